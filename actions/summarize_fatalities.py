#!/usr/bin/env python3
"""
Summarize monthly traffic fatalities across several years of FARS extracts.

**Conceptual**: This script loads accident_{year}.csv.bz2 for each requested
year, counts fatal crashes per month, and prints a month-by-year table.
Optionally writes the table to CSV.

**Usage**:
    # Summarize three years from the configured data directory
    python actions/summarize_fatalities.py 2013 2014 2015

    # Read extracts from a specific directory and save the table
    python actions/summarize_fatalities.py 2013 2014 --data-dir data/fars --output results/summary.csv

    # Echo every raw table as it is loaded
    python actions/summarize_fatalities.py 2015 --echo

**Configuration** (.env or environment):
    FARS_DATA_DIR     Directory holding the extracts (default: current directory)
    FARS_ECHO_TABLES  true/false, same as --echo (default: false)

**Error handling**:
    - A missing or unreadable year doesn't stop the run; it is reported and
      left out of the table
    - Years are passed through as typed; a non-numeric year is reported as
      invalid rather than rejected by argument parsing

**Exit codes**:
    - 0: Every requested year loaded
    - 1: Partial failure (some years missing from the table)
    - 2: Total failure (no year loaded) or bad configuration
"""

import argparse
import sys
import warnings
from pathlib import Path

# Add project root to Python path so we can import fars modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fars.analytics.summary import summarize_batch
from fars.config.settings import get_settings
from fars.data.io import print_record_table, write_summary_csv
from fars.data.schemas import InvalidYearWarning, SettingsError, YearConversionWarning
from fars.orchestration.yearly import build_yearly_batch


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Count FARS fatal crashes by month for one or more years.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "years",
        nargs="+",
        help="Years to summarize (e.g. 2013 2014 2015).",
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding accident_{year}.csv.bz2 files. Default: FARS_DATA_DIR or current directory.",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional CSV path to write the summary table to.",
    )

    parser.add_argument(
        "--echo",
        action="store_true",
        help="Print every raw table as it is loaded.",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main entry point for the fatality summary script.

    **Workflow**:
      1. Parse command-line arguments
      2. Load settings from environment
      3. Load each year (failures isolated per year)
      4. Print per-year status and the summary table
      5. Optionally write the table to CSV

    Returns:
        Exit code (0 success, 1 partial failure, 2 total failure/bad config).
    """
    args = parse_args(argv)

    try:
        settings = get_settings()
    except SettingsError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 2

    data_dir = Path(args.data_dir) if args.data_dir else settings.data_dir
    echo = args.echo or settings.echo_loaded_tables

    # Print configuration
    print("=" * 60)
    print("FARS Monthly Fatality Summary")
    print("=" * 60)
    print(f"Years: {', '.join(args.years)}")
    print(f"Data directory: {data_dir.absolute()}")
    print(f"Echo loaded tables: {'yes' if echo else 'no'}")
    print("=" * 60)

    # Per-year problems are reported below from the batch itself
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", InvalidYearWarning)
        warnings.simplefilter("ignore", YearConversionWarning)
        batch = build_yearly_batch(
            args.years,
            data_dir=data_dir,
            on_load=print_record_table if echo else None,
        )

    success_count = 0
    failure_count = 0

    for result in batch:
        if result.ok:
            success_count += 1
            print(f"[{result.year}] ✓ Loaded {len(result.records)} records.")
        else:
            failure_count += 1
            print(f"[{result.year}] ERROR: invalid year - {result.failure.error_type}: {result.failure.message}")

    table = summarize_batch(batch)

    print("\n" + "=" * 60)
    print("Fatal crashes by month")
    print("=" * 60)
    if table.empty:
        print("No data loaded.")
    else:
        print(table.to_string())

    if args.output and success_count > 0:
        try:
            write_summary_csv(table, args.output)
            print(f"\n✓ Wrote summary to {args.output}")
        except OSError as e:
            print(f"ERROR: {e}")
            return 2

    print("\n" + "=" * 60)
    print(f"Success: {success_count}/{len(batch)} years")
    print(f"Failures: {failure_count}/{len(batch)} years")
    print("=" * 60)

    if failure_count == 0:
        return 0  # Success
    elif success_count == 0:
        return 2  # Total failure
    else:
        return 1  # Partial failure


if __name__ == "__main__":
    sys.exit(main())
