"""
Multi-year batch loading with per-year failure isolation.

**Conceptual**: A summary over several years should not be lost because one
year's file is missing or malformed. build_yearly_batch walks the requested
years in order and, for each one, resolves the filename, loads the extract and
projects it down to (MONTH, year). Any exception inside that sequence is caught
for that year only: an InvalidYearWarning names the year and the slot records
a BatchYearFailure instead of records. The loop then moves on.

**Batch shape**:
  - One YearLoadResult per requested year, in input order.
  - len(batch) == len(years), always.
  - Failures are positional: permuting the input permutes the success/failure
    pattern identically.

read_years gives the same batch as a plain list of DataFrame-or-None, and
successful_record_sets is the separate pass that hands only the loaded record
sets to the aggregator.

Execution is sequential: one year is resolved, loaded and projected before the
next is started. The result list is local to a single call.
"""

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from fars.data.filenames import ParsedYear, make_filename, parse_year
from fars.data.io import LoadHook, read_accident_csv
from fars.data.loaders import resolve_data_dir
from fars.data.schemas import (
    MONTH_COLUMN,
    YEAR_COLUMN,
    YEARLY_RECORD_COLUMNS,
    BatchYearFailure,
    InvalidYearWarning,
)


@dataclass(frozen=True, eq=False)
class YearLoadResult:
    """
    Outcome of loading one requested year.

    Exactly one of records/failure is set.

    Attributes:
        year: The year value as the caller supplied it.
        parsed_year: Integer year, or None if the value couldn't be parsed.
        records: Projected (MONTH, year) record set on success.
        failure: What went wrong, on failure.
    """
    year: object
    parsed_year: Optional[int] = None
    records: Optional[pd.DataFrame] = None
    failure: Optional[BatchYearFailure] = None

    @property
    def ok(self) -> bool:
        return self.records is not None


def project_year_records(df: pd.DataFrame, year: int) -> pd.DataFrame:
    """
    Reduce a raw accident table to its MONTH column plus a constant year tag.

    Raises:
        KeyError: If df has no MONTH column.
    """
    projected = df[[MONTH_COLUMN]].copy()
    projected[YEAR_COLUMN] = year
    return projected[YEARLY_RECORD_COLUMNS].reset_index(drop=True)


def _load_one_year(
    year: object,
    data_dir: Path,
    on_load: Optional[LoadHook],
) -> YearLoadResult:
    parsed = parse_year(year)
    parsed_year = parsed.value if isinstance(parsed, ParsedYear) else None

    try:
        path = data_dir / make_filename(year)
        # The sentinel path must never load, even if such a file exists
        if parsed_year is None:
            raise ValueError(f"cannot load year {year!r}: {parsed.reason}")
        raw = read_accident_csv(path, on_load=on_load)
        records = project_year_records(raw, parsed_year)
    except Exception as e:
        warnings.warn(f"invalid year: {year}", InvalidYearWarning, stacklevel=3)
        return YearLoadResult(
            year=year,
            parsed_year=parsed_year,
            failure=BatchYearFailure.from_exception(year, e),
        )

    return YearLoadResult(year=year, parsed_year=parsed_year, records=records)


def build_yearly_batch(
    years: Iterable[object],
    data_dir: Optional[Path | str] = None,
    on_load: Optional[LoadHook] = None,
) -> List[YearLoadResult]:
    """
    Load every requested year, isolating failures per year.

    **Functionally**, for each year in order:
      1. Resolve accident_{year}.csv.bz2 under data_dir (make_filename; an
         unparseable year warns and resolves to the sentinel file, and the
         slot fails with ValueError without loading it).
      2. Load it with read_accident_csv.
      3. Project to MONTH plus a year column holding the parsed integer year.
      4. If any step raises, emit InvalidYearWarning("invalid year: <year>")
         and record a BatchYearFailure for that slot.

    Args:
        years: Ordered year-like values (ints, floats, numeric strings...).
        data_dir: Directory holding the extracts. Defaults to
                 get_settings().data_dir (resolved once, before the loop).
        on_load: Optional hook called with each raw table as it is loaded.

    Returns:
        List of YearLoadResult, same length and order as years.

    Example:
        >>> batch = build_yearly_batch([2013, 2099], data_dir="data/fars")
        InvalidYearWarning: invalid year: 2099
        >>> [r.ok for r in batch]
        [True, False]
        >>> batch[1].failure.error_type
        'FileNotFoundError'
    """
    directory = resolve_data_dir(data_dir)

    batch: List[YearLoadResult] = []
    for year in years:
        batch.append(_load_one_year(year, directory, on_load))

    return batch


def read_years(
    years: Iterable[object],
    data_dir: Optional[Path | str] = None,
    on_load: Optional[LoadHook] = None,
) -> List[Optional[pd.DataFrame]]:
    """
    Load every requested year as (MONTH, year) record sets.

    Same as build_yearly_batch, but each slot is just the record set, or None
    where that year failed.
    """
    return [
        result.records
        for result in build_yearly_batch(years, data_dir=data_dir, on_load=on_load)
    ]


BatchSlot = Union[YearLoadResult, Optional[pd.DataFrame]]


def successful_record_sets(batch: Sequence[BatchSlot]) -> List[pd.DataFrame]:
    """
    Extract the loaded record sets from a batch, dropping failed slots.

    Accepts either form of batch: YearLoadResult items (from
    build_yearly_batch) or DataFrame-or-None items (from read_years).
    Order of the surviving record sets follows the batch.
    """
    record_sets = []
    for slot in batch:
        if isinstance(slot, YearLoadResult):
            slot = slot.records
        if slot is not None:
            record_sets.append(slot)
    return record_sets
