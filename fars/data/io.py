"""
Readers and writers for accident extracts and summary tables.

**Conceptual**: This module is the I/O boundary for FARS data. Yearly accident
extracts come in as bz2-compressed CSVs; summary tables go out as plain CSVs.
Everything else in the package works on in-memory DataFrames.

**Rule**: Never call pd.read_csv on accident files directly from orchestration
or analytics code. Use read_accident_csv so the existence check, error message
and optional load hook stay consistent.

**Diagnostic hook**: Loading is pure. Callers that want to see each table as it
is read pass on_load=print_record_table (or any callable taking a DataFrame).
The hook runs only after a successful parse.
"""

from pathlib import Path
from typing import Callable, Optional

import pandas as pd

from fars.data.schemas import MONTH_COLUMN


LoadHook = Callable[[pd.DataFrame], None]


def print_record_table(df: pd.DataFrame) -> None:
    """Print a loaded record table to stdout."""
    print(df)


def read_accident_csv(
    path: Path | str,
    on_load: Optional[LoadHook] = None,
    *,
    low_memory: bool = False,
) -> pd.DataFrame:
    """
    Read one accident extract into a DataFrame.

    **Functionally**:
      - Raises FileNotFoundError if path does not exist at call time.
      - Reads with pandas; compression is inferred from the suffix, so
        accident_2014.csv.bz2 is decompressed transparently.
      - Row count and column names are preserved exactly; no columns are
        required or checked here.
      - Calls on_load(df) once the table is parsed, then returns it.

    **Resource handling**: pandas opens and closes the underlying (bz2) stream
    inside read_csv, on both the success and the error path, so no handle
    outlives a single call.

    Args:
        path: Path to the extract (e.g., "data/accident_2014.csv.bz2").
        on_load: Optional hook called with the loaded table (e.g.,
                print_record_table). Not called if reading fails.
        low_memory: Passed through to pd.read_csv. Defaults to False so mixed
                   dtype columns are inferred from the whole file.

    Returns:
        DataFrame with the file's columns and one row per record.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pd.errors.ParserError / OSError: If the file exists but can't be parsed
                                        or decompressed.

    Example:
        >>> df = read_accident_csv("accident_2013.csv.bz2")
        >>> df[["STATE", "MONTH"]].head(2)
           STATE  MONTH
        0      1      1
        1      1      1
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"file '{path}' does not exist")

    df = pd.read_csv(path, compression="infer", low_memory=low_memory)

    if on_load is not None:
        on_load(df)

    return df


def write_summary_csv(
    table: pd.DataFrame,
    path: Path | str,
) -> None:
    """
    Write a month-by-year summary table to CSV.

    The MONTH index is written as the first column; year columns follow in
    table order. Missing (month, year) cells are written as empty fields.
    Parent directories are created if needed.

    Args:
        table: Summary table as returned by summarize_batch/summarize_years.
        path: Destination CSV path.

    Raises:
        OSError: If the file can't be written (permissions, disk full, etc.).
    """
    path = Path(path)

    to_write = table.copy()
    to_write.index.name = MONTH_COLUMN
    to_write.columns = [str(col) for col in to_write.columns]

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        to_write.to_csv(path, index=True)
    except Exception as e:
        raise OSError(
            f"Failed to write summary CSV to {path}. Error: {e}"
        ) from e
