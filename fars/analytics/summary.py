"""
Month-by-year fatality count tables.

**Conceptual**: Each successfully loaded year contributes one (MONTH, year) row
per accident record. Stacking those record sets and counting rows per
(year, MONTH) gives the number of fatal crashes in each month of each year;
pivoting puts months down the side and years across the top:

    year   2013  2014  2015
    MONTH
    1      2230  2168  2368
    2      1952  1893  1968
    ...

**Table contract**:
  - Index: MONTH, ascending, only months that occur in the data.
  - Columns: one per distinct year that loaded, ascending integer labels.
  - Cells: counts as nullable Int64; a (month, year) pair with no records is
    <NA>, never 0.
  - Failed years contribute nothing, not even an empty column.
  - Rows whose MONTH is missing are not counted.

**Empty input**: If no year loaded (or every loaded file had zero rows), the
result is an empty DataFrame with a MONTH-named index and no columns.

The aggregator does no error recovery of its own. Record sets passed in
directly must carry MONTH and year columns; otherwise a KeyError surfaces.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence

import pandas as pd

from fars.data.io import LoadHook
from fars.data.schemas import MONTH_COLUMN, YEAR_COLUMN
from fars.orchestration.yearly import (
    BatchSlot,
    build_yearly_batch,
    successful_record_sets,
)


COUNT_COLUMN = "n"


def empty_summary() -> pd.DataFrame:
    """Summary table with no months and no years."""
    return pd.DataFrame(
        index=pd.Index([], dtype="int64", name=MONTH_COLUMN),
        columns=pd.Index([], dtype="int64", name=YEAR_COLUMN),
    )


def count_by_year_month(record_sets: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """
    Count records per (year, MONTH) across record sets.

    Args:
        record_sets: DataFrames with at least MONTH and year columns.

    Returns:
        Long-format DataFrame with columns year, MONTH, n, sorted by year
        then MONTH. Empty (but with those columns) if there are no records.

    Raises:
        KeyError: If any record set lacks MONTH or year.
    """
    # Select per set so a malformed set fails here instead of being NaN-padded by concat
    frames = [rs[[YEAR_COLUMN, MONTH_COLUMN]] for rs in record_sets]
    frames = [frame for frame in frames if not frame.empty]
    if not frames:
        return pd.DataFrame(columns=[YEAR_COLUMN, MONTH_COLUMN, COUNT_COLUMN])

    combined = pd.concat(frames, ignore_index=True)

    return (
        combined.groupby([YEAR_COLUMN, MONTH_COLUMN], sort=True)
        .size()
        .rename(COUNT_COLUMN)
        .reset_index()
    )


def summarize_batch(batch: Sequence[BatchSlot]) -> pd.DataFrame:
    """
    Pivot a yearly batch into a month-by-year count table.

    **Functionally**:
      1. Keeps only the loaded record sets (successful_record_sets); failed
         slots are dropped without placeholder rows.
      2. Counts records per (year, MONTH).
      3. Pivots to MONTH rows x year columns, both ascending, Int64 cells.

    Args:
        batch: Output of build_yearly_batch or read_years (or any sequence of
              (MONTH, year) DataFrames and None).

    Returns:
        Summary table (see module docstring for the contract).

    Raises:
        KeyError: If a non-null record set lacks MONTH or year.

    Example:
        >>> batch = build_yearly_batch([2013, 2014], data_dir="data/fars")
        >>> summarize_batch(batch).loc[1]
        year
        2013    2230
        2014    2168
        Name: 1, dtype: Int64
    """
    counts = count_by_year_month(successful_record_sets(batch))

    if counts.empty:
        return empty_summary()

    table = counts.pivot(index=MONTH_COLUMN, columns=YEAR_COLUMN, values=COUNT_COLUMN)
    table = table.sort_index(axis=0).sort_index(axis=1)

    return table.astype("Int64")


def summarize_years(
    years: Iterable[object],
    data_dir: Optional[Path | str] = None,
    on_load: Optional[LoadHook] = None,
) -> pd.DataFrame:
    """
    Load the requested years and return their month-by-year count table.

    Years that fail to load (missing file, unparseable year, no MONTH column)
    are reported with InvalidYearWarning and left out of the table; only the
    table is returned, so nothing is raised for partial or total failure.

    Args:
        years: Ordered year-like values, e.g. [2013, 2014, 2015].
        data_dir: Directory holding accident_{year}.csv.bz2 files. Defaults to
                 get_settings().data_dir.
        on_load: Optional hook called with each raw table as it is loaded
                (e.g. print_record_table).

    Returns:
        Summary table with MONTH index and one column per loaded year.
    """
    batch = build_yearly_batch(years, data_dir=data_dir, on_load=on_load)
    return summarize_batch(batch)
