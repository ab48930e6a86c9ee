"""
Year-addressed convenience loader for accident extracts.

**Conceptual**: Callers that want "the 2014 data" shouldn't have to build
accident_2014.csv.bz2 and join it onto a directory themselves. This is a thin
wrapper over filenames.py and io.py that does exactly that, resolving the data
directory from settings when none is given.

Map plotting code uses this to get the full raw table (STATE, LONGITUD,
LATITUDE included); the summary pipeline goes through the batch builder instead.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from fars.config.settings import get_settings
from fars.data.filenames import make_filename
from fars.data.io import LoadHook, read_accident_csv


def resolve_data_dir(data_dir: Optional[Path | str] = None) -> Path:
    """Return data_dir as a Path, falling back to the configured data directory."""
    if data_dir is None:
        return get_settings().data_dir
    return Path(data_dir)


def year_path(year: object, data_dir: Optional[Path | str] = None) -> Path:
    """
    Full path of the accident extract for a year.

    Emits YearConversionWarning (via make_filename) if year isn't coercible;
    the returned path then points at the accident_NA.csv.bz2 sentinel.
    """
    return resolve_data_dir(data_dir) / make_filename(year)


def load_year_records(
    year: object,
    data_dir: Optional[Path | str] = None,
    on_load: Optional[LoadHook] = None,
) -> pd.DataFrame:
    """
    Load the raw accident table for one year.

    Args:
        year: Year-like value (2014, "2014", 2014.0, ...).
        data_dir: Directory holding the extracts. Defaults to
                 get_settings().data_dir.
        on_load: Optional hook passed through to read_accident_csv.

    Returns:
        The full raw table for that year, all source columns included.

    Raises:
        FileNotFoundError: If the extract for that year doesn't exist
                          (including the sentinel path for unparseable years).

    Example:
        >>> df = load_year_records(2014, data_dir="data/fars")
        >>> sorted(df["MONTH"].unique())[:3]
        [1, 2, 3]
    """
    return read_accident_csv(year_path(year, data_dir), on_load=on_load)
