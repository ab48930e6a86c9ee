"""
Column contract and error taxonomy for FARS accident data.

**Conceptual**: Every yearly accident extract carries a MONTH column (1-12);
the same files also carry STATE, LONGITUD and LATITUDE for map plotting. The
summary pipeline only reads MONTH and tags each row with the year it was
loaded for. This module names those columns once and defines the exceptions
and warnings raised along the way.

**Failure model**:
  - A year that cannot be coerced to an integer is not an error here: it
    produces a YearConversionWarning and a sentinel filename. The batch
    builder then records that year as failed without loading anything.
  - A missing file is a plain FileNotFoundError from the loader.
  - Any failure while loading one year of a batch is recovered by the batch
    builder, recorded as a BatchYearFailure, and announced with an
    InvalidYearWarning naming the year.
  - Column presence is deliberately not validated. A table without MONTH
    surfaces as a KeyError wherever MONTH is first looked up.
"""

import warnings
from dataclasses import dataclass


# Source column holding the month of the crash (1-12)
MONTH_COLUMN = "MONTH"

# Column injected by the batch builder: the year a row was loaded for
YEAR_COLUMN = "year"

# Columns of a projected yearly record set, in order
YEARLY_RECORD_COLUMNS = [MONTH_COLUMN, YEAR_COLUMN]

# Location columns used only by map plotting
STATE_COLUMN = "STATE"
LONGITUDE_COLUMN = "LONGITUD"
LATITUDE_COLUMN = "LATITUDE"


class SettingsError(ValueError):
    """Raised when environment configuration is missing or malformed."""
    pass


class YearConversionWarning(UserWarning):
    """
    Emitted when a year value cannot be coerced to an integer.

    Non-fatal: the filename resolver still returns a (sentinel) path, and the
    failure surfaces when that path is loaded.
    """
    pass


class InvalidYearWarning(UserWarning):
    """
    Emitted once per year that failed to load during a batch.

    The message names the year ("invalid year: 2099"); the underlying error is
    kept on the BatchYearFailure rather than repeated in the warning.
    """
    pass


@dataclass(frozen=True)
class BatchYearFailure:
    """
    Why one year of a batch produced no records.

    Attributes:
        year: The year value exactly as the caller supplied it.
        error_type: Class name of the exception caught (e.g. "FileNotFoundError").
        message: str() of that exception.
    """
    year: object
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, year: object, exc: Exception) -> "BatchYearFailure":
        return cls(year=year, error_type=type(exc).__name__, message=str(exc))


# Show every occurrence, one per failed year, instead of the interpreter's
# once-per-location default. Appended so caller and CLI "ignore" filters still win.
warnings.filterwarnings("always", category=YearConversionWarning, append=True)
warnings.filterwarnings("always", category=InvalidYearWarning, append=True)
