"""
Year parsing and per-year accident filename resolution.

**Conceptual**: Accident extracts are published one file per year and named
accident_{year}.csv.bz2. Callers hand us "years" in whatever shape they have
them: ints from range(), floats from a numpy array, strings from argv. This
module turns such a value into an integer year (or a tagged failure) and then
into the deterministic filename.

**Coercion rules** (integer-cast semantics):
  - Integers (int, bool, numpy integer and bool scalars) are taken as-is.
  - Finite floats truncate toward zero (2013.9 -> 2013).
  - Strings are stripped, then parsed as an integer, or as a finite decimal
    that is truncated ("2014" -> 2014, "2015.0" -> 2015).
  - Anything else (None, NaN, inf, "not-a-year", arbitrary objects) fails.

**Why a tagged result?** parse_year never raises and never warns, so callers
can branch on ParsedYear vs YearConversionError explicitly. make_filename is
the lenient wrapper: on failure it warns and returns a sentinel path, deferring
the error to the loader where the batch builder can isolate it.
"""

import math
import numbers
import warnings
from dataclasses import dataclass
from typing import Union

import numpy as np

from fars.data.schemas import YearConversionWarning


FILENAME_TEMPLATE = "accident_{year}.csv.bz2"

# Placeholder used instead of digits when a year cannot be parsed
NOT_AVAILABLE_MARKER = "NA"

SENTINEL_FILENAME = FILENAME_TEMPLATE.format(year=NOT_AVAILABLE_MARKER)


@dataclass(frozen=True)
class ParsedYear:
    """A year value successfully coerced to an integer."""
    value: int


@dataclass(frozen=True)
class YearConversionError:
    """
    A year value that could not be coerced to an integer.

    Attributes:
        raw: The value as supplied.
        reason: Short human-readable explanation.
    """
    raw: object
    reason: str


YearParseResult = Union[ParsedYear, YearConversionError]


def _truncate_float(raw: object, number: float) -> YearParseResult:
    if math.isnan(number) or math.isinf(number):
        return YearConversionError(raw=raw, reason=f"{number!r} is not a finite number")
    return ParsedYear(int(number))


def parse_year(value: object) -> YearParseResult:
    """
    Coerce a year-like value to an integer year.

    Args:
        value: Anything intended to represent a calendar year.

    Returns:
        ParsedYear on success, YearConversionError otherwise. Never raises.

    Example:
        >>> parse_year(2015)
        ParsedYear(value=2015)
        >>> parse_year(" 2014 ")
        ParsedYear(value=2014)
        >>> parse_year(2013.9)
        ParsedYear(value=2013)
        >>> parse_year("a")
        YearConversionError(raw='a', reason="'a' is not a number")
    """
    # bool and np.bool_ count as integers; True -> 1 matches integer-cast semantics
    if isinstance(value, (numbers.Integral, np.integer, np.bool_)):
        return ParsedYear(int(value))

    if isinstance(value, (numbers.Real, np.floating)):
        return _truncate_float(value, float(value))

    if isinstance(value, (str, np.str_)):
        text = value.strip()
        try:
            return ParsedYear(int(text))
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return YearConversionError(raw=value, reason=f"{value!r} is not a number")
        return _truncate_float(value, number)

    return YearConversionError(
        raw=value,
        reason=f"cannot interpret {type(value).__name__} as a year",
    )


def make_filename(year: object) -> str:
    """
    Build the accident filename for a year.

    **Functionally**:
      - Parses year via parse_year.
      - On success returns "accident_{Y}.csv.bz2" (plain decimal, no padding).
      - On failure emits YearConversionWarning and returns the sentinel
        "accident_NA.csv.bz2". The batch builder never loads the sentinel; it
        records the year as failed instead.

    Args:
        year: A year-like value (int, float, numeric string, ...).

    Returns:
        The filename as a string. The path is relative; callers join it onto
        their data directory.

    Example:
        >>> make_filename(2015)
        'accident_2015.csv.bz2'
        >>> make_filename("2016")
        'accident_2016.csv.bz2'
    """
    parsed = parse_year(year)

    if isinstance(parsed, YearConversionError):
        warnings.warn(
            f"year {year!r} could not be converted to an integer ({parsed.reason}); "
            f"using {SENTINEL_FILENAME}",
            YearConversionWarning,
            stacklevel=2,
        )
        return SENTINEL_FILENAME

    return FILENAME_TEMPLATE.format(year=parsed.value)
