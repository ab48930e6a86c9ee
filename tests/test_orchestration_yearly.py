"""
Tests for fars/orchestration/yearly.py

**Purpose**: Verify that the batch builder:
  1. Returns one slot per requested year, in input order
  2. Projects each loaded table to (MONTH, year) with the parsed year tag
  3. Isolates failures (missing file, bad year, no MONTH column) per slot
  4. Warns once per failed year, naming the year

**Testing philosophy**: Real bz2 files in tmp_path, no mocking of pandas.
"""

import json
import os
import subprocess
import sys
import warnings
from pathlib import Path

import pandas as pd
import pytest

from fars.data.io import print_record_table
from fars.data.schemas import (
    BatchYearFailure,
    InvalidYearWarning,
    YearConversionWarning,
)
from fars.orchestration.yearly import (
    YearLoadResult,
    build_yearly_batch,
    project_year_records,
    read_years,
    successful_record_sets,
)


def write_accident_file(directory, year, months):
    """Write accident_{year}.csv.bz2 with one row per month entry."""
    n_rows = len(months)
    df = pd.DataFrame({
        'STATE': [6] * n_rows,
        'MONTH': list(months),
        'LATITUDE': [34.0] * n_rows,
        'LONGITUD': [-118.2] * n_rows,
    })
    path = directory / f"accident_{year}.csv.bz2"
    df.to_csv(path, index=False, compression="bz2")
    return path


@pytest.fixture
def data_dir(tmp_path):
    """Directory with 2013-2015 extracts."""
    write_accident_file(tmp_path, 2013, [1, 1, 2])
    write_accident_file(tmp_path, 2014, [2, 3])
    write_accident_file(tmp_path, 2015, [12])
    return tmp_path


# ============================================================================
# project_year_records
# ============================================================================

def test_project_year_records_keeps_month_and_tags_year():
    raw = pd.DataFrame({'STATE': [1, 2], 'MONTH': [5, 6], 'LATITUDE': [30.0, 31.0]})

    projected = project_year_records(raw, 2014)

    assert list(projected.columns) == ['MONTH', 'year']
    assert projected['MONTH'].tolist() == [5, 6]
    assert projected['year'].tolist() == [2014, 2014]


def test_project_year_records_missing_month_raises_key_error():
    with pytest.raises(KeyError):
        project_year_records(pd.DataFrame({'STATE': [1]}), 2014)


# ============================================================================
# build_yearly_batch
# ============================================================================

def test_build_yearly_batch_all_years_present(data_dir):
    """Test that every year loads, in order, with row counts preserved."""
    with warnings.catch_warnings(record=True) as record:
        warnings.simplefilter("always")
        batch = build_yearly_batch([2013, 2014, 2015], data_dir=data_dir)

    assert not [w for w in record if issubclass(w.category, InvalidYearWarning)]

    assert len(batch) == 3
    assert all(result.ok for result in batch)
    assert [result.parsed_year for result in batch] == [2013, 2014, 2015]
    assert [len(result.records) for result in batch] == [3, 2, 1]
    assert all(result.failure is None for result in batch)


def test_build_yearly_batch_missing_year_is_isolated(data_dir):
    """Test that a missing file empties only its own slot and warns naming the year."""
    with pytest.warns(InvalidYearWarning) as record:
        batch = build_yearly_batch([2013, 2099], data_dir=data_dir)

    assert len(batch) == 2
    assert batch[0].ok
    assert not batch[1].ok
    assert batch[1].records is None
    assert batch[1].failure.year == 2099
    assert batch[1].failure.error_type == "FileNotFoundError"
    assert "accident_2099.csv.bz2" in batch[1].failure.message

    messages = [str(w.message) for w in record if issubclass(w.category, InvalidYearWarning)]
    assert messages == ["invalid year: 2099"]


def test_build_yearly_batch_unparseable_year(data_dir):
    """Test that a non-numeric year warns twice (conversion, then invalid year) and is isolated."""
    with pytest.warns(UserWarning) as record:
        batch = build_yearly_batch(["a", 2014], data_dir=data_dir)

    categories = [w.category for w in record]
    assert YearConversionWarning in categories
    assert InvalidYearWarning in categories

    assert not batch[0].ok
    assert batch[0].parsed_year is None
    assert batch[0].failure.error_type == "ValueError"
    assert batch[1].ok


def test_build_yearly_batch_unparseable_year_ignores_sentinel_file(tmp_path):
    """Test that an existing accident_NA.csv.bz2 is never loaded for a bad year."""
    write_accident_file(tmp_path, "NA", [1, 2])

    with pytest.warns(InvalidYearWarning, match="invalid year: a"):
        batch = build_yearly_batch(["a"], data_dir=tmp_path)

    assert not batch[0].ok
    assert batch[0].records is None
    assert batch[0].failure.error_type == "ValueError"


def test_build_yearly_batch_missing_month_column(tmp_path):
    """Test that a file without MONTH becomes a failed slot, not a crash."""
    pd.DataFrame({'STATE': [1, 2]}).to_csv(
        tmp_path / "accident_2016.csv.bz2", index=False, compression="bz2"
    )

    with pytest.warns(InvalidYearWarning, match="invalid year: 2016"):
        batch = build_yearly_batch([2016], data_dir=tmp_path)

    assert batch[0].failure.error_type == "KeyError"


def test_build_yearly_batch_all_fail(tmp_path):
    with pytest.warns(InvalidYearWarning):
        batch = build_yearly_batch([2001, 2002, 2003], data_dir=tmp_path)

    assert len(batch) == 3
    assert not any(result.ok for result in batch)


def test_build_yearly_batch_empty_input(tmp_path):
    assert build_yearly_batch([], data_dir=tmp_path) == []


def test_build_yearly_batch_tags_parsed_year_for_string_input(data_dir):
    batch = build_yearly_batch(["2014"], data_dir=data_dir)

    assert batch[0].records['year'].tolist() == [2014, 2014]


def test_failure_pattern_follows_input_order(data_dir):
    """Test that permuting years permutes the ok/failed pattern identically."""
    years = [2013, 2099, 2014, 1900]
    permuted = [1900, 2014, 2099, 2013]

    with pytest.warns(InvalidYearWarning):
        forward = [result.ok for result in build_yearly_batch(years, data_dir=data_dir)]
    with pytest.warns(InvalidYearWarning):
        backward = [result.ok for result in build_yearly_batch(permuted, data_dir=data_dir)]

    assert forward == [True, False, True, False]
    assert backward == [False, True, False, True]


def test_build_yearly_batch_passes_hook(data_dir, capsys):
    """Test that the print hook fires once per successfully loaded year."""
    seen = []

    build_yearly_batch([2013, 2014], data_dir=data_dir, on_load=seen.append)

    assert [len(df) for df in seen] == [3, 2]

    build_yearly_batch([2015], data_dir=data_dir, on_load=print_record_table)
    assert 'LONGITUD' in capsys.readouterr().out


def test_build_yearly_batch_uses_settings_data_dir(data_dir, monkeypatch):
    monkeypatch.setenv("FARS_DATA_DIR", str(data_dir))

    batch = build_yearly_batch([2015])

    assert batch[0].ok


# ============================================================================
# read_years / successful_record_sets
# ============================================================================

def test_read_years_returns_frames_or_none(data_dir):
    with pytest.warns(InvalidYearWarning):
        slots = read_years([2013, 2099, 2015], data_dir=data_dir)

    assert len(slots) == 3
    assert isinstance(slots[0], pd.DataFrame)
    assert slots[1] is None
    assert slots[2]['year'].tolist() == [2015]


def test_successful_record_sets_accepts_both_batch_forms():
    frame = pd.DataFrame({'MONTH': [1], 'year': [2013]})
    failure = BatchYearFailure(year=2099, error_type="FileNotFoundError", message="gone")

    results = [
        YearLoadResult(year=2013, parsed_year=2013, records=frame),
        YearLoadResult(year=2099, parsed_year=2099, failure=failure),
    ]

    from_results = successful_record_sets(results)
    from_frames = successful_record_sets([None, frame, None])

    assert len(from_results) == 1 and from_results[0] is frame
    assert len(from_frames) == 1 and from_frames[0] is frame
    assert successful_record_sets([]) == []


def test_batch_year_failure_from_exception():
    failure = BatchYearFailure.from_exception("a", FileNotFoundError("file 'x' does not exist"))

    assert failure == BatchYearFailure(
        year="a", error_type="FileNotFoundError", message="file 'x' does not exist"
    )


# ============================================================================
# Warning delivery under the interpreter's default filters
# ============================================================================

DEFAULT_FILTER_SCRIPT = """
import json
import sys
import warnings

from fars.orchestration.yearly import build_yearly_batch

shown = []
warnings.showwarning = lambda message, category, *args, **kwargs: shown.append(
    [category.__name__, str(message)]
)

slots = []
for years in (["a", 2099, 2099], [2099]):
    slots.extend(result.ok for result in build_yearly_batch(years, data_dir=sys.argv[1]))

print(json.dumps({"slots": slots, "shown": shown}))
"""


def test_every_failed_slot_warns_with_default_filters(tmp_path):
    """
    Test that repeated failures from the same call site are all reported.

    Runs in a fresh interpreter, since pytest's warning capture records every
    warning regardless of the once-per-location default.
    """
    repo_root = Path(__file__).parent.parent
    env = {key: value for key, value in os.environ.items() if key != "PYTHONWARNINGS"}

    completed = subprocess.run(
        [sys.executable, "-c", DEFAULT_FILTER_SCRIPT, str(tmp_path)],
        cwd=repo_root,
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    output = json.loads(completed.stdout.strip().splitlines()[-1])

    assert output["slots"] == [False, False, False, False]
    invalid = [message for category, message in output["shown"] if category == "InvalidYearWarning"]
    conversion = [message for category, message in output["shown"] if category == "YearConversionWarning"]
    assert invalid == [
        "invalid year: a",
        "invalid year: 2099",
        "invalid year: 2099",
        "invalid year: 2099",
    ]
    assert len(conversion) == 1


def test_ignore_filter_still_silences_batch_warnings(tmp_path):
    """Test that a caller's ignore filter takes precedence over the package default."""
    with warnings.catch_warnings(record=True) as record:
        warnings.simplefilter("ignore", InvalidYearWarning)
        build_yearly_batch([2099], data_dir=tmp_path)

    assert not [w for w in record if issubclass(w.category, InvalidYearWarning)]
