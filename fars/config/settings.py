"""
Configuration settings for the fatality summary pipeline.

**Conceptual**: This module provides a strongly-typed configuration object that
loads from environment variables (via .env files). Settings are validated at
startup, so a bad data directory or malformed flag fails before any year is
loaded rather than halfway through a batch.

**Why centralized config?**
  - Single source of truth for where the per-year accident files live.
  - Easy to test (inject a FarsSettings pointing at tmp_path).
  - Scripts in actions/ and library callers resolve paths the same way.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from fars.data.schemas import SettingsError

# Load .env from project root (dev/local environments)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


TRUTHY_VALUES = ("true", "1", "yes")
FALSY_VALUES = ("false", "0", "no", "")


def _parse_flag(name: str, raw: str) -> bool:
    """Parse a boolean environment flag, rejecting anything unrecognised."""
    value = raw.strip().lower()
    if value in TRUTHY_VALUES:
        return True
    if value in FALSY_VALUES:
        return False
    raise SettingsError(
        f"{name} must be true/false (or 1/0, yes/no), got: {raw!r}"
    )


@dataclass(frozen=True)
class FarsSettings:
    """
    Settings for locating and loading yearly accident files.

    **Conceptual**: Accident extracts are named accident_{year}.csv.bz2 and live
    together in one directory. The pipeline never searches for them; it joins
    each derived filename onto data_dir and lets the loader decide whether the
    file exists.

    Attributes:
        data_dir: Directory holding the accident_{year}.csv.bz2 files.
                 Defaults to the current working directory.
        echo_loaded_tables: If True, scripts attach the print hook so every
                           loaded table is echoed to stdout as it is read.
    """
    data_dir: Path = Path(".")
    echo_loaded_tables: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.data_dir.exists() and not self.data_dir.is_dir():
            raise SettingsError(
                f"FARS_DATA_DIR must point to a directory, got file: {self.data_dir}"
            )

    @classmethod
    def from_env(cls) -> "FarsSettings":
        """
        Load settings from environment variables.

        **Environment variables**:
          - FARS_DATA_DIR (optional): Directory with accident_{year}.csv.bz2 files.
            Defaults to "." if not set.
          - FARS_ECHO_TABLES (optional): "true"/"false" (default: "false").

        Returns:
            FarsSettings object with values loaded from environment.

        Raises:
            SettingsError: If FARS_DATA_DIR is not a directory or
                          FARS_ECHO_TABLES is not a recognised flag.

        Usage example:
            >>> # In .env file:
            >>> # FARS_DATA_DIR=data/fars
            >>>
            >>> settings = FarsSettings.from_env()
            >>> print(settings.data_dir)  # data/fars
        """
        data_dir = os.getenv("FARS_DATA_DIR", ".")
        echo_str = os.getenv("FARS_ECHO_TABLES", "false")

        return cls(
            data_dir=Path(data_dir),
            echo_loaded_tables=_parse_flag("FARS_ECHO_TABLES", echo_str),
        )


# Lazily loaded settings; tests can inject FarsSettings(...) directly instead.
_default_settings: Optional[FarsSettings] = None


def get_settings() -> FarsSettings:
    """
    Get the global settings singleton.

    Loaded from the environment on first access and cached afterwards. Call
    reset_settings() to force a reload (useful in tests that change env vars).

    Returns:
        Global FarsSettings singleton.

    Raises:
        SettingsError: If the environment holds invalid values.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = FarsSettings.from_env()

    return _default_settings


def reset_settings() -> None:
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("FARS_DATA_DIR", "/tmp/fars")
          reset_settings()
          assert get_settings().data_dir == Path("/tmp/fars")
      ```
    """
    global _default_settings
    _default_settings = None
