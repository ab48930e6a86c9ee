"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import fars...' works, and keeps
FARS_* environment variables from leaking into tests through cached settings.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from fars.config.settings import reset_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Start every test with no FARS_* overrides and an empty settings cache."""
    monkeypatch.delenv("FARS_DATA_DIR", raising=False)
    monkeypatch.delenv("FARS_ECHO_TABLES", raising=False)
    reset_settings()
    yield
    reset_settings()
