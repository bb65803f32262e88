"""Pytest configuration for Gridcore test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_GRID_ENV_NAMES = (
    "GRID_PAGE_SIZE",
    "GRID_INDEX_THRESHOLD",
    "GRID_SEARCH_MIN_RELEVANCE",
    "GRID_SEARCH_MAX_RESULTS",
    "GRID_SEARCH_FUZZY",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def clear_grid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default engine configuration."""
    for env_name in _GRID_ENV_NAMES:
        monkeypatch.delenv(env_name, raising=False)
