"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import GridConfig
from core.errors import GridConfigError


def test_from_env_uses_defaults_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to documented defaults."""
    for env_name in (
        "GRID_PAGE_SIZE",
        "GRID_INDEX_THRESHOLD",
        "GRID_SEARCH_MIN_RELEVANCE",
        "GRID_SEARCH_MAX_RESULTS",
        "GRID_SEARCH_FUZZY",
    ):
        monkeypatch.delenv(env_name, raising=False)

    config = GridConfig.from_env()

    assert config == GridConfig(
        page_size=10,
        index_threshold=1000,
        search_min_relevance=0.1,
        search_max_results=100,
        search_fuzzy=True,
    )


def test_from_env_reads_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should parse page size from environment."""
    monkeypatch.setenv("GRID_PAGE_SIZE", "25")

    config = GridConfig.from_env()

    assert config.page_size == 25


def test_from_env_raises_for_non_numeric_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric page size."""
    monkeypatch.setenv("GRID_PAGE_SIZE", "many")

    with pytest.raises(GridConfigError):
        GridConfig.from_env()


def test_from_env_raises_for_zero_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject page sizes below one."""
    monkeypatch.setenv("GRID_PAGE_SIZE", "0")

    with pytest.raises(GridConfigError):
        GridConfig.from_env()


def test_from_env_raises_for_relevance_out_of_range(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should keep the search threshold within [0, 1]."""
    monkeypatch.setenv("GRID_SEARCH_MIN_RELEVANCE", "1.5")

    with pytest.raises(GridConfigError):
        GridConfig.from_env()


def test_from_env_parses_fuzzy_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should accept textual booleans for fuzzy search."""
    monkeypatch.setenv("GRID_SEARCH_FUZZY", "off")

    config = GridConfig.from_env()

    assert config.search_fuzzy is False


def test_from_env_raises_for_unknown_fuzzy_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject unrecognized boolean text."""
    monkeypatch.setenv("GRID_SEARCH_FUZZY", "maybe")

    with pytest.raises(GridConfigError):
        GridConfig.from_env()
