"""Paths to the companies grid fixtures under tests/fixtures."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture file path.

    Args:
        relative_path: Path under the fixtures root.

    Returns:
        Absolute fixture path.
    """
    return FIXTURES_ROOT / relative_path


def companies_schema_path() -> str:
    """Return the companies YAML schema path as a CLI-ready string."""
    return str(fixture_path("companies_schema.yaml"))


def companies_data_path() -> str:
    """Return the companies JSON record file path as a CLI-ready string."""
    return str(fixture_path("companies.json"))
