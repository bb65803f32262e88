"""Unit tests for record data file reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import GridDataError
from store.record_io import read_records_file
from tests.fixture_paths import fixture_path


def test_read_records_file_parses_json_array() -> None:
    """JSON array files should yield one record per element."""
    records = read_records_file(str(fixture_path("companies.json")))

    assert [record["id"] for record in records] == [1, 2, 3, 4, 5]


def test_read_records_file_parses_jsonl() -> None:
    """JSONL files should yield one record per non-empty line."""
    records = read_records_file(str(fixture_path("companies_invalid.jsonl")))

    assert len(records) == 3


def test_read_records_file_raises_for_non_object_rows(tmp_path: Path) -> None:
    """Rows must be JSON objects."""
    data_file = tmp_path / "rows.json"
    data_file.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(GridDataError):
        read_records_file(str(data_file))


def test_read_records_file_raises_for_bad_jsonl_line(tmp_path: Path) -> None:
    """Malformed JSONL lines should raise with location context."""
    data_file = tmp_path / "rows.jsonl"
    data_file.write_text('{"id": 1}\n{oops}\n', encoding="utf-8")

    with pytest.raises(GridDataError, match=":2"):
        read_records_file(str(data_file))


def test_read_records_file_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing files should raise GridDataError."""
    with pytest.raises(GridDataError):
        read_records_file(str(tmp_path / "missing.json"))
