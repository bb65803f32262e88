"""Unit tests for CLI query and validate commands."""

from __future__ import annotations

import json

import pytest

from cli.main import main
from tests.fixture_paths import companies_data_path, companies_schema_path, fixture_path

_SCHEMA = companies_schema_path()
_DATA = companies_data_path()


def _run_query(capsys: pytest.CaptureFixture[str], *extra_args: str) -> tuple[int, list[int], str]:
    exit_code = main(["query", "--schema", _SCHEMA, "--data", _DATA, *extra_args])
    lines = capsys.readouterr().out.splitlines()
    record_ids = [json.loads(line)["id"] for line in lines[:-1]]
    return exit_code, record_ids, lines[-1]


def test_query_prints_enabled_records_and_page_summary(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Default query should print enabled rows followed by a page summary."""
    exit_code, record_ids, summary = _run_query(capsys)

    assert (exit_code, record_ids, summary) == (0, [1, 4], "page=1/1\trows=1-2\ttotal=2")


def test_query_search_returns_matching_companies(capsys: pytest.CaptureFixture[str]) -> None:
    """--search should rank matching enabled records."""
    _, record_ids, _ = _run_query(capsys, "--search", "Tech")

    assert record_ids == [1, 4]


def test_query_show_disabled_with_descending_sort(capsys: pytest.CaptureFixture[str]) -> None:
    """Disabled rows should sort by the requested key and direction."""
    _, record_ids, _ = _run_query(capsys, "--show-disabled", "--sort", "employees:desc")

    assert record_ids == [3, 2, 5]


def test_query_where_filters_disabled_view(capsys: pytest.CaptureFixture[str]) -> None:
    """--where predicates should apply inside the selected view."""
    _, record_ids, _ = _run_query(capsys, "--show-disabled", "--where", "employees=45")

    assert record_ids == [2]


def test_query_where_any_combines_predicates(capsys: pytest.CaptureFixture[str]) -> None:
    """--match any should OR the predicates."""
    _, record_ids, _ = _run_query(
        capsys,
        "--show-disabled",
        "--where",
        "employees>=300",
        "--where",
        "company~=web",
        "--match",
        "any",
    )

    assert record_ids == [3, 5]


def test_query_pages_with_clamping(capsys: pytest.CaptureFixture[str]) -> None:
    """Out-of-range pages should clamp to the last page."""
    _, record_ids, summary = _run_query(
        capsys, "--show-disabled", "--page-size", "2", "--page", "9"
    )

    assert (record_ids, summary) == ([5], "page=2/2\trows=3-3\ttotal=3")


def test_query_rejects_unknown_sort_field(capsys: pytest.CaptureFixture[str]) -> None:
    """Invalid sort keys should fail with exit code 1."""
    exit_code = main(["query", "--schema", _SCHEMA, "--data", _DATA, "--sort", "revenue"])

    assert exit_code == 1 and capsys.readouterr().out.startswith("error=invalid sort")


def test_query_rejects_unfilterable_field(capsys: pytest.CaptureFixture[str]) -> None:
    """Predicates on canFilter=false fields should fail."""
    exit_code = main(
        ["query", "--schema", _SCHEMA, "--data", _DATA, "--where", "founded=2001-04-01"]
    )

    assert exit_code == 1 and capsys.readouterr().out.startswith("error=invalid filter")


def test_query_reports_missing_schema(capsys: pytest.CaptureFixture[str]) -> None:
    """Missing schema files should print an error line."""
    exit_code = main(["query", "--schema", "missing.yaml", "--data", _DATA])

    assert exit_code == 1 and capsys.readouterr().out.startswith("error=Schema file does not exist")


def test_validate_accepts_valid_records(capsys: pytest.CaptureFixture[str]) -> None:
    """Valid files should report zero invalid records."""
    exit_code = main(["validate", "--schema", _SCHEMA, "--data", _DATA])

    assert exit_code == 0 and "valid_records=5\tinvalid_records=0" in capsys.readouterr().out


def test_validate_reports_each_record_error(capsys: pytest.CaptureFixture[str]) -> None:
    """Invalid files should list errors per record and exit 1."""
    exit_code = main(
        ["validate", "--schema", _SCHEMA, "--data", str(fixture_path("companies_invalid.jsonl"))]
    )

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 1 and lines == [
        "record[1]\tCompany is required",
        "record[1]\tContact Email must be a valid email",
        "record[2]\tid '1' already exists",
        "valid_records=1\tinvalid_records=2",
    ]
