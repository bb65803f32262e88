"""Gridcore CLI entry points.
This module exposes query and validation commands over record files.
It maps argparse commands onto the grid engine.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from typing import Any, Sequence

from core.config import GridConfig
from core.errors import GridError
from core.logging_config import configure_console_logging
from core.schema_loader import load_schema_file
from core.types import FilterPredicate
from store.record_io import read_records_file
from store.record_validation import collect_validation_errors
from view.grid_engine import GridEngine


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="gridcore", description="Gridcore record engine CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Structured log level written to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_query_command(subparsers)
    _add_validate_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Gridcore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_console_logging(args.log_level)
    try:
        if args.command == "query":
            return _run_query_command(args)
        if args.command == "validate":
            return _run_validate_command(args)
    except GridError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_query_command(args: argparse.Namespace) -> int:
    """Handle query command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    config = GridConfig.from_env()
    if args.page_size is not None:
        config = replace(config, page_size=args.page_size)
    engine = GridEngine(
        load_schema_file(args.schema),
        read_records_file(args.data),
        config=config,
    )
    if args.show_disabled:
        engine.toggle_disabled_filter()
    if args.where:
        predicates = [_parse_where(raw_where) for raw_where in args.where]
        if not engine.set_filters(predicates, mode="or" if args.match == "any" else "and"):
            print("error=invalid filter; check --where field names against the schema")
            return 1
    if args.search:
        engine.handle_search(args.search)
    if args.sort:
        columns, directions = _parse_sort_args(args.sort)
        if not engine.sort_by(columns, directions):
            print("error=invalid sort; check --sort field names and directions")
            return 1
    engine.go_to_page(args.page)
    for record in engine.page_records():
        print(json.dumps(record, sort_keys=True, default=str))
    info = engine.page_info()
    print(
        f"page={info.current_page}/{info.total_pages}\t"
        f"rows={info.start}-{info.end}\t"
        f"total={info.total}"
    )
    return 0


def _run_validate_command(args: argparse.Namespace) -> int:
    """Handle validate command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    schema = load_schema_file(args.schema)
    records = read_records_file(args.data)
    failures = 0
    seen_ids: set[Any] = set()
    for index, record in enumerate(records):
        errors = collect_validation_errors(schema, record)
        record_id = record.get("id")
        if record_id is not None and record_id in seen_ids:
            errors.append(f"id '{record_id}' already exists")
        seen_ids.add(record_id)
        for message in errors:
            print(f"record[{index}]\t{message}")
        failures += 1 if errors else 0
    print(f"valid_records={len(records) - failures}\tinvalid_records={failures}")
    return 0 if failures == 0 else 1


def _parse_where(raw_where: str) -> FilterPredicate:
    for token, operator in (("~=", "contains"), ("!=", "ne"), (">=", "gte"), ("<=", "lte")):
        if token in raw_where:
            field_name, raw_value = raw_where.split(token, 1)
            return FilterPredicate(field_name.strip(), operator, _parse_value(raw_value))
    for token, operator in (("=", "eq"), (">", "gt"), ("<", "lt")):
        if token in raw_where:
            field_name, raw_value = raw_where.split(token, 1)
            return FilterPredicate(field_name.strip(), operator, _parse_value(raw_value))
    raise GridError(
        f"Invalid --where expression '{raw_where}'. Use field=value, field~=text, or field>=n."
    )


def _parse_value(raw_value: str) -> Any:
    text = raw_value.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _parse_sort_args(raw_sorts: Sequence[str]) -> tuple[list[str], list[str]]:
    columns = []
    directions = []
    for raw_sort in raw_sorts:
        field_name, _, direction = raw_sort.partition(":")
        columns.append(field_name.strip())
        directions.append(direction.strip().lower() or "asc")
    return columns, directions


def _add_query_command(subparsers: Any) -> None:
    """Register query subcommand."""
    parser = subparsers.add_parser("query", help="Filter, search, sort, and page a record file")
    parser.add_argument("--schema", required=True, help="YAML schema file")
    parser.add_argument("--data", required=True, help="JSON array or JSONL record file")
    parser.add_argument("--search", help="Free-text search query")
    parser.add_argument(
        "--sort",
        action="append",
        default=[],
        help="Sort key as field or field:desc; repeat for multi-key sorting",
    )
    parser.add_argument(
        "--where",
        action="append",
        default=[],
        help="Filter predicate, e.g. status=active, company~=tech, salary>=5000",
    )
    parser.add_argument(
        "--match",
        choices=("all", "any"),
        default="all",
        help="Combine --where predicates with AND (all) or OR (any)",
    )
    parser.add_argument(
        "--show-disabled",
        action="store_true",
        help="Show soft-deleted records instead of enabled ones",
    )
    parser.add_argument("--page", type=int, default=1, help="One-based page number")
    parser.add_argument("--page-size", type=int, help="Rows per page")


def _add_validate_command(subparsers: Any) -> None:
    """Register validate subcommand."""
    parser = subparsers.add_parser("validate", help="Check a record file against a schema")
    parser.add_argument("--schema", required=True, help="YAML schema file")
    parser.add_argument("--data", required=True, help="JSON array or JSONL record file")
