"""Record data file reading.

This module loads grid records from JSON array or JSONL files.
It is used by the CLI; the engine itself never touches the filesystem.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.errors import GridDataError
from core.types import Record


def read_records_file(data_path: str) -> list[Record]:
    """Read records from a JSON array or JSONL file.

    Args:
        data_path: Path to ``.json`` or ``.jsonl`` file.

    Returns:
        Parsed records in file order.

    Raises:
        GridDataError: If the file is missing or malformed.
    """
    file_path = Path(data_path).expanduser().resolve()
    if not file_path.exists():
        raise GridDataError(f"Data file does not exist at {file_path}. Provide a valid path.")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as error:
        raise GridDataError(
            f"Failed to read data file at {file_path}: {error}. Check file permissions and retry."
        ) from error
    if file_path.suffix.lower() == ".jsonl":
        return _parse_jsonl(file_path, content)
    return _parse_json_array(file_path, content)


def _parse_json_array(file_path: Path, content: str) -> list[Record]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as error:
        raise GridDataError(
            f"Failed to parse JSON data at {file_path}: {error.msg}. Fix the JSON syntax and retry."
        ) from error
    if not isinstance(payload, list):
        raise GridDataError(
            f"Invalid data file {file_path}: expected a JSON array of record objects."
        )
    return [_expect_record(row, f"{file_path}[{index}]") for index, row in enumerate(payload)]


def _parse_jsonl(file_path: Path, content: str) -> list[Record]:
    records: list[Record] = []
    for line_number, line in enumerate(content.splitlines(), 1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as error:
            raise GridDataError(
                f"Failed to parse JSONL record at {file_path}:{line_number}: "
                f"{error.msg}. Fix the JSON syntax and retry."
            ) from error
        records.append(_expect_record(payload, f"{file_path}:{line_number}"))
    return records


def _expect_record(payload: Any, location: str) -> Record:
    if not isinstance(payload, dict):
        raise GridDataError(
            f"Invalid record at {location}: expected a JSON object, got {type(payload).__name__}."
        )
    return payload
