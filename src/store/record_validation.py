"""Schema validation for grid records.

This module checks required fields and declared value types.
It returns every violation at once so callers can report them together.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from core.constants import DISABLED_FIELD, VERSION_FIELD
from core.errors import RecordValidationError
from core.field_values import is_empty_value, is_number, parse_date_value
from core.types import FieldDescriptor, GridSchema

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
_URL_PATTERN = re.compile(r"^https?://.+")


def collect_validation_errors(schema: GridSchema, record: Mapping[str, Any]) -> list[str]:
    """Collect every schema violation in a record.

    Args:
        schema: Grid schema.
        record: Candidate record.

    Returns:
        Violation messages, empty when the record is valid.
    """
    errors: list[str] = []
    for descriptor in schema:
        value = record.get(descriptor.name)
        if is_empty_value(value):
            if descriptor.required:
                errors.append(f"{descriptor.label} is required")
            continue
        type_error = _check_type(descriptor, value)
        if type_error:
            errors.append(type_error)
    errors.extend(_check_reserved_fields(record))
    return errors


def validate_record(schema: GridSchema, record: Mapping[str, Any]) -> None:
    """Raise when a record violates the schema.

    Raises:
        RecordValidationError: With every violation attached.
    """
    errors = collect_validation_errors(schema, record)
    if errors:
        raise RecordValidationError(f"Validation failed: {', '.join(errors)}", errors)


def _check_type(descriptor: FieldDescriptor, value: Any) -> str | None:
    label = descriptor.label
    field_type = descriptor.type
    if field_type == "number":
        return None if is_number(value) else f"{label} must be a number"
    if field_type == "boolean":
        return None if isinstance(value, bool) else f"{label} must be true or false"
    if field_type == "date":
        return None if parse_date_value(value) is not None else f"{label} must be a valid date"
    if not isinstance(value, str):
        return f"{label} must be text"
    if field_type == "email" and not _EMAIL_PATTERN.match(value):
        return f"{label} must be a valid email"
    if field_type == "url" and not _URL_PATTERN.match(value):
        return f"{label} must be a valid URL"
    if field_type == "select" and descriptor.options and value not in descriptor.options:
        return f"{label} must be one of: {', '.join(descriptor.options)}"
    return None


def _check_reserved_fields(record: Mapping[str, Any]) -> list[str]:
    errors = []
    disabled = record.get(DISABLED_FIELD)
    if disabled is not None and not isinstance(disabled, bool):
        errors.append(f"{DISABLED_FIELD} must be true or false")
    version = record.get(VERSION_FIELD)
    if version is not None and (not isinstance(version, int) or isinstance(version, bool)):
        errors.append(f"{VERSION_FIELD} must be an integer")
    return errors
