"""Stable multi-key record sorting.

This module orders records by a list of (field, direction) keys. The
first key producing a non-zero comparison decides; ``desc`` negates the
comparator's sign; records equal on every key keep their input order.
All keys are validated before any reordering happens.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Mapping, Sequence

from core.constants import (
    DELETED_AT_FIELD,
    DISABLED_FIELD,
    ID_FIELD,
    LAST_MODIFIED_FIELD,
    SUPPORTED_SORT_DIRECTIONS,
    VERSION_FIELD,
)
from core.errors import InvalidSortFieldError
from core.field_values import is_number, parse_date_value
from core.logging_config import get_logger
from core.types import FieldType, GridSchema, Record, SortKey, ValueComparator

_LOGGER = get_logger(__name__)

_RESERVED_FIELD_TYPES: dict[str, FieldType] = {
    ID_FIELD: "string",
    DISABLED_FIELD: "boolean",
    VERSION_FIELD: "number",
    DELETED_AT_FIELD: "date",
    LAST_MODIFIED_FIELD: "date",
}


def sort_records(
    records: Sequence[Record],
    sort_keys: Sequence[SortKey],
    schema: GridSchema,
    comparators: Mapping[str, ValueComparator] | None = None,
) -> list[Record]:
    """Sort records by ordered keys.

    Args:
        records: Input records; never mutated.
        sort_keys: Ordered sort keys.
        schema: Schema declaring field types.
        comparators: Optional per-field custom comparators returning
            negative, zero, or positive like ``cmp``.

    Returns:
        Newly ordered list.

    Raises:
        InvalidSortFieldError: If a field or direction is unknown.
    """
    field_types = resolve_sort_fields(sort_keys, schema)
    custom = dict(comparators or {})
    resolved = [
        (
            key.field,
            -1 if key.direction == "desc" else 1,
            custom.get(key.field) or _default_comparator(field_types[key.field]),
        )
        for key in sort_keys
    ]

    def compare_records(left: Record, right: Record) -> int:
        for field_name, sign, comparator in resolved:
            result = _compare_present(left.get(field_name), right.get(field_name), comparator)
            if result != 0:
                return sign * result
        return 0

    # sorted() is a stable merge sort, so full ties keep input order.
    ordered = sorted(records, key=cmp_to_key(compare_records))
    _LOGGER.debug(
        "records_sorted",
        record_count=len(records),
        keys=[f"{key.field}:{key.direction}" for key in sort_keys],
    )
    return ordered


def resolve_sort_fields(sort_keys: Sequence[SortKey], schema: GridSchema) -> dict[str, FieldType]:
    """Validate sort keys and resolve each field's declared type.

    Raises:
        InvalidSortFieldError: If a field or direction is unknown.
    """
    field_types: dict[str, FieldType] = {}
    for key in sort_keys:
        if key.direction not in SUPPORTED_SORT_DIRECTIONS:
            raise InvalidSortFieldError(
                f"Unsupported sort direction '{key.direction}' for field '{key.field}'. "
                "Use 'asc' or 'desc'."
            )
        descriptor = schema.get(key.field)
        if descriptor is not None:
            field_types[key.field] = descriptor.type
        elif key.field in _RESERVED_FIELD_TYPES:
            field_types[key.field] = _RESERVED_FIELD_TYPES[key.field]
        else:
            raise InvalidSortFieldError(
                f"Cannot sort on unknown field '{key.field}'. "
                f"Known fields: {', '.join(schema.field_names())}."
            )
    return field_types


def compare_values(left: Any, right: Any) -> int:
    """Compare two defined values of possibly different types."""
    try:
        if left < right:
            return -1
        if left > right:
            return 1
        return 0
    except TypeError:
        return _cmp(str(left), str(right))


def _compare_present(left: Any, right: Any, comparator: ValueComparator) -> int:
    # Missing values sort below any defined value.
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    return comparator(left, right)


def _default_comparator(field_type: FieldType) -> ValueComparator:
    if field_type == "number":
        return _compare_numbers
    if field_type == "date":
        return _compare_dates
    if field_type == "boolean":
        return compare_values
    return _compare_strings


def _compare_numbers(left: Any, right: Any) -> int:
    if is_number(left) and is_number(right):
        return _cmp(left, right)
    return compare_values(left, right)


def _compare_dates(left: Any, right: Any) -> int:
    left_date = parse_date_value(left)
    right_date = parse_date_value(right)
    if left_date is not None and right_date is not None:
        return _cmp(left_date, right_date)
    return compare_values(left, right)


def _compare_strings(left: Any, right: Any) -> int:
    if isinstance(left, str) and isinstance(right, str):
        return _cmp(left, right)
    return compare_values(left, right)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)
