"""Soft-delete and predicate filtering.

This module evaluates the built-in soft-delete predicate and any user
predicates over a record sequence. The soft-delete predicate always runs
first and is exclusive: the enabled view holds only ``isDisabled=False``
records, the disabled view only ``isDisabled=True`` records, whatever the
other predicates say.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from core.constants import (
    DEFAULT_INDEX_THRESHOLD,
    DISABLED_FIELD,
    INDEXED_FILTER_OPERATORS,
    RESERVED_FIELDS,
    SUPPORTED_FILTER_MODES,
    SUPPORTED_FILTER_OPERATORS,
)
from core.errors import InvalidFilterFieldError
from core.field_values import to_search_text
from core.logging_config import get_logger
from core.types import FilterMode, FilterPredicate, GridSchema, Record
from query.filter_index import FieldValueIndex

_LOGGER = get_logger(__name__)


def filter_records(
    records: Sequence[Record],
    show_disabled: bool = False,
    predicates: Sequence[FilterPredicate] = (),
    mode: FilterMode = "and",
    schema: GridSchema | None = None,
    index_threshold: int = DEFAULT_INDEX_THRESHOLD,
) -> list[Record]:
    """Filter records by soft-delete state and predicates.

    Args:
        records: Input records; never mutated.
        show_disabled: Select the disabled view instead of the enabled one.
        predicates: Additional field predicates.
        mode: ``and`` requires every predicate, ``or`` any predicate.
        schema: Optional schema used to validate predicate fields.
        index_threshold: Record count above which value indexes are used.

    Returns:
        Matching records in input order.

    Raises:
        InvalidFilterFieldError: If the mode, an operator, or a field is
            invalid. Raised before any record is evaluated.
    """
    validate_filter(predicates, mode, schema)
    candidates = [
        position
        for position, record in enumerate(records)
        if is_disabled(record) == show_disabled
    ]
    if predicates:
        index = FieldValueIndex(records) if len(records) > index_threshold else None
        matched = _match_predicates(records, predicates, mode, index)
        candidates = [position for position in candidates if position in matched]
    _LOGGER.debug(
        "records_filtered",
        input_count=len(records),
        output_count=len(candidates),
        show_disabled=show_disabled,
        predicate_count=len(predicates),
        mode=mode,
        indexed=bool(predicates) and len(records) > index_threshold,
    )
    return [records[position] for position in candidates]


def is_disabled(record: Record) -> bool:
    """Return whether a record is soft-deleted."""
    return record.get(DISABLED_FIELD) is True


def validate_filter(
    predicates: Sequence[FilterPredicate],
    mode: str,
    schema: GridSchema | None,
) -> None:
    """Check filter configuration without evaluating it.

    Raises:
        InvalidFilterFieldError: On an unknown mode, operator, or field.
    """
    if mode not in SUPPORTED_FILTER_MODES:
        raise InvalidFilterFieldError(
            f"Unsupported filter mode '{mode}'. Use one of: {', '.join(SUPPORTED_FILTER_MODES)}."
        )
    for predicate in predicates:
        if predicate.operator not in SUPPORTED_FILTER_OPERATORS:
            supported = ", ".join(SUPPORTED_FILTER_OPERATORS)
            raise InvalidFilterFieldError(
                f"Unsupported filter operator '{predicate.operator}' on field "
                f"'{predicate.field}'. Use one of: {supported}."
            )
        if schema is None or predicate.field in RESERVED_FIELDS:
            continue
        descriptor = schema.get(predicate.field)
        if descriptor is None:
            raise InvalidFilterFieldError(
                f"Cannot filter on unknown field '{predicate.field}'. "
                f"Known fields: {', '.join(schema.field_names())}."
            )
        if not descriptor.can_filter:
            raise InvalidFilterFieldError(
                f"Field '{predicate.field}' does not allow filtering. Set canFilter in the schema."
            )


def _match_predicates(
    records: Sequence[Record],
    predicates: Sequence[FilterPredicate],
    mode: FilterMode,
    index: FieldValueIndex | None,
) -> set[int]:
    matched: set[int] | None = None
    for predicate in predicates:
        positions = _predicate_positions(records, predicate, index)
        if matched is None:
            matched = positions
        elif mode == "and":
            matched &= positions
        else:
            matched |= positions
    return matched if matched is not None else set(range(len(records)))


def _predicate_positions(
    records: Sequence[Record],
    predicate: FilterPredicate,
    index: FieldValueIndex | None,
) -> set[int]:
    if index is not None and predicate.operator in INDEXED_FILTER_OPERATORS:
        if predicate.operator == "eq":
            positions = index.positions_equal(predicate.field, predicate.value)
        else:
            positions = index.positions_in(predicate.field, _as_collection(predicate.value))
        if positions is not None:
            return positions
    check = _OPERATORS[predicate.operator]
    operand = _as_collection(predicate.value) if predicate.operator == "in" else predicate.value
    return {
        position
        for position, record in enumerate(records)
        if _safe_check(check, record.get(predicate.field), operand)
    }


def _as_collection(value: Any) -> tuple[Any, ...]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


def _safe_check(check: Callable[[Any, Any], bool], value: Any, operand: Any) -> bool:
    try:
        return check(value, operand)
    except TypeError:
        return False


def _contains(value: Any, operand: Any) -> bool:
    if value is None:
        return False
    return to_search_text(operand).lower() in to_search_text(value).lower()


def _starts_with(value: Any, operand: Any) -> bool:
    if value is None:
        return False
    return to_search_text(value).lower().startswith(to_search_text(operand).lower())


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(value: Any, operand: Any) -> bool:
        if value is None or operand is None:
            return False
        return compare(value, operand)

    return check


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": lambda value, operand: value == operand,
    "ne": lambda value, operand: value != operand,
    "contains": _contains,
    "starts_with": _starts_with,
    "gt": _ordered(lambda value, operand: value > operand),
    "gte": _ordered(lambda value, operand: value >= operand),
    "lt": _ordered(lambda value, operand: value < operand),
    "lte": _ordered(lambda value, operand: value <= operand),
    "in": lambda value, operand: value in operand,
}
