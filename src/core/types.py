"""Shared typed models.

This module defines immutable data models used by the store, query,
and view layers to keep interfaces explicit and stable. Records
themselves stay plain dictionaries because their fields are schema-driven.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Literal, Mapping

from core.constants import (
    DEFAULT_SEARCH_FUZZY,
    DEFAULT_SEARCH_MAX_RESULTS,
    DEFAULT_SEARCH_MIN_RELEVANCE,
    DEFAULT_SEARCH_WEIGHT,
)

Record = dict[str, Any]
FieldType = Literal["string", "number", "boolean", "date", "email", "url", "phone", "select"]
SortDirection = Literal["asc", "desc"]
FilterMode = Literal["and", "or"]
FilterOperator = Literal["eq", "ne", "contains", "starts_with", "gt", "gte", "lt", "lte", "in"]
ValueComparator = Callable[[Any, Any], int]


@dataclass(frozen=True)
class FieldDescriptor:
    """Schema entry describing one record field.

    Attributes:
        name: Field name, unique within a schema.
        type: Declared value type used for validation and sorting.
        display_name: Human-readable label used in error messages.
        required: Whether the field must hold a non-empty value.
        searchable: Whether free-text search considers the field.
        search_weight: Multiplier applied to the field's search score.
        can_filter: Whether filter predicates may target the field.
        options: Allowed values for select fields.
    """

    name: str
    type: FieldType = "string"
    display_name: str = ""
    required: bool = False
    searchable: bool = True
    search_weight: float = DEFAULT_SEARCH_WEIGHT
    can_filter: bool = True
    options: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        """Return display name, falling back to the field name."""
        return self.display_name or self.name


@dataclass(frozen=True)
class GridSchema:
    """Immutable ordered mapping of field name to descriptor.

    Attributes:
        fields: Field descriptors in declaration order.
    """

    fields: tuple[FieldDescriptor, ...]

    def __contains__(self, field_name: object) -> bool:
        return self.get(field_name) is not None

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, field_name: object) -> FieldDescriptor | None:
        """Look up a descriptor by field name."""
        for item in self.fields:
            if item.name == field_name:
                return item
        return None

    def field_names(self) -> tuple[str, ...]:
        """Return field names in declaration order."""
        return tuple(item.name for item in self.fields)

    def searchable_fields(self) -> tuple[FieldDescriptor, ...]:
        """Return descriptors that free-text search considers."""
        return tuple(item for item in self.fields if item.searchable)


@dataclass(frozen=True)
class FilterPredicate:
    """One field constraint evaluated by the filter engine.

    Attributes:
        field: Record field name.
        operator: Comparison operator.
        value: Operand; a collection for the ``in`` operator.
    """

    field: str
    operator: FilterOperator = "eq"
    value: Any = None


@dataclass(frozen=True)
class SortKey:
    """One ordering key for the sort engine.

    Attributes:
        field: Record field name.
        direction: ``asc`` or ``desc``.
    """

    field: str
    direction: SortDirection = "asc"


@dataclass(frozen=True)
class SearchOptions:
    """Free-text search tuning.

    Attributes:
        min_relevance: Hits scoring below this value are dropped.
        max_results: Maximum number of hits returned.
        fuzzy: Whether in-order subsequence matches earn a score.
        include_disabled: Whether soft-deleted input records are eligible.
    """

    min_relevance: float = DEFAULT_SEARCH_MIN_RELEVANCE
    max_results: int = DEFAULT_SEARCH_MAX_RESULTS
    fuzzy: bool = DEFAULT_SEARCH_FUZZY
    include_disabled: bool = False


@dataclass(frozen=True)
class SearchHit:
    """Search result row.

    Attributes:
        record: Matched record.
        relevance: Score in [0, 1].
    """

    record: Record
    relevance: float


@dataclass(frozen=True)
class PageInfo:
    """Summary of the current page window.

    Attributes:
        start: One-based position of the first visible row, 0 when empty.
        end: One-based position of the last visible row, 0 when empty.
        total: Number of rows in the filtered, sorted view.
        current_page: One-based current page.
        total_pages: Number of pages, 0 when the view is empty.
    """

    start: int
    end: int
    total: int
    current_page: int
    total_pages: int


@dataclass(frozen=True)
class GridEvent:
    """Notification emitted to rendering and logging collaborators.

    Attributes:
        name: Event name, e.g. ``recordAdded``.
        payload: Event data such as ids, counts, and before/after values.
    """

    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)
