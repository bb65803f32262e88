"""Public SDK surface for Gridcore.

This module provides a stable import path for grid consumers.
It re-exports the engine, the pipeline functions, and typed models.
"""

from __future__ import annotations

from core.config import GridConfig
from core.errors import (
    GridError,
    InvalidFilterFieldError,
    InvalidSortFieldError,
    PageIndexError,
    RecordNotFoundError,
    RecordValidationError,
    StaleViewError,
    VersionConflictError,
)
from core.schema_loader import build_schema, load_schema_file
from core.types import (
    FieldDescriptor,
    FilterPredicate,
    GridEvent,
    GridSchema,
    PageInfo,
    SearchHit,
    SearchOptions,
    SortKey,
)
from query.filter_engine import filter_records
from query.search_engine import search_records
from query.sort_engine import sort_records
from store.record_store import RecordStore
from view.grid_engine import GridEngine
from view.grid_events import GridEventBus
from view.paginator import Paginator

__all__ = [
    "FieldDescriptor",
    "FilterPredicate",
    "GridConfig",
    "GridEngine",
    "GridError",
    "GridEvent",
    "GridEventBus",
    "GridSchema",
    "InvalidFilterFieldError",
    "InvalidSortFieldError",
    "PageIndexError",
    "PageInfo",
    "Paginator",
    "RecordNotFoundError",
    "RecordStore",
    "RecordValidationError",
    "SearchHit",
    "SearchOptions",
    "SortKey",
    "StaleViewError",
    "VersionConflictError",
    "build_schema",
    "filter_records",
    "load_schema_file",
    "search_records",
    "sort_records",
]
