"""Gridcore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each engine component raises a specific error type for debuggability.
None of these errors is fatal to the engine: a failed mutation leaves
the store in its prior valid state.
"""

from __future__ import annotations

from typing import Sequence


class GridError(Exception):
    """Base exception for all Gridcore failures."""


class GridConfigError(GridError):
    """Raised for invalid runtime configuration."""


class GridSchemaError(GridError):
    """Raised for invalid schema definitions or schema files."""


class GridDataError(GridError):
    """Raised for unreadable or malformed record data files."""


class RecordValidationError(GridError):
    """Raised when a record fails schema checks.

    Attributes:
        errors: Individual validation messages, one per violation.
    """

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


class RecordNotFoundError(GridError):
    """Raised when a record id is unknown to the store."""

    def __init__(self, record_id: object) -> None:
        super().__init__(
            f"Record '{record_id}' does not exist. Refresh the view and retry with a known id."
        )
        self.record_id = record_id


class VersionConflictError(GridError):
    """Raised when an update carries a stale expected version."""

    def __init__(self, record_id: object, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Version conflict on record '{record_id}': expected version {expected_version}, "
            f"store has version {actual_version}. Re-fetch the record and retry."
        )
        self.record_id = record_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class InvalidSortFieldError(GridError):
    """Raised for sort configuration naming unknown fields or directions."""


class InvalidFilterFieldError(GridError):
    """Raised for filter predicates naming unknown or unfilterable fields."""


class PageIndexError(GridError, IndexError):
    """Raised when a page-local row index is outside the current window."""


class StaleViewError(GridError):
    """Raised when rows are read from a view the store has invalidated."""


class GridEventError(GridError):
    """Raised when an event listener fails."""
