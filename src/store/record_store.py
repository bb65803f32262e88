"""Canonical in-memory record store.

This module owns the record collection and schema for one grid.
It performs CRUD with soft/hard delete and optimistic version checks.
Every mutation is validated before it touches state, so a failed call
leaves the store exactly as it was.
"""

from __future__ import annotations

from collections.abc import Hashable
import uuid
from typing import Any, Iterable, Iterator, Mapping

from core.constants import (
    DELETED_AT_FIELD,
    DISABLED_FIELD,
    ID_FIELD,
    INITIAL_RECORD_VERSION,
    LAST_MODIFIED_FIELD,
    VERSION_FIELD,
)
from core.errors import RecordNotFoundError, RecordValidationError, VersionConflictError
from core.field_values import is_empty_value, is_number, utc_now_iso
from core.logging_config import get_logger
from core.types import GridSchema, Record
from store.record_validation import validate_record

_LOGGER = get_logger(__name__)


class RecordStore:
    """Schema-validated record collection keyed by ``id``.

    Records are kept in insertion order. Reads return copies so callers
    cannot change stored state without going through a mutation method.
    """

    def __init__(self, schema: GridSchema, records: Iterable[Mapping[str, Any]] = ()) -> None:
        """Create a store and load initial records.

        Args:
            schema: Immutable grid schema.
            records: Initial records; each goes through ``add``.

        Raises:
            RecordValidationError: If an initial record is invalid.
        """
        self._schema = schema
        self._order: list[Hashable] = []
        self._records: dict[Hashable, Record] = {}
        self._revision = 0
        for record in records:
            self.add(record)

    @property
    def schema(self) -> GridSchema:
        """Return the store schema."""
        return self._schema

    @property
    def revision(self) -> int:
        """Return a counter bumped by every successful mutation."""
        return self._revision

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, record_id: object) -> bool:
        try:
            return record_id in self._records
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records())

    def ids(self) -> tuple[Hashable, ...]:
        """Return record ids in store order."""
        return tuple(self._order)

    def records(self) -> list[Record]:
        """Return copies of every record in store order."""
        return [dict(self._records[record_id]) for record_id in self._order]

    def get(self, record_id: Hashable) -> Record:
        """Return a copy of one record.

        Raises:
            RecordNotFoundError: If the id is unknown.
        """
        return dict(self._require(record_id))

    def add(self, record: Mapping[str, Any], position: int | None = None) -> Hashable:
        """Add a record, assigning id and version when absent.

        Args:
            record: Record fields.
            position: Optional insertion index; appends when omitted.

        Returns:
            The stored record id.

        Raises:
            RecordValidationError: If the record fails schema checks or the
                id already exists.
        """
        candidate = dict(record)
        if is_empty_value(candidate.get(ID_FIELD)):
            candidate[ID_FIELD] = self._next_id()
        record_id = candidate[ID_FIELD]
        if isinstance(record_id, bool) or not isinstance(record_id, Hashable):
            raise RecordValidationError(
                f"Record id must be a string or number, got {type(record_id).__name__}.",
                ("id must be a string or number",),
            )
        if record_id in self._records:
            raise RecordValidationError(
                f"Record id '{record_id}' already exists. Use update or choose another id.",
                (f"id '{record_id}' already exists",),
            )
        candidate.setdefault(DISABLED_FIELD, False)
        if candidate.get(VERSION_FIELD) is None:
            candidate[VERSION_FIELD] = INITIAL_RECORD_VERSION
        candidate.setdefault(LAST_MODIFIED_FIELD, utc_now_iso())
        validate_record(self._schema, candidate)
        if position is None or not 0 <= position <= len(self._order):
            self._order.append(record_id)
        else:
            self._order.insert(position, record_id)
        self._records[record_id] = candidate
        self._revision += 1
        _LOGGER.info("record_added", record_id=record_id, total_records=len(self._order))
        return record_id

    def update(
        self,
        record_id: Hashable,
        changes: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Record:
        """Merge changes into a record and bump its version.

        Args:
            record_id: Record to update.
            changes: Partial or full record fields.
            expected_version: Version the caller last read, when known.

        Returns:
            Copy of the updated record.

        Raises:
            RecordNotFoundError: If the id is unknown.
            VersionConflictError: If ``expected_version`` is stale.
            RecordValidationError: If the merged record fails schema checks.
        """
        current = self._require(record_id)
        current_version = int(current[VERSION_FIELD])
        if expected_version is not None and expected_version != current_version:
            _LOGGER.warning(
                "record_update_conflict",
                record_id=record_id,
                expected_version=expected_version,
                actual_version=current_version,
            )
            raise VersionConflictError(record_id, expected_version, current_version)
        if ID_FIELD in changes and changes[ID_FIELD] != record_id:
            raise RecordValidationError(
                f"Record id '{record_id}' cannot be changed. Add a new record instead.",
                ("id cannot be changed",),
            )
        merged = dict(current)
        for key, value in changes.items():
            if key in (ID_FIELD, VERSION_FIELD, LAST_MODIFIED_FIELD):
                continue
            merged[key] = value
        validate_record(self._schema, merged)
        merged[VERSION_FIELD] = current_version + 1
        merged[LAST_MODIFIED_FIELD] = utc_now_iso()
        self._records[record_id] = merged
        self._revision += 1
        _LOGGER.info(
            "record_updated",
            record_id=record_id,
            version=merged[VERSION_FIELD],
            changed_fields=sorted(key for key in changes if key != ID_FIELD),
        )
        return dict(merged)

    def delete(self, record_id: Hashable, soft: bool = True) -> Record:
        """Soft-delete (disable) or hard-delete (remove) a record.

        Args:
            record_id: Record to delete.
            soft: Flag the record disabled instead of removing it.

        Returns:
            Copy of the record after a soft delete, or as it was before a
            hard delete.

        Raises:
            RecordNotFoundError: If the id is unknown.
        """
        current = self._require(record_id)
        if not soft:
            self._order.remove(record_id)
            del self._records[record_id]
            self._revision += 1
            _LOGGER.info("record_hard_deleted", record_id=record_id, total_records=len(self._order))
            return dict(current)
        timestamp = utc_now_iso()
        disabled = dict(current)
        disabled[DISABLED_FIELD] = True
        disabled[DELETED_AT_FIELD] = timestamp
        disabled[LAST_MODIFIED_FIELD] = timestamp
        disabled[VERSION_FIELD] = int(current[VERSION_FIELD]) + 1
        self._records[record_id] = disabled
        self._revision += 1
        _LOGGER.info("record_soft_deleted", record_id=record_id, version=disabled[VERSION_FIELD])
        return dict(disabled)

    def restore(self, record_id: Hashable) -> Record:
        """Re-enable a soft-deleted record.

        Raises:
            RecordNotFoundError: If the id is unknown.
        """
        current = self._require(record_id)
        restored = dict(current)
        restored[DISABLED_FIELD] = False
        restored.pop(DELETED_AT_FIELD, None)
        restored[LAST_MODIFIED_FIELD] = utc_now_iso()
        restored[VERSION_FIELD] = int(current[VERSION_FIELD]) + 1
        self._records[record_id] = restored
        self._revision += 1
        _LOGGER.info("record_restored", record_id=record_id, version=restored[VERSION_FIELD])
        return dict(restored)

    def _require(self, record_id: Hashable) -> Record:
        if record_id not in self:
            raise RecordNotFoundError(record_id)
        return self._records[record_id]

    def _next_id(self) -> Hashable:
        descriptor = self._schema.get(ID_FIELD)
        if descriptor is not None and descriptor.type != "number":
            digit_ids = [
                int(record_id)
                for record_id in self._order
                if isinstance(record_id, str) and record_id.isdigit()
            ]
            if len(digit_ids) == len(self._order):
                return str(max(digit_ids, default=0) + 1)
            return uuid.uuid4().hex
        numeric_ids = [int(record_id) for record_id in self._order if is_number(record_id)]
        if self._order and not numeric_ids:
            return uuid.uuid4().hex
        return max(numeric_ids, default=0) + 1
