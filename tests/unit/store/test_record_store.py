"""Unit tests for the in-memory record store."""

from __future__ import annotations

import pytest

from core.errors import RecordNotFoundError, RecordValidationError, VersionConflictError
from core.schema_loader import build_schema
from core.types import GridSchema
from store.record_store import RecordStore


def _schema() -> GridSchema:
    return build_schema(
        {
            "company": {"type": "string", "required": True},
            "employees": {"type": "number"},
        }
    )


def _store() -> RecordStore:
    return RecordStore(
        _schema(),
        [
            {"id": 1, "company": "Tech Corp", "employees": 120},
            {"id": 2, "company": "Cloud Tech", "employees": 45},
        ],
    )


def test_add_assigns_next_numeric_id_and_initial_version() -> None:
    """Records without id should get max numeric id + 1 and version 1."""
    store = _store()

    record_id = store.add({"company": "Data Systems"})
    record = store.get(record_id)

    assert (record_id, record["version"], record["isDisabled"]) == (3, 1, False)


def test_add_assigns_uuid_when_existing_ids_are_text() -> None:
    """Stores keyed by text ids should generate uuid hex ids."""
    store = RecordStore(_schema(), [{"id": "tech-corp", "company": "Tech Corp"}])

    record_id = store.add({"company": "Data Systems"})

    assert isinstance(record_id, str) and len(record_id) == 32


def test_add_assigns_text_id_when_schema_declares_text_ids() -> None:
    """Generated ids should satisfy a string-typed id field."""
    schema = build_schema({"id": {"type": "string"}, "company": {"type": "string"}})
    store = RecordStore(schema)

    record_id = store.add({"company": "Tech Corp"})

    assert record_id == "1"


def test_add_continues_digit_text_ids() -> None:
    """Digit-only text ids should continue as the next number in text form."""
    schema = build_schema({"id": {"type": "string"}, "company": {"type": "string"}})
    store = RecordStore(schema, [{"id": "7", "company": "Tech Corp"}])

    record_id = store.add({"company": "Cloud Tech"})

    assert record_id == "8"


def test_add_rejects_boolean_id_without_mutation() -> None:
    """Boolean ids should be rejected instead of colliding with id 1."""
    store = _store()

    with pytest.raises(RecordValidationError) as error_info:
        store.add({"id": True, "company": "Data Systems"})

    assert error_info.value.errors == ("id must be a string or number",) and len(store) == 2


def test_add_rejects_duplicate_id() -> None:
    """Ids must stay unique across the store."""
    store = _store()

    with pytest.raises(RecordValidationError):
        store.add({"id": 1, "company": "Copy Corp"})


def test_add_rejects_duplicate_id_of_soft_deleted_record() -> None:
    """Soft-deleted records still reserve their id."""
    store = _store()
    store.delete(2)

    with pytest.raises(RecordValidationError):
        store.add({"id": 2, "company": "Copy Corp"})


def test_add_rejects_missing_required_field_without_mutation() -> None:
    """Invalid records should leave the store unchanged."""
    store = _store()
    revision = store.revision

    with pytest.raises(RecordValidationError) as error_info:
        store.add({"company": "  "})

    assert (len(store), store.revision, error_info.value.errors) == (
        2,
        revision,
        ("company is required",),
    )


def test_add_inserts_at_position() -> None:
    """Optional position should insert instead of append."""
    store = _store()

    store.add({"id": 9, "company": "First Inc"}, position=0)

    assert store.ids() == (9, 1, 2)


def test_update_merges_changes_and_bumps_version() -> None:
    """Updates should merge partial fields and increment version."""
    store = _store()

    updated = store.update(1, {"employees": 130}, expected_version=1)

    assert (updated["company"], updated["employees"], updated["version"]) == ("Tech Corp", 130, 2)


def test_update_rejects_stale_version_and_keeps_record() -> None:
    """A mismatched expected version should raise and change nothing."""
    store = _store()
    store.update(1, {"employees": 130})
    before = store.get(1)

    with pytest.raises(VersionConflictError):
        store.update(1, {"employees": 999}, expected_version=1)

    assert store.get(1) == before


def test_update_raises_for_unknown_id() -> None:
    """Updating a missing record should raise RecordNotFoundError."""
    store = _store()

    with pytest.raises(RecordNotFoundError):
        store.update(42, {"company": "Ghost"})


def test_update_rejects_type_mismatch_without_mutation() -> None:
    """Merged records failing type checks should not be stored."""
    store = _store()

    with pytest.raises(RecordValidationError):
        store.update(1, {"employees": "lots"})

    assert store.get(1)["version"] == 1


def test_update_rejects_id_change() -> None:
    """Record ids are immutable."""
    store = _store()

    with pytest.raises(RecordValidationError):
        store.update(1, {"id": 7})


def test_update_ignores_caller_supplied_version() -> None:
    """The store owns the version counter."""
    store = _store()

    updated = store.update(1, {"version": 50, "company": "Tech Corp Ltd"})

    assert updated["version"] == 2


def test_soft_delete_flags_record_and_keeps_id() -> None:
    """Soft delete should set isDisabled and deletedAt."""
    store = _store()

    record = store.delete(1)

    assert record["isDisabled"] is True and "deletedAt" in record and 1 in store


def test_hard_delete_removes_record() -> None:
    """Hard delete should drop the record from the store."""
    store = _store()

    store.delete(1, soft=False)

    assert 1 not in store and store.ids() == (2,)


def test_delete_raises_for_unknown_id() -> None:
    """Deleting a missing record should raise RecordNotFoundError."""
    store = _store()

    with pytest.raises(RecordNotFoundError):
        store.delete(42)


def test_restore_clears_soft_delete() -> None:
    """Restore should re-enable a soft-deleted record."""
    store = _store()
    store.delete(1)

    restored = store.restore(1)

    assert restored["isDisabled"] is False and "deletedAt" not in restored


def test_get_returns_copy() -> None:
    """Mutating a returned record must not change the store."""
    store = _store()

    record = store.get(1)
    record["company"] = "Changed"

    assert store.get(1)["company"] == "Tech Corp"


def test_revision_counts_successful_mutations() -> None:
    """Every successful mutation should bump the revision counter."""
    store = _store()
    start = store.revision

    store.update(1, {"employees": 1})
    store.delete(2)

    assert store.revision == start + 2
