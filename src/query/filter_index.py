"""Per-field value indexes for large record sequences.

This module maps field values to record positions so equality and
membership predicates avoid a full scan. Indexes are built lazily per
field and answer only what a scan would answer.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence

from core.types import Record


class FieldValueIndex:
    """Lazy value -> positions lookup over one record sequence."""

    def __init__(self, records: Sequence[Record]) -> None:
        self._records = records
        self._indexes: dict[str, dict[Hashable, list[int]] | None] = {}

    def positions_equal(self, field_name: str, value: Any) -> set[int] | None:
        """Return positions whose field equals value.

        Returns:
            Matching positions, or None when the field cannot be indexed
            (unhashable values) and the caller must scan instead.
        """
        index = self._index_for(field_name)
        if index is None:
            return None
        try:
            return set(index.get(value, ()))
        except TypeError:
            return None

    def positions_in(self, field_name: str, values: Iterable[Any]) -> set[int] | None:
        """Return positions whose field equals any of values."""
        matched: set[int] = set()
        for value in values:
            positions = self.positions_equal(field_name, value)
            if positions is None:
                return None
            matched.update(positions)
        return matched

    def _index_for(self, field_name: str) -> dict[Hashable, list[int]] | None:
        if field_name not in self._indexes:
            self._indexes[field_name] = _build_index(self._records, field_name)
        return self._indexes[field_name]


def _build_index(records: Sequence[Record], field_name: str) -> dict[Hashable, list[int]] | None:
    index: dict[Hashable, list[int]] = {}
    for position, record in enumerate(records):
        try:
            index.setdefault(record.get(field_name), []).append(position)
        except TypeError:
            return None
    return index
