"""Grid command surface.

This module composes the record store, query pipeline, paginator, and
event bus into the commands a rendering collaborator calls. The visible
view is a derived cache of the store: engine commands refresh it after
mutating, and row reads refuse to serve a view the store has since
invalidated.

Pipeline: store -> filter (soft-delete + predicates) -> search -> sort -> page.
"""

from __future__ import annotations

from typing import Any, Hashable, Mapping, Sequence

from core.config import GridConfig
from core.constants import ID_FIELD
from core.errors import InvalidFilterFieldError, InvalidSortFieldError, StaleViewError
from core.logging_config import get_logger
from core.schema_loader import build_schema
from core.types import (
    FilterMode,
    FilterPredicate,
    GridSchema,
    PageInfo,
    Record,
    SearchHit,
    SearchOptions,
    SortDirection,
    SortKey,
    ValueComparator,
)
from query.filter_engine import filter_records, validate_filter
from query.search_engine import search_records
from query.sort_engine import resolve_sort_fields, sort_records
from store.record_store import RecordStore
from view import grid_events
from view.grid_events import GridEventBus
from view.paginator import Paginator

_LOGGER = get_logger(__name__)


class GridEngine:
    """Filtered, searched, sorted, and paginated view over a record store."""

    def __init__(
        self,
        schema: GridSchema | Mapping[str, Any],
        data: Sequence[Mapping[str, Any]] = (),
        page_size: int | None = None,
        config: GridConfig | None = None,
        events: GridEventBus | None = None,
    ) -> None:
        """Create an engine and compute the initial enabled view.

        Args:
            schema: Grid schema or a schema definition mapping.
            data: Initial records.
            page_size: Rows per page; config default when omitted.
            config: Optional runtime configuration.
            events: Optional shared event bus.

        Raises:
            GridSchemaError: If the schema definition is invalid.
            RecordValidationError: If an initial record is invalid.
            GridConfigError: If the page size is invalid.
        """
        self._config = config or GridConfig.from_env()
        self._schema = build_schema(schema)
        self._store = RecordStore(self._schema, data)
        self._events = events or GridEventBus()
        if page_size is None:
            page_size = self._config.page_size
        self._paginator = Paginator(page_size)
        self._show_disabled = False
        self._predicates: tuple[FilterPredicate, ...] = ()
        self._filter_mode: FilterMode = "and"
        self._search_term = ""
        self._sort_keys: tuple[SortKey, ...] = ()
        self._comparators: dict[str, ValueComparator] = {}
        self._filtered: list[Record] = []
        self._hits: list[SearchHit] = []
        self._selected: set[Hashable] = set()
        self._view_revision = -1
        self.refresh()

    @property
    def schema(self) -> GridSchema:
        return self._schema

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def events(self) -> GridEventBus:
        return self._events

    @property
    def show_disabled(self) -> bool:
        return self._show_disabled

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def sort_keys(self) -> tuple[SortKey, ...]:
        return self._sort_keys

    @property
    def current_page(self) -> int:
        return self._paginator.current_page

    @property
    def total_pages(self) -> int:
        return self._paginator.total_pages

    @property
    def page_size(self) -> int:
        return self._paginator.page_size

    @property
    def is_stale(self) -> bool:
        """Return whether the store changed since the view was computed."""
        return self._store.revision != self._view_revision

    def view(self) -> list[Record]:
        """Return the full filtered, searched, sorted sequence."""
        self._ensure_fresh()
        return list(self._paginator.view)

    def refresh(self) -> list[Record]:
        """Recompute the view from the store.

        Returns:
            The full filtered, searched, sorted sequence.
        """
        filtered = self._filtered_records()
        self._filtered = filtered
        rows = filtered
        self._hits = []
        if self._search_term:
            self._hits = search_records(
                filtered, self._search_term, self._schema, self._search_options()
            )
            rows = [hit.record for hit in self._hits]
        if self._sort_keys:
            rows = sort_records(rows, self._sort_keys, self._schema, self._comparators)
        self._paginator.set_view(rows)
        self._view_revision = self._store.revision
        visible_ids = {record[ID_FIELD] for record in rows}
        self._selected &= visible_ids
        _LOGGER.debug(
            "view_refreshed",
            store_revision=self._view_revision,
            view_count=len(rows),
            current_page=self.current_page,
            total_pages=self.total_pages,
        )
        return rows

    def filter_data(self) -> list[Record]:
        """Apply soft-delete mode and active predicates.

        Returns:
            Filtered records in store order, before search and sort.
        """
        self.refresh()
        filtered = list(self._filtered)
        self._events.emit(
            grid_events.FILTERS_APPLIED,
            show_disabled=self._show_disabled,
            predicate_count=len(self._predicates),
            mode=self._filter_mode,
            input_count=len(self._store),
            output_count=len(filtered),
        )
        return filtered

    def set_filters(
        self,
        predicates: Sequence[FilterPredicate],
        mode: FilterMode = "and",
    ) -> bool:
        """Replace the active predicates.

        Returns:
            False, with the view unchanged, when the configuration is invalid.
        """
        try:
            validate_filter(predicates, mode, self._schema)
        except InvalidFilterFieldError as error:
            _LOGGER.warning("filter_rejected", reason=str(error))
            return False
        self._predicates = tuple(predicates)
        self._filter_mode = mode
        self._paginator.go_to_page(1)
        self.filter_data()
        return True

    def toggle_disabled_filter(self) -> None:
        """Switch between the enabled and disabled views."""
        self._show_disabled = not self._show_disabled
        self._selected.clear()
        self._paginator.go_to_page(1)
        _LOGGER.info("disabled_filter_toggled", show_disabled=self._show_disabled)
        self.filter_data()

    def handle_search(self, term: str) -> list[Record]:
        """Run a free-text search and make it the active view.

        Args:
            term: Query text; blank clears the search.

        Returns:
            Matched records in descending relevance order.
        """
        self._search_term = term.strip()
        self._paginator.go_to_page(1)
        self.refresh()
        hits = list(self._hits)
        if not self._search_term:
            hits = [SearchHit(record=record, relevance=1.0) for record in self._filtered]
        self._events.emit(
            grid_events.SEARCH_COMPLETED,
            term=self._search_term,
            result_count=len(hits),
            record_ids=[hit.record[ID_FIELD] for hit in hits],
            top_relevance=hits[0].relevance if hits else 0.0,
        )
        return [hit.record for hit in hits]

    def clear_search(self) -> list[Record]:
        """Drop the active search term."""
        return self.handle_search("")

    def relevance_of(self, record_id: Hashable) -> float | None:
        """Return a record's relevance under the active search, if any."""
        if not self._search_term:
            return None
        for hit in self._hits:
            if hit.record[ID_FIELD] == record_id:
                return hit.relevance
        return None

    def sort_by(
        self,
        columns: str | Sequence[str],
        directions: SortDirection | Sequence[str] | None = None,
        comparators: Mapping[str, ValueComparator] | None = None,
    ) -> bool:
        """Order the view by one or more columns.

        Args:
            columns: Field name or ordered field names; empty clears sorting.
            directions: Matching directions; missing entries default to asc.
            comparators: Optional per-field custom comparators.

        Returns:
            False, with the view unchanged, when a field or direction is invalid.
        """
        column_list = [columns] if isinstance(columns, str) else list(columns)
        if directions is None:
            direction_list: list[str] = []
        elif isinstance(directions, str):
            direction_list = [directions]
        else:
            direction_list = list(directions)
        sort_keys = tuple(
            SortKey(
                field=column,
                direction=direction_list[position] if position < len(direction_list) else "asc",
            )
            for position, column in enumerate(column_list)
        )
        try:
            resolve_sort_fields(sort_keys, self._schema)
        except InvalidSortFieldError as error:
            _LOGGER.warning("sort_rejected", reason=str(error))
            return False
        self._sort_keys = sort_keys
        self._comparators = dict(comparators or {})
        rows = self.refresh()
        self._events.emit(
            grid_events.DATA_SORTED,
            columns=[key.field for key in sort_keys],
            directions=[key.direction for key in sort_keys],
            record_count=len(rows),
        )
        return True

    def add_record(self, record: Mapping[str, Any], position: int | None = None) -> Hashable:
        """Add a record and refresh the view.

        Raises:
            RecordValidationError: If the record is invalid or its id exists.
        """
        record_id = self._store.add(record, position)
        self.refresh()
        self._events.emit(
            grid_events.RECORD_ADDED,
            record_id=record_id,
            record=self._store.get(record_id),
            total_records=len(self._store),
        )
        return record_id

    def update_record(
        self,
        record_id: Hashable,
        changes: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Record:
        """Update a record and refresh the view.

        Raises:
            RecordNotFoundError: If the id is unknown.
            VersionConflictError: If ``expected_version`` is stale.
            RecordValidationError: If the merged record is invalid.
        """
        before = self._store.get(record_id)
        after = self._store.update(record_id, changes, expected_version)
        self.refresh()
        self._events.emit(
            grid_events.RECORD_UPDATED,
            record_id=record_id,
            before=before,
            after=after,
            changed_fields=sorted(
                key for key in before.keys() | after.keys() if before.get(key) != after.get(key)
            ),
        )
        return after

    def delete_record(self, record_id: Hashable, soft: bool = True) -> Record:
        """Soft- or hard-delete a record and refresh the view.

        Raises:
            RecordNotFoundError: If the id is unknown.
        """
        record = self._store.delete(record_id, soft=soft)
        rows = self.refresh()
        self._events.emit(
            grid_events.RECORD_DELETED,
            record_id=record_id,
            record=record,
            soft=soft,
            view_count=len(rows),
            total_records=len(self._store),
        )
        return record

    def restore_record(self, record_id: Hashable) -> Record:
        """Re-enable a soft-deleted record and refresh the view.

        Raises:
            RecordNotFoundError: If the id is unknown.
        """
        record = self._store.restore(record_id)
        rows = self.refresh()
        self._events.emit(
            grid_events.RECORD_RESTORED,
            record_id=record_id,
            record=record,
            view_count=len(rows),
        )
        return record

    def remove_record(self, local_index: int) -> None:
        """Soft-delete the record shown at a page-local row.

        Raises:
            StaleViewError: If the store changed without a refresh.
            PageIndexError: If the row is outside the current page.
        """
        record = self._record_at(local_index)
        self.delete_record(record[ID_FIELD], soft=True)

    def go_to_page(self, page: int) -> None:
        """Move to a page; out-of-range requests clamp to the nearest page."""
        self._ensure_fresh()
        previous_page = self._paginator.current_page
        self._paginator.go_to_page(page)
        self._events.emit(
            grid_events.PAGE_CHANGED,
            previous_page=previous_page,
            current_page=self._paginator.current_page,
            total_pages=self._paginator.total_pages,
        )

    def change_page_size(self, page_size: int) -> None:
        """Change rows per page, returning to page 1 and clearing selection.

        Raises:
            StaleViewError: If the store changed without a refresh.
            GridConfigError: If page size is not a positive integer.
        """
        self._ensure_fresh()
        previous_page = self._paginator.current_page
        self._paginator.change_page_size(page_size)
        self._selected.clear()
        self._events.emit(
            grid_events.PAGE_CHANGED,
            previous_page=previous_page,
            current_page=self._paginator.current_page,
            total_pages=self._paginator.total_pages,
            page_size=page_size,
        )

    def get_global_index(self, local_index: int) -> int:
        """Map a page-local row to its position in the filtered, sorted view.

        Raises:
            StaleViewError: If the store changed without a refresh.
            PageIndexError: If the row is outside the current page.
        """
        self._ensure_fresh()
        return self._paginator.get_global_index(local_index)

    def page_records(self) -> list[Record]:
        """Return rows visible on the current page.

        Raises:
            StaleViewError: If the store changed without a refresh.
        """
        self._ensure_fresh()
        return self._paginator.page_records()

    def page_info(self) -> PageInfo:
        self._ensure_fresh()
        return self._paginator.page_info()

    def select_row(self, local_index: int) -> None:
        """Add the record at a page-local row to the selection."""
        self._selected.add(self._record_at(local_index)[ID_FIELD])
        self._emit_selection()

    def deselect_row(self, local_index: int) -> None:
        """Remove the record at a page-local row from the selection."""
        self._selected.discard(self._record_at(local_index)[ID_FIELD])
        self._emit_selection()

    def select_page(self) -> None:
        """Select every record on the current page."""
        self._selected.update(record[ID_FIELD] for record in self.page_records())
        self._emit_selection()

    def clear_selection(self) -> None:
        self._selected.clear()
        self._emit_selection()

    def selected_ids(self) -> tuple[Hashable, ...]:
        """Return selected record ids in view order."""
        return tuple(
            record[ID_FIELD] for record in self._paginator.view if record[ID_FIELD] in self._selected
        )

    def bulk_toggle_selected(self) -> int:
        """Soft-delete the selection in the enabled view, restore it in the disabled view.

        Returns:
            Number of records changed.

        Raises:
            StaleViewError: If the store changed without a refresh.
        """
        self._ensure_fresh()
        record_ids = self.selected_ids()
        if not record_ids:
            return 0
        changed = []
        for record_id in record_ids:
            if self._show_disabled:
                changed.append((grid_events.RECORD_RESTORED, self._store.restore(record_id)))
            else:
                changed.append((grid_events.RECORD_DELETED, self._store.delete(record_id)))
        self._selected.clear()
        rows = self.refresh()
        for event_name, record in changed:
            self._events.emit(
                event_name,
                record_id=record[ID_FIELD],
                record=record,
                soft=True,
                view_count=len(rows),
                total_records=len(self._store),
            )
        self._emit_selection()
        _LOGGER.info(
            "bulk_toggle_completed",
            action="restore" if self._show_disabled else "delete",
            record_count=len(changed),
        )
        return len(changed)

    def _filtered_records(self) -> list[Record]:
        return filter_records(
            self._store.records(),
            show_disabled=self._show_disabled,
            predicates=self._predicates,
            mode=self._filter_mode,
            schema=self._schema,
            index_threshold=self._config.index_threshold,
        )

    def _search_options(self) -> SearchOptions:
        return SearchOptions(
            min_relevance=self._config.search_min_relevance,
            max_results=self._config.search_max_results,
            fuzzy=self._config.search_fuzzy,
            include_disabled=self._show_disabled,
        )

    def _record_at(self, local_index: int) -> Record:
        global_index = self.get_global_index(local_index)
        return self._paginator.view[global_index]

    def _emit_selection(self) -> None:
        selected = self.selected_ids()
        self._events.emit(
            grid_events.SELECTION_CHANGED,
            selected_ids=list(selected),
            selected_count=len(selected),
        )

    def _ensure_fresh(self) -> None:
        if self.is_stale:
            raise StaleViewError(
                "The record store changed since the view was computed. "
                "Call refresh() before reading rows."
            )
