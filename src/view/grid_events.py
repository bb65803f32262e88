"""Grid event channel.

This module delivers engine notifications to subscribed listeners with
plain callbacks. Rendering and logging collaborators subscribe by event
name, or to every event with ``"*"``.
"""

from __future__ import annotations

from typing import Any, Callable

from core.errors import GridEventError
from core.types import GridEvent

RECORD_ADDED = "recordAdded"
RECORD_UPDATED = "recordUpdated"
RECORD_DELETED = "recordDeleted"
RECORD_RESTORED = "recordRestored"
SEARCH_COMPLETED = "searchCompleted"
DATA_SORTED = "dataSorted"
FILTERS_APPLIED = "filtersApplied"
PAGE_CHANGED = "pageChanged"
SELECTION_CHANGED = "selectionChanged"
ALL_EVENTS = "*"

GridListener = Callable[[GridEvent], None]


class GridEventBus:
    """Synchronous listener registry for one engine instance."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[GridListener]] = {}

    def subscribe(self, event_name: str, listener: GridListener) -> Callable[[], None]:
        """Register a listener.

        Args:
            event_name: Event name, or ``"*"`` for every event.
            listener: Callback receiving the event.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.setdefault(event_name, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(event_name, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event_name: str, **payload: Any) -> GridEvent:
        """Deliver an event to its listeners in subscription order.

        Returns:
            The delivered event.

        Raises:
            GridEventError: If a listener raises.
        """
        event = GridEvent(name=event_name, payload=payload)
        listeners = [*self._listeners.get(event_name, ()), *self._listeners.get(ALL_EVENTS, ())]
        for listener in listeners:
            try:
                listener(event)
            except Exception as error:
                raise GridEventError(
                    f"Listener for '{event_name}' failed: {error}. Fix or unsubscribe the listener."
                ) from error
        return event
