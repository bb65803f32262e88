"""Page windowing and page-local to global index mapping.

This module windows a filtered, sorted sequence into fixed-size pages.
Global indexes always refer to positions in that filtered, sorted
sequence, never to positions in the raw store.

Out-of-range page requests clamp to ``[1, max(1, total_pages)]``.
"""

from __future__ import annotations

import math
from typing import Sequence

from core.errors import GridConfigError, PageIndexError
from core.types import PageInfo, Record


class Paginator:
    """Fixed-size page window over the current view."""

    def __init__(self, page_size: int, view: Sequence[Record] = ()) -> None:
        """Create a paginator on page 1.

        Args:
            page_size: Rows per page, at least 1.
            view: Initial filtered, sorted sequence.

        Raises:
            GridConfigError: If page size is not a positive integer.
        """
        self._page_size = _validate_page_size(page_size)
        self._current_page = 1
        self._view: tuple[Record, ...] = ()
        self.set_view(view)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        """Return ``ceil(len(view) / page_size)``, 0 for an empty view."""
        return math.ceil(len(self._view) / self._page_size)

    @property
    def view(self) -> tuple[Record, ...]:
        return self._view

    def set_view(self, view: Sequence[Record]) -> None:
        """Replace the underlying sequence and clamp the current page."""
        self._view = tuple(view)
        if self._current_page > self.total_pages:
            self._current_page = max(1, self.total_pages)

    def go_to_page(self, page: int) -> list[Record]:
        """Move to a page, clamping out-of-range requests.

        Args:
            page: One-based page number.

        Returns:
            Rows of the page actually selected.
        """
        self._current_page = min(max(1, page), max(1, self.total_pages))
        return self.page_records()

    def page_records(self) -> list[Record]:
        """Return the rows visible on the current page."""
        start = (self._current_page - 1) * self._page_size
        return list(self._view[start : start + self._page_size])

    def get_global_index(self, local_index: int) -> int:
        """Map a page-local row index to its position in the view.

        Raises:
            PageIndexError: If the index is outside the current page.
        """
        visible_count = len(self.page_records())
        if not 0 <= local_index < visible_count:
            raise PageIndexError(
                f"Row index {local_index} is outside page {self._current_page} "
                f"({visible_count} visible rows)."
            )
        return (self._current_page - 1) * self._page_size + local_index

    def change_page_size(self, page_size: int) -> None:
        """Change rows per page and return to page 1.

        Raises:
            GridConfigError: If page size is not a positive integer.
        """
        self._page_size = _validate_page_size(page_size)
        self._current_page = 1

    def page_info(self) -> PageInfo:
        """Summarize the current window with one-based row positions."""
        total = len(self._view)
        start = 0 if total == 0 else (self._current_page - 1) * self._page_size + 1
        end = min(self._current_page * self._page_size, total)
        return PageInfo(
            start=start,
            end=end,
            total=total,
            current_page=self._current_page,
            total_pages=self.total_pages,
        )


def _validate_page_size(page_size: int) -> int:
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise GridConfigError(f"Invalid page size {page_size!r}: must be a positive integer.")
    return page_size
