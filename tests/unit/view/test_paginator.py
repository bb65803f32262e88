"""Unit tests for page windowing and global index mapping."""

from __future__ import annotations

import pytest

from core.errors import GridConfigError, PageIndexError
from core.types import PageInfo
from view.paginator import Paginator


def _rows(count: int) -> list[dict[str, object]]:
    return [{"id": index} for index in range(1, count + 1)]


def test_total_pages_rounds_up() -> None:
    """Partial last pages still count as a page."""
    assert Paginator(10, _rows(25)).total_pages == 3


def test_empty_view_has_zero_pages_and_stays_on_page_one() -> None:
    """An empty view should report zero pages on page 1."""
    paginator = Paginator(10)

    assert (paginator.total_pages, paginator.current_page) == (0, 1)


def test_go_to_page_returns_window() -> None:
    """Page rows should come from the matching slice."""
    paginator = Paginator(10, _rows(25))

    rows = paginator.go_to_page(3)

    assert [row["id"] for row in rows] == [21, 22, 23, 24, 25]


@pytest.mark.parametrize(("requested", "expected"), [(0, 1), (-4, 1), (9, 3)])
def test_go_to_page_clamps_out_of_range(requested: int, expected: int) -> None:
    """Out-of-range page requests should clamp to the nearest page."""
    paginator = Paginator(10, _rows(25))

    paginator.go_to_page(requested)

    assert paginator.current_page == expected


def test_global_index_offsets_by_page() -> None:
    """Global index is (page - 1) * page_size + local index."""
    paginator = Paginator(10, _rows(25))
    paginator.go_to_page(2)

    assert paginator.get_global_index(3) == 13


def test_global_index_rejects_rows_past_partial_page() -> None:
    """Local indexes beyond the visible rows should raise."""
    paginator = Paginator(10, _rows(25))
    paginator.go_to_page(3)

    with pytest.raises(PageIndexError):
        paginator.get_global_index(5)


def test_page_index_error_is_an_index_error() -> None:
    """Callers catching IndexError should also catch page errors."""
    with pytest.raises(IndexError):
        Paginator(10).get_global_index(0)


def test_shrinking_view_clamps_current_page() -> None:
    """Replacing the view with fewer rows should pull the page back."""
    paginator = Paginator(2, _rows(4))
    paginator.go_to_page(2)

    paginator.set_view(_rows(2))

    assert paginator.current_page == 1


def test_change_page_size_resets_to_first_page() -> None:
    """New page sizes should restart at page 1."""
    paginator = Paginator(5, _rows(25))
    paginator.go_to_page(4)

    paginator.change_page_size(20)

    assert (paginator.current_page, paginator.total_pages) == (1, 2)


@pytest.mark.parametrize("page_size", [0, -1, True, 2.5])
def test_invalid_page_size_raises(page_size: object) -> None:
    """Page size must be a positive integer."""
    with pytest.raises(GridConfigError):
        Paginator(page_size)  # type: ignore[arg-type]


def test_page_info_reports_one_based_row_range() -> None:
    """Page info should describe the visible row range."""
    paginator = Paginator(10, _rows(25))
    paginator.go_to_page(3)

    assert paginator.page_info() == PageInfo(
        start=21, end=25, total=25, current_page=3, total_pages=3
    )


def test_page_info_for_empty_view() -> None:
    """Empty views report a zero row range."""
    assert Paginator(10).page_info() == PageInfo(
        start=0, end=0, total=0, current_page=1, total_pages=0
    )
