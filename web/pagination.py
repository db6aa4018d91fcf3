"""Pagination control for the results list."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


MAX_VISIBLE_PAGES = 5


def page_window(current: int, total_pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int]:
    """Up to `max_visible` page numbers centred on `current`, clamped to [1, total_pages]."""
    if total_pages < 1:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


@dataclass(frozen=True)
class PageButton:
    number: int
    active: bool
    disabled: bool


@dataclass(frozen=True)
class PaginationControl:
    pages: list[PageButton]
    previous_page: int
    next_page: int
    previous_disabled: bool
    next_disabled: bool


def build_pagination(current: int, total_pages: int, is_loading: bool = False) -> Optional[PaginationControl]:
    """None when there is nothing to paginate (a single page or none)."""
    if total_pages <= 1:
        return None
    return PaginationControl(
        pages=[
            PageButton(number=n, active=n == current, disabled=n == current or is_loading)
            for n in page_window(current, total_pages)
        ],
        previous_page=current - 1,
        next_page=current + 1,
        previous_disabled=current == 1 or is_loading,
        next_disabled=current == total_pages or is_loading,
    )
