"""Paginator — page/page-size arithmetic."""

from __future__ import annotations

from typing import NamedTuple

DEFAULT_PAGE_SIZE = 20


class PageWindow(NamedTuple):
    """Normalized page plus the limit/offset it maps to."""

    page: int
    limit: int
    offset: int


class Paginator:
    """Compute limit, offset, and page counts.

    Page sizes are unbounded unless ``max_page_size`` is given.
    """

    def __init__(
        self,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int | None = None,
    ) -> None:
        if default_page_size <= 0:
            raise ValueError("default_page_size must be positive")
        if max_page_size is not None and max_page_size < default_page_size:
            raise ValueError("max_page_size must not be below default_page_size")
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def limit(self, page_size: int) -> int:
        if page_size <= 0:
            return self.default_page_size
        if self.max_page_size is not None:
            return min(page_size, self.max_page_size)
        return page_size

    def offset(self, page: int, limit: int) -> PageWindow:
        """Return the window for ``page``; pages below 1 become 1."""
        page = max(page, 1)
        return PageWindow(page=page, limit=limit, offset=(page - 1) * limit)

    def window(self, page: int, page_size: int) -> PageWindow:
        return self.offset(page, self.limit(page_size))

    @staticmethod
    def total_pages(total_count: int, page_size: int) -> int:
        if page_size <= 0:
            return 0
        pages, remainder = divmod(total_count, page_size)
        return pages + 1 if remainder else pages
