"""Page windows over the newest-first post feed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

DEFAULT_PAGE_SIZE = 2

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageWindow:
    page: int
    page_size: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def resolve_page_window(page: int | None, page_size: int = DEFAULT_PAGE_SIZE) -> PageWindow:
    """Normalize a requested page number into a 1-indexed window.

    Absent or zero page numbers mean the first page. There is no upper
    bound: pages past the end simply select nothing.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")
    if not page:
        page = 1
    if page < 1:
        raise ValueError("page must be positive")
    return PageWindow(page=page, page_size=page_size)


class FeedSource(Protocol[T]):
    def count_posts(self) -> int: ...

    def list_posts_with_owners(self, *, skip: int, limit: int) -> list[T]: ...


@dataclass(frozen=True)
class FeedPage(Generic[T]):
    items: list[T]
    total: int


class FeedPaginator(Generic[T]):
    """Slices the shared feed and reports the total independently of the slice."""

    def __init__(self, source: FeedSource[T], *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._source = source
        self._page_size = page_size

    def page(self, page: int | None) -> FeedPage[T]:
        window = resolve_page_window(page, self._page_size)
        total = self._source.count_posts()
        items = self._source.list_posts_with_owners(skip=window.skip, limit=window.limit)
        return FeedPage(items=items, total=total)


__all__ = ["DEFAULT_PAGE_SIZE", "FeedPage", "FeedPaginator", "FeedSource", "PageWindow", "resolve_page_window"]
