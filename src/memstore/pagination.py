"""Cursor-based pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Sequence, TypeVar

from memstore.errors import InvalidArgumentError

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationOptions:
    """Which page to read.

    ``cursor`` is the identifier of the last item of the previous page;
    ``limit`` is the maximum page size (None reads everything remaining).
    """

    cursor: str | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None:
            if not isinstance(self.limit, int) or isinstance(self.limit, bool):
                raise InvalidArgumentError(f"Pagination limit must be an integer, got {self.limit!r}")
            if self.limit < 0:
                raise InvalidArgumentError(f"Pagination limit must be non-negative, got {self.limit}")


@dataclass
class Page(Generic[T]):
    """One page of results."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


def paginate(
    items: Sequence[T], get_id: Callable[[T], str], options: PaginationOptions | None = None
) -> Page[T]:
    """Slice one page out of an ordered sequence.

    An unknown cursor yields an empty page with ``has_more`` False.
    """
    options = options or PaginationOptions()

    start = 0
    if options.cursor is not None:
        index = next(
            (i for i, item in enumerate(items) if get_id(item) == options.cursor), None
        )
        if index is None:
            return Page()
        start = index + 1

    if start >= len(items):
        return Page()

    end = len(items) if options.limit is None else min(start + options.limit, len(items))
    page_items = list(items[start:end])
    has_more = end < len(items)
    next_cursor = get_id(page_items[-1]) if page_items and has_more else None
    return Page(items=page_items, next_cursor=next_cursor, has_more=has_more)
