"""Paginator for archive listings (home, tag, author).

Page 1 lives at the archive's base URL; page N lives at
``{base}page{N}/``, matching the classic Jekyll paginate layout.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from blogctl.domain.slugs import normalize_url


@dataclass(frozen=True)
class Paginator:
    """One page of an archive listing."""

    page: int
    per_page: int
    total_pages: int
    total_items: int
    base_url: str
    items: list[Any] = field(default_factory=list)

    @property
    def url(self) -> str:
        return page_url(self.base_url, self.page)

    @property
    def previous_page(self) -> int | None:
        return self.page - 1 if self.page > 1 else None

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.page < self.total_pages else None

    @property
    def previous_url(self) -> str | None:
        prev = self.previous_page
        return page_url(self.base_url, prev) if prev is not None else None

    @property
    def next_url(self) -> str | None:
        nxt = self.next_page
        return page_url(self.base_url, nxt) if nxt is not None else None

    @property
    def window(self) -> list[int | None]:
        return page_window(self.page, self.total_pages)


def page_url(base_url: str, page: int) -> str:
    """URL of page *page* of the archive rooted at *base_url*."""
    base = normalize_url(base_url)
    if page <= 1:
        return base
    return f"{base}page{page}/"


def paginate(items: Sequence[Any], per_page: int, *, base_url: str = "/") -> list[Paginator]:
    """Split *items* into pages of *per_page*.

    An empty sequence still yields one empty page so archives always
    have an index.

    Raises:
        ValueError: *per_page* is less than 1.
    """
    if per_page < 1:
        msg = f"per_page must be >= 1, got {per_page}"
        raise ValueError(msg)

    total_items = len(items)
    total_pages = max(1, -(-total_items // per_page))
    return [
        Paginator(
            page=number,
            per_page=per_page,
            total_pages=total_pages,
            total_items=total_items,
            base_url=base_url,
            items=list(items[(number - 1) * per_page : number * per_page]),
        )
        for number in range(1, total_pages + 1)
    ]


def page_window(current: int, total: int, *, delta: int = 2) -> list[int | None]:
    """Page numbers to show around *current*, ``None`` marking a gap.

    Always includes the first and last page.

    Examples:
        >>> page_window(1, 1)
        [1]
        >>> page_window(6, 10)
        [1, None, 4, 5, 6, 7, 8, None, 10]
    """
    if total <= 1:
        return [1]

    links: list[int | None] = [1]
    start = max(current - delta, 2)
    end = min(current + delta, total - 1)
    if start > 2:
        links.append(None)
    links.extend(range(start, end + 1))
    if end < total - 1:
        links.append(None)
    links.append(total)
    return links
