"""Pagination for Gazette listings.

Pagination is a stateless calculator: given a number of items and a page
size it reports the page count and produces a PageWindow for any page.
Page numbers are 1-based.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .utils import fill_placeholders


@dataclass(frozen=True)
class PageWindow:
    """One page of a paginated listing.

    ``start``/``end`` are slice bounds into the listed items, so
    ``items[window.start:window.end]`` are the items on this page.
    """

    current: int
    total: int
    total_pages: int
    size: int
    start: int
    end: int
    has_prev: bool
    has_next: bool
    prev: int
    next: int
    url_format: str = ""

    def url(self, page: int) -> str:
        return fill_placeholders(self.url_format, page=page)

    @property
    def current_url(self) -> str:
        return self.url(self.current)

    @property
    def prev_url(self) -> str:
        return self.url(self.prev)

    @property
    def next_url(self) -> str:
        return self.url(self.next)


@dataclass(frozen=True)
class Pagination:
    """Page calculator for ``total`` items shown ``per_page`` at a time."""

    total: int
    per_page: int

    def __post_init__(self):
        if self.per_page < 1:
            raise ValueError("per_page must be at least 1")
        if self.total < 0:
            raise ValueError("total must not be negative")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page)

    def window(self, current: int, url_format: str = "") -> PageWindow:
        """Return the window for page *current*.

        Pages below 1 clamp to 1 and ``end`` never passes ``total``.

        Args:
            current: 1-based page number.
            url_format: Listing URL format containing ``:page``.
        """
        current = max(current, 1)
        start = min((current - 1) * self.per_page, self.total)
        end = min(start + self.per_page, self.total)
        has_prev = current > 1
        has_next = end < self.total
        return PageWindow(
            current=current,
            total=self.total,
            total_pages=self.total_pages,
            size=self.per_page,
            start=start,
            end=end,
            has_prev=has_prev,
            has_next=has_next,
            prev=current - 1 if has_prev else 1,
            next=current + 1 if has_next else current,
            url_format=url_format,
        )

    def windows(self, url_format: str = "") -> list[PageWindow]:
        """Return a window for every page, first to last."""
        return [
            self.window(number, url_format)
            for number in range(1, self.total_pages + 1)
        ]


def paginate(total: int, per_page: int) -> Pagination:
    """Return the Pagination for ``total`` items, ``per_page`` per page."""
    return Pagination(total, per_page)
