"""Pagination bookkeeping."""

from __future__ import annotations

import logging

from .exceptions import PageOutOfRangeError

logger = logging.getLogger(__name__)


class Pagination:
    """Current page and known page count.

    ``total_pages`` is 0 until the rasterizer reports it; until then every
    page change is rejected.

    Example:
        >>> pagination = Pagination()
        >>> pagination.set_total(3)
        False
        >>> pagination.next_page()
        True
        >>> pagination.current_page
        2
        >>> pagination.go_to(7)
        Traceback (most recent call last):
            ...
        docsync.exceptions.PageOutOfRangeError: Page 7 is out of range (1..3)
    """

    def __init__(self, current_page: int = 1, total_pages: int = 0):
        self.current_page = current_page
        self.total_pages = total_pages

    def set_total(self, total_pages: int) -> bool:
        """Set the page count, moving the current page back inside it.

        Returns:
            True if the current page had to move
        """
        self.total_pages = max(0, int(total_pages))
        logger.debug("Total pages: %d", self.total_pages)
        last_page = max(1, self.total_pages)
        if self.current_page > last_page:
            self.current_page = last_page
            return True
        return False

    def reset(self) -> None:
        """Back to page 1 with an unknown page count (new document)."""
        self.current_page = 1
        self.total_pages = 0

    def validate(self, page_no: int) -> None:
        """Raise PageOutOfRangeError unless ``1 <= page_no <= total_pages``."""
        if page_no < 1 or page_no > self.total_pages:
            raise PageOutOfRangeError(page_no, self.total_pages)

    def go_to(self, page_no: int) -> bool:
        """Move to ``page_no``.

        Returns:
            True if the current page changed

        Raises:
            PageOutOfRangeError: If the page is out of range; nothing is changed
        """
        self.validate(page_no)
        if page_no == self.current_page:
            return False
        self.current_page = page_no
        return True

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    def next_page(self) -> bool:
        """Advance one page; no-op on the last page."""
        if not self.has_next:
            return False
        self.current_page += 1
        return True

    def prev_page(self) -> bool:
        """Go back one page; no-op on the first page."""
        if not self.has_prev:
            return False
        self.current_page -= 1
        return True

    def __repr__(self) -> str:
        return f"Pagination(current_page={self.current_page}, total_pages={self.total_pages})"
