"""Cancellation token shared between the render controller and a rasterizer."""

from __future__ import annotations

from ..exceptions import RenderCancelledError


class CancellationToken:
    """One-shot cancellation flag tied to a single render request.

    The controller owns the token and invalidates it when the request is
    superseded. A rasterizer must call ``raise_if_cancelled()`` before and
    after any blocking work and abandon its result once the token is
    cancelled.

    Example:
        >>> token = CancellationToken(page_no=3)
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.raise_if_cancelled()
        Traceback (most recent call last):
            ...
        docsync.exceptions.RenderCancelledError: Render of page 3 was cancelled
    """

    __slots__ = ("page_no", "_cancelled")

    def __init__(self, page_no: int):
        self.page_no = page_no
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        """Raise RenderCancelledError if this token has been invalidated."""
        if self._cancelled:
            raise RenderCancelledError(f"Render of page {self.page_no} was cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(page_no={self.page_no}, cancelled={self._cancelled})"
