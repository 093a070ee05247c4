"""Lifecycle of the single outstanding page render.

At most one render is in flight per viewer. A new request cancels the
previous one and waits for it to wind down before calling the rasterizer,
so two renders never target the same drawing surface at once. Cancellation
is the expected outcome of superseding a stale render and is never reported
as an error; every other rasterizer failure becomes a page-level error.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..exceptions import RenderCancelledError, RenderFailedError
from ..types.interfaces import Rasterizer, RenderedPage
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

__all__ = ["PageRenderController", "RenderHandle", "RenderOutcome", "RenderStatus"]


class RenderStatus:
    """Terminal states of a render request."""

    RENDERED = "rendered"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class RenderOutcome:
    """Result of one render request.

    Attributes:
        page_no: Requested page (1-indexed)
        status: RenderStatus value
        page: Rendered page, when status is RENDERED
        error: Failure, when status is FAILED
    """

    page_no: int
    status: str
    page: RenderedPage | None = None
    error: RenderFailedError | None = None


class RenderHandle:
    """Handle on one render request.

    Awaiting the handle yields its RenderOutcome; it never raises for a
    cancelled or failed render.
    """

    def __init__(self, page_no: int, token: CancellationToken, task: asyncio.Task[RenderOutcome]):
        self.page_no = page_no
        self.token = token
        self._task = task

    @property
    def pending(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        """Invalidate the token and cancel the underlying task."""
        self.token.cancel()
        if not self._task.done():
            self._task.cancel()

    async def wait(self) -> RenderOutcome:
        try:
            return await self._task
        except asyncio.CancelledError:
            # Cancelled before the task got to run
            if self._task.cancelled() and self.token.cancelled:
                return RenderOutcome(page_no=self.page_no, status=RenderStatus.CANCELLED)
            raise

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        return f"RenderHandle(page_no={self.page_no}, pending={self.pending}, cancelled={self.token.cancelled})"


class PageRenderController:
    """Owns the one outstanding render request of a viewer.

    Args:
        rasterizer: Page rasterizer collaborator
        on_page_count_known: Called with the page count after the first
            successful render of each document load
        on_page_rendered: Called with each RenderedPage
        on_render_failed: Called with the RenderFailedError of a failed render
        on_render_cancelled: Called with the page number of a superseded render

    Example:
        >>> controller = PageRenderController(rasterizer, on_page_count_known=pagination.set_total)
        >>> handle = controller.request_render(1)
        >>> controller.request_render(2)  # cancels page 1
        >>> (await handle).status
        'cancelled'
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        on_page_count_known: Callable[[int], None] | None = None,
        on_page_rendered: Callable[[RenderedPage], None] | None = None,
        on_render_failed: Callable[[RenderFailedError], None] | None = None,
        on_render_cancelled: Callable[[int], None] | None = None,
    ):
        self.rasterizer = rasterizer
        self.on_page_count_known = on_page_count_known
        self.on_page_rendered = on_page_rendered
        self.on_render_failed = on_render_failed
        self.on_render_cancelled = on_render_cancelled

        self._current: RenderHandle | None = None
        self._page_count_reported = False

    @property
    def current(self) -> RenderHandle | None:
        """Most recently issued handle."""
        return self._current

    def request_render(self, page_no: int) -> RenderHandle:
        """Start rendering ``page_no``, cancelling any pending render first.

        Must be called from a running event loop.
        """
        previous = self._current
        if previous is not None and previous.pending:
            logger.debug("Cancelling pending render of page %d for page %d", previous.page_no, page_no)
            previous.cancel()

        token = CancellationToken(page_no)
        task = asyncio.get_running_loop().create_task(
            self._run(page_no, token, previous),
            name=f"render-page-{page_no}",
        )
        task.add_done_callback(functools.partial(self._task_done, page_no, token))
        handle = RenderHandle(page_no, token, task)
        self._current = handle
        return handle

    def document_loaded(self) -> None:
        """Cancel any pending render and re-arm the one-time page count report."""
        self.cancel_pending()
        self._page_count_reported = False

    def cancel_pending(self) -> None:
        if self._current is not None and self._current.pending:
            self._current.cancel()

    async def _run(
        self, page_no: int, token: CancellationToken, previous: RenderHandle | None
    ) -> RenderOutcome:
        try:
            if previous is not None and previous.pending:
                await asyncio.wait({previous._task})
            token.raise_if_cancelled()
            page = await self.rasterizer.render_page(page_no, token)
            token.raise_if_cancelled()
        except RenderCancelledError:
            return self._cancelled(page_no)
        except asyncio.CancelledError:
            if token.cancelled:
                return self._cancelled(page_no)
            raise
        except Exception as e:
            error = e if isinstance(e, RenderFailedError) else RenderFailedError(page_no, str(e), cause=e)
            logger.error("Failed to render page %d: %s", page_no, e)
            if self.on_render_failed is not None:
                self.on_render_failed(error)
            return RenderOutcome(page_no=page_no, status=RenderStatus.FAILED, error=error)

        logger.info("Rendered page %d/%d", page_no, page.total_pages)
        if not self._page_count_reported:
            self._page_count_reported = True
            if self.on_page_count_known is not None:
                self.on_page_count_known(page.total_pages)
        if self.on_page_rendered is not None:
            self.on_page_rendered(page)
        return RenderOutcome(page_no=page_no, status=RenderStatus.RENDERED, page=page)

    def _task_done(self, page_no: int, token: CancellationToken, task: asyncio.Task[RenderOutcome]) -> None:
        # A task cancelled before its first step never reaches _run's handlers
        if task.cancelled() and token.cancelled:
            self._cancelled(page_no)

    def _cancelled(self, page_no: int) -> RenderOutcome:
        logger.debug("Render of page %d cancelled", page_no)
        if self.on_render_cancelled is not None:
            self.on_render_cancelled(page_no)
        return RenderOutcome(page_no=page_no, status=RenderStatus.CANCELLED)
