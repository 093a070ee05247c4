"""ViewerSession - the state of one mounted viewer.

The session is created when a viewer mounts and closed when it unmounts. It
owns pagination, the bbox index, highlight state and the render controller,
and is mutated only from the event loop: every pointer, click, navigation and
rasterizer callback goes through one of its methods.
"""

from __future__ import annotations

import logging

from .config import ViewerConfig
from .exceptions import NavigationError, PageOutOfRangeError, RenderFailedError
from .geometry.coords import CoordinateMapper
from .highlight import HighlightListener, HighlightState, HighlightSync, ScrollListener
from .index.bbox_index import BBoxIndexBuilder, BBoxIndexEntry
from .pagination import Pagination
from .rendering.controller import PageRenderController, RenderHandle, RenderOutcome
from .structure import OutlineItem, build_outline
from .types.document import DocumentTree
from .types.interfaces import Rasterizer, RenderedPage

logger = logging.getLogger(__name__)


class ViewerSession:
    """Synchronizes the spatial and structural views of one document.

    Args:
        config: Viewer configuration (defaults when omitted)
        rasterizer: Page rasterizer; without one the session still tracks
            pages, highlights and the index but cannot render

    Example:
        >>> session = ViewerSession(ViewerConfig(), rasterizer)
        >>> session.load_document(load_document("report.json"))
        >>> session.add_scroll_listener(lambda request: print(request.target))
        >>> session.node_clicked("#/texts/3")
        >>> outcome = await session.show_page(2)
    """

    def __init__(self, config: ViewerConfig | None = None, rasterizer: Rasterizer | None = None):
        self.config = config or ViewerConfig()
        self.config.validate()

        self.document: DocumentTree | None = None
        self.pagination = Pagination()
        self.index_builder = BBoxIndexBuilder(default_page_height=self.config.default_page_height)
        self.highlight = HighlightSync(CoordinateMapper(self.config.default_page_height, self.config.scale))

        self.page_errors: dict[int, RenderFailedError] = {}
        self.rendered_page: RenderedPage | None = None

        self.renderer: PageRenderController | None = None
        if rasterizer is not None:
            self.renderer = PageRenderController(
                rasterizer,
                on_page_count_known=self._on_page_count_known,
                on_page_rendered=self._on_page_rendered,
                on_render_failed=self._on_render_failed,
            )

    # ==================== Read-only State ====================

    @property
    def current_page(self) -> int:
        return self.pagination.current_page

    @property
    def total_pages(self) -> int:
        return self.pagination.total_pages

    @property
    def highlight_state(self) -> HighlightState:
        return self.highlight.state

    @property
    def index(self) -> list[BBoxIndexEntry]:
        return list(self.highlight.index or ())

    @property
    def mapper(self) -> CoordinateMapper:
        return self.highlight.mapper

    @property
    def canvas_size(self) -> tuple[float, float]:
        """Canvas (width, height) in pixels for the current page at the configured scale."""
        width, height = self._page_dimensions(self.current_page)
        return width * self.config.scale, height * self.config.scale

    def add_highlight_listener(self, listener: HighlightListener) -> None:
        self.highlight.add_highlight_listener(listener)

    def add_scroll_listener(self, listener: ScrollListener) -> None:
        self.highlight.add_scroll_listener(listener)

    # ==================== Document Lifecycle ====================

    def load_document(self, document: DocumentTree) -> None:
        """Handle "document ready": show page 1 of ``document``.

        The page count starts from the pages the document itself declares
        and is replaced by the rasterizer's count after the first render.
        """
        self.document = document
        self.index_builder.invalidate()
        self.pagination.reset()
        self.pagination.set_total(document.num_pages)
        self.page_errors.clear()
        self.rendered_page = None
        if self.renderer is not None:
            self.renderer.document_loaded()

        logger.info("Document %s ready (%d pages)", document.name or "<unnamed>", self.total_pages)
        self._enter_page(self.current_page)

    def close(self) -> None:
        """Cancel any in-flight render and drop the document."""
        if self.renderer is not None:
            self.renderer.cancel_pending()
        self.highlight.page_changed()
        self.document = None
        self.index_builder.invalidate()

    # ==================== Navigation ====================

    def go_to_page(self, page_no: int) -> bool:
        """Make ``page_no`` current.

        Returns:
            True if the page changed

        Raises:
            NavigationError: If no document is loaded
            PageOutOfRangeError: If the page is out of range; nothing is changed
        """
        if self.document is None:
            raise NavigationError("No document loaded")
        try:
            changed = self.pagination.go_to(page_no)
        except PageOutOfRangeError as e:
            logger.warning("Page change rejected: %s", e)
            raise
        if changed:
            self._page_changed()
        return changed

    def next_page(self) -> bool:
        if self.document is None or not self.pagination.next_page():
            return False
        self._page_changed()
        return True

    def prev_page(self) -> bool:
        if self.document is None or not self.pagination.prev_page():
            return False
        self._page_changed()
        return True

    # ==================== Rendering ====================

    def request_render(self) -> RenderHandle:
        """Render the current page, superseding any pending render.

        Raises:
            NavigationError: If the session has no rasterizer
        """
        if self.renderer is None:
            raise NavigationError("Session has no rasterizer")
        return self.renderer.request_render(self.current_page)

    async def show_page(self, page_no: int) -> RenderOutcome:
        """Navigate to ``page_no`` and wait for it to render."""
        self.go_to_page(page_no)
        return await self.request_render()

    # ==================== Pointer and Tree Events ====================

    def pointer_moved(self, x: float, y: float) -> None:
        """Pointer moved to canvas-local pixel ``(x, y)``."""
        self.highlight.pointer_moved(x, y)

    def pointer_left(self) -> None:
        self.highlight.pointer_left()

    def node_clicked(self, ref: str) -> None:
        """Node ``ref`` was clicked in the structural view; unknown refs are ignored."""
        if self.document is None or self.document.resolve(ref) is None:
            logger.debug("Ignoring click on unknown node %s", ref)
            return
        self.highlight.node_clicked(ref)

    def outline(self) -> list[OutlineItem]:
        """Structural view rows for the current page."""
        if self.document is None:
            return []
        page_no = self.current_page
        return build_outline(self.document, page_no, self.index_builder.membership(self.document, page_no))

    # ==================== Internals ====================

    def _page_changed(self) -> None:
        page_no = self.current_page
        logger.info("Page changed to %d/%d", page_no, self.total_pages)
        if self.renderer is not None:
            self.renderer.cancel_pending()
        self.rendered_page = None
        self._enter_page(page_no)

    def _enter_page(self, page_no: int) -> None:
        # Highlight reset and index rebuild happen before any later pointer event
        self.highlight.page_changed()
        if self.document is None:
            return
        entries = self.index_builder.build(self.document, page_no)
        self.highlight.set_index(entries, self._mapper_for(page_no))

    def _page_dimensions(self, page_no: int) -> tuple[float, float]:
        page_size = self.document.page_size(page_no) if self.document is not None else None
        if page_size is None:
            return self.config.default_page_width, self.config.default_page_height
        return page_size.width, page_size.height

    def _mapper_for(self, page_no: int) -> CoordinateMapper:
        _, page_height = self._page_dimensions(page_no)
        return CoordinateMapper(page_height=page_height, scale=self.config.scale)

    def _on_page_count_known(self, total_pages: int) -> None:
        previous = self.current_page
        if not self.pagination.set_total(total_pages):
            return
        logger.warning(
            "Page %d is past the rasterized page count %d; showing page %d", previous, total_pages, self.current_page
        )
        self.rendered_page = None
        self._enter_page(self.current_page)

    def _on_page_rendered(self, page: RenderedPage) -> None:
        self.page_errors.pop(page.page_no, None)
        if page.page_no == self.current_page:
            self.rendered_page = page

    def _on_render_failed(self, error: RenderFailedError) -> None:
        self.page_errors[error.page_no] = error
