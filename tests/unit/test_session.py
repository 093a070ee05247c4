"""Tests for ViewerSession.

Tests cover:
- Document load and page 1 index
- Page changes: validation, highlight reset, index rebuild
- Pointer and structural-click delegation
- Rendering lifecycle wiring (page count, page errors, cancellation)
"""

from __future__ import annotations

import pytest

from docsync import ViewerConfig, ViewerSession
from docsync.exceptions import InvalidConfigError, NavigationError, PageOutOfRangeError
from docsync.highlight import HighlightChanged, HighlightSource, ScrollRequest, SyncState
from docsync.rendering import RenderStatus
from docsync.types import DocumentTree


@pytest.fixture
def session(sample_document: DocumentTree) -> ViewerSession:
    """Create a session without a rasterizer and load the sample document."""
    viewer = ViewerSession(ViewerConfig())
    viewer.load_document(sample_document)
    return viewer


class TestLoadDocument:
    """Tests for ViewerSession.load_document."""

    def test_load_shows_page_one(self, session: ViewerSession):
        """Test the first page is current and indexed."""
        assert session.current_page == 1
        assert session.total_pages == 2
        assert [e.ref for e in session.index][:2] == ["#/texts/0", "#/texts/1"]
        assert session.highlight_state.state == SyncState.IDLE

    def test_reload_resets_page(self, session: ViewerSession, sample_document: DocumentTree):
        """Test loading again goes back to page 1."""
        session.go_to_page(2)

        session.load_document(sample_document)

        assert session.current_page == 1

    def test_invalid_config_is_rejected(self):
        """Test the session validates its configuration."""
        with pytest.raises(InvalidConfigError):
            ViewerSession(ViewerConfig(dpi=0))


class TestNavigation:
    """Tests for page changes."""

    def test_go_to_page_rebuilds_index(self, session: ViewerSession):
        """Test the index follows the current page."""
        assert session.go_to_page(2) is True

        assert session.current_page == 2
        assert [e.ref for e in session.index] == ["#/texts/4", "#/texts/5", "#/tables/0"]

    def test_out_of_range_changes_nothing(self, session: ViewerSession):
        """Test a rejected page change keeps page, index and highlight."""
        session.pointer_moved(50, 42)
        index_before = session.index

        with pytest.raises(PageOutOfRangeError):
            session.go_to_page(5)

        assert session.current_page == 1
        assert session.index == index_before
        assert session.highlight_state.highlighted_ref == "#/texts/3"

    def test_navigation_without_document(self):
        """Test page changes need a document."""
        with pytest.raises(NavigationError):
            ViewerSession().go_to_page(1)

        assert ViewerSession().next_page() is False

    def test_next_and_prev(self, session: ViewerSession):
        """Test stepping pages and no-ops at the ends."""
        assert session.prev_page() is False
        assert session.next_page() is True
        assert session.current_page == 2
        assert session.next_page() is False
        assert session.prev_page() is True
        assert session.current_page == 1

    def test_same_page_is_not_a_change(self, session: ViewerSession):
        """Test going to the current page keeps the highlight."""
        session.pointer_moved(50, 42)

        assert session.go_to_page(1) is False
        assert session.highlight_state.highlighted_ref == "#/texts/3"


class TestHighlightWiring:
    """Tests for pointer and structural-click handling."""

    def test_hover_then_page_change(self, session: ViewerSession):
        """Test the page 1 hit is cleared by a page change and misses on page 2."""
        events: list[HighlightChanged] = []
        session.add_highlight_listener(events.append)

        session.pointer_moved(50, 42)
        assert session.highlight_state.highlighted_ref == "#/texts/3"

        session.go_to_page(2)
        assert session.highlight_state.state == SyncState.IDLE
        assert events[-1].source == HighlightSource.NONE

        session.pointer_moved(50, 42)
        assert session.highlight_state.highlighted_ref is None

    def test_click_scrolls_once_and_toggles(self, session: ViewerSession):
        """Test a tree click scrolls once and a second click clears without scrolling."""
        scrolls: list[ScrollRequest] = []
        session.add_scroll_listener(scrolls.append)

        session.node_clicked("#/texts/3")
        assert session.highlight_state.state == SyncState.SELECTED
        assert len(scrolls) == 1

        session.node_clicked("#/texts/3")
        assert session.highlight_state.state == SyncState.IDLE
        assert len(scrolls) == 1

    def test_click_unknown_ref_is_ignored(self, session: ViewerSession):
        """Test a dangling ref from the tree does nothing."""
        session.node_clicked("#/texts/99")

        assert session.highlight_state.state == SyncState.IDLE

    def test_pointer_left(self, session: ViewerSession):
        """Test leaving the canvas clears the hover."""
        session.pointer_moved(50, 42)
        session.pointer_left()

        assert session.highlight_state.highlighted_ref is None

    def test_scaled_canvas(self, sample_document: DocumentTree):
        """Test pointer pixels are mapped with the configured dpi."""
        session = ViewerSession(ViewerConfig(dpi=144))
        session.load_document(sample_document)

        session.pointer_moved(100, 84)

        assert session.highlight_state.highlighted_ref == "#/texts/3"
        assert session.mapper.scale == 2.0
        assert session.canvas_size == (1190.0, 1684.0)

    def test_canvas_size_falls_back_to_default_page(self, sample_document_data: dict):
        """Test pages without a declared size use the configured default size."""
        del sample_document_data["pages"]
        session = ViewerSession(ViewerConfig(default_page_width=600, default_page_height=800))
        session.load_document(DocumentTree.from_dict(sample_document_data))

        assert session.canvas_size == (600.0, 800.0)
        assert session.mapper.page_height == 800

    def test_outline(self, session: ViewerSession):
        """Test the outline follows the current page."""
        assert session.outline()[0].ref == "#/texts/0"

        session.go_to_page(2)

        assert session.outline()[0].ref == "#/tables/0"

    def test_close(self, session: ViewerSession):
        """Test close drops the document."""
        session.close()

        assert session.document is None
        assert session.outline() == []
        assert session.index == []


class TestRendering:
    """Tests for render lifecycle wiring."""

    def test_request_render_without_rasterizer(self, session: ViewerSession):
        """Test a session without a rasterizer cannot render."""
        with pytest.raises(NavigationError):
            session.request_render()

    @pytest.mark.anyio
    async def test_page_count_comes_from_rasterizer(self, sample_document: DocumentTree, fake_rasterizer):
        """Test the first render replaces the page count."""
        session = ViewerSession(ViewerConfig(), fake_rasterizer)
        session.load_document(sample_document)

        outcome = await session.request_render()

        assert outcome.status == RenderStatus.RENDERED
        assert session.total_pages == 3
        assert session.rendered_page is outcome.page

    @pytest.mark.anyio
    async def test_smaller_page_count_pulls_page_back(self, sample_document: DocumentTree, rasterizer_factory):
        """Test a rasterizer reporting fewer pages than the document moves the current page into range."""
        session = ViewerSession(ViewerConfig(), rasterizer_factory(total_pages=1))
        session.load_document(sample_document)
        session.go_to_page(2)

        outcome = await session.request_render()

        assert outcome.status == RenderStatus.RENDERED
        assert session.total_pages == 1
        assert session.current_page == 1
        assert session.rendered_page is None
        assert [e.ref for e in session.index][:2] == ["#/texts/0", "#/texts/1"]

    @pytest.mark.anyio
    async def test_show_page(self, sample_document: DocumentTree, fake_rasterizer):
        """Test navigating and rendering in one step."""
        session = ViewerSession(ViewerConfig(), fake_rasterizer)
        session.load_document(sample_document)

        outcome = await session.show_page(2)

        assert outcome.page_no == 2
        assert session.current_page == 2
        assert fake_rasterizer.calls == [2]

    @pytest.mark.anyio
    async def test_render_failure_is_a_page_error(self, sample_document: DocumentTree, rasterizer_factory):
        """Test a failed render is recorded for its page and navigation keeps working."""
        session = ViewerSession(ViewerConfig(), rasterizer_factory(failing_pages={2}))
        session.load_document(sample_document)

        outcome = await session.show_page(2)

        assert outcome.status == RenderStatus.FAILED
        assert session.page_errors[2] is outcome.error

        outcome = await session.show_page(1)
        assert outcome.status == RenderStatus.RENDERED
        assert 2 in session.page_errors

    @pytest.mark.anyio
    async def test_page_change_cancels_in_flight_render(self, sample_document: DocumentTree, gated_rasterizer):
        """Test a page change supersedes the render of the previous page."""
        session = ViewerSession(ViewerConfig(), gated_rasterizer)
        session.load_document(sample_document)

        first = session.request_render()
        await gated_rasterizer.wait_started(1)
        session.go_to_page(2)

        assert (await first).status == RenderStatus.CANCELLED
        assert session.page_errors == {}

        gated_rasterizer.release(2)
        assert (await session.request_render()).status == RenderStatus.RENDERED
