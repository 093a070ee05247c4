"""Bidirectional highlight synchronization between the spatial and structural views.

States:
    Idle            no highlight
    Hovering(ref)   the pointer is over ``ref``'s box on the canvas
    Selected(ref)   ``ref`` was clicked in the structural view

Pointer events only ever produce Hovering or Idle and never scroll. A
structural click toggles Selected and, when the pointer is off the canvas,
asks the spatial view to scroll the node's box into view. A page change
always returns to Idle and drops the index until the new page's index is
installed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .geometry.coords import CoordinateMapper
from .index.bbox_index import BBoxIndexEntry
from .index.hit_test import HitTester
from .types.bbox import BoundingBox, Point, ScreenRect

logger = logging.getLogger(__name__)

__all__ = [
    "HighlightChanged",
    "HighlightSource",
    "HighlightState",
    "HighlightSync",
    "ScrollRequest",
    "SyncState",
]


class HighlightSource:
    """What triggered the latest highlight transition."""

    POINTER = "pointer"
    TREE = "tree"
    NONE = "none"


class SyncState:
    """HighlightSync states."""

    IDLE = "idle"
    HOVERING = "hovering"
    SELECTED = "selected"


@dataclass(frozen=True)
class HighlightState:
    """Single source of truth for which node is highlighted and why."""

    highlighted_ref: str | None = None
    source: str = HighlightSource.NONE

    @property
    def state(self) -> str:
        if self.highlighted_ref is None:
            return SyncState.IDLE
        if self.source == HighlightSource.TREE:
            return SyncState.SELECTED
        return SyncState.HOVERING


@dataclass(frozen=True)
class HighlightChanged:
    """Emitted on every highlight transition.

    Attributes:
        ref: Newly highlighted node, or None
        source: HighlightSource that triggered the transition
        bbox: Document-space box to outline on the canvas, when the node is on the page
    """

    ref: str | None
    source: str
    bbox: BoundingBox | None = None


@dataclass(frozen=True)
class ScrollRequest:
    """Ask the views to bring ``target`` (screen space) into view."""

    ref: str
    target: ScreenRect

    def offset_for(self, viewport_height: float) -> float:
        """Scroll offset that centres the target in a viewport of the given height."""
        return max(0.0, self.target.center.y - viewport_height / 2)


HighlightListener = Callable[[HighlightChanged], None]
ScrollListener = Callable[[ScrollRequest], None]


class HighlightSync:
    """Highlight state machine for one viewer session.

    Example:
        >>> sync = HighlightSync(CoordinateMapper(page_height=842))
        >>> sync.set_index(builder.build(document, 1))
        >>> sync.pointer_moved(50, 42)
        >>> sync.state
        HighlightState(highlighted_ref='#/texts/0', source='pointer')
    """

    def __init__(self, mapper: CoordinateMapper, hit_tester: HitTester | None = None):
        self.mapper = mapper
        self.hit_tester = hit_tester or HitTester()

        self._state = HighlightState()
        self._index: list[BBoxIndexEntry] | None = None
        self._pointer: Point | None = None

        self._highlight_listeners: list[HighlightListener] = []
        self._scroll_listeners: list[ScrollListener] = []

    # ==================== Observers ====================

    def add_highlight_listener(self, listener: HighlightListener) -> None:
        self._highlight_listeners.append(listener)

    def add_scroll_listener(self, listener: ScrollListener) -> None:
        self._scroll_listeners.append(listener)

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def index(self) -> list[BBoxIndexEntry] | None:
        """Index for the current page, or None between a page change and the rebuild."""
        return self._index

    @property
    def pointer_on_canvas(self) -> bool:
        return self._pointer is not None

    # ==================== Inputs ====================

    def set_index(self, entries: Sequence[BBoxIndexEntry], mapper: CoordinateMapper | None = None) -> None:
        """Install the bbox index (and optionally the mapper) for the current page."""
        self._index = list(entries)
        if mapper is not None:
            self.mapper = mapper

    def pointer_moved(self, x: float, y: float) -> None:
        """Handle a pointer move at canvas-local pixel ``(x, y)``."""
        self._pointer = self.mapper.to_document(Point(x, y))
        entry = self.hit_tester.find_entry(self._pointer, self._index)
        if entry is None:
            self._transition(HighlightState(None, HighlightSource.POINTER))
        else:
            self._transition(HighlightState(entry.ref, HighlightSource.POINTER), entry.bbox)

    def pointer_left(self) -> None:
        """Handle the pointer leaving the canvas."""
        self._pointer = None
        self._transition(HighlightState(None, HighlightSource.POINTER))

    def node_clicked(self, ref: str) -> None:
        """Handle a click on ``ref`` in the structural view.

        Clicking the selected node again clears the highlight. Otherwise the
        node becomes selected and, unless the pointer is on the canvas, one
        scroll request is issued for its box on this page.
        """
        if self._state == HighlightState(ref, HighlightSource.TREE):
            self._transition(HighlightState(None, HighlightSource.TREE))
            return

        entry = self._entry_for(ref)
        bbox = entry.bbox if entry is not None else None
        self._transition(HighlightState(ref, HighlightSource.TREE), bbox)

        if entry is None:
            logger.debug("Selected %s has no box on this page; not scrolling", ref)
            return
        if self.pointer_on_canvas:
            return

        request = ScrollRequest(ref=ref, target=self.mapper.to_screen(entry.bbox))
        for listener in self._scroll_listeners:
            listener(request)

    def page_changed(self) -> None:
        """Reset to Idle and drop the index; the next page's index must be installed."""
        self._index = None
        self._transition(HighlightState(None, HighlightSource.NONE), force=True)

    # ==================== Internals ====================

    def _entry_for(self, ref: str) -> BBoxIndexEntry | None:
        for entry in self._index or ():
            if entry.ref == ref:
                return entry
        return None

    def _transition(self, new_state: HighlightState, bbox: BoundingBox | None = None, force: bool = False) -> None:
        old_state = self._state
        changed = (old_state.highlighted_ref, old_state.state) != (new_state.highlighted_ref, new_state.state)
        if not changed and not force:
            return

        self._state = new_state
        if not changed:
            return

        logger.debug(
            "Highlight %s(%s) -> %s(%s)",
            old_state.state,
            old_state.highlighted_ref,
            new_state.state,
            new_state.highlighted_ref,
        )
        event = HighlightChanged(ref=new_state.highlighted_ref, source=new_state.source, bbox=bbox)
        for listener in self._highlight_listeners:
            listener(event)
