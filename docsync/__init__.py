"""docsync - synchronization core of a two-pane document viewer.

Keeps a rendered page (spatial view) and the document's structure tree
(structural view) in sync: hover a box on the page and the node lights up
in the tree; click a node in the tree and its box is highlighted and
scrolled into view.
"""

from .config import ViewerConfig
from .exceptions import (
    ConfigurationError,
    DocSyncError,
    DocumentError,
    DocumentFormatError,
    DocumentLoadError,
    InvalidConfigError,
    NavigationError,
    PageOutOfRangeError,
    RenderCancelledError,
    RenderError,
    RenderFailedError,
)
from .geometry import CoordinateMapper
from .highlight import HighlightChanged, HighlightSource, HighlightState, HighlightSync, ScrollRequest, SyncState
from .index import BBoxIndexBuilder, BBoxIndexEntry, HitTester
from .io import load_document
from .pagination import Pagination
from .rendering import PageRenderController, RenderHandle, RenderOutcome, RenderStatus
from .session import ViewerSession
from .structure import OutlineItem, build_outline
from .table import CoveredSlot, SpanGridReconstructor
from .types import BoundingBox, DocumentTree, Point, ScreenRect

__version__ = "0.1.0"

__all__ = [
    "ViewerSession",
    "ViewerConfig",
    "load_document",
    # Core components
    "SpanGridReconstructor",
    "CoveredSlot",
    "CoordinateMapper",
    "BBoxIndexBuilder",
    "BBoxIndexEntry",
    "HitTester",
    "HighlightSync",
    "HighlightState",
    "HighlightChanged",
    "HighlightSource",
    "ScrollRequest",
    "SyncState",
    "PageRenderController",
    "RenderHandle",
    "RenderOutcome",
    "RenderStatus",
    "Pagination",
    "OutlineItem",
    "build_outline",
    # Types
    "BoundingBox",
    "DocumentTree",
    "Point",
    "ScreenRect",
    # Exceptions
    "DocSyncError",
    "ConfigurationError",
    "InvalidConfigError",
    "DocumentError",
    "DocumentLoadError",
    "DocumentFormatError",
    "NavigationError",
    "PageOutOfRangeError",
    "RenderError",
    "RenderCancelledError",
    "RenderFailedError",
]
