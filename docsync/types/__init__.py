"""Unified type definitions for docsync.

This module provides:
- BoundingBox, Point, ScreenRect: Geometry value types
- NodeKind, ProvenanceRecord: Node kind constants and page placements
- TextNode, PictureNode, TableNode, GroupNode: Content node variants
- TableCell, TableData: Sparse table payload
- DocumentTree, PageSize: Loaded document with ref lookup table
- Rasterizer, RenderedPage: Page rasterizer interface
"""

from .bbox import BoundingBox, Point, ScreenRect
from .document import BODY_REF, DocumentTree, PageSize
from .interfaces import Rasterizer, RenderedPage
from .nodes import (
    ContentNode,
    GroupNode,
    ImageDescriptor,
    NodeKind,
    PictureNode,
    ProvenanceRecord,
    TableCell,
    TableData,
    TableNode,
    TextNode,
)

__all__ = [
    # Geometry
    "BoundingBox",
    "Point",
    "ScreenRect",
    # Nodes
    "NodeKind",
    "ProvenanceRecord",
    "ContentNode",
    "TextNode",
    "PictureNode",
    "TableNode",
    "GroupNode",
    "ImageDescriptor",
    "TableCell",
    "TableData",
    # Document
    "BODY_REF",
    "DocumentTree",
    "PageSize",
    # Collaborator interfaces
    "Rasterizer",
    "RenderedPage",
]
