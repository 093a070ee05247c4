"""Content node types.

This module provides:
- NodeKind: The closed set of node kinds (text, picture, table, group)
- ProvenanceRecord: One placement of a node on one page
- TableCell / TableData: Sparse table cell list with spans
- TextNode, PictureNode, TableNode, GroupNode: Tagged node variants

Group children are references by ``self_ref``, not owned objects: the same
reference may appear under several groups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from .bbox import BoundingBox

if TYPE_CHECKING:
    from ..table.span_grid import GridSlot


class NodeKind:
    """Node kinds, in spatial index order."""

    TEXT = "text"
    PICTURE = "picture"
    TABLE = "table"
    GROUP = "group"


def _child_refs(items: list[Any] | None) -> list[str]:
    """Extract ``$ref`` strings from a docling ``children`` list."""
    refs: list[str] = []
    for item in items or []:
        if isinstance(item, dict):
            ref = item.get("$ref") or item.get("self_ref")
        else:
            ref = item
        if isinstance(ref, str) and ref:
            refs.append(ref)
    return refs


def _parent_ref(data: dict[str, Any]) -> str | None:
    parent = data.get("parent")
    if isinstance(parent, dict):
        return parent.get("$ref")
    return None


@dataclass(frozen=True)
class ProvenanceRecord:
    """Association of a node with one placement (page + bounding box)."""

    page_no: int
    bbox: BoundingBox

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProvenanceRecord:
        return cls(page_no=int(data["page_no"]), bbox=BoundingBox.from_dict(data["bbox"]))


def _provenance(data: dict[str, Any]) -> list[ProvenanceRecord]:
    return [ProvenanceRecord.from_dict(p) for p in data.get("prov") or []]


@dataclass(frozen=True)
class TableCell:
    """One cell of a sparse table, anchored at ``(row, col)``.

    ``row_span``/``col_span`` are at least 1. Spans running past the grid
    edge are clamped during reconstruction, not here.
    """

    row: int
    col: int
    row_span: int = 1
    col_span: int = 1
    text: str = ""
    bbox: BoundingBox | None = None
    column_header: bool = False
    row_header: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableCell:
        """Create from a docling table cell.

        Example:
            >>> cell = TableCell.from_dict({
            ...     "start_row_offset_idx": 0, "start_col_offset_idx": 1,
            ...     "row_span": 2, "col_span": 1, "text": "Total",
            ... })
            >>> cell.row, cell.col, cell.row_span
            (0, 1, 2)
        """
        bbox = data.get("bbox")
        return cls(
            row=int(data["start_row_offset_idx"]),
            col=int(data["start_col_offset_idx"]),
            row_span=max(1, int(data.get("row_span", 1))),
            col_span=max(1, int(data.get("col_span", 1))),
            text=data.get("text") or "",
            bbox=BoundingBox.from_dict(bbox) if bbox else None,
            column_header=bool(data.get("column_header", False)),
            row_header=bool(data.get("row_header", False)),
        )


@dataclass(frozen=True)
class TableData:
    """Sparse table payload."""

    num_rows: int
    num_cols: int
    cells: tuple[TableCell, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableData:
        return cls(
            num_rows=int(data["num_rows"]),
            num_cols=int(data["num_cols"]),
            cells=tuple(TableCell.from_dict(c) for c in data.get("table_cells") or []),
        )


@dataclass(frozen=True)
class ImageDescriptor:
    """Embedded picture metadata."""

    mimetype: str | None = None
    dpi: int | None = None
    width: float | None = None
    height: float | None = None
    uri: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ImageDescriptor:
        data = data or {}
        size = data.get("size") or {}
        return cls(
            mimetype=data.get("mimetype"),
            dpi=data.get("dpi"),
            width=size.get("width"),
            height=size.get("height"),
            uri=data.get("uri"),
        )


# ==================== Node Variants ====================


@dataclass(frozen=True)
class ContentNode:
    """Fields shared by every node kind."""

    kind: ClassVar[str] = ""

    self_ref: str
    label: str = ""
    parent: str | None = None
    children: tuple[str, ...] = ()
    prov: tuple[ProvenanceRecord, ...] = ()

    @staticmethod
    def _common(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "self_ref": data["self_ref"],
            "label": data.get("label") or "",
            "parent": _parent_ref(data),
            "children": tuple(_child_refs(data.get("children"))),
        }

    def on_page(self, page_no: int) -> bool:
        """Whether any provenance record places this node on ``page_no``."""
        return any(p.page_no == page_no for p in self.prov)


@dataclass(frozen=True)
class TextNode(ContentNode):
    kind: ClassVar[str] = NodeKind.TEXT

    text: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextNode:
        return cls(
            **cls._common(data),
            prov=tuple(_provenance(data)),
            text=data.get("text") or data.get("orig") or "",
        )


@dataclass(frozen=True)
class PictureNode(ContentNode):
    kind: ClassVar[str] = NodeKind.PICTURE

    image: ImageDescriptor = field(default_factory=ImageDescriptor)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PictureNode:
        return cls(
            **cls._common(data),
            prov=tuple(_provenance(data)),
            image=ImageDescriptor.from_dict(data.get("image")),
        )


@dataclass(frozen=True)
class TableNode(ContentNode):
    kind: ClassVar[str] = NodeKind.TABLE

    data: TableData = field(default_factory=lambda: TableData(num_rows=0, num_cols=0))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableNode:
        table_data = data.get("data")
        return cls(
            **cls._common(data),
            prov=tuple(_provenance(data)),
            data=TableData.from_dict(table_data) if table_data else TableData(num_rows=0, num_cols=0),
        )

    def dense_grid(self) -> list[list[GridSlot]]:
        """Reconstruct this table's dense display grid."""
        from ..table.span_grid import SpanGridReconstructor

        return SpanGridReconstructor().reconstruct(self.data.num_rows, self.data.num_cols, self.data.cells)


@dataclass(frozen=True)
class GroupNode(ContentNode):
    """Container node; carries no provenance of its own."""

    kind: ClassVar[str] = NodeKind.GROUP

    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GroupNode:
        return cls(**cls._common(data), name=data.get("name") or "")
