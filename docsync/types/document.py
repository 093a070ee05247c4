"""DocumentTree - the structured node universe of one loaded document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import DocumentFormatError
from .nodes import ContentNode, GroupNode, PictureNode, TableNode, TextNode

logger = logging.getLogger(__name__)

BODY_REF = "#/body"


@dataclass(frozen=True)
class PageSize:
    """Page size in document units."""

    width: float
    height: float


@dataclass
class DocumentTree:
    """Read-only document tree.

    Core fields:
    - texts, pictures, tables, groups: Flat per-kind node lists in source order
    - body: Root group whose children define the structural view

    Optional fields:
    - pages: Page sizes keyed by 1-indexed page number
    - name: Document name

    All nodes are addressable by ``self_ref`` through a lookup table built
    once at construction; a reference that is not in the table resolves to
    ``None``.

    Example:
        >>> doc = DocumentTree.from_dict(data)
        >>> doc.resolve("#/texts/0").text
        'Introduction'
    """

    texts: list[TextNode] = field(default_factory=list)
    pictures: list[PictureNode] = field(default_factory=list)
    tables: list[TableNode] = field(default_factory=list)
    groups: list[GroupNode] = field(default_factory=list)
    body: GroupNode = field(default_factory=lambda: GroupNode(self_ref=BODY_REF, name="_root_"))
    pages: dict[int, PageSize] = field(default_factory=dict)
    name: str | None = None

    _lookup: dict[str, ContentNode] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        lookup: dict[str, ContentNode] = {self.body.self_ref: self.body}
        for node in (*self.texts, *self.pictures, *self.tables, *self.groups):
            if node.self_ref in lookup:
                logger.debug("Duplicate self_ref %s; keeping first occurrence", node.self_ref)
                continue
            lookup[node.self_ref] = node
        self._lookup = lookup

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocumentTree:
        """Create DocumentTree from docling-style JSON.

        Args:
            data: Parsed JSON object

        Returns:
            DocumentTree object

        Raises:
            DocumentFormatError: If the object or one of its nodes is malformed
        """
        if not isinstance(data, dict):
            raise DocumentFormatError(f"Document must be a JSON object, got {type(data).__name__}")

        try:
            body_data = data.get("body") or {"self_ref": BODY_REF}
            body = GroupNode.from_dict({"self_ref": BODY_REF, **body_data})
            return cls(
                texts=[TextNode.from_dict(t) for t in data.get("texts") or []],
                pictures=[PictureNode.from_dict(p) for p in data.get("pictures") or []],
                tables=[TableNode.from_dict(t) for t in data.get("tables") or []],
                groups=[GroupNode.from_dict(g) for g in data.get("groups") or []],
                body=body,
                pages=_parse_pages(data.get("pages") or {}),
                name=data.get("name"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DocumentFormatError(f"Malformed document node: {e!r}") from e

    def resolve(self, ref: str | None) -> ContentNode | None:
        """Look up a node by ``self_ref``; unknown references return None."""
        if ref is None:
            return None
        node = self._lookup.get(ref)
        if node is None:
            logger.debug("Unresolved reference: %s", ref)
        return node

    def __contains__(self, ref: object) -> bool:
        return ref in self._lookup

    def __len__(self) -> int:
        return len(self._lookup)

    def page_size(self, page_no: int) -> PageSize | None:
        """Return the declared size of a page, or None if the document has none."""
        return self.pages.get(page_no)

    @property
    def num_pages(self) -> int:
        """Highest page number referenced by page sizes or provenance."""
        highest = max(self.pages, default=0)
        for node in (*self.texts, *self.pictures, *self.tables):
            for record in node.prov:
                highest = max(highest, record.page_no)
        return highest


def _parse_pages(pages: dict[str, Any]) -> dict[int, PageSize]:
    result: dict[int, PageSize] = {}
    for key, page in pages.items():
        size = (page or {}).get("size")
        if not size:
            continue
        page_no = int(page.get("page_no", key))
        result[page_no] = PageSize(width=float(size["width"]), height=float(size["height"]))
    return result
