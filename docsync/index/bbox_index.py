"""Per-page spatial index of content bounding boxes.

The index is built from the document's flat ``texts``, ``pictures`` and
``tables`` lists rather than from what the structural view currently shows,
so it is a superset of the visible tree. Entry order (texts, then pictures,
then tables, source order within each) is the hit-test tie-break basis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..constants import DEFAULT_PAGE_HEIGHT
from ..geometry.coords import CoordinateMapper
from ..types.bbox import BoundingBox
from ..types.document import DocumentTree
from ..types.nodes import NodeKind

logger = logging.getLogger(__name__)

__all__ = ["BBoxIndexEntry", "BBoxIndexBuilder"]


@dataclass(frozen=True)
class BBoxIndexEntry:
    """One placement of a content node on the indexed page.

    Attributes:
        bbox: Box in document space (bottom-left origin)
        kind: NodeKind of the source node
        ref: ``self_ref`` of the source node
    """

    bbox: BoundingBox
    kind: str
    ref: str


@dataclass(frozen=True)
class _PageIndex:
    entries: tuple[BBoxIndexEntry, ...]
    membership: frozenset[str]


class BBoxIndexBuilder:
    """Builds and memoizes per-page bbox indexes and page membership sets.

    Results are cached per page for the most recently seen document; handing
    in a different document drops the cache.

    Example:
        >>> builder = BBoxIndexBuilder()
        >>> entries = builder.build(document, page_no=1)
        >>> [(e.kind, e.ref) for e in entries]
        [('text', '#/texts/0'), ('picture', '#/pictures/0')]
        >>> "#/groups/0" in builder.membership(document, page_no=1)
        True
    """

    def __init__(self, default_page_height: float = DEFAULT_PAGE_HEIGHT):
        self.default_page_height = default_page_height
        self._document: DocumentTree | None = None
        self._pages: dict[int, _PageIndex] = {}

    def build(self, document: DocumentTree, page_no: int) -> list[BBoxIndexEntry]:
        """Return the index entries for one page.

        Args:
            document: Loaded document tree
            page_no: Page number (1-indexed)

        Returns:
            One entry per provenance record on ``page_no``, in index order
        """
        return list(self._page_index(document, page_no).entries)

    def membership(self, document: DocumentTree, page_no: int) -> frozenset[str]:
        """Return the refs of every node that shows up on ``page_no``.

        Content nodes are members when one of their provenance records is on
        the page; groups (including the body) are members when any
        descendant is.
        """
        return self._page_index(document, page_no).membership

    def invalidate(self) -> None:
        """Drop all cached pages."""
        self._document = None
        self._pages.clear()

    # ==================== Internals ====================

    def _page_index(self, document: DocumentTree, page_no: int) -> _PageIndex:
        if self._document is not document:
            self.invalidate()
            self._document = document

        cached = self._pages.get(page_no)
        if cached is not None:
            return cached

        page_index = self._compute(document, page_no)
        self._pages[page_no] = page_index
        logger.debug(
            "Indexed page %d: %d boxes, %d member nodes",
            page_no,
            len(page_index.entries),
            len(page_index.membership),
        )
        return page_index

    def _compute(self, document: DocumentTree, page_no: int) -> _PageIndex:
        page_size = document.page_size(page_no)
        mapper = CoordinateMapper(page_height=page_size.height if page_size else self.default_page_height)

        entries: list[BBoxIndexEntry] = []
        for nodes in (document.texts, document.pictures, document.tables):
            for node in nodes:
                for record in node.prov:
                    if record.page_no != page_no:
                        continue
                    entries.append(
                        BBoxIndexEntry(bbox=mapper.to_document_box(record.bbox), kind=node.kind, ref=node.self_ref)
                    )

        members = {entry.ref for entry in entries}
        members |= self._groups_on_page(document, members)
        return _PageIndex(entries=tuple(entries), membership=frozenset(members))

    @staticmethod
    def _groups_on_page(document: DocumentTree, content_refs: set[str]) -> set[str]:
        memo: dict[str, bool] = {}
        in_progress: set[str] = set()

        def reaches_page(ref: str) -> bool:
            if ref in content_refs:
                return True
            if ref in memo:
                return memo[ref]
            node = document.resolve(ref)
            if node is None or node.kind != NodeKind.GROUP or ref in in_progress:
                return False
            in_progress.add(ref)
            result = any(reaches_page(child) for child in node.children)
            in_progress.discard(ref)
            memo[ref] = result
            return result

        groups = [document.body, *document.groups]
        return {group.self_ref for group in groups if reaches_page(group.self_ref)}
