"""Structural view of the current page.

Flattens the body tree into the ordered list of nodes the tree view shows for
one page. Only nodes in the page's membership set are emitted; children of a
picture or table (captions, footnotes) follow their parent one level deeper.
Unresolvable references are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from .types.document import DocumentTree
from .types.nodes import ContentNode, GroupNode, NodeKind, TextNode

logger = logging.getLogger(__name__)

__all__ = ["OutlineItem", "build_outline"]


@dataclass(frozen=True)
class OutlineItem:
    """One row of the structural view.

    Attributes:
        ref: Node ``self_ref``
        kind: NodeKind
        depth: Nesting depth below the body (top-level nodes are 0)
        label: Docling label (``section_header``, ``caption``, ...) or group name
        text: Text content for text nodes, otherwise empty
    """

    ref: str
    kind: str
    depth: int
    label: str = ""
    text: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"ref": self.ref, "kind": self.kind, "depth": self.depth, "label": self.label, "text": self.text}


def build_outline(document: DocumentTree, page_no: int, membership: frozenset[str]) -> list[OutlineItem]:
    """Build the structural view for one page.

    Args:
        document: Loaded document tree
        page_no: Page number, for logging only
        membership: Refs on the page, from ``BBoxIndexBuilder.membership``

    Returns:
        Outline items in document order
    """
    items = list(_walk(document, document.body.children, membership, depth=0, seen=set()))
    logger.debug("Outline for page %d: %d items", page_no, len(items))
    return items


def _walk(
    document: DocumentTree,
    refs: tuple[str, ...],
    membership: frozenset[str],
    depth: int,
    seen: set[str],
) -> Iterator[OutlineItem]:
    for ref in refs:
        if ref in seen:
            continue
        node = document.resolve(ref)
        if node is None or ref not in membership:
            continue

        seen.add(ref)
        yield _item(node, depth)

        if node.kind == NodeKind.GROUP:
            yield from _walk(document, node.children, membership, depth + 1, seen)
        else:
            yield from _walk_attached(document, node, depth + 1, seen)


def _walk_attached(document: DocumentTree, node: ContentNode, depth: int, seen: set[str]) -> Iterator[OutlineItem]:
    # Captions and footnotes are shown with their parent regardless of their own provenance
    for ref in node.children:
        child = document.resolve(ref)
        if child is None or ref in seen:
            continue
        seen.add(ref)
        yield _item(child, depth)


def _item(node: ContentNode, depth: int) -> OutlineItem:
    if isinstance(node, TextNode):
        return OutlineItem(ref=node.self_ref, kind=node.kind, depth=depth, label=node.label, text=node.text)
    if isinstance(node, GroupNode):
        return OutlineItem(ref=node.self_ref, kind=node.kind, depth=depth, label=node.label or node.name)
    return OutlineItem(ref=node.self_ref, kind=node.kind, depth=depth, label=node.label)
