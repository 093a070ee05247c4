"""Conversion between document space and screen space.

Document space has its origin at the page's bottom-left corner with y growing
upward; screen space has its origin at the canvas' top-left corner with y
growing downward. A canvas renders one page at ``scale`` pixels per document
unit. No clamping is done: out-of-page points are legal and simply miss every
box.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..types.bbox import BoundingBox, Point, ScreenRect


@dataclass(frozen=True)
class CoordinateMapper:
    """Maps boxes and points between document and screen space for one page.

    Attributes:
        page_height: Height of the page in document units
        scale: Canvas pixels per document unit (``dpi / 72``)

    Example:
        >>> mapper = CoordinateMapper(page_height=842)
        >>> mapper.to_screen(BoundingBox(l=0, t=842, r=100, b=800))
        ScreenRect(x=0.0, y=0.0, width=100.0, height=42.0)
        >>> mapper.to_document(Point(50, 42))
        Point(x=50.0, y=800.0)
    """

    page_height: float
    scale: float = 1.0

    def to_screen(self, bbox: BoundingBox) -> ScreenRect:
        """Convert a box to a top-left-origin canvas rectangle.

        ``x = l``, ``y = page_height - t``, ``width = r - l``, ``height = t - b``
        (each multiplied by ``scale``). Top-left boxes are first normalized to
        document space.
        """
        bbox = bbox.to_bottom_left(self.page_height)
        return ScreenRect(
            x=float(bbox.l * self.scale),
            y=float((self.page_height - bbox.t) * self.scale),
            width=float((bbox.r - bbox.l) * self.scale),
            height=float((bbox.t - bbox.b) * self.scale),
        )

    def to_document_box(self, bbox: BoundingBox) -> BoundingBox:
        """Normalize a box of this page to document space (bottom-left origin)."""
        return bbox.to_bottom_left(self.page_height)

    def to_document(self, point: Point) -> Point:
        """Convert a canvas-local pixel position to document space.

        ``x = point.x``, ``y = page_height - point.y`` (after dividing by ``scale``).
        """
        return Point(
            x=float(point.x / self.scale),
            y=float(self.page_height - point.y / self.scale),
        )

    def point_to_screen(self, point: Point) -> Point:
        """Inverse of ``to_document``."""
        return Point(
            x=float(point.x * self.scale),
            y=float((self.page_height - point.y) * self.scale),
        )
