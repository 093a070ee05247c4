"""Geometry value types: BoundingBox, Point, ScreenRect.

Document space: origin at the page's bottom-left corner, y increasing upward.
Boxes are stored as (l, t, r, b) with ``b <= t`` in that space.

Screen space: origin at the canvas' top-left corner, y increasing downward.
Screen rectangles are stored as (x, y, width, height).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..constants import COORD_ORIGIN_BOTTOMLEFT, COORD_ORIGIN_TOPLEFT


@dataclass(frozen=True)
class Point:
    """A 2-D point. The coordinate space is given by context."""

    x: float
    y: float


@dataclass(frozen=True)
class ScreenRect:
    """Top-left-origin rectangle in canvas pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        """Get center point.

        Example:
            >>> ScreenRect(0, 0, 100, 42).center
            Point(x=50.0, y=21.0)
        """
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class BoundingBox:
    """Bounding box of a content placement on a page.

    Attributes:
        l: Left x coordinate
        t: Top y coordinate
        r: Right x coordinate
        b: Bottom y coordinate
        coord_origin: ``"BOTTOMLEFT"`` (document space, ``t >= b``) or
            ``"TOPLEFT"`` (``t <= b``)

    Example:
        >>> bbox = BoundingBox(l=10, t=820, r=200, b=790)
        >>> bbox.width, bbox.height
        (190, 30)
        >>> bbox.contains(Point(50, 800))
        True
    """

    l: float  # noqa: E741
    t: float
    r: float
    b: float
    coord_origin: str = COORD_ORIGIN_BOTTOMLEFT

    # ==================== Conversions ====================

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoundingBox:
        """Create from a ``{l, t, r, b, coord_origin}`` mapping.

        Raises:
            KeyError: If one of l/t/r/b is missing
        """
        return cls(
            l=float(data["l"]),
            t=float(data["t"]),
            r=float(data["r"]),
            b=float(data["b"]),
            coord_origin=str(data.get("coord_origin", COORD_ORIGIN_BOTTOMLEFT)).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "l": self.l,
            "t": self.t,
            "r": self.r,
            "b": self.b,
            "coord_origin": self.coord_origin,
        }

    def to_bottom_left(self, page_height: float) -> BoundingBox:
        """Return this box in document space (bottom-left origin).

        Top-left boxes are flipped on the y axis; bottom-left boxes are
        returned unchanged.

        Args:
            page_height: Height of the page the box lives on

        Example:
            >>> BoundingBox(10, 22, 200, 52, coord_origin="TOPLEFT").to_bottom_left(842)
            BoundingBox(l=10, t=820, r=200, b=790, coord_origin='BOTTOMLEFT')
        """
        if self.coord_origin != COORD_ORIGIN_TOPLEFT:
            return self
        return BoundingBox(
            l=self.l,
            t=page_height - self.t,
            r=self.r,
            b=page_height - self.b,
            coord_origin=COORD_ORIGIN_BOTTOMLEFT,
        )

    # ==================== Properties ====================

    @property
    def width(self) -> float:
        return self.r - self.l

    @property
    def height(self) -> float:
        """Get height (always non-negative for a well-formed box)."""
        return abs(self.t - self.b)

    @property
    def is_well_formed(self) -> bool:
        """Whether ``l <= r`` and the vertical order matches ``coord_origin``."""
        if self.l > self.r:
            return False
        if self.coord_origin == COORD_ORIGIN_TOPLEFT:
            return self.t <= self.b
        return self.b <= self.t

    # ==================== Geometric Operations ====================

    def contains(self, point: Point) -> bool:
        """Check if a document-space point lies inside this box.

        Closed interval on both axes: points on the boundary match.
        Only meaningful for bottom-left boxes.
        """
        return self.l <= point.x <= self.r and self.b <= point.y <= self.t
