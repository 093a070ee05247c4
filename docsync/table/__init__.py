"""Table display helpers."""

from .span_grid import CoveredSlot, GridSlot, SpanGridReconstructor

__all__ = ["CoveredSlot", "GridSlot", "SpanGridReconstructor"]
