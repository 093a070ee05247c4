"""Coordinate-space helpers."""

from .coords import CoordinateMapper

__all__ = ["CoordinateMapper"]
