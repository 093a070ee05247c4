"""Spatial index and hit testing."""

from .bbox_index import BBoxIndexBuilder, BBoxIndexEntry
from .hit_test import HitTester

__all__ = ["BBoxIndexBuilder", "BBoxIndexEntry", "HitTester"]
