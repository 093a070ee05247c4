"""Pytest fixtures specific to unit tests.

Unit tests should be fast and isolated. These fixtures
ensure tests don't require poppler or real PDF files.
"""

from __future__ import annotations

import pytest

from docsync.geometry import CoordinateMapper
from docsync.index import BBoxIndexBuilder, BBoxIndexEntry
from docsync.types import BoundingBox, DocumentTree, NodeKind


@pytest.fixture
def mapper() -> CoordinateMapper:
    """Create a mapper for an A4 page (842 units tall) at scale 1.

    Returns:
        CoordinateMapper instance
    """
    return CoordinateMapper(page_height=842)


@pytest.fixture
def page1_index(sample_document: DocumentTree) -> list[BBoxIndexEntry]:
    """Build the bbox index of page 1 of the sample document.

    Returns:
        Index entries in index order
    """
    return BBoxIndexBuilder().build(sample_document, 1)


@pytest.fixture
def overlapping_index() -> list[BBoxIndexEntry]:
    """Create an index where a text box sits inside a picture and a table.

    Returns:
        Entries ordered text, picture, table
    """
    return [
        BBoxIndexEntry(bbox=BoundingBox(l=100, t=400, r=200, b=350), kind=NodeKind.TEXT, ref="#/texts/0"),
        BBoxIndexEntry(bbox=BoundingBox(l=50, t=500, r=300, b=300), kind=NodeKind.PICTURE, ref="#/pictures/0"),
        BBoxIndexEntry(bbox=BoundingBox(l=0, t=600, r=400, b=200), kind=NodeKind.TABLE, ref="#/tables/0"),
    ]
