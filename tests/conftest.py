"""Pytest configuration and shared fixtures for docsync tests.

This module provides:
- Common fixtures for all tests (sample document JSON, loaded trees)
- Fake rasterizer for render lifecycle tests
- Test configuration and path setup
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import pytest

# Register anyio pytest plugin for async test support
# This enables @pytest.mark.anyio decorator and anyio_backends config option
pytest_plugins = ("anyio",)

# Ensure project root is importable when running tests via uv or python -m pytest
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

if TYPE_CHECKING:
    from docsync.rendering import CancellationToken
    from docsync.types import DocumentTree, RenderedPage


# ==================== Sample Data Fixtures ====================


def _prov(page_no: int, l: float, t: float, r: float, b: float) -> dict[str, Any]:  # noqa: E741
    return {"page_no": page_no, "bbox": {"l": l, "t": t, "r": r, "b": b, "coord_origin": "BOTTOMLEFT"}}


@pytest.fixture
def sample_document_data() -> dict[str, Any]:
    """Create a two-page docling-style document.

    Page 1: a heading, a list with one item, a figure with its caption, the
    text ``#/texts/3`` at ``{l:10, t:820, r:200, b:790}`` and a running footer.
    Page 2: a 2x2 table whose first cell spans two rows, a paragraph and the
    same running footer.

    The body also references a node that does not exist (``#/texts/99``) and
    ``#/groups/1`` only contains a dangling reference.

    Returns:
        Document JSON as a dict
    """
    return {
        "name": "sample",
        "body": {
            "self_ref": "#/body",
            "name": "_root_",
            "children": [
                {"$ref": "#/texts/0"},
                {"$ref": "#/texts/3"},
                {"$ref": "#/groups/0"},
                {"$ref": "#/pictures/0"},
                {"$ref": "#/tables/0"},
                {"$ref": "#/texts/4"},
                {"$ref": "#/texts/5"},
                {"$ref": "#/texts/99"},
            ],
        },
        "groups": [
            {
                "self_ref": "#/groups/0",
                "parent": {"$ref": "#/body"},
                "children": [{"$ref": "#/texts/1"}, {"$ref": "#/groups/1"}],
                "name": "list",
                "label": "list",
            },
            {
                "self_ref": "#/groups/1",
                "parent": {"$ref": "#/groups/0"},
                "children": [{"$ref": "#/texts/77"}],
                "name": "group",
                "label": "unspecified",
            },
        ],
        "texts": [
            {
                "self_ref": "#/texts/0",
                "parent": {"$ref": "#/body"},
                "label": "section_header",
                "text": "Introduction",
                "prov": [_prov(1, 300, 842, 500, 825)],
            },
            {
                "self_ref": "#/texts/1",
                "parent": {"$ref": "#/groups/0"},
                "label": "list_item",
                "text": "First item",
                "prov": [_prov(1, 10, 780, 300, 710)],
            },
            {
                "self_ref": "#/texts/2",
                "parent": {"$ref": "#/pictures/0"},
                "label": "caption",
                "text": "Figure 1: Overview",
                "prov": [_prov(1, 50, 480, 250, 460)],
            },
            {
                "self_ref": "#/texts/3",
                "parent": {"$ref": "#/body"},
                "label": "text",
                "text": "Abstract",
                "prov": [_prov(1, 10, 820, 200, 790)],
            },
            {
                "self_ref": "#/texts/4",
                "parent": {"$ref": "#/body"},
                "label": "text",
                "orig": "Second page paragraph",
                "prov": [_prov(2, 10, 780, 400, 650)],
            },
            {
                "self_ref": "#/texts/5",
                "parent": {"$ref": "#/body"},
                "label": "page_footer",
                "text": "Confidential",
                "prov": [_prov(1, 0, 40, 595, 20), _prov(2, 0, 40, 595, 20)],
            },
        ],
        "pictures": [
            {
                "self_ref": "#/pictures/0",
                "parent": {"$ref": "#/body"},
                "label": "picture",
                "children": [{"$ref": "#/texts/2"}],
                "prov": [_prov(1, 50, 700, 250, 500)],
                "image": {"mimetype": "image/png", "dpi": 72, "size": {"width": 200, "height": 200}},
            }
        ],
        "tables": [
            {
                "self_ref": "#/tables/0",
                "parent": {"$ref": "#/body"},
                "label": "table",
                "prov": [_prov(2, 50, 600, 550, 300)],
                "data": {
                    "num_rows": 2,
                    "num_cols": 2,
                    "table_cells": [
                        {
                            "start_row_offset_idx": 0,
                            "start_col_offset_idx": 0,
                            "row_span": 2,
                            "col_span": 1,
                            "text": "Region",
                            "row_header": True,
                        },
                        {"start_row_offset_idx": 0, "start_col_offset_idx": 1, "text": "Q1"},
                        {"start_row_offset_idx": 1, "start_col_offset_idx": 1, "text": "Q2"},
                    ],
                },
            }
        ],
        "pages": {
            "1": {"page_no": 1, "size": {"width": 595, "height": 842}},
            "2": {"page_no": 2, "size": {"width": 595, "height": 842}},
        },
    }


@pytest.fixture
def sample_document(sample_document_data: dict[str, Any]) -> DocumentTree:
    """Create a DocumentTree from the sample document JSON."""
    from docsync.types import DocumentTree

    return DocumentTree.from_dict(sample_document_data)


@pytest.fixture
def sample_document_path(tmp_path: Path, sample_document_data: dict[str, Any]) -> Path:
    """Write the sample document to a JSON file.

    Returns:
        Path to the JSON file
    """
    path = tmp_path / "sample.json"
    path.write_text(json.dumps(sample_document_data), encoding="utf-8")
    return path


@pytest.fixture
def sample_pdf_path(tmp_path: Path) -> Path:
    """Create a path for a sample PDF file.

    Note: This does not create an actual PDF, just a path.

    Returns:
        Path to a (non-existent) PDF file
    """
    return tmp_path / "sample.pdf"


# ==================== Fake Rasterizer ====================


class FakeRasterizer:
    """In-memory rasterizer for render lifecycle tests.

    Each page renders to a blank 842x595 image. Pages listed in
    ``failing_pages`` raise RuntimeError. When ``gated`` is set, every render
    waits for ``release(page_no)`` before finishing, which lets a test hold a
    render in flight.
    """

    def __init__(self, total_pages: int = 3, failing_pages: set[int] | None = None, gated: bool = False):
        self.total_pages = total_pages
        self.failing_pages = failing_pages or set()
        self.gated = gated
        self.calls: list[int] = []
        self.started: dict[int, asyncio.Event] = {}
        self._gates: dict[int, asyncio.Event] = {}

    def _event(self, events: dict[int, asyncio.Event], page_no: int) -> asyncio.Event:
        if page_no not in events:
            events[page_no] = asyncio.Event()
        return events[page_no]

    def release(self, page_no: int) -> None:
        self._event(self._gates, page_no).set()

    async def wait_started(self, page_no: int) -> None:
        await self._event(self.started, page_no).wait()

    async def render_page(self, page_no: int, token: CancellationToken) -> RenderedPage:
        from docsync.types import RenderedPage

        self.calls.append(page_no)
        self._event(self.started, page_no).set()
        token.raise_if_cancelled()
        if self.gated:
            await self._event(self._gates, page_no).wait()
        if page_no in self.failing_pages:
            raise RuntimeError(f"poppler crashed on page {page_no}")
        token.raise_if_cancelled()
        image = np.ones((842, 595, 3), dtype=np.uint8) * 255
        return RenderedPage(page_no=page_no, image=image, total_pages=self.total_pages)


@pytest.fixture
def rasterizer_factory() -> type[FakeRasterizer]:
    """Return the FakeRasterizer class for tests that need custom settings."""
    return FakeRasterizer


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    """Create a rasterizer that renders instantly."""
    return FakeRasterizer()


@pytest.fixture
def gated_rasterizer() -> FakeRasterizer:
    """Create a rasterizer whose renders wait for ``release(page_no)``."""
    return FakeRasterizer(gated=True)


# ==================== Async Configuration ====================


@pytest.fixture
def anyio_backend() -> str:
    """Force anyio to use asyncio backend only (trio not installed)."""
    return "asyncio"


# ==================== Helper Functions ====================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (require poppler)")
