"""Pytest fixtures specific to integration tests.

Integration tests need poppler (pdftoppm/pdfinfo) on PATH.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def three_page_pdf(tmp_path: Path) -> Path:
    """Write a three-page A4 PDF (595x842 points) with Pillow.

    Returns:
        Path to the PDF file
    """
    pages = [Image.new("RGB", (595, 842), color=color) for color in ("white", "red", "blue")]
    path = tmp_path / "three_pages.pdf"
    pages[0].save(path, save_all=True, append_images=pages[1:], resolution=72.0)
    return path
