"""PDF page rasterizer backed by pdf2image (poppler)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import numpy as np
from pdf2image.pdf2image import convert_from_path, pdfinfo_from_path

from ..constants import DEFAULT_DPI
from ..exceptions import RenderFailedError
from ..types.interfaces import RenderedPage
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


def get_pdf_info(pdf_path: Path) -> dict[str, Any]:
    """Get PDF document information.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        Dictionary containing PDF metadata including page count

    Example:
        >>> info = get_pdf_info(Path("document.pdf"))
        >>> info["Pages"]
        10
    """
    return pdfinfo_from_path(str(pdf_path))


def render_pdf_page(pdf_path: Path, page_num: int, dpi: int = DEFAULT_DPI) -> np.ndarray:
    """Render a PDF page to an RGB array.

    Args:
        pdf_path: Path to the PDF file
        page_num: Page number to render (1-indexed)
        dpi: DPI for rendering; 72 maps one PDF point to one pixel

    Returns:
        Image array (H, W, 3)

    Raises:
        ValueError: If the page could not be rendered

    Example:
        >>> image = render_pdf_page(Path("doc.pdf"), page_num=1, dpi=72)
        >>> image.shape
        (842, 595, 3)
    """
    images = convert_from_path(
        pdf_path,
        first_page=page_num,
        last_page=page_num,
        dpi=dpi,
    )

    if not images:
        raise ValueError(f"Failed to render page {page_num} from {pdf_path}")

    return np.array(images[0].convert("RGB"))


class Pdf2ImageRasterizer:
    """Rasterizer that renders PDF pages in a worker thread.

    poppler cannot be interrupted mid-page, so a cancelled render is
    abandoned: the token is checked before starting and again once the
    worker thread returns, and a stale result is discarded.

    Example:
        >>> rasterizer = Pdf2ImageRasterizer(Path("doc.pdf"), dpi=72)
        >>> page = await rasterizer.render_page(1, CancellationToken(1))
        >>> page.total_pages
        12
    """

    def __init__(self, pdf_path: str | Path, dpi: int = DEFAULT_DPI):
        self.pdf_path = Path(pdf_path)
        self.dpi = dpi
        self._total_pages: int | None = None

    async def page_count(self) -> int:
        """Return the document page count (cached after the first call)."""
        if self._total_pages is None:
            info = await asyncio.to_thread(get_pdf_info, self.pdf_path)
            self._total_pages = int(info["Pages"])
        return self._total_pages

    async def render_page(self, page_no: int, token: CancellationToken) -> RenderedPage:
        token.raise_if_cancelled()

        try:
            total_pages = await self.page_count()
        except Exception as e:
            raise RenderFailedError(page_no, f"Cannot read page count of {self.pdf_path}: {e}", cause=e) from e

        if page_no < 1 or page_no > total_pages:
            raise RenderFailedError(page_no, f"Page {page_no} does not exist (total pages: {total_pages})")

        token.raise_if_cancelled()
        image = await asyncio.to_thread(render_pdf_page, self.pdf_path, page_no, self.dpi)
        token.raise_if_cancelled()

        logger.debug("Rasterized %s page %d at %d dpi: %s", self.pdf_path.name, page_no, self.dpi, image.shape)
        return RenderedPage(page_no=page_no, image=image, total_pages=total_pages)
