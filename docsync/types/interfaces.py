"""Collaborator interface definitions for docsync.

This module defines the Protocol the render controller drives and the
value it receives back:
- Rasterizer: Produces a pixel buffer for one page, honouring cancellation
- RenderedPage: Result of a successful render
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from ..rendering.cancellation import CancellationToken


@dataclass(frozen=True)
class RenderedPage:
    """A rasterized page.

    Attributes:
        page_no: Page number (1-indexed)
        image: RGB pixel buffer (H, W, 3)
        total_pages: Page count of the source document
    """

    page_no: int
    image: np.ndarray
    total_pages: int

    @property
    def size(self) -> tuple[int, int]:
        """Get (width, height) in pixels."""
        return (int(self.image.shape[1]), int(self.image.shape[0]))


@runtime_checkable
class Rasterizer(Protocol):
    """Page rasterizer interface.

    Implementations must check ``token`` before and after blocking work and
    raise ``RenderCancelledError`` (or let ``asyncio.CancelledError``
    propagate) once it is cancelled. Any other exception is treated as a
    render failure for that page.

    Example:
        >>> rasterizer = Pdf2ImageRasterizer(Path("doc.pdf"), dpi=72)
        >>> page = await rasterizer.render_page(1, CancellationToken(1))
        >>> page.total_pages
        12
    """

    async def render_page(self, page_no: int, token: CancellationToken) -> RenderedPage:
        """Render one page.

        Args:
            page_no: Page number (1-indexed)
            token: Cancellation token for this request

        Returns:
            RenderedPage with the pixel buffer and document page count
        """
        ...
