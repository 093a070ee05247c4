"""Page rendering lifecycle and rasterizers."""

from .cancellation import CancellationToken
from .controller import PageRenderController, RenderHandle, RenderOutcome, RenderStatus

__all__ = [
    "CancellationToken",
    "PageRenderController",
    "RenderHandle",
    "RenderOutcome",
    "RenderStatus",
]
