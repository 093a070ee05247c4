"""Shared constants for docsync."""

# =============================================================================
# Page Geometry
# =============================================================================
DEFAULT_PAGE_WIDTH = 595
"""Fallback page width in document units (A4 portrait, PDF points)."""

DEFAULT_PAGE_HEIGHT = 842
"""Fallback page height in document units (A4 portrait, PDF points)."""

POINTS_PER_INCH = 72
"""Document units per inch; a render at this DPI maps one unit to one pixel."""

# =============================================================================
# Rendering
# =============================================================================
DEFAULT_DPI = 72
"""Default rasterization DPI (canvas scale 1.0)."""

DEFAULT_VIEWPORT_HEIGHT = 800
"""Default visible canvas height in pixels, used to centre scroll targets."""

# =============================================================================
# Coordinate Origins
# =============================================================================
COORD_ORIGIN_BOTTOMLEFT = "BOTTOMLEFT"
"""Document space: origin at the page's bottom-left corner, y grows upward."""

COORD_ORIGIN_TOPLEFT = "TOPLEFT"
"""Screen-like space: origin at the top-left corner, y grows downward."""

# =============================================================================
# Logging
# =============================================================================
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
"""Log level names accepted by the CLI and configuration."""
