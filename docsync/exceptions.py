"""Custom exception classes for docsync.

This module defines a hierarchy of custom exceptions so that callers can
tell configuration, document, navigation and rendering problems apart.

Exception Hierarchy:
    DocSyncError (base)
    ├── ConfigurationError
    │   └── InvalidConfigError
    ├── DocumentError
    │   ├── DocumentLoadError
    │   └── DocumentFormatError
    ├── NavigationError
    │   └── PageOutOfRangeError
    └── RenderError
        ├── RenderCancelledError
        └── RenderFailedError

Missing node references and malformed table spans are not represented here:
they are resolved by skipping and clamping respectively, never by raising.

Usage:
    try:
        session.go_to_page(12)
    except PageOutOfRangeError as e:
        logger.warning("Page change rejected: %s", e)
"""

from __future__ import annotations


class DocSyncError(Exception):
    """Base exception for all docsync errors."""


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(DocSyncError):
    """Base exception for configuration-related errors."""


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid or malformed.

    Examples:
        - Non-positive DPI
        - Non-positive default page size
        - Unknown log level
    """


# ============================================================================
# Document Errors
# ============================================================================


class DocumentError(DocSyncError):
    """Base exception for document tree errors."""


class DocumentLoadError(DocumentError):
    """Raised when a document file cannot be read.

    Examples:
        - File not found
        - Permission denied
        - Invalid JSON
    """


class DocumentFormatError(DocumentError):
    """Raised when document JSON does not have the expected shape.

    Examples:
        - Top-level value is not an object
        - A node has no ``self_ref``
        - A table has no ``num_rows``/``num_cols``
    """


# ============================================================================
# Navigation Errors
# ============================================================================


class NavigationError(DocSyncError):
    """Base exception for pagination errors."""


class PageOutOfRangeError(NavigationError):
    """Raised when a page change targets a page outside ``1..total_pages``."""

    def __init__(self, page_no: int, total_pages: int):
        self.page_no = page_no
        self.total_pages = total_pages
        super().__init__(f"Page {page_no} is out of range (1..{total_pages})")


# ============================================================================
# Render Errors
# ============================================================================


class RenderError(DocSyncError):
    """Base exception for page rendering errors."""


class RenderCancelledError(RenderError):
    """Raised by a rasterizer when a render was superseded.

    This is the expected outcome of a page change while a render is in
    flight and is never reported to the user.
    """


class RenderFailedError(RenderError):
    """Raised when rasterizing a page fails for any reason other than cancellation."""

    def __init__(self, page_no: int, message: str, cause: Exception | None = None):
        self.page_no = page_no
        self.cause = cause
        super().__init__(f"[page {page_no}] {message}")
