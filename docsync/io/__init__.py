"""Document input helpers."""

from .loader import load_document

__all__ = ["load_document"]
