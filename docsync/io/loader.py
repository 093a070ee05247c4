"""Document tree loading from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..exceptions import DocumentLoadError
from ..types.document import DocumentTree

logger = logging.getLogger(__name__)


def load_document(path: str | Path) -> DocumentTree:
    """Load a docling-style document JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        DocumentTree with its ref lookup table built

    Raises:
        DocumentLoadError: If the file cannot be read or is not valid JSON
        DocumentFormatError: If the JSON does not describe a document

    Example:
        >>> document = load_document(Path("report.json"))
        >>> len(document.texts)
        42
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise DocumentLoadError(f"Document file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Failed to read {path}: {e}") from e

    document = DocumentTree.from_dict(data)
    if document.name is None:
        document.name = path.stem

    logger.info(
        "Loaded document %s: %d texts, %d pictures, %d tables, %d groups",
        document.name,
        len(document.texts),
        len(document.pictures),
        len(document.tables),
        len(document.groups),
    )
    return document
