#!/usr/bin/env python3
"""
Main entry point for docsync
Loads a document tree, opens a viewer session on one page and prints a JSON
report of the page's bbox index, hit tests, selections and table grids
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING, Any

# Note: docsync imports are moved to function-level
# to improve CLI startup time (--help, argument validation, etc.)
if TYPE_CHECKING:
    from docsync import ViewerSession
    from docsync.table import GridSlot


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration with timestamped log files.

    Log records go to stderr so that stdout carries only the JSON report.
    """
    from docsync.misc import timestamped_log_path  # noqa: PLC0415 - lazy import for startup performance

    log_filename = timestamped_log_path(Path(".logs"), "docsync")

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr), logging.FileHandler(log_filename, encoding="utf-8")],
    )


def parse_ref_list(refs_str: str) -> list[str]:
    """Parse comma-separated node refs like '#/texts/0,#/tables/1'."""
    return [ref.strip() for ref in refs_str.split(",") if ref.strip()]


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "INFO")
    logger = logging.getLogger(__name__)

    return _execute_command(args, logger)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="docsync - Inspect how a document viewer maps a page's boxes to its structure tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Examples:
              # Bbox index of page 1
              python main.py --document report.json

              # What is under canvas pixel (50, 42) on page 2?
              python main.py --document report.json --page 2 --point 50 42

              # Select nodes from the structure tree and get the scroll offset
              python main.py --document report.json --select "#/texts/3"

              # Structural view and a reconstructed table grid
              python main.py --document report.json --outline --table "#/tables/0"

              # Render the page from the source PDF at 144 dpi
              python main.py --document report.json --pdf report.pdf --dpi 144
            """
        ),
    )

    parser.add_argument(
        "--document",
        "-d",
        type=str,
        required=True,
        help="Document tree JSON file (docling export)",
    )
    parser.add_argument(
        "--page",
        "-p",
        type=int,
        default=1,
        help="Page to open (default: 1)",
    )
    parser.add_argument("--config", type=str, help="YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    # Spatial view
    spatial_group = parser.add_argument_group("Spatial View")
    spatial_group.add_argument(
        "--point",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        help="Hit test canvas pixel (X, Y) on the page",
    )
    spatial_group.add_argument(
        "--pdf",
        type=str,
        help="Source PDF; when given the page is rendered and the page count comes from the PDF",
    )
    spatial_group.add_argument(
        "--dpi",
        type=int,
        help="Render resolution; canvas scale is dpi/72 (default: 72)",
    )
    spatial_group.add_argument(
        "--viewport-height",
        type=float,
        help="Viewport height in pixels used for scroll offsets (default: 800)",
    )

    # Structural view
    structural_group = parser.add_argument_group("Structural View")
    structural_group.add_argument(
        "--select",
        type=str,
        help="Click node refs in the structure tree, comma-separated (e.g., --select '#/texts/3,#/texts/3')",
    )
    structural_group.add_argument(
        "--outline",
        action="store_true",
        help="Include the structural view of the page",
    )
    structural_group.add_argument(
        "--table",
        type=str,
        help="Include the dense grid of a table node (e.g., --table '#/tables/0')",
    )

    return parser


def _execute_command(args: argparse.Namespace, logger: logging.Logger) -> int:
    # Lazy import: only load docsync when actually processing input
    from docsync import (  # noqa: PLC0415
        ConfigurationError,
        DocumentError,
        NavigationError,
        ViewerConfig,
        ViewerSession,
        load_document,
    )

    try:
        config = ViewerConfig.from_cli(args)
        config.validate()
        logging.getLogger().setLevel(config.log_level)

        document = load_document(args.document)

        rasterizer = None
        if args.pdf:
            from docsync.rendering.pdf2image_rasterizer import Pdf2ImageRasterizer  # noqa: PLC0415

            rasterizer = Pdf2ImageRasterizer(args.pdf, dpi=config.dpi)

        session = ViewerSession(config, rasterizer)
        session.load_document(document)
        report = asyncio.run(_run_session(session, args, logger))
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    except DocumentError as exc:
        logger.error("Cannot load document: %s", exc)
        return 1
    except NavigationError as exc:
        logger.error("Navigation failed: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except Exception as exc:  # noqa: BLE001 - retain broad logging for CLI
        logger.error("Unexpected error: %s", exc, exc_info=True)
        return 1

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


async def _run_session(session: ViewerSession, args: argparse.Namespace, logger: logging.Logger) -> dict[str, Any]:
    from docsync.types import Point  # noqa: PLC0415

    report: dict[str, Any] = {"document": session.document.name if session.document else None}

    outcome = None
    if session.renderer is not None:
        # The first render reports the page count
        outcome = await session.request_render()

    if args.page != session.current_page:
        session.go_to_page(args.page)
        if session.renderer is not None:
            outcome = await session.request_render()

    if outcome is not None:
        report["render"] = _render_report(outcome, session)

    report["page"] = session.current_page
    report["total_pages"] = session.total_pages
    report["scale"] = session.config.scale
    canvas_width, canvas_height = session.canvas_size
    report["canvas"] = {"width": canvas_width, "height": canvas_height}
    report["index"] = [
        {
            "ref": entry.ref,
            "kind": entry.kind,
            "bbox": entry.bbox.to_dict(),
            "screen": session.mapper.to_screen(entry.bbox).to_dict(),
        }
        for entry in session.index
    ]

    if args.point:
        x, y = args.point
        session.pointer_moved(x, y)
        document_point = session.mapper.to_document(Point(x, y))
        report["hit"] = {
            "canvas": [x, y],
            "document": [document_point.x, document_point.y],
            "ref": session.highlight_state.highlighted_ref,
        }
        session.pointer_left()

    if args.select:
        report["selections"] = _select_report(session, parse_ref_list(args.select))

    if args.outline:
        report["outline"] = [item.to_dict() for item in session.outline()]

    if args.table:
        report["table"] = _table_report(session, args.table, logger)

    return report


def _render_report(outcome: Any, session: ViewerSession) -> dict[str, Any]:
    result: dict[str, Any] = {"page": outcome.page_no, "status": outcome.status}
    if outcome.page is not None:
        width, height = outcome.page.size
        result["width"] = width
        result["height"] = height
    if outcome.error is not None:
        result["error"] = str(outcome.error)
    elif outcome.page_no in session.page_errors:
        result["error"] = str(session.page_errors[outcome.page_no])
    return result


def _select_report(session: ViewerSession, refs: list[str]) -> list[dict[str, Any]]:
    scrolls = []
    session.add_scroll_listener(scrolls.append)

    selections = []
    for ref in refs:
        scrolls.clear()
        session.node_clicked(ref)
        state = session.highlight_state
        selection: dict[str, Any] = {"ref": ref, "state": state.state, "highlighted": state.highlighted_ref}
        if scrolls:
            selection["scroll_offset"] = scrolls[-1].offset_for(session.config.viewport_height)
        selections.append(selection)
    return selections


def _table_report(session: ViewerSession, ref: str, logger: logging.Logger) -> dict[str, Any] | None:
    from docsync.types import TableNode  # noqa: PLC0415

    node = session.document.resolve(ref) if session.document else None
    if not isinstance(node, TableNode):
        logger.warning("Not a table node: %s", ref)
        return None

    grid = node.dense_grid()
    return {
        "ref": ref,
        "num_rows": node.data.num_rows,
        "num_cols": node.data.num_cols,
        "grid": [[_slot_to_dict(slot) for slot in row] for row in grid],
    }


def _slot_to_dict(slot: GridSlot) -> dict[str, Any]:
    from docsync.table import CoveredSlot  # noqa: PLC0415

    if isinstance(slot, CoveredSlot):
        return {"covered_by": [slot.anchor_row, slot.anchor_col]}
    return {
        "text": slot.text,
        "row_span": slot.row_span,
        "col_span": slot.col_span,
        "header": slot.column_header or slot.row_header,
    }


if __name__ == "__main__":
    sys.exit(main())
