"""Dense grid reconstruction for tables with row/column spans.

A sparse table lists each cell once, at the first ``(row, col)`` it occupies.
The dense grid has exactly ``num_rows x num_cols`` slots: every slot holds
either the anchor cell that starts there or a ``CoveredSlot`` pointing back at
the anchor whose span covers it, so a renderer emits each cell exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from ..types.nodes import TableCell

logger = logging.getLogger(__name__)

__all__ = ["CoveredSlot", "GridSlot", "SpanGridReconstructor"]


@dataclass(frozen=True)
class CoveredSlot:
    """Placeholder for a slot covered by an earlier cell's span."""

    anchor_row: int
    anchor_col: int


GridSlot = TableCell | CoveredSlot


class SpanGridReconstructor:
    """Expand a sparse span-carrying cell list into a dense grid.

    Rows are processed top to bottom and columns left to right. A per-column
    counter tracks how many more rows a vertical span still covers; within a
    row, ``current_col`` tracks how far the last anchor's horizontal span
    reaches. Spans that would run past the grid edge, or into a column still
    covered from above, are clamped. Positions with no cell become empty
    anchor cells.

    The reconstruction is a pure function of its input.

    Example:
        >>> cells = [
        ...     TableCell(row=0, col=0, row_span=2, text="A"),
        ...     TableCell(row=0, col=1, text="B"),
        ...     TableCell(row=1, col=1, text="C"),
        ... ]
        >>> grid = SpanGridReconstructor().reconstruct(2, 2, cells)
        >>> grid[1][0]
        CoveredSlot(anchor_row=0, anchor_col=0)
    """

    def reconstruct(self, num_rows: int, num_cols: int, cells: Iterable[TableCell]) -> list[list[GridSlot]]:
        """Build the dense grid.

        Args:
            num_rows: Number of grid rows
            num_cols: Number of grid columns
            cells: Sparse cells, each anchored at its first (row, col)

        Returns:
            ``num_rows`` lists of ``num_cols`` slots each
        """
        num_rows = max(0, num_rows)
        num_cols = max(0, num_cols)
        anchors = self._index_anchors(num_rows, num_cols, cells)

        remaining_span = [0] * num_cols
        covering_anchor: list[tuple[int, int]] = [(0, 0)] * num_cols

        grid: list[list[GridSlot]] = []
        for row in range(num_rows):
            slots: list[GridSlot] = []
            current_col = 0
            row_anchor = (row, 0)

            for col in range(num_cols):
                # Horizontal coverage first: an anchor's own row span counters start on the next row
                if col < current_col:
                    slots.append(CoveredSlot(*row_anchor))
                    if (row, col) in anchors:
                        logger.debug("Cell at (%d, %d) is spanned away horizontally; skipped", row, col)
                    continue

                if remaining_span[col] > 0:
                    remaining_span[col] -= 1
                    slots.append(CoveredSlot(*covering_anchor[col]))
                    if (row, col) in anchors:
                        logger.debug("Cell at (%d, %d) overlaps a row span; skipped", row, col)
                    continue

                cell = anchors.get((row, col)) or TableCell(row=row, col=col)
                cell = self._clamp(cell, num_rows, remaining_span)
                slots.append(cell)

                current_col = col + cell.col_span
                row_anchor = (row, col)
                if cell.row_span > 1:
                    for spanned in range(col, col + cell.col_span):
                        remaining_span[spanned] = cell.row_span - 1
                        covering_anchor[spanned] = row_anchor

            grid.append(slots)

        return grid

    @staticmethod
    def _index_anchors(
        num_rows: int, num_cols: int, cells: Iterable[TableCell]
    ) -> dict[tuple[int, int], TableCell]:
        anchors: dict[tuple[int, int], TableCell] = {}
        for cell in cells:
            key = (cell.row, cell.col)
            if not (0 <= cell.row < num_rows and 0 <= cell.col < num_cols):
                logger.debug("Cell anchored outside the %dx%d grid at %s; skipped", num_rows, num_cols, key)
                continue
            # Dense docling grids repeat a spanning cell in every slot it covers
            anchors.setdefault(key, cell)
        return anchors

    @staticmethod
    def _clamp(cell: TableCell, num_rows: int, remaining_span: list[int]) -> TableCell:
        row_span = min(max(1, cell.row_span), num_rows - cell.row)

        col_span = 1
        limit = min(max(1, cell.col_span), len(remaining_span) - cell.col)
        while col_span < limit and remaining_span[cell.col + col_span] == 0:
            col_span += 1

        if row_span == cell.row_span and col_span == cell.col_span:
            return cell

        logger.debug(
            "Clamped span of cell (%d, %d) from %dx%d to %dx%d",
            cell.row,
            cell.col,
            cell.row_span,
            cell.col_span,
            row_span,
            col_span,
        )
        return replace(cell, row_span=row_span, col_span=col_span)
