"""Rectangular selection tool."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.models import BeadCell
from beadforge.tools.base import Tool, ToolContext


class RectSelect(Tool):
    """Select the cells in the rectangle spanned by a drag.

    :meth:`on_pointer_down` stores the drag start; :meth:`apply` with the
    end point returns the present cells inside the inclusive rectangle in
    row-major order.  The grid is never modified.  Without a stored start
    the selection is the single cell at ``(x, y)``.
    """

    tool_id = "rect_select"
    name = "Rectangle Select"

    def __init__(self) -> None:
        self.start: tuple[int, int] | None = None

    def on_pointer_down(self, ctx: ToolContext, x: int, y: int) -> None:
        self.start = (x, y)

    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        sx, sy = self.start if self.start is not None else (x, y)
        x0, x1 = sorted((sx, x))
        y0, y1 = sorted((sy, y))
        x0, y0 = max(x0, 0), max(y0, 0)
        x1, y1 = min(x1, grid.width - 1), min(y1, grid.height - 1)
        selected: list[BeadCell] = []
        for row in range(y0, y1 + 1):
            for col in range(x0, x1 + 1):
                cell = grid.get(col, row)
                if cell is not None:
                    selected.append(cell)
        return selected
