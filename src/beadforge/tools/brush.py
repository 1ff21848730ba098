"""Single-cell paint tool."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.models import BeadCell
from beadforge.tools.base import Tool, ToolContext


class Brush(Tool):
    """Paint one cell with the context color (black when none is set)."""

    tool_id = "brush"
    name = "Brush"

    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        return [grid.paint(x, y, ctx.color_or_black)]
