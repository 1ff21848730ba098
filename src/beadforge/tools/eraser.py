"""Single-cell erase tool."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.models import BeadCell
from beadforge.tools.base import Tool, ToolContext


class Eraser(Tool):
    """Remove the cell at ``(x, y)``; erasing an empty cell does nothing."""

    tool_id = "eraser"
    name = "Eraser"

    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        removed = grid.remove(x, y)
        return [removed] if removed is not None else []
