"""Eyedropper tool."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.models import BeadCell, BeadColor
from beadforge.tools.base import Tool, ToolContext


class ColorPicker(Tool):
    """Remember the color under the pointer in :attr:`picked`.

    Picking an empty cell leaves the previous pick untouched.
    """

    tool_id = "color_picker"
    name = "Color Picker"

    def __init__(self) -> None:
        self.picked: BeadColor | None = None

    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        cell = grid.get(x, y)
        if cell is not None:
            self.picked = cell.color
        return []
