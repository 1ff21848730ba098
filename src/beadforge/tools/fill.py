"""Flood fill tool."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.models import BeadCell
from beadforge.tools.base import Tool, ToolContext

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Fill(Tool):
    """Recolor the 4-connected region sharing the clicked cell's RGB.

    The flood is iterative (explicit stack plus visited set) and stays
    within grid bounds.  Empty cells are region boundaries.
    """

    tool_id = "fill"
    name = "Fill"

    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        start = grid.get(x, y)
        if start is None:
            return []
        target = start.color.rgb
        new_color = ctx.color_or_black
        if target == new_color.rgb:
            return []

        changed: list[BeadCell] = []
        visited: set[tuple[int, int]] = set()
        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            if (cx, cy) in visited or not grid.in_bounds(cx, cy):
                continue
            visited.add((cx, cy))
            cell = grid.get(cx, cy)
            if cell is None or cell.color.rgb != target:
                continue
            changed.append(grid.set(cell.with_color(new_color)))
            stack.extend((cx + dx, cy + dy) for dx, dy in _NEIGHBOURS)
        return changed
