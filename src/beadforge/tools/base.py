"""Tool interface shared by all grid editing tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from beadforge.grid import Grid
from beadforge.models import BeadCell, BeadColor, GridDimensions

BLACK = BeadColor(name="BLACK", hex="#000000", r=0, g=0, b=0)


@dataclass(frozen=True)
class ToolContext:
    """What a tool needs besides the grid: its size and the active color."""

    dimensions: GridDimensions
    color: BeadColor | None = None

    @property
    def color_or_black(self) -> BeadColor:
        return self.color if self.color is not None else BLACK


class Tool(ABC):
    """A grid editing tool.

    Subclasses set ``tool_id`` (registry key) and ``name`` (display label)
    and implement :meth:`apply`.  Pointer hooks default to no-ops.
    """

    tool_id: str = ""
    name: str = ""

    @abstractmethod
    def apply(self, ctx: ToolContext, grid: Grid, x: int, y: int) -> list[BeadCell]:
        """Act on ``(x, y)``; returns the affected cells."""

    def on_pointer_down(self, ctx: ToolContext, x: int, y: int) -> None:
        pass

    def on_pointer_move(self, ctx: ToolContext, x: int, y: int) -> None:
        pass

    def on_pointer_up(self, ctx: ToolContext, x: int, y: int) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tool_id={self.tool_id!r})"
