"""Tool registry, selection, and per-application undo history."""

from __future__ import annotations

from beadforge.grid import Grid
from beadforge.history import DEFAULT_HISTORY_LIMIT, HistoryEntry, HistoryManager
from beadforge.logging import get_logger
from beadforge.models import BeadCell, BeadColor, GridDimensions
from beadforge.tools.base import Tool, ToolContext
from beadforge.tools.brush import Brush
from beadforge.tools.color_picker import ColorPicker
from beadforge.tools.eraser import Eraser
from beadforge.tools.fill import Fill
from beadforge.tools.rect_select import RectSelect

logger = get_logger("tools")


class ToolManager:
    """Dispatch pointer actions to the selected tool and record grid history.

    Each :meth:`apply` with an active tool records one entry holding copies
    of the grid before and after, labelled with the tool id.

    Args:
        dimensions: Size of the grids the tools operate on.
        history_limit: Maximum number of undo steps (``None`` for unbounded).
    """

    def __init__(
        self,
        dimensions: GridDimensions,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._dimensions = dimensions
        self._tools: dict[str, Tool] = {}
        self._active: Tool | None = None
        self._history: HistoryManager[Grid] = HistoryManager(history_limit)

    @property
    def dimensions(self) -> GridDimensions:
        return self._dimensions

    def register(self, tool: Tool) -> None:
        """Add *tool*; a tool with the same id is replaced."""
        self._tools[tool.tool_id] = tool

    def select(self, tool_id: str) -> Tool | None:
        """Activate the tool registered under *tool_id*.

        An unknown id deselects and returns None.
        """
        self._active = self._tools.get(tool_id)
        logger.debug("Selected tool: %s", tool_id if self._active else None)
        return self._active

    @property
    def active(self) -> Tool | None:
        return self._active

    @property
    def tools(self) -> dict[str, Tool]:
        return dict(self._tools)

    def _context(self, color: BeadColor | None = None) -> ToolContext:
        return ToolContext(dimensions=self._dimensions, color=color)

    def apply(
        self, grid: Grid, x: int, y: int, color: BeadColor | None = None
    ) -> list[BeadCell]:
        """Run the active tool on *grid* at ``(x, y)``.

        Returns:
            The cells the tool reported; ``[]`` (and no history entry) when
            no tool is active.
        """
        if self._active is None:
            return []
        before = grid.copy()
        changed = self._active.apply(self._context(color), grid, x, y)
        self._history.record(before, grid.copy(), changed, self._active.tool_id)
        logger.debug(
            "%s at (%d, %d): %d cell(s)",
            self._active.tool_id,
            x,
            y,
            len(changed),
            extra={"tool": self._active.tool_id, "cells": len(changed)},
        )
        return changed

    def pointer_down(self, x: int, y: int, color: BeadColor | None = None) -> None:
        if self._active is not None:
            self._active.on_pointer_down(self._context(color), x, y)

    def pointer_move(self, x: int, y: int, color: BeadColor | None = None) -> None:
        if self._active is not None:
            self._active.on_pointer_move(self._context(color), x, y)

    def pointer_up(self, x: int, y: int, color: BeadColor | None = None) -> None:
        if self._active is not None:
            self._active.on_pointer_up(self._context(color), x, y)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history(self) -> list[HistoryEntry[Grid]]:
        return self._history.entries

    def undo(self, grid: Grid) -> list[BeadCell]:
        """Restore *grid* in place to its state before the last application.

        Raises:
            NoHistoryError: If there is nothing to undo.
        """
        entry = self._history.undo()
        grid.replace_contents(entry.before)
        return grid.cells()

    def redo(self, grid: Grid) -> list[BeadCell]:
        """Re-apply the last undone application to *grid* in place.

        Raises:
            NoHistoryError: If there is nothing to redo.
        """
        entry = self._history.redo()
        grid.replace_contents(entry.after)
        return grid.cells()

    def clear_history(self) -> None:
        self._history.clear()


def default_tool_manager(
    dimensions: GridDimensions, history_limit: int | None = DEFAULT_HISTORY_LIMIT
) -> ToolManager:
    """A manager with all built-in tools registered and none selected."""
    manager = ToolManager(dimensions, history_limit)
    for tool in (Brush(), Eraser(), Fill(), ColorPicker(), RectSelect()):
        manager.register(tool)
    return manager
