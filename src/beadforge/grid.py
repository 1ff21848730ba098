"""Sparse bead grid and the conversion result that wraps it."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from beadforge.models import BeadCell, BeadColor, GridDimensions


class Grid:
    """A width × height bounded, sparse mapping of ``(x, y)`` to :class:`BeadCell`.

    Absent coordinates are empty (erased) cells.  Cells are immutable, so
    :meth:`copy` only needs a fresh mapping to be fully independent.

    Args:
        width: Number of columns (> 0).
        height: Number of rows (> 0).
        cells: Initial cells; later cells at the same coordinate win.

    Raises:
        ValueError: On non-positive dimensions or an out-of-bounds cell.
    """

    def __init__(self, width: int, height: int, cells: Iterable[BeadCell] = ()) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}×{height}")
        self._width = width
        self._height = height
        self._cells: dict[tuple[int, int], BeadCell] = {}
        for cell in cells:
            self.set(cell)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def dimensions(self) -> GridDimensions:
        return GridDimensions(width=self._width, height=self._height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> BeadCell | None:
        return self._cells.get((x, y))

    def set(self, cell: BeadCell) -> BeadCell:
        """Place *cell*, overwriting whatever occupied its coordinate."""
        if not self.in_bounds(cell.x, cell.y):
            raise ValueError(
                f"Cell ({cell.x}, {cell.y}) is outside the "
                f"{self._width}×{self._height} grid"
            )
        self._cells[cell.key] = cell
        return cell

    def paint(self, x: int, y: int, color: BeadColor) -> BeadCell:
        """Set the color at ``(x, y)``, keeping the cell's original sample."""
        existing = self._cells.get((x, y))
        if existing is not None:
            return self.set(existing.with_color(color))
        return self.set(BeadCell(x=x, y=y, color=color))

    def remove(self, x: int, y: int) -> BeadCell | None:
        return self._cells.pop((x, y), None)

    def clear(self) -> None:
        self._cells.clear()

    def replace_contents(self, other: "Grid") -> None:
        """Make this grid hold exactly *other*'s cells (dimensions unchanged)."""
        self._cells = dict(other._cells)

    def copy(self) -> "Grid":
        clone = Grid(self._width, self._height)
        clone._cells = dict(self._cells)
        return clone

    def cells(self) -> list[BeadCell]:
        return list(self._cells.values())

    def __iter__(self) -> Iterator[BeadCell]:
        return iter(list(self._cells.values()))

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._cells == other._cells
        )

    def __repr__(self) -> str:
        return f"Grid({self._width}×{self._height}, cells={len(self._cells)})"

    def color_stats(self) -> dict[str, int]:
        """Count of present cells per color name."""
        return dict(Counter(cell.color.name for cell in self._cells.values()))

    def colors_in_use(self) -> list[BeadColor]:
        """Distinct colors of the present cells, first-seen order."""
        seen: dict[str, BeadColor] = {}
        for cell in self._cells.values():
            seen.setdefault(cell.color.name, cell.color)
        return list(seen.values())

    def rows(self) -> list[list[BeadCell | None]]:
        """Dense row-major view; ``None`` marks empty cells."""
        return [
            [self._cells.get((x, y)) for x in range(self._width)]
            for y in range(self._height)
        ]

    def to_list(self) -> list[dict[str, Any]]:
        return [cell.to_dict() for cell in self._cells.values()]


@dataclass
class ConversionResult:
    """A converted grid plus derived bookkeeping.

    ``color_stats`` always equals the color-name multiset of the grid's
    present cells; use :meth:`from_grid` or :meth:`refreshed` rather than
    patching it by hand.

    Attributes:
        grid: The bead grid.
        palette: Palette snapshot: all matchable colors right after
            conversion, the colors in use after any edit.
        color_stats: Cell count per color name.
    """

    grid: Grid
    palette: list[BeadColor] = field(default_factory=list)
    color_stats: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_grid(
        cls, grid: Grid, palette: Iterable[BeadColor] | None = None
    ) -> "ConversionResult":
        """Build a result with stats derived from *grid*.

        Args:
            grid: The grid to wrap (not copied).
            palette: Palette snapshot to record; defaults to the colors in use.
        """
        return cls(
            grid=grid,
            palette=list(palette) if palette is not None else grid.colors_in_use(),
            color_stats=grid.color_stats(),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversionResult":
        """Rebuild a result from :meth:`to_dict` output; stats are recomputed."""
        dims = data["dimensions"]
        grid = Grid(
            dims["width"],
            dims["height"],
            (BeadCell(**cell) for cell in data.get("cells", [])),
        )
        palette = [BeadColor(**c) for c in data.get("palette", [])]
        return cls.from_grid(grid, palette)

    @property
    def dimensions(self) -> GridDimensions:
        return self.grid.dimensions

    @property
    def total_beads(self) -> int:
        return len(self.grid)

    def refreshed(self) -> "ConversionResult":
        """Same grid, with stats and palette-in-use recomputed from all cells."""
        return ConversionResult.from_grid(self.grid)

    def copy(self) -> "ConversionResult":
        return ConversionResult(
            grid=self.grid.copy(),
            palette=list(self.palette),
            color_stats=dict(self.color_stats),
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain serializable snapshot for storage layers."""
        return {
            "dimensions": {"width": self.grid.width, "height": self.grid.height},
            "cells": self.grid.to_list(),
            "palette": [c.to_dict() for c in self.palette],
            "color_stats": dict(self.color_stats),
        }
