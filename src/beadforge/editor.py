"""Grid editing controller with undo/redo and batch transactions.

:class:`GridEditor` owns one :class:`ConversionResult` at a time.  Every
mutation works on a copy of the grid, recomputes the color statistics from
the full cell set, and (outside a batch) records a before/after snapshot
pair in a bounded :class:`HistoryManager`.

Access is not synchronized; callers must serialize operations on a given
editor.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Sequence

from PIL import Image

from beadforge.converter import ImageConverter, PixelBuffer
from beadforge.errors import (
    BatchAlreadyActiveError,
    ConversionError,
    InvalidImageError,
    NoActiveBatchError,
    NoActiveResultError,
)
from beadforge.export import (
    BeadUsageEstimate,
    estimate_bead_usage,
    export_json,
    export_pattern,
    export_stats_csv,
    preview_cells,
)
from beadforge.grid import ConversionResult, Grid
from beadforge.history import DEFAULT_HISTORY_LIMIT, HistoryManager
from beadforge.image_io import image_to_rgba_bytes, load_image, resize_image
from beadforge.logging import get_logger
from beadforge.models import BeadCell, BeadColor, ConversionOptions, ConverterConfig, PaletteKind
from beadforge.palette import Palette, create_palette
from beadforge.renderer import render_preview, save_preview

logger = get_logger("editor")

CellPredicate = Callable[[BeadCell], bool]
CellUpdater = Callable[[BeadCell], BeadCell]


def _config_palette_value(palette: Palette) -> str | list[BeadColor]:
    if palette.kind is PaletteKind.CUSTOM:
        return palette.colors
    return palette.kind.value


def _stage_failed(stage: str, message: str) -> ConversionError:
    logger.warning("%s", message, extra={"stage": stage})
    return ConversionError(message, stage=stage)


class GridEditor:
    """Convert images to bead grids and edit the current grid.

    Args:
        palette: Preset id, color list, or :class:`Palette` (cloned).
            Defaults to ``config.palette``.
        config: Base settings; defaults to :class:`ConverterConfig` defaults.
        history_limit: Maximum undo depth, 100 by default (``None`` for
            unbounded).
        **settings: Individual :class:`ConverterConfig` fields such as
            ``width`` or ``background_color``, overriding *config*.

    Raises:
        UnknownPaletteError: If the configured preset does not exist.
        pydantic.ValidationError: If the settings are invalid.
    """

    def __init__(
        self,
        palette: str | PaletteKind | list[BeadColor] | Palette | None = None,
        *,
        config: ConverterConfig | None = None,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
        **settings: Any,
    ) -> None:
        explicit: Palette | None = None
        if isinstance(palette, Palette):
            explicit = palette.clone()
            settings["palette"] = _config_palette_value(explicit)
        elif isinstance(palette, PaletteKind):
            settings["palette"] = palette.value
        elif palette is not None:
            settings["palette"] = palette
        self._config = self._merge_config(config or ConverterConfig(), settings)
        self._palette = explicit or create_palette(self._config.palette)
        self._result: ConversionResult | None = None
        self._history: HistoryManager[ConversionResult] = HistoryManager(history_limit)
        self._batch_original: ConversionResult | None = None

    @staticmethod
    def _merge_config(base: ConverterConfig, settings: dict[str, Any]) -> ConverterConfig:
        data = base.model_dump()
        data.update(settings)
        return ConverterConfig(**data)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> ConverterConfig:
        return self._config

    @property
    def palette(self) -> Palette:
        """The conversion palette (a copy; edit via :meth:`update_config`)."""
        return self._palette.clone()

    def update_config(self, **changes: Any) -> ConverterConfig:
        """Change settings; a new ``palette`` value rebuilds the palette."""
        new_palette: Palette | None = None
        if isinstance(changes.get("palette"), Palette):
            new_palette = changes["palette"].clone()
            changes["palette"] = _config_palette_value(new_palette)
        self._config = self._merge_config(self._config, changes)
        if "palette" in changes:
            self._palette = new_palette or create_palette(self._config.palette)
            logger.debug("Palette changed to %r", self._palette)
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _converter(self) -> ImageConverter:
        return ImageConverter(self._palette, use_lab=self._config.use_lab)

    def convert_image_data(
        self,
        data: PixelBuffer,
        width: int,
        height: int,
        options: ConversionOptions | None = None,
        *,
        background_color: tuple[int, int, int] | None = None,
    ) -> ConversionResult:
        """Convert a raw RGBA buffer and load the result.

        Args:
            data: Interleaved RGBA values, ``width * height * 4`` long.
            width: Image width.
            height: Image height.
            options: Explicit options; defaults come from the config.
            background_color: Overrides the background of *options*/config.

        Raises:
            InvalidImageError: On a malformed buffer.
            ConversionError: If matching fails.
        """
        options = options or self._config.conversion_options()
        if background_color is not None:
            options = options.model_copy(update={"background_color": background_color})
        result = self._converter().convert_to_result(data, width, height, options)
        self.load_result(result)
        logger.info(
            "Converted %d×%d image: %d colors used",
            width,
            height,
            len(result.color_stats),
        )
        return self.result_or_raise()

    def convert_image(
        self,
        source: str | Path | bytes | Image.Image,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Decode, resize to the configured grid size, convert, and load.

        Raises:
            ConversionError: If any stage fails; ``stage`` names it and the
                original exception is chained.
        """
        try:
            image = source if isinstance(source, Image.Image) else load_image(source)
        except (OSError, InvalidImageError) as exc:
            raise _stage_failed("decode", f"Failed to load image: {exc}") from exc

        try:
            resized = resize_image(
                image,
                self._config.width,
                self._config.height,
                self._config.maintain_aspect_ratio,
            )
            raw, width, height = image_to_rgba_bytes(resized)
        except (OSError, ValueError, InvalidImageError) as exc:
            raise _stage_failed("resize", f"Failed to resize image: {exc}") from exc

        try:
            return self.convert_image_data(raw, width, height, options)
        except ConversionError:
            raise
        except InvalidImageError as exc:
            raise _stage_failed("convert", f"Failed to convert pixels: {exc}") from exc

    # ------------------------------------------------------------------
    # Result access
    # ------------------------------------------------------------------

    def load_result(self, result: ConversionResult) -> None:
        """Take a copy of *result* as the current state and reset history."""
        self._result = result.copy()
        self._history.clear()
        self._batch_original = None

    @property
    def has_result(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> ConversionResult | None:
        """An independent copy of the current result, or None."""
        return self._result.copy() if self._result is not None else None

    def result_or_raise(self) -> ConversionResult:
        return self._require_result().copy()

    def _require_result(self) -> ConversionResult:
        if self._result is None:
            raise NoActiveResultError("No conversion result is loaded")
        return self._result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def history(self) -> HistoryManager[ConversionResult]:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def _ensure_no_batch(self, action: str) -> None:
        if self._batch_original is not None:
            raise BatchAlreadyActiveError(f"Cannot {action} while a batch is active")

    def undo(self) -> ConversionResult:
        """Restore the state before the latest recorded mutation.

        Raises:
            NoHistoryError: If there is nothing to undo.
            BatchAlreadyActiveError: If a batch is in progress.
        """
        self._ensure_no_batch("undo")
        entry = self._history.undo()
        self._result = entry.before.copy()
        logger.debug("Undo %s", entry.label or "edit", extra={"edit": entry.label})
        return self.result_or_raise()

    def redo(self) -> ConversionResult:
        """Re-apply the most recently undone mutation.

        Raises:
            NoHistoryError: If there is nothing to redo.
            BatchAlreadyActiveError: If a batch is in progress.
        """
        self._ensure_no_batch("redo")
        entry = self._history.redo()
        self._result = entry.after.copy()
        logger.debug("Redo %s", entry.label or "edit", extra={"edit": entry.label})
        return self.result_or_raise()

    # ------------------------------------------------------------------
    # Batch transactions
    # ------------------------------------------------------------------

    @property
    def in_batch(self) -> bool:
        return self._batch_original is not None

    def start_batch(self) -> None:
        """Begin grouping mutations into a single history entry.

        Raises:
            BatchAlreadyActiveError: If a batch is already active.
            NoActiveResultError: If no result is loaded.
        """
        self._ensure_no_batch("start a batch")
        self._batch_original = self._require_result().copy()
        logger.debug("Batch started")

    def commit_batch(self) -> ConversionResult:
        """Record the whole batch as one history entry and clear redo.

        Raises:
            NoActiveBatchError: If no batch is active.
        """
        if self._batch_original is None:
            raise NoActiveBatchError("No batch is active")
        original, self._batch_original = self._batch_original, None
        self._history.record(original, self._require_result().copy(), label="batch")
        logger.debug("Batch committed")
        return self.result_or_raise()

    def cancel_batch(self) -> ConversionResult:
        """Discard every mutation since :meth:`start_batch`; records nothing.

        Raises:
            NoActiveBatchError: If no batch is active.
        """
        if self._batch_original is None:
            raise NoActiveBatchError("No batch is active")
        self._result, self._batch_original = self._batch_original, None
        logger.debug("Batch cancelled")
        return self.result_or_raise()

    def run_batch(self, mutator: Callable[["GridEditor"], Any]) -> ConversionResult:
        """Run *mutator* as one all-or-nothing batch.

        Any exception cancels the batch before it propagates.
        """
        with self.batch():
            mutator(self)
        return self.result_or_raise()

    @contextmanager
    def batch(self) -> Iterator["GridEditor"]:
        """Context manager form of :meth:`run_batch`."""
        self.start_batch()
        try:
            yield self
        except BaseException:
            if self.in_batch:
                self.cancel_batch()
            raise
        if self.in_batch:
            self.commit_batch()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _mutate(self, label: str, mutate: Callable[[Grid], list[BeadCell]]) -> ConversionResult:
        current = self._require_result()
        grid = current.grid.copy()
        changed = mutate(grid)
        self._result = ConversionResult.from_grid(grid)
        if self._batch_original is None:
            self._history.record(current.copy(), self._result.copy(), changed, label)
        logger.debug(
            "%s: %d cell(s) changed",
            label,
            len(changed),
            extra={"edit": label, "cells": len(changed)},
        )
        return self.result_or_raise()

    def set_cell(self, x: int, y: int, color: BeadColor) -> ConversionResult:
        """Paint ``(x, y)`` with *color*, creating the cell if it was empty.

        Raises:
            ValueError: If ``(x, y)`` is outside the grid.
        """
        return self._mutate("set_cell", lambda grid: [grid.paint(x, y, color)])

    def set_cells_where(
        self, predicate: CellPredicate, updater: CellUpdater
    ) -> ConversionResult:
        """Replace every cell matching *predicate* with ``updater(cell)``."""

        def mutate(grid: Grid) -> list[BeadCell]:
            matched = [cell for cell in grid if predicate(cell)]
            updated = [updater(cell) for cell in matched]
            for cell in matched:
                grid.remove(cell.x, cell.y)
            return [grid.set(cell) for cell in updated]

        return self._mutate("set_cells_where", mutate)

    def replace_color_everywhere(
        self, target_name: str, new_color: BeadColor
    ) -> ConversionResult:
        """Recolor all cells currently named *target_name*."""
        return self.set_cells_where(
            lambda cell: cell.color.name == target_name,
            lambda cell: cell.with_color(new_color),
        )

    def remove_cells_where(self, predicate: CellPredicate) -> ConversionResult:
        """Erase every cell matching *predicate*."""

        def mutate(grid: Grid) -> list[BeadCell]:
            matched = [cell for cell in grid if predicate(cell)]
            for cell in matched:
                grid.remove(cell.x, cell.y)
            return matched

        return self._mutate("remove_cells_where", mutate)

    def delete_cell(self, x: int, y: int) -> ConversionResult:
        return self.remove_cells_where(lambda cell: cell.x == x and cell.y == y)

    def upsert_cells(self, cells: Iterable[BeadCell]) -> ConversionResult:
        """Add or overwrite cells by ``(x, y)``; later entries win."""
        incoming: Sequence[BeadCell] = list(cells)
        return self._mutate("upsert_cells", lambda grid: [grid.set(c) for c in incoming])

    def upsert_cell(self, cell: BeadCell) -> ConversionResult:
        return self.upsert_cells([cell])

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_pattern(self) -> dict[str, Any]:
        return export_pattern(self._require_result())

    def export_csv(self) -> str:
        return export_stats_csv(self._require_result())

    def export_json(self) -> str:
        return export_json(
            self._require_result(),
            config=self._config.model_dump(mode="json"),
            palette=self._palette,
        )

    def estimate_bead_usage(self) -> BeadUsageEstimate:
        return estimate_bead_usage(self._require_result())

    def preview_cells(self) -> list[dict[str, Any]]:
        return preview_cells(self._require_result())

    def render_preview(self, cell_size: int = 10) -> Image.Image:
        result = self._require_result()
        return render_preview(
            preview_cells(result), result.grid.width, result.grid.height, cell_size
        )

    def save_preview(
        self, path: str | Path, cell_size: int = 10, fmt: str | None = None
    ) -> Path:
        """Render the block preview and write it to *path*."""
        return save_preview(self.render_preview(cell_size), path, fmt)
