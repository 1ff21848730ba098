"""Pattern, CSV, and JSON exports of a conversion result."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from beadforge.grid import ConversionResult
from beadforge.models import BeadColor
from beadforge.palette import Palette

CSV_HEADER: tuple[str, ...] = ("Color Name", "Hex", "RGB", "Brand", "Count", "Percentage")


@dataclass(frozen=True)
class ColorUsage:
    """Bead count for one color."""

    color: BeadColor
    count: int
    percentage: float


@dataclass(frozen=True)
class BeadUsageEstimate:
    """Total beads and a per-color breakdown, most used first."""

    total_beads: int
    breakdown: list[ColorUsage]


def _legend(result: ConversionResult) -> dict[str, BeadColor]:
    legend: dict[str, BeadColor] = {}
    for cell in result.grid:
        legend[cell.color.name] = cell.color
    return legend


def preview_cells(result: ConversionResult) -> list[dict[str, Any]]:
    """Abstract ``{x, y, rgb}`` records for a preview encoder."""
    return [{"x": c.x, "y": c.y, "rgb": c.color.rgb} for c in result.grid]


def export_pattern(result: ConversionResult) -> dict[str, Any]:
    """Color-name matrix, legend, and aggregate statistics.

    Empty cells appear as ``""`` in the pattern.
    """
    pattern = [
        [cell.color.name if cell is not None else "" for cell in row]
        for row in result.grid.rows()
    ]
    return {
        "pattern": pattern,
        "legend": {name: color.to_dict() for name, color in _legend(result).items()},
        "statistics": {
            "total_beads": result.total_beads,
            "unique_colors": len(result.color_stats),
            "color_usage": dict(result.color_stats),
        },
    }


def export_stats_csv(result: ConversionResult) -> str:
    """One row per used color: name, hex, RGB, brand, count, percentage."""
    legend = _legend(result)
    total = sum(result.color_stats.values())
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for name, count in result.color_stats.items():
        color = legend[name]
        writer.writerow(
            [
                name,
                color.hex,
                f"{color.r},{color.g},{color.b}",
                color.brand,
                count,
                f"{count / total * 100:.2f}%",
            ]
        )
    return buf.getvalue()


def export_json(
    result: ConversionResult,
    config: dict[str, Any] | None = None,
    palette: Palette | None = None,
) -> str:
    """Full JSON document: metadata, the result snapshot, and its pattern."""
    metadata: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "config": config or {},
    }
    if palette is not None:
        metadata["palette"] = palette.to_dict()
    payload = {
        "metadata": metadata,
        "result": {**result.to_dict(), "pattern": export_pattern(result)},
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def estimate_bead_usage(result: ConversionResult) -> BeadUsageEstimate:
    """Per-color bead counts sorted by count, descending."""
    legend = _legend(result)
    total = sum(result.color_stats.values())
    breakdown = [
        ColorUsage(
            color=legend[name],
            count=count,
            percentage=count / total * 100 if total else 0.0,
        )
        for name, count in result.color_stats.items()
    ]
    breakdown.sort(key=lambda usage: usage.count, reverse=True)
    return BeadUsageEstimate(total_beads=total, breakdown=breakdown)
