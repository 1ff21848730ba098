"""Block preview rendering: one solid square per bead cell."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Iterable, Mapping

from PIL import Image

_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
}


def render_preview(
    cells: Iterable[Mapping[str, Any]],
    width: int,
    height: int,
    cell_size: int = 10,
    background: tuple[int, int, int] = (255, 255, 255),
) -> Image.Image:
    """Draw ``{x, y, rgb}`` cells as solid blocks on a background.

    Args:
        cells: Cell records with ``x``, ``y`` and an ``rgb`` triple.
        width: Grid width in cells.
        height: Grid height in cells.
        cell_size: Edge length of each block in pixels.
        background: Fill for empty cells.

    Returns:
        An RGB image of ``(width * cell_size, height * cell_size)``.

    Raises:
        ValueError: On non-positive sizes.
    """
    if width <= 0 or height <= 0 or cell_size <= 0:
        raise ValueError(
            f"Preview size must be positive, got {width}×{height} cells of {cell_size}px"
        )
    img = Image.new("RGB", (width * cell_size, height * cell_size), background)
    for cell in cells:
        left = cell["x"] * cell_size
        top = cell["y"] * cell_size
        img.paste(tuple(cell["rgb"]), (left, top, left + cell_size, top + cell_size))
    return img


def _resolve_format(fmt: str) -> str:
    key = fmt.lower().lstrip(".")
    if key not in _FORMATS:
        raise ValueError(f"Unsupported preview format: {fmt!r}")
    return _FORMATS[key]


def preview_to_bytes(image: Image.Image, fmt: str = "png") -> bytes:
    """Encode a preview image (png, jpg/jpeg or webp)."""
    pil_format = _resolve_format(fmt)
    buf = io.BytesIO()
    if pil_format == "PNG":
        image.save(buf, format=pil_format)
    else:
        image.save(buf, format=pil_format, quality=90)
    return buf.getvalue()


def save_preview(image: Image.Image, path: str | Path, fmt: str | None = None) -> Path:
    """Write a preview image; the format defaults to the file suffix."""
    target = Path(path)
    data = preview_to_bytes(image, fmt or target.suffix or "png")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return target
