"""Tests for beadforge.renderer — block preview rendering."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from beadforge.renderer import preview_to_bytes, render_preview, save_preview


def _cells() -> list[dict]:
    return [
        {"x": 0, "y": 0, "rgb": (255, 0, 0)},
        {"x": 1, "y": 1, "rgb": (0, 0, 255)},
    ]


class TestRenderPreview:
    """Solid blocks on a white background."""

    def test_size_and_colors(self) -> None:
        img = render_preview(_cells(), 2, 2, cell_size=5)
        assert img.mode == "RGB"
        assert img.size == (10, 10)
        assert img.getpixel((0, 0)) == (255, 0, 0)
        assert img.getpixel((4, 4)) == (255, 0, 0)
        assert img.getpixel((5, 5)) == (0, 0, 255)
        assert img.getpixel((9, 0)) == (255, 255, 255)

    def test_custom_background(self) -> None:
        img = render_preview([], 1, 1, cell_size=2, background=(1, 2, 3))
        assert img.getpixel((1, 1)) == (1, 2, 3)

    @pytest.mark.parametrize(("width", "height", "cell"), [(0, 1, 1), (1, 1, 0)])
    def test_invalid_sizes(self, width: int, height: int, cell: int) -> None:
        with pytest.raises(ValueError):
            render_preview([], width, height, cell_size=cell)


class TestEncoding:
    """preview_to_bytes / save_preview."""

    @pytest.mark.parametrize(
        ("fmt", "pil_format"),
        [("png", "PNG"), ("jpg", "JPEG"), ("JPEG", "JPEG"), ("webp", "WEBP")],
    )
    def test_formats(self, fmt: str, pil_format: str) -> None:
        data = preview_to_bytes(render_preview(_cells(), 2, 2), fmt)
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == pil_format

    def test_unsupported_format(self) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            preview_to_bytes(render_preview(_cells(), 2, 2), "gif")

    def test_save_uses_suffix(self, tmp_path: Path) -> None:
        path = save_preview(render_preview(_cells(), 2, 2), tmp_path / "nested" / "p.jpg")
        with Image.open(path) as img:
            assert img.format == "JPEG"

    def test_save_explicit_format(self, tmp_path: Path) -> None:
        path = save_preview(render_preview(_cells(), 2, 2), tmp_path / "p.bin", fmt="png")
        with Image.open(path) as img:
            assert img.format == "PNG"
