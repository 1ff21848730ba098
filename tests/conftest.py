"""Shared fixtures for beadforge tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from beadforge.models import BeadColor
from beadforge.palette import Palette

# ---------------------------------------------------------------------------
# Palette fixtures
# ---------------------------------------------------------------------------

WHITE = BeadColor(name="WHITE", hex="#FFFFFF", r=255, g=255, b=255, brand="test")
BLACK = BeadColor(name="BLACK", hex="#000000", r=0, g=0, b=0, brand="test")
RED = BeadColor(name="RED", hex="#FF0000", r=255, g=0, b=0, brand="test")
GREEN = BeadColor(name="GREEN", hex="#00FF00", r=0, g=255, b=0, brand="test")
BLUE = BeadColor(name="BLUE", hex="#0000FF", r=0, g=0, b=255, brand="test")


@pytest.fixture()
def test_colors() -> list[BeadColor]:
    """Five primary colors: WHITE, BLACK, RED, GREEN, BLUE (in that order)."""
    return [WHITE, BLACK, RED, GREEN, BLUE]


@pytest.fixture()
def test_palette(test_colors: list[BeadColor]) -> Palette:
    """A custom palette built from :func:`test_colors`."""
    return Palette(test_colors)


# ---------------------------------------------------------------------------
# Pixel / image fixtures
# ---------------------------------------------------------------------------


def solid_rgba(width: int, height: int, rgba: tuple[int, int, int, int]) -> bytes:
    """Interleaved RGBA buffer of one repeated pixel."""
    return bytes(rgba) * (width * height)


@pytest.fixture()
def red_2x2() -> bytes:
    """A 2×2 fully opaque red RGBA buffer."""
    return solid_rgba(2, 2, (255, 0, 0, 255))


@pytest.fixture()
def png_bytes() -> bytes:
    """A 4×2 PNG: left half red, right half blue."""
    img = Image.new("RGBA", (4, 2), (255, 0, 0, 255))
    for y in range(2):
        for x in range(2, 4):
            img.putpixel((x, y), (0, 0, 255, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def png_file(tmp_path: Path, png_bytes: bytes) -> Path:
    """The :func:`png_bytes` image written to a temporary file."""
    path = tmp_path / "source.png"
    path.write_bytes(png_bytes)
    return path
