"""Image decode and resize helpers feeding the converter."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from beadforge.color_space import round_half_up
from beadforge.errors import InvalidImageError
from beadforge.logging import get_logger

logger = get_logger("image_io")


def load_image(source: str | Path | bytes) -> Image.Image:
    """Decode an image from a file path or encoded bytes into RGBA.

    Raises:
        FileNotFoundError: If a path does not exist.
        InvalidImageError: If the data cannot be decoded.
    """
    if isinstance(source, (bytes, bytearray)):
        handle: io.BytesIO | Path = io.BytesIO(source)
        label = f"<{len(source)} bytes>"
    else:
        handle = Path(source)
        label = str(handle)
        if not handle.is_file():
            raise FileNotFoundError(f"Image not found: {handle}")

    try:
        img = Image.open(handle)
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError(f"Cannot decode image: {label}") from exc

    if img.width <= 0 or img.height <= 0:
        raise InvalidImageError(f"Image has no pixels: {label}")
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img


def fit_dimensions(
    source_width: int,
    source_height: int,
    target_width: int,
    target_height: int,
    maintain_aspect_ratio: bool = True,
) -> tuple[int, int]:
    """Output size for a resize, optionally shrinking one side to keep the ratio."""
    if not maintain_aspect_ratio:
        return (target_width, target_height)
    aspect = source_width / source_height
    width, height = target_width, target_height
    if target_width / target_height > aspect:
        width = round_half_up(target_height * aspect)
    else:
        height = round_half_up(target_width / aspect)
    return (max(1, width), max(1, height))


def resize_image(
    image: Image.Image,
    target_width: int,
    target_height: int,
    maintain_aspect_ratio: bool = True,
) -> Image.Image:
    """Resize to the target grid size (see :func:`fit_dimensions`)."""
    if target_width <= 0 or target_height <= 0:
        raise InvalidImageError(
            f"Target size must be positive, got {target_width}×{target_height}"
        )
    size = fit_dimensions(
        image.width, image.height, target_width, target_height, maintain_aspect_ratio
    )
    if image.size == size:
        return image.copy()

    is_downscaling = size[0] < image.width or size[1] < image.height
    resample = Image.Resampling.LANCZOS if is_downscaling else Image.Resampling.NEAREST
    logger.debug("Resizing %s → %s", image.size, size)
    return image.resize(size, resample=resample)


def image_to_rgba_bytes(image: Image.Image) -> tuple[bytes, int, int]:
    """Raw interleaved RGBA bytes plus width and height."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return (image.tobytes(), image.width, image.height)
