"""Raw RGBA pixel buffer → bead grid conversion.

Each pixel is composited over a background color, adjusted for brightness
and contrast, optionally perturbed (dither), and matched to the nearest
palette color.  Decoding and resizing happen elsewhere (see
:mod:`beadforge.image_io`); this module only consumes interleaved RGBA.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from beadforge.color_space import round_half_up
from beadforge.errors import ConversionError, InvalidImageError
from beadforge.grid import ConversionResult, Grid
from beadforge.logging import get_logger
from beadforge.matcher import ColorMatcher
from beadforge.models import BeadCell, BeadColor, ConversionOptions, PixelSample
from beadforge.palette import Palette

logger = get_logger("converter")

PixelBuffer = Union[bytes, bytearray, memoryview, Sequence[int]]
RGB = tuple[int, int, int]


def _clamp(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


def composite_over_background(
    r: int, g: int, b: int, a: int, background: Sequence[int]
) -> RGB:
    """Alpha-blend a pixel over an opaque background using ``alpha = a / 255``."""
    alpha = a / 255
    return (
        round_half_up(r * alpha + background[0] * (1 - alpha)),
        round_half_up(g * alpha + background[1] * (1 - alpha)),
        round_half_up(b * alpha + background[2] * (1 - alpha)),
    )


def adjust_brightness_contrast(rgb: Sequence[int], brightness: float, contrast: float) -> RGB:
    """Apply brightness then contrast to each channel.

    Brightness ``>= 1`` moves a channel toward 255 by ``brightness - 1``;
    below 1 it scales the channel toward 0.  Contrast rescales about 128.
    Results are clamped to 0–255.  Out-of-range factors are used as given.
    """

    def apply(value: int) -> int:
        if brightness >= 1:
            shifted = value + (255 - value) * (brightness - 1)
        else:
            shifted = value * brightness
        return _clamp(128 + (shifted - 128) * contrast)

    return (apply(rgb[0]), apply(rgb[1]), apply(rgb[2]))


def dither_offset(x: int, y: int) -> RGB:
    """Deterministic coordinate-derived perturbation added before matching.

    This approximates error diffusion with a fixed pattern; it is not
    Floyd–Steinberg.
    """
    return (((x * 7) % 5) - 2, ((y * 3) % 5) - 2, 0)


def _validate_buffer(pixels: PixelBuffer | None, width: int, height: int) -> None:
    if pixels is None:
        raise InvalidImageError("Pixel buffer is missing")
    if width <= 0 or height <= 0:
        raise InvalidImageError(f"Image dimensions must be positive, got {width}×{height}")
    expected = width * height * 4
    if len(pixels) != expected:
        raise InvalidImageError(
            f"Pixel buffer has {len(pixels)} values, expected {expected} "
            f"for a {width}×{height} RGBA image"
        )
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return
    for index, value in enumerate(pixels):
        if not 0 <= value <= 255:
            raise InvalidImageError(
                f"Channel value {value} at index {index} is outside 0–255"
            )


class ImageConverter:
    """Convert RGBA buffers into bead grids against a fixed palette.

    The palette is snapshotted into a :class:`ColorMatcher` at construction;
    changing the caller's palette afterwards does not affect conversions.

    Args:
        palette: Palette or colors to match against.
        use_lab: Match in Lab space (default) or weighted RGB.

    Raises:
        EmptyPaletteError: If the palette has no colors.
    """

    def __init__(
        self, palette: Palette | Iterable[BeadColor], use_lab: bool = True
    ) -> None:
        self._matcher = ColorMatcher(palette, use_lab=use_lab)

    @property
    def matcher(self) -> ColorMatcher:
        return self._matcher

    @property
    def palette(self) -> list[BeadColor]:
        return self._matcher.palette

    def prepare_color(
        self,
        r: int,
        g: int,
        b: int,
        a: int,
        x: int,
        y: int,
        options: ConversionOptions,
    ) -> RGB:
        """Run the pre-matching stages for one pixel."""
        blended = composite_over_background(r, g, b, a, options.background_color)
        adjusted = adjust_brightness_contrast(blended, options.brightness, options.contrast)
        if not options.dither:
            return adjusted
        offset = dither_offset(x, y)
        return (
            _clamp(adjusted[0] + offset[0]),
            _clamp(adjusted[1] + offset[1]),
            _clamp(adjusted[2] + offset[2]),
        )

    def convert(
        self,
        pixels: PixelBuffer,
        width: int,
        height: int,
        options: ConversionOptions | None = None,
    ) -> Grid:
        """Convert an interleaved RGBA buffer into a fully populated grid.

        Args:
            pixels: ``width * height * 4`` channel values, row-major.
            width: Image width in pixels (> 0).
            height: Image height in pixels (> 0).
            options: Conversion options; defaults apply when omitted.

        Returns:
            A grid with one cell per pixel.

        Raises:
            InvalidImageError: On a missing, empty, or mis-sized buffer.
            ConversionError: If matching a pixel fails.
        """
        _validate_buffer(pixels, width, height)
        options = options or ConversionOptions()
        grid = Grid(width, height)
        for y in range(height):
            for x in range(width):
                index = (y * width + x) * 4
                r, g, b, a = (int(v) for v in pixels[index : index + 4])
                target = self.prepare_color(r, g, b, a, x, y, options)
                try:
                    color = self._matcher.closest(target)
                except Exception as exc:
                    raise ConversionError(
                        f"Color matching failed at ({x}, {y}): {exc}", stage="match"
                    ) from exc
                grid.set(
                    BeadCell(
                        x=x,
                        y=y,
                        color=color,
                        original=PixelSample(x=x, y=y, r=r, g=g, b=b, a=a),
                    )
                )
        logger.debug("Converted %d×%d image (dither=%s)", width, height, options.dither)
        return grid

    def convert_to_result(
        self,
        pixels: PixelBuffer,
        width: int,
        height: int,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Like :meth:`convert`, wrapped with color stats and the palette snapshot."""
        grid = self.convert(pixels, width, height, options)
        return ConversionResult.from_grid(grid, self._matcher.palette)

    def find_closest_color(
        self, rgb: Sequence[int], brightness: float = 1.0, contrast: float = 1.0
    ) -> BeadColor:
        """Adjust *rgb* for brightness/contrast, then match it."""
        return self._matcher.closest(adjust_brightness_contrast(rgb, brightness, contrast))
