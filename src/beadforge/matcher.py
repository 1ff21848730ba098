"""Nearest-palette-color matching in Lab or weighted RGB space."""

from __future__ import annotations

from typing import Iterable, Sequence

from beadforge.color_space import (
    delta_e,
    lab_to_approx_rgb,
    rgb_to_lab,
    weighted_rgb_distance,
)
from beadforge.errors import EmptyPaletteError
from beadforge.models import BeadColor, LabColor
from beadforge.palette import Palette

RGB = Sequence[int]


def _palette_colors(palette: Palette | Iterable[BeadColor]) -> list[BeadColor]:
    colors = palette.colors if isinstance(palette, Palette) else list(palette)
    if not colors:
        raise EmptyPaletteError("Cannot match against an empty palette")
    return colors


def precompute_palette_lab(colors: Iterable[BeadColor]) -> list[tuple[BeadColor, LabColor]]:
    """Pair every color with its Lab value."""
    return [(color, rgb_to_lab(color.rgb)) for color in colors]


class ColorMatcher:
    """Find the palette colors closest to a target color.

    In Lab mode (the default) Lab values of the palette are computed once and
    reused for every lookup; distance is Delta E.  Otherwise the
    luminance-weighted RGB distance is used.  Scans are linear with a strict
    ``<`` comparison, so ties resolve to the earliest palette entry.

    The palette is copied on construction and on :meth:`update_palette`;
    later changes to the caller's palette are not seen.

    Args:
        palette: A :class:`Palette` or an iterable of :class:`BeadColor`.
        use_lab: Match in Lab space when True, weighted RGB otherwise.

    Raises:
        EmptyPaletteError: If the palette has no colors.
    """

    def __init__(
        self, palette: Palette | Iterable[BeadColor], use_lab: bool = True
    ) -> None:
        self._use_lab = use_lab
        self._colors: list[BeadColor] = []
        self._palette_labs: list[tuple[BeadColor, LabColor]] | None = None
        self.update_palette(palette)

    @property
    def use_lab(self) -> bool:
        return self._use_lab

    @property
    def palette(self) -> list[BeadColor]:
        return list(self._colors)

    def update_palette(self, palette: Palette | Iterable[BeadColor]) -> None:
        """Replace the palette and refresh the cached Lab values.

        Raises:
            EmptyPaletteError: If the new palette has no colors.
        """
        colors = _palette_colors(palette)
        self._colors = colors
        self._palette_labs = precompute_palette_lab(colors) if self._use_lab else None

    def closest(self, rgb: RGB) -> BeadColor:
        """Return the palette color nearest to *rgb*."""
        if self._use_lab:
            return self.closest_from_lab(rgb_to_lab(rgb))
        best = self._colors[0]
        min_distance = float("inf")
        for color in self._colors:
            distance = weighted_rgb_distance(rgb, color.rgb)
            if distance < min_distance:
                min_distance = distance
                best = color
        return best

    def closest_from_lab(self, lab: LabColor) -> BeadColor:
        """Return the palette color nearest to an already converted Lab value.

        Without Lab mode the value is mapped back to RGB approximately and
        matched with the RGB metric.
        """
        if self._palette_labs is None:
            return self.closest(lab_to_approx_rgb(lab))
        best = self._palette_labs[0][0]
        min_distance = float("inf")
        for color, color_lab in self._palette_labs:
            distance = delta_e(lab, color_lab)
            if distance < min_distance:
                min_distance = distance
                best = color
        return best

    def batch_closest(self, colors: Iterable[RGB]) -> list[BeadColor]:
        """Match each color independently; identical to repeated :meth:`closest`."""
        return [self.closest(rgb) for rgb in colors]

    def top_k(self, rgb: RGB, k: int) -> list[BeadColor]:
        """The *k* nearest colors, closest first.

        *k* is clamped to ``[0, len(palette)]``; equal distances keep
        palette order.
        """
        if self._palette_labs is not None:
            target = rgb_to_lab(rgb)
            ranked = [(delta_e(target, lab), color) for color, lab in self._palette_labs]
        else:
            ranked = [(weighted_rgb_distance(rgb, c.rgb), c) for c in self._colors]
        ranked.sort(key=lambda pair: pair[0])
        limit = max(0, min(k, len(ranked)))
        return [color for _distance, color in ranked[:limit]]


def find_closest_color(
    rgb: RGB, colors: Palette | Iterable[BeadColor], use_lab: bool = True
) -> BeadColor:
    """One-shot match without keeping a :class:`ColorMatcher` around."""
    return ColorMatcher(colors, use_lab=use_lab).closest(rgb)
