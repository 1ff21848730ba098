"""Tests for beadforge.matcher — nearest palette color search."""

from __future__ import annotations

import pytest

from beadforge.color_space import rgb_to_lab
from beadforge.errors import EmptyPaletteError
from beadforge.matcher import ColorMatcher, find_closest_color
from beadforge.models import BeadColor
from beadforge.palette import Palette


class TestColorMatcher:
    """Lab and weighted-RGB matching."""

    @pytest.mark.parametrize("use_lab", [True, False])
    def test_exact_palette_colors_match_themselves(
        self, test_palette: Palette, use_lab: bool
    ) -> None:
        matcher = ColorMatcher(test_palette, use_lab=use_lab)
        for color in test_palette:
            assert matcher.closest(color.rgb) == color

    @pytest.mark.parametrize("use_lab", [True, False])
    def test_near_colors(self, test_palette: Palette, use_lab: bool) -> None:
        matcher = ColorMatcher(test_palette, use_lab=use_lab)
        assert matcher.closest((250, 10, 5)).name == "RED"
        assert matcher.closest((10, 10, 10)).name == "BLACK"
        assert matcher.closest((240, 240, 240)).name == "WHITE"

    def test_ties_resolve_to_first_entry(self) -> None:
        first = BeadColor(name="FIRST", r=10, g=10, b=10)
        second = BeadColor(name="SECOND", r=10, g=10, b=10)
        for use_lab in (True, False):
            matcher = ColorMatcher([first, second], use_lab=use_lab)
            assert matcher.closest((12, 12, 12)).name == "FIRST"

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(EmptyPaletteError):
            ColorMatcher([])

    def test_update_palette(self, test_palette: Palette) -> None:
        matcher = ColorMatcher(test_palette)
        matcher.update_palette([BeadColor(name="ONLY", r=1, g=2, b=3)])
        assert matcher.closest((255, 0, 0)).name == "ONLY"
        with pytest.raises(EmptyPaletteError):
            matcher.update_palette([])
        assert matcher.closest((255, 0, 0)).name == "ONLY"

    def test_palette_is_snapshotted(self, test_palette: Palette) -> None:
        matcher = ColorMatcher(test_palette)
        test_palette.remove("RED")
        assert matcher.closest((255, 0, 0)).name == "RED"

    def test_closest_from_lab(self, test_palette: Palette) -> None:
        lab = rgb_to_lab((0, 0, 250))
        assert ColorMatcher(test_palette).closest_from_lab(lab).name == "BLUE"
        assert ColorMatcher(test_palette, use_lab=False).closest_from_lab(lab).name == "BLUE"

    def test_batch_closest_matches_individual(self, test_palette: Palette) -> None:
        matcher = ColorMatcher(test_palette)
        targets = [(255, 0, 0), (0, 250, 0), (3, 3, 3)]
        assert matcher.batch_closest(targets) == [matcher.closest(t) for t in targets]

    def test_top_k(self, test_palette: Palette) -> None:
        matcher = ColorMatcher(test_palette)
        top = matcher.top_k((255, 0, 0), 2)
        assert len(top) == 2
        assert top[0].name == "RED"

    def test_top_k_clamped(self, test_palette: Palette) -> None:
        matcher = ColorMatcher(test_palette, use_lab=False)
        assert len(matcher.top_k((0, 0, 0), 100)) == 5
        assert matcher.top_k((0, 0, 0), -1) == []

    def test_find_closest_color_helper(self, test_colors: list[BeadColor]) -> None:
        assert find_closest_color((0, 255, 10), test_colors).name == "GREEN"
