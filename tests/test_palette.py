"""Tests for beadforge.palette — presets, lookups and palette algebra."""

from __future__ import annotations

import pytest

from beadforge.errors import EmptyPaletteError, UnknownPaletteError
from beadforge.models import BeadColor, PaletteKind
from beadforge.palette import (
    DEFAULT_PRESET,
    Palette,
    create_palette,
    preset_names,
    resolve_preset_kind,
)

# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class TestPresets:
    """Bundled preset loading."""

    def test_preset_names(self) -> None:
        assert preset_names() == ["mard", "coco"]

    @pytest.mark.parametrize("name", ["mard", "coco", "MARD", " coco "])
    def test_presets_load(self, name: str) -> None:
        palette = Palette.from_preset(name)
        assert len(palette) > 0
        assert palette.kind is resolve_preset_kind(name)

    def test_preset_brand_applied(self) -> None:
        palette = Palette.from_preset("mard")
        assert palette.list_brands() == ["MARD"]

    def test_preset_names_unique(self) -> None:
        for name in preset_names():
            palette = Palette.from_preset(name)
            assert len({c.name for c in palette}) == len(palette)

    def test_presets_contain_white_and_black(self) -> None:
        for name in preset_names():
            palette = Palette.from_preset(name)
            assert palette.find_by_hex("#ffffff") is not None
            assert palette.find_by_hex("000000") is not None

    def test_unknown_preset(self) -> None:
        with pytest.raises(UnknownPaletteError, match="Unsupported palette"):
            Palette.from_preset("perler")

    def test_custom_is_not_a_preset(self) -> None:
        with pytest.raises(UnknownPaletteError):
            resolve_preset_kind("custom")

    def test_presets_are_independent_instances(self) -> None:
        first = Palette.from_preset("coco")
        first.remove(first.colors[0].name)
        second = Palette.from_preset("coco")
        assert len(second) == len(first) + 1


# ---------------------------------------------------------------------------
# Lookups and mutation
# ---------------------------------------------------------------------------


class TestPaletteOperations:
    """Lookup, upsert and removal on a custom palette."""

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(EmptyPaletteError):
            Palette([])

    def test_order_preserved(self, test_palette: Palette) -> None:
        assert [c.name for c in test_palette] == ["WHITE", "BLACK", "RED", "GREEN", "BLUE"]
        assert test_palette.kind is PaletteKind.CUSTOM

    def test_duplicate_names_later_wins_in_place(self) -> None:
        palette = Palette(
            [
                BeadColor(name="A", r=1, g=1, b=1),
                BeadColor(name="B", r=2, g=2, b=2),
                BeadColor(name="A", r=3, g=3, b=3),
            ]
        )
        assert [c.name for c in palette] == ["A", "B"]
        assert palette.find_by_name("A").rgb == (3, 3, 3)  # type: ignore[union-attr]

    def test_accepts_dicts(self) -> None:
        palette = Palette([{"name": "X", "hex": "#010203"}])
        assert palette.find_by_name("X").rgb == (1, 2, 3)  # type: ignore[union-attr]

    def test_find_by_hex_case_and_hash_insensitive(self, test_palette: Palette) -> None:
        assert test_palette.find_by_hex("ff0000").name == "RED"  # type: ignore[union-attr]
        assert test_palette.find_by_hex("#Ff0000").name == "RED"  # type: ignore[union-attr]
        assert test_palette.find_by_hex("#123456") is None

    def test_find_name_then_hex(self, test_palette: Palette) -> None:
        assert test_palette.find("BLUE").name == "BLUE"  # type: ignore[union-attr]
        assert test_palette.find("#0000ff").name == "BLUE"  # type: ignore[union-attr]
        assert test_palette.find("MISSING") is None

    def test_contains_and_count(self, test_palette: Palette) -> None:
        assert "RED" in test_palette
        assert "PINK" not in test_palette
        assert test_palette.count() == len(test_palette) == 5

    def test_add_upserts(self, test_palette: Palette) -> None:
        test_palette.add(BeadColor(name="RED", r=200, g=0, b=0))
        test_palette.add(BeadColor(name="PINK", r=255, g=192, b=203))
        assert test_palette.find_by_name("RED").r == 200  # type: ignore[union-attr]
        assert [c.name for c in test_palette][-1] == "PINK"
        assert len(test_palette) == 6

    def test_remove(self, test_palette: Palette) -> None:
        assert test_palette.remove("RED") is True
        assert test_palette.remove("RED") is False
        assert "RED" not in test_palette

    def test_colors_returns_copy(self, test_palette: Palette) -> None:
        colors = test_palette.colors
        colors.clear()
        assert len(test_palette) == 5

    def test_filter_and_list_brands(self) -> None:
        palette = Palette(
            [
                BeadColor(name="A", r=0, g=0, b=0, brand="x"),
                BeadColor(name="B", r=0, g=0, b=1, brand="y"),
                BeadColor(name="C", r=0, g=0, b=2, brand="x"),
            ]
        )
        assert palette.list_brands() == ["x", "y"]
        assert [c.name for c in palette.filter_by_brand("x")] == ["A", "C"]
        assert palette.filter_by_brand("z") == []


# ---------------------------------------------------------------------------
# Derived palettes
# ---------------------------------------------------------------------------


class TestDerivedPalettes:
    """clone / merge / to_dict / from_dict / create_palette."""

    def test_clone_is_independent(self, test_palette: Palette) -> None:
        clone = test_palette.clone()
        clone.remove("WHITE")
        assert "WHITE" in test_palette
        assert clone.kind is test_palette.kind

    def test_merge_left_wins(self, test_palette: Palette) -> None:
        other = Palette(
            [
                BeadColor(name="RED", r=1, g=1, b=1),
                BeadColor(name="PINK", r=255, g=192, b=203),
            ]
        )
        merged = test_palette.merge(other)
        assert merged.find_by_name("RED").rgb == (255, 0, 0)  # type: ignore[union-attr]
        assert "PINK" in merged
        assert len(merged) == 6
        assert merged.kind is PaletteKind.CUSTOM
        assert len(test_palette) == 5

    def test_to_dict_from_dict(self, test_palette: Palette) -> None:
        data = test_palette.to_dict()
        assert data["kind"] == "custom"
        assert data["color_count"] == 5
        rebuilt = Palette.from_dict(data)
        assert rebuilt.colors == test_palette.colors

    def test_create_palette_default(self) -> None:
        assert create_palette().kind is DEFAULT_PRESET

    def test_create_palette_from_list(self, test_colors: list[BeadColor]) -> None:
        assert create_palette(test_colors).colors == test_colors

    def test_create_palette_clones_instance(self, test_palette: Palette) -> None:
        created = create_palette(test_palette)
        assert created is not test_palette
        assert created.colors == test_palette.colors

    def test_create_palette_empty_list(self) -> None:
        with pytest.raises(EmptyPaletteError):
            create_palette([])
