"""Bead palettes: named color registries and the bundled presets.

A :class:`Palette` keeps its colors in a name-keyed ``dict`` whose insertion
order is the palette order.  Upserts replace an entry in place; ``merge``
and ``clone`` always build new instances and never touch their operands.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Any, Iterable, Iterator, Union

import yaml

from beadforge.errors import EmptyPaletteError, UnknownPaletteError
from beadforge.logging import get_logger
from beadforge.models import BeadColor, PaletteKind

logger = get_logger("palette")

DEFAULT_PRESET = PaletteKind.COCO

PaletteSource = Union[str, PaletteKind, "Palette", Iterable[Any]]


def _coerce_color(value: BeadColor | dict[str, Any]) -> BeadColor:
    if isinstance(value, BeadColor):
        return value
    return BeadColor(**value)


def _normalize_hex(value: str) -> str:
    return value.strip().lstrip("#").lower()


def resolve_preset_kind(value: str | PaletteKind) -> PaletteKind:
    """Map a preset identifier to its :class:`PaletteKind`.

    Raises:
        UnknownPaletteError: If *value* does not name a bundled preset.
    """
    if isinstance(value, PaletteKind):
        kind = value
    else:
        try:
            kind = PaletteKind(str(value).strip().lower())
        except ValueError as exc:
            raise UnknownPaletteError(f"Unsupported palette preset: {value!r}") from exc
    if kind is PaletteKind.CUSTOM:
        raise UnknownPaletteError("'custom' is not a preset; pass a color list instead")
    return kind


def preset_names() -> list[str]:
    """Identifiers of the bundled presets."""
    return [kind.value for kind in PaletteKind if kind is not PaletteKind.CUSTOM]


@lru_cache(maxsize=None)
def _load_preset_colors(kind: PaletteKind) -> tuple[BeadColor, ...]:
    resource = resources.files("beadforge").joinpath("presets", f"{kind.value}.yaml")
    data = yaml.safe_load(resource.read_text(encoding="utf-8"))
    brand = data.get("brand", kind.value.upper())
    colors = tuple(BeadColor(**{"brand": brand, **entry}) for entry in data["colors"])
    logger.debug(
        "Loaded preset %s (%d colors)", kind.value, len(colors), extra={"palette": kind.value}
    )
    return colors


class Palette:
    """Ordered collection of uniquely named :class:`BeadColor` entries.

    Args:
        colors: Initial colors (models or plain dicts).  A repeated name
            replaces the earlier entry in its original position.
        kind: Where the palette came from.

    Raises:
        EmptyPaletteError: If *colors* is empty.
    """

    def __init__(
        self,
        colors: Iterable[BeadColor | dict[str, Any]],
        kind: PaletteKind = PaletteKind.CUSTOM,
    ) -> None:
        self._colors: dict[str, BeadColor] = {}
        for entry in colors:
            color = _coerce_color(entry)
            self._colors[color.name] = color
        if not self._colors:
            raise EmptyPaletteError("A palette needs at least one color")
        self._kind = kind

    @classmethod
    def from_preset(cls, preset: str | PaletteKind = DEFAULT_PRESET) -> "Palette":
        """Build a palette from a bundled preset (``"mard"`` or ``"coco"``)."""
        kind = resolve_preset_kind(preset)
        return cls(_load_preset_colors(kind), kind=kind)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Palette":
        """Rebuild a palette from :meth:`to_dict` output."""
        kind = PaletteKind(data.get("kind", PaletteKind.CUSTOM.value))
        return cls(data.get("colors", []), kind=kind)

    @property
    def kind(self) -> PaletteKind:
        return self._kind

    @property
    def colors(self) -> list[BeadColor]:
        """A new list of the colors, in palette order."""
        return list(self._colors.values())

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self) -> Iterator[BeadColor]:
        return iter(list(self._colors.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._colors

    def __repr__(self) -> str:
        return f"Palette(kind={self._kind.value!r}, colors={len(self)})"

    def count(self) -> int:
        """Number of colors in the palette."""
        return len(self._colors)

    def find_by_name(self, name: str) -> BeadColor | None:
        return self._colors.get(name)

    def find_by_hex(self, hex_value: str) -> BeadColor | None:
        """First color whose hex matches *hex_value*, ignoring case and ``#``."""
        target = _normalize_hex(hex_value)
        for color in self._colors.values():
            if _normalize_hex(color.hex) == target:
                return color
        return None

    def find(self, key: str) -> BeadColor | None:
        """Look up by name first, then by hex."""
        return self.find_by_name(key) or self.find_by_hex(key)

    def add(self, color: BeadColor | dict[str, Any]) -> None:
        """Insert *color*, replacing a same-named entry in place."""
        color = _coerce_color(color)
        self._colors[color.name] = color

    def remove(self, name: str) -> bool:
        """Remove the color called *name*; return False if it was absent."""
        if name not in self._colors:
            return False
        del self._colors[name]
        return True

    def filter_by_brand(self, brand: str) -> list[BeadColor]:
        return [c for c in self._colors.values() if c.brand == brand]

    def list_brands(self) -> list[str]:
        """Distinct brands in first-seen order."""
        return list(dict.fromkeys(c.brand for c in self._colors.values()))

    def clone(self) -> "Palette":
        """Independent copy with the same colors and kind."""
        return Palette(self._colors.values(), kind=self._kind)

    def merge(self, other: "Palette") -> "Palette":
        """Union by name; on a name collision this palette's color wins."""
        merged = dict(self._colors)
        for color in other:
            merged.setdefault(color.name, color)
        return Palette(merged.values())

    def to_dict(self) -> dict[str, Any]:
        """Plain serializable snapshot of the palette."""
        return {
            "kind": self._kind.value,
            "colors": [c.to_dict() for c in self._colors.values()],
            "color_count": len(self._colors),
        }


def create_palette(source: PaletteSource = DEFAULT_PRESET) -> Palette:
    """Build a palette from a preset id, an existing palette, or a color list.

    Existing palettes are cloned so the caller's instance is never shared.

    Raises:
        UnknownPaletteError: For an unrecognized preset identifier.
        EmptyPaletteError: For an empty color list.
    """
    if isinstance(source, (str, PaletteKind)):
        return Palette.from_preset(source)
    if isinstance(source, Palette):
        return source.clone()
    return Palette(list(source))
