"""Pydantic data models for bead colors, pixels, cells, and conversion options."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class PaletteKind(str, Enum):
    """Origin of a palette: one of the bundled presets or a custom list."""

    MARD = "mard"
    COCO = "coco"
    CUSTOM = "custom"


class BeadColor(BaseModel):
    """A single named bead color.

    Accepts either explicit ``r``/``g``/``b`` channels, an ``rgb`` sequence
    or mapping, or only a ``hex`` string.  Missing ``hex`` is derived from
    the channels.

    Attributes:
        name: Color code, unique within a palette (e.g. "A1", "WHITE").
        hex: Hex notation as supplied (e.g. "#FFFFFF").
        r: Red channel (0–255).
        g: Green channel (0–255).
        b: Blue channel (0–255).
        brand: Manufacturer name.
    """

    name: str = Field(..., min_length=1)
    hex: str = ""
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    brand: str = ""

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _expand_rgb(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        rgb = data.pop("rgb", None)
        if rgb is not None:
            if isinstance(rgb, dict):
                data.setdefault("r", rgb.get("r"))
                data.setdefault("g", rgb.get("g"))
                data.setdefault("b", rgb.get("b"))
            else:
                if len(rgb) != 3:
                    raise ValueError("rgb must have exactly three channels")
                data.setdefault("r", rgb[0])
                data.setdefault("g", rgb[1])
                data.setdefault("b", rgb[2])
        if data.get("hex") and not {"r", "g", "b"} <= data.keys():
            from beadforge.color_space import hex_to_rgb

            data["r"], data["g"], data["b"] = hex_to_rgb(data["hex"])
        if not data.get("hex") and {"r", "g", "b"} <= data.keys():
            from beadforge.color_space import rgb_to_hex

            data["hex"] = rgb_to_hex((data["r"], data["g"], data["b"]))
        return data

    @property
    def rgb(self) -> tuple[int, int, int]:
        """Return the color as an ``(R, G, B)`` tuple."""
        return (self.r, self.g, self.b)

    def to_dict(self) -> dict[str, Any]:
        """Plain serializable form (``rgb`` as a list), accepted back by the model."""
        return {
            "name": self.name,
            "hex": self.hex,
            "rgb": [self.r, self.g, self.b],
            "brand": self.brand,
        }


class LabColor(BaseModel):
    """A color in CIE L*a*b* space."""

    l: float
    a: float
    b: float

    model_config = {"frozen": True}


class PixelSample(BaseModel):
    """An original source pixel with its coordinates."""

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    a: int = Field(default=255, ge=0, le=255)

    model_config = {"frozen": True}

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Return the sample as an ``(R, G, B, A)`` tuple."""
        return (self.r, self.g, self.b, self.a)


class BeadCell(BaseModel):
    """One cell of the output grid.

    Cells are immutable; edits replace a cell rather than mutate it, so a
    grid snapshot never aliases state that the live grid later changes.

    Attributes:
        x: Column index.
        y: Row index.
        color: The bead color placed in this cell.
        original: The source pixel the cell was converted from, if any.
    """

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    color: BeadColor
    original: PixelSample | None = None

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[int, int]:
        """The ``(x, y)`` identity of the cell."""
        return (self.x, self.y)

    def with_color(self, color: BeadColor) -> "BeadCell":
        """Return a copy of this cell holding *color*."""
        return self.model_copy(update={"color": color})

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"x": self.x, "y": self.y, "color": self.color.to_dict()}
        if self.original is not None:
            data["original"] = self.original.model_dump()
        return data


class GridDimensions(BaseModel):
    """Width and height of a grid, in cells."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    model_config = {"frozen": True}


class ConversionOptions(BaseModel):
    """Per-conversion tuning knobs.

    Brightness and contrast are deliberately not range-checked: values
    outside the usual ``(0, 2]`` / ``[0, 2]`` windows are applied as given
    and produce extreme but well-defined output.

    Attributes:
        dither: Apply the coordinate-derived perturbation before matching.
        brightness: ``>= 1`` blends toward white, ``< 1`` scales toward black.
        contrast: Scale factor about the 128 midpoint.
        background_color: RGB that translucent pixels are composited over.
    """

    dither: bool = False
    brightness: float = 1.0
    contrast: float = 1.0
    background_color: tuple[int, int, int] = (255, 255, 255)

    model_config = {"frozen": True}

    @field_validator("background_color")
    @classmethod
    def _validate_background(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        return _check_rgb_triple(v)


def _check_rgb_triple(value: tuple[int, int, int]) -> tuple[int, int, int]:
    if any(channel < 0 or channel > 255 for channel in value):
        raise ValueError(f"color channels must be within 0–255, got {value}")
    return value


class ConverterConfig(BaseModel):
    """Settings for a :class:`~beadforge.editor.GridEditor`.

    Attributes:
        width: Target grid width in beads.
        height: Target grid height in beads.
        palette: Preset identifier (``"mard"``, ``"coco"``) or a color list.
        maintain_aspect_ratio: Shrink one side on resize to keep the ratio.
        background_color: RGB that transparent pixels are blended over.
        use_lab: Match in Lab space (False: weighted RGB).
        dither: Default for :attr:`ConversionOptions.dither`.
        brightness: Default for :attr:`ConversionOptions.brightness`.
        contrast: Default for :attr:`ConversionOptions.contrast`.
    """

    width: int = Field(default=32, gt=0)
    height: int = Field(default=32, gt=0)
    palette: str | list[BeadColor] = "coco"
    maintain_aspect_ratio: bool = True
    background_color: tuple[int, int, int] = (255, 255, 255)
    use_lab: bool = True
    dither: bool = False
    brightness: float = 1.0
    contrast: float = 1.0

    @field_validator("background_color")
    @classmethod
    def _validate_background(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        return _check_rgb_triple(v)

    @field_validator("palette")
    @classmethod
    def _palette_not_empty(cls, v: str | list[BeadColor]) -> str | list[BeadColor]:
        if isinstance(v, list) and not v:
            raise ValueError("custom palette must contain at least one color")
        return v

    def conversion_options(self) -> ConversionOptions:
        """Conversion options built from these defaults."""
        return ConversionOptions(
            dither=self.dither,
            brightness=self.brightness,
            contrast=self.contrast,
            background_color=self.background_color,
        )


class OutputConfig(BaseModel):
    """Where the CLI writes its artifacts (all optional).

    Attributes:
        preview_path: Block preview image path.
        cell_size: Preview block edge length in pixels.
        csv_path: Color statistics CSV path.
        json_path: Full JSON export path.
    """

    preview_path: str = ""
    cell_size: int = Field(default=10, gt=0)
    csv_path: str = ""
    json_path: str = ""


class BeadForgeConfig(BaseModel):
    """Top-level configuration loaded from YAML."""

    converter: ConverterConfig = ConverterConfig()
    output: OutputConfig = OutputConfig()
