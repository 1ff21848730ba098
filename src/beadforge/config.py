"""YAML configuration loading and validation for bead conversions.

Expected YAML shape::

    palette: mard            # preset id, or a list of colors
    grid:
      width: 48
      height: 48
      maintain_aspect_ratio: true
    conversion:
      dither: false
      brightness: 1.0
      contrast: 1.0
      background_color: [255, 255, 255]
      use_lab: true
    output:
      preview_path: output/preview.png
      cell_size: 10
      csv_path: output/colors.csv
      json_path: output/pattern.json

Custom palette entries take ``name``, ``brand`` and either ``rgb: [r, g, b]``
or ``hex``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from beadforge.errors import ConfigError
from beadforge.logging import get_logger
from beadforge.models import BeadForgeConfig, ConverterConfig, OutputConfig
from beadforge.palette import create_palette

logger = get_logger("config")

_SECTIONS = ("palette", "grid", "conversion", "output")
_SECTION_KEYS: dict[str, tuple[str, ...]] = {
    "grid": ("width", "height", "maintain_aspect_ratio"),
    "conversion": ("dither", "brightness", "contrast", "background_color", "use_lab"),
    "output": ("preview_path", "cell_size", "csv_path", "json_path"),
}

# Thresholds for non-fatal warnings
_LARGE_PALETTE = 200
_SMALL_GRID = 4
_BRIGHTNESS_RANGE = (0.0, 2.0)
_CONTRAST_RANGE = (0.0, 2.0)


def validate_config_path(path: str | Path) -> Path:
    """Resolve and validate that a config file path exists.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    resolved = Path(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Config file not found: {resolved}")
    return resolved


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file that must contain a top-level mapping.

    Raises:
        ConfigError: If the YAML is malformed or not a mapping.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}"
        )
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"'{name}' section must be a YAML mapping, got {type(value).__name__}"
        )
    unknown = sorted(str(key) for key in set(value) - set(_SECTION_KEYS[name]))
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in '{name}' section: {', '.join(unknown)}"
        )
    return value


def parse_config(data: dict[str, Any]) -> BeadForgeConfig:
    """Build a validated config from an already parsed mapping.

    Raises:
        ConfigError: On unknown sections or keys, or wrongly typed sections.
        pydantic.ValidationError: If values fail model validation.
    """
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown config section(s): {', '.join(unknown)}")

    converter_kwargs: dict[str, Any] = {}
    converter_kwargs.update(_section(data, "grid"))
    converter_kwargs.update(_section(data, "conversion"))

    if "palette" in data:
        palette = data["palette"]
        if not isinstance(palette, (str, list)):
            raise ConfigError(
                "'palette' must be a preset name or a YAML sequence of colors"
            )
        converter_kwargs["palette"] = palette

    return BeadForgeConfig(
        converter=ConverterConfig(**converter_kwargs),
        output=OutputConfig(**_section(data, "output")),
    )


def load_config(path: str | Path) -> BeadForgeConfig:
    """Load and validate a conversion configuration from a YAML file.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist.
        ConfigError: If the YAML is malformed or structurally invalid.
        pydantic.ValidationError: If values fail model validation.
    """
    resolved = validate_config_path(path)
    config = parse_config(_parse_yaml(resolved))

    palette = config.converter.palette
    logger.info(
        "Loaded config: %s palette, %d×%d grid",
        palette if isinstance(palette, str) else f"custom ({len(palette)} colors)",
        config.converter.width,
        config.converter.height,
    )
    return config


def validate_config(path: str | Path) -> list[str]:
    """Validate a config file more thoroughly than :func:`load_config`.

    Besides schema validation, the palette is actually built (so unknown
    presets fail here) and a few suspicious settings are reported.

    Returns:
        Non-fatal warning strings (empty if none).

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If the YAML is malformed or structurally invalid.
        pydantic.ValidationError: If values fail model validation.
        UnknownPaletteError: If the palette names an unknown preset.
    """
    config = load_config(path)
    converter = config.converter
    warnings: list[str] = []

    palette = create_palette(converter.palette)
    if len(palette) > _LARGE_PALETTE:
        warnings.append(
            f"Palette has {len(palette)} colors (>{_LARGE_PALETTE}), "
            "conversion will be slow"
        )

    if converter.width < _SMALL_GRID or converter.height < _SMALL_GRID:
        warnings.append(
            f"Grid {converter.width}×{converter.height} is very small; "
            "most detail will be lost"
        )

    low, high = _BRIGHTNESS_RANGE
    if not low < converter.brightness <= high:
        warnings.append(
            f"brightness {converter.brightness} is outside ({low}, {high}]; "
            "output may be washed out or black"
        )
    low, high = _CONTRAST_RANGE
    if not low <= converter.contrast <= high:
        warnings.append(
            f"contrast {converter.contrast} is outside [{low}, {high}]; "
            "output may be posterized"
        )

    return warnings
