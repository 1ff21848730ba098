"""BeadForge — convert images into fuse-bead patterns and edit them."""

from beadforge.color_space import (
    delta_e,
    hex_to_rgb,
    rgb_distance,
    rgb_to_hex,
    rgb_to_lab,
    weighted_rgb_distance,
)
from beadforge.config import load_config, validate_config
from beadforge.converter import ImageConverter
from beadforge.editor import GridEditor
from beadforge.errors import (
    BatchAlreadyActiveError,
    BatchError,
    BeadForgeError,
    ConfigError,
    ConversionError,
    EditorError,
    EmptyPaletteError,
    InvalidImageError,
    NoActiveBatchError,
    NoActiveResultError,
    NoHistoryError,
    PaletteError,
    UnknownPaletteError,
)
from beadforge.export import (
    BeadUsageEstimate,
    ColorUsage,
    estimate_bead_usage,
    export_json,
    export_pattern,
    export_stats_csv,
)
from beadforge.grid import ConversionResult, Grid
from beadforge.history import HistoryEntry, HistoryManager
from beadforge.logging import get_logger, setup_logging
from beadforge.matcher import ColorMatcher, find_closest_color
from beadforge.models import (
    BeadCell,
    BeadColor,
    BeadForgeConfig,
    ConversionOptions,
    ConverterConfig,
    GridDimensions,
    LabColor,
    OutputConfig,
    PaletteKind,
    PixelSample,
)
from beadforge.palette import Palette, create_palette, preset_names
from beadforge.tools import (
    Brush,
    ColorPicker,
    Eraser,
    Fill,
    RectSelect,
    Tool,
    ToolContext,
    ToolManager,
    default_tool_manager,
)

__all__ = [
    "BatchAlreadyActiveError",
    "BatchError",
    "BeadCell",
    "BeadColor",
    "BeadForgeConfig",
    "BeadForgeError",
    "BeadUsageEstimate",
    "Brush",
    "ColorMatcher",
    "ColorPicker",
    "ColorUsage",
    "ConfigError",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "ConverterConfig",
    "EditorError",
    "EmptyPaletteError",
    "Eraser",
    "Fill",
    "Grid",
    "GridDimensions",
    "GridEditor",
    "HistoryEntry",
    "HistoryManager",
    "ImageConverter",
    "InvalidImageError",
    "LabColor",
    "NoActiveBatchError",
    "NoActiveResultError",
    "NoHistoryError",
    "OutputConfig",
    "Palette",
    "PaletteError",
    "PaletteKind",
    "PixelSample",
    "RectSelect",
    "Tool",
    "ToolContext",
    "ToolManager",
    "UnknownPaletteError",
    "create_palette",
    "default_tool_manager",
    "delta_e",
    "estimate_bead_usage",
    "export_json",
    "export_pattern",
    "export_stats_csv",
    "find_closest_color",
    "get_logger",
    "hex_to_rgb",
    "load_config",
    "preset_names",
    "rgb_distance",
    "rgb_to_hex",
    "rgb_to_lab",
    "setup_logging",
    "validate_config",
    "weighted_rgb_distance",
]
