"""Grid editing tools and the manager that dispatches to them."""

from beadforge.tools.base import Tool, ToolContext
from beadforge.tools.brush import Brush
from beadforge.tools.color_picker import ColorPicker
from beadforge.tools.eraser import Eraser
from beadforge.tools.fill import Fill
from beadforge.tools.manager import ToolManager, default_tool_manager
from beadforge.tools.rect_select import RectSelect

__all__ = [
    "Brush",
    "ColorPicker",
    "Eraser",
    "Fill",
    "RectSelect",
    "Tool",
    "ToolContext",
    "ToolManager",
    "default_tool_manager",
]
