"""Tools exposed to calling agents."""

from .base import TextContent, Tool, ToolResult
from .bgcleaner import BackgroundRemovalTool
from .registry import ToolRegistry
from .resize import UpscaleTool

__all__ = [
    "BackgroundRemovalTool",
    "TextContent",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "UpscaleTool",
]
