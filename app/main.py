"""
Entry point for lumen-tools.

Builds the tool registry a transport (MCP over stdio/SSE, HTTP, ...) sits
on top of. The transport itself lives outside this package.

Usage:
    registry = create_registry()
    result = await registry.call("resize", {"image_path": "/tmp/photo.jpg", "scale": 4})
"""

from __future__ import annotations

from loguru import logger

from app.tools import BackgroundRemovalTool, ToolRegistry, UpscaleTool
from lumen_core.config import Settings, settings
from lumen_core.logging import setup_logging


def create_registry(config: Settings | None = None, configure_logging: bool = True) -> ToolRegistry:
    """
    Create the registry with every default tool.

    Args:
        config: Settings to use. Defaults to the global settings.
        configure_logging: Whether to install the loguru sinks.

    Returns:
        ToolRegistry: Registry holding bgcleaner and resize.
    """
    config = config or settings
    if configure_logging:
        setup_logging(config.LOG_LEVEL)

    registry = ToolRegistry(
        [
            BackgroundRemovalTool(config=config),
            UpscaleTool(config=config),
        ]
    )
    logger.info(f"{config.SERVICE_NAME} tools: {', '.join(registry.names())}")
    return registry
