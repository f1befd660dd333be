"""
Tool registry: the seam a transport layer uses to list and call tools.
"""
from __future__ import annotations

from typing import Any, Iterable

from app.tools.base import Tool, ToolResult


class ToolRegistry:
    """Name-indexed collection of tools with uniform dispatch."""

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_schemas(self) -> list[dict[str, Any]]:
        return [tool.to_schema() for tool in self._tools.values()]

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run a tool by name; unknown names produce an error result."""
        tool = self.get(name)
        if tool is None:
            return ToolResult.error(f"Tool not found: {name}")
        return await tool.run(arguments)

    async def aclose(self) -> None:
        """Release clients held by registered tools."""
        for tool in self._tools.values():
            close = getattr(tool, "close", None)
            if close is not None:
                await close()
