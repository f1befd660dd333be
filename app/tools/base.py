"""
Tool Abstraction Layer

Every tool is defined by:
1. name: Unique identifier
2. description: What the tool does (shown to the calling agent)
3. input_model: pydantic model describing and validating its arguments
4. forward(): The actual implementation

Callers only ever use ``run(arguments)``, which always returns a ToolResult:
invalid arguments and failures come back as ``is_error=True`` results
instead of exceptions.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ValidationError

from lumen_core.runtime import RunContext


class TextContent(BaseModel):
    """A text block in a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform tool response."""

    content: list[TextContent]
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)


def format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "arguments"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class Tool(ABC):
    """
    Abstract base class for tools.

    Example:
    ```python
    class EchoInput(BaseModel):
        text: str

    class EchoTool(Tool):
        name = "echo"
        description = "Returns its input"
        input_model = EchoInput

        async def forward(self, params: EchoInput, context: RunContext) -> ToolResult:
            return ToolResult.success(params.text)
    ```
    """

    name: str
    description: str
    input_model: type[BaseModel]

    @abstractmethod
    async def forward(self, params: Any, context: RunContext) -> ToolResult:
        """Execute the tool with validated arguments."""
        ...

    async def run(self, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Validate ``arguments``, execute, and convert failures to error results."""
        context = RunContext.for_tool(self.name)

        try:
            params = self.input_model.model_validate(arguments or {})
        except ValidationError as e:
            return ToolResult.error(f"Invalid arguments: {format_validation_error(e)}")

        logger.info(f"[{context.request_id}] Running tool {self.name}")
        try:
            return await self.forward(params, context)
        except Exception as e:
            logger.exception(f"[{context.request_id}] Tool {self.name} failed")
            return ToolResult.error(f"Error: {e}")

    async def __call__(self, **kwargs: Any) -> ToolResult:
        """Allow calling tool instance directly."""
        return await self.run(kwargs)

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool's arguments."""
        return self.input_model.model_json_schema()

    def to_schema(self) -> dict[str, Any]:
        """Describe the tool for a calling agent."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }
