"""
Request-scoped context for tool invocations.

RunContext carries the correlation ID of a single tool call across the
HTTP calls it makes, so every log line and outbound request of one
invocation can be tied together.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class RunContext(BaseModel):
    """Request-scoped context for one tool invocation.

    Attributes:
        request_id: Unique identifier for request tracing.
        tool_name: Name of the tool being executed, if any.
    """

    request_id: str
    tool_name: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def for_tool(cls, tool_name: str) -> "RunContext":
        """Create a fresh RunContext for a tool call.

        Args:
            tool_name: The tool being invoked.

        Returns:
            A new RunContext with a generated request_id.
        """
        return cls(request_id=str(uuid.uuid4()), tool_name=tool_name)

    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers for propagating context.

        Returns:
            Dictionary of headers to inject into outbound requests.
        """
        return {"X-Request-Id": self.request_id}


def default_context() -> RunContext:
    """Create a RunContext for callers that do not provide one."""
    return RunContext(request_id=str(uuid.uuid4()))
