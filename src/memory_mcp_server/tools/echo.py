"""
Echo tool for the MCP server.
"""

from typing import Any, Dict

from ..protocol.schemas import Tool
from .base import BaseTool, ToolResult


class EchoTool(BaseTool):
    """Echo back the provided text."""

    name = "echo"
    description = "Echo back the provided text"

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "text": self._create_parameter("string", "Text to echo back"),
            },
            required=["text"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        return ToolResult.success(f"Echo: {arguments['text']}")
