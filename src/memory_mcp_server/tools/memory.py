"""
Memory tools for the MCP server.

Read and write JSON values in the shared in-memory store.
"""

import json
from typing import Any, Dict, Optional

from ..protocol.schemas import Tool
from ..store import MemoryStore
from ..utils import strict_json
from .base import BaseTool, ToolResult
from .errors import ToolExecutionError

_NOT_FOUND = object()


def dump_json(value: Any) -> str:
    """Pretty-print a stored value with two-space indentation."""
    return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)


class GetMemoryTool(BaseTool):
    """Tool for reading a value from the memory store."""

    name = "get_memory"
    description = "Get value from memory store"

    def __init__(self, store: MemoryStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "key": self._create_parameter("string", "Key to retrieve from memory"),
            },
            required=["key"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        value = await self.store.get(arguments["key"], _NOT_FOUND)
        if value is _NOT_FOUND:
            return ToolResult.success("Key not found")
        return ToolResult.success(dump_json(value))


class SetMemoryTool(BaseTool):
    """Tool for writing a JSON value to the memory store."""

    name = "set_memory"
    description = "Set value in memory store"

    def __init__(self, store: MemoryStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "key": self._create_parameter("string", "Key to store in memory"),
                "value": self._create_parameter("string", "Value to store (JSON string)"),
            },
            required=["key", "value"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        key = arguments["key"]
        raw_value = arguments["value"]

        try:
            parsed = strict_json.loads(raw_value)
        except ValueError as e:
            raise ToolExecutionError(
                "Value must be valid JSON", code="invalid_json", details={"reason": str(e)}
            )

        await self.store.set(key, parsed)
        return ToolResult.success(f"Successfully set {key} = {raw_value}")
