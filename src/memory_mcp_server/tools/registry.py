"""Tool registry keyed by tool name."""

from typing import Dict, Iterator, List, Optional

import structlog

from ..protocol.schemas import Tool
from .base import BaseTool
from .errors import DuplicateToolError

logger = structlog.get_logger(__name__)


class ToolRegistry:
    """In-memory registry of MCP tools, kept in registration order."""

    def __init__(self) -> None:
        self._tools: Dict[str, BaseTool] = {}
        self._schemas: Dict[str, Tool] = {}

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool implementation.

        Raises:
            DuplicateToolError: If a tool with the same name is registered
        """
        schema = tool.get_schema()
        if schema.name in self._tools:
            raise DuplicateToolError(schema.name)

        self._tools[schema.name] = tool
        self._schemas[schema.name] = schema
        logger.info("Registered tool", tool_name=schema.name)

    def list(self) -> List[Tool]:
        """Return tool definitions for discovery."""
        return list(self._schemas.values())

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name."""
        return self._tools.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())
