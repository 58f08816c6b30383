"""
MCP tools implementation.

This module provides the built-in tools exposed through the MCP protocol,
the registry they are kept in, and argument validation.
"""

from .base import BaseTool, ToolResult
from .calculate import CalculateTool
from .echo import EchoTool
from .errors import DuplicateToolError, ToolError, ToolExecutionError, ToolValidationError
from .memory import GetMemoryTool, SetMemoryTool
from .registry import ToolRegistry
from .validation import validate_arguments

__all__ = [
    "BaseTool",
    "ToolError",
    "ToolExecutionError",
    "ToolValidationError",
    "DuplicateToolError",
    "ToolResult",
    "ToolRegistry",
    "validate_arguments",
    "EchoTool",
    "CalculateTool",
    "GetMemoryTool",
    "SetMemoryTool",
]
