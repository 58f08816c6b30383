"""
Tool error types.
"""

from typing import Any, Dict, Optional


class ToolError(Exception):
    """Base exception for tool execution errors."""

    def __init__(
        self, message: str, code: str = "tool_error", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ToolValidationError(ToolError):
    """Error for invalid tool arguments."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", details=details)


class ToolExecutionError(ToolError):
    """Domain failure while executing a valid call; reported as an error result."""

    def __init__(
        self,
        message: str,
        code: str = "execution_error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)


class DuplicateToolError(ValueError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Tool already registered: {name}")
        self.name = name
