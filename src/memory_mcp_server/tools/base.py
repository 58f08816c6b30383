"""
Base classes for MCP tools.

Provides common functionality and interfaces for the built-in tools,
including argument validation, error handling, and result formatting.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog

from ..protocol.schemas import MCPInvalidRequestError, Tool, ToolParameter, ToolSchema
from .errors import ToolError, ToolValidationError
from .validation import validate_arguments

logger = structlog.get_logger(__name__)


class ToolResult:
    """
    Standardized tool result format.

    A result is either a success carrying text content, or an error
    carrying a code and message. The dispatcher turns error results into
    protocol errors.
    """

    def __init__(
        self,
        content: List[Dict[str, Any]],
        is_error: bool = False,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.content = content
        self.is_error = is_error
        self.error_code = error_code
        self.details = details or {}

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        """Create a successful result with one text item."""
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def error(
        cls,
        message: str,
        error_code: str = "tool_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> "ToolResult":
        """Create an error result."""
        content = [{"type": "text", "text": message}]
        return cls(content=content, is_error=True, error_code=error_code, details=details)

    @classmethod
    def from_exception(cls, error: ToolError) -> "ToolResult":
        """Create an error result from a tool error."""
        return cls.error(error.message, error.code, error.details)

    @property
    def message(self) -> str:
        """Joined text of all content items."""
        return "\n".join(item.get("text", "") for item in self.content)


class BaseTool(ABC):
    """
    Base class for all MCP tools.

    Provides common functionality including argument validation,
    error handling, and result formatting.
    """

    # Tool metadata (must be defined by subclasses)
    name: str = ""
    description: str = ""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize tool with configuration.

        Args:
            config: Tool-specific configuration
        """
        self.config = config or {}
        self.reject_invalid_arguments = bool(self.config.get("reject_invalid_arguments", False))
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Set up tool-specific logging."""
        self.logger = logger.bind(tool=self.name)

    @abstractmethod
    def get_schema(self) -> Tool:
        """
        Get the tool schema definition.

        Returns:
            Tool schema for MCP protocol
        """

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        """
        Execute the tool with validated arguments.

        Args:
            arguments: Tool arguments from MCP request

        Returns:
            Tool execution result, an error result for domain failures
        """

    async def __call__(self, arguments: Any) -> ToolResult:
        """
        Validate arguments and execute the tool.

        Tool errors are returned as error results. Protocol errors raised by
        the tool propagate unchanged.

        Args:
            arguments: Raw tool arguments

        Returns:
            Tool execution result
        """
        self.logger.info("Executing tool", arguments=arguments)

        try:
            validated = validate_arguments(self.get_schema().inputSchema, arguments)
        except ToolValidationError as e:
            self.logger.warning("Invalid tool arguments", error_message=e.message, details=e.details)
            if self.reject_invalid_arguments:
                raise MCPInvalidRequestError(e.message, data=e.details)
            return ToolResult.from_exception(e)

        try:
            result = await self.execute(validated)
        except ToolError as e:
            self.logger.warning(
                "Tool execution failed",
                error_code=e.code,
                error_message=e.message,
                details=e.details,
            )
            return ToolResult.from_exception(e)

        self.logger.info("Tool execution completed", success=not result.is_error)
        return result

    def _create_parameter(
        self,
        param_type: str,
        description: str,
        enum: Optional[List[Any]] = None,
        default: Optional[Any] = None,
    ) -> ToolParameter:
        """Helper to create a parameter definition."""
        return ToolParameter(type=param_type, description=description, enum=enum, default=default)

    def _create_schema(
        self,
        parameters: Dict[str, ToolParameter],
        required: List[str],
    ) -> Tool:
        """Helper to create tool schema."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=ToolSchema(
                type="object",
                properties=parameters,
                required=required,
            ),
        )
