"""
Calculate tool for the MCP server.

Performs basic arithmetic on two numbers.
"""

import math
import operator
from typing import Any, Dict, Union

from ..protocol.schemas import Tool
from .base import BaseTool, ToolResult
from .errors import ToolExecutionError

Number = Union[int, float]

OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


def format_number(value: Number) -> str:
    """
    Render a number the way JavaScript prints it: integral floats below
    1e21 without a trailing '.0', overflow as 'Infinity' or '-Infinity'.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


class CalculateTool(BaseTool):
    """Tool for basic arithmetic operations."""

    name = "calculate"
    description = "Perform basic arithmetic operations"

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "operation": self._create_parameter(
                    "string",
                    "The arithmetic operation to perform",
                    enum=list(OPERATIONS),
                ),
                "a": self._create_parameter("number", "First number"),
                "b": self._create_parameter("number", "Second number"),
            },
            required=["operation", "a", "b"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        operation = arguments["operation"]
        a = arguments["a"]
        b = arguments["b"]

        if operation == "divide" and b == 0:
            raise ToolExecutionError("Division by zero is not allowed", code="division_by_zero")

        result = OPERATIONS[operation](a, b)

        return ToolResult.success(
            f"Result: {format_number(a)} {operation} {format_number(b)} = {format_number(result)}"
        )
