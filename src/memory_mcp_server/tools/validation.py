"""
Argument validation against declared tool input schemas.
"""

from typing import Any, Dict, Mapping

from ..protocol.schemas import ToolParameter, ToolSchema
from .errors import ToolValidationError

# bool is a subclass of int, so it is excluded explicitly from numeric types
_TYPE_CHECKS = {
    "string": lambda value: isinstance(value, str),
    "number": lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
    "boolean": lambda value: isinstance(value, bool),
    "object": lambda value: isinstance(value, dict),
    "array": lambda value: isinstance(value, list),
}


def validate_arguments(schema: ToolSchema, arguments: Any) -> Dict[str, Any]:
    """
    Validate raw tool arguments against a tool input schema.

    Declared parameters are checked for presence, type and enum membership.
    Undeclared arguments are passed through untouched.

    Args:
        schema: Declared input schema of the tool
        arguments: Untyped arguments from the request

    Returns:
        A copy of the arguments

    Raises:
        ToolValidationError: If validation fails
    """
    if not isinstance(arguments, Mapping):
        raise ToolValidationError(
            "Arguments must be an object",
            details={"actual_type": type(arguments).__name__},
        )

    for required_param in schema.required:
        if required_param not in arguments:
            raise ToolValidationError(
                f"Missing required parameter: {required_param}",
                details={"missing_parameter": required_param},
            )

    for param_name, definition in schema.properties.items():
        if param_name in arguments:
            validate_parameter(param_name, arguments[param_name], definition)

    return dict(arguments)


def validate_parameter(name: str, value: Any, definition: ToolParameter) -> None:
    """
    Validate a single parameter.

    Raises:
        ToolValidationError: If validation fails
    """
    check = _TYPE_CHECKS.get(definition.type)
    if check is not None and not check(value):
        raise ToolValidationError(
            f"Parameter '{name}' must be a {definition.type}",
            details={
                "parameter": name,
                "expected_type": definition.type,
                "actual_type": type(value).__name__,
            },
        )

    if definition.enum is not None and value not in definition.enum:
        raise ToolValidationError(
            f"Parameter '{name}' must be one of: {definition.enum}",
            details={
                "parameter": name,
                "allowed_values": definition.enum,
                "actual_value": value,
            },
        )
