"""
Strict JSON decoding.

The standard decoder accepts ``NaN``, ``Infinity`` and ``-Infinity`` and
turns overflowing literals such as ``1e999`` into ``inf``. None of these
are JSON, and none can be written back out as JSON, so they are rejected.
"""

import json
import math
from typing import Any


class NonStandardJSONError(ValueError):
    """Raised for input that only the lenient Python decoder accepts."""


def _reject_constant(name: str) -> Any:
    raise NonStandardJSONError(f"{name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise NonStandardJSONError(f"Number out of range: {text}")
    return value


def loads(text: str) -> Any:
    """
    Decode JSON text, rejecting non-finite numbers.

    Raises:
        ValueError: ``json.JSONDecodeError`` for malformed text,
            ``NonStandardJSONError`` for non-finite numbers
    """
    return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_finite_float)
