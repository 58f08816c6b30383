"""Readable resources exposed through the MCP protocol."""

from .registry import (
    JSON_MIME_TYPE,
    MEMORY_SCHEME,
    DuplicateResourceError,
    ResourceRegistry,
    memory_key,
)

__all__ = [
    "ResourceRegistry",
    "DuplicateResourceError",
    "memory_key",
    "MEMORY_SCHEME",
    "JSON_MIME_TYPE",
]
