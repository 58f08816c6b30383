"""
MCP Protocol implementation for the memory MCP server.

This module provides the core Model Context Protocol implementation,
including message handling, transport, and schema definitions.
"""

from .handlers import MCPHandler
from .schemas import (
    ErrorCode,
    MCPCallToolRequest,
    MCPCallToolResponse,
    MCPError,
    MCPInitializeRequest,
    MCPInitializeResponse,
    MCPInternalError,
    MCPInvalidParamsError,
    MCPInvalidRequestError,
    MCPListResourcesRequest,
    MCPListToolsRequest,
    MCPMethodNotFoundError,
    MCPReadResourceRequest,
    MCPRequest,
    MCPResponse,
    Resource,
    ResourceContents,
    Tool,
)
from .transport import StdioTransport, TransportError

__all__ = [
    "MCPHandler",
    "StdioTransport",
    "TransportError",
    "ErrorCode",
    "MCPError",
    "MCPInvalidRequestError",
    "MCPInvalidParamsError",
    "MCPMethodNotFoundError",
    "MCPInternalError",
    "MCPInitializeRequest",
    "MCPInitializeResponse",
    "MCPListToolsRequest",
    "MCPListResourcesRequest",
    "MCPCallToolRequest",
    "MCPCallToolResponse",
    "MCPReadResourceRequest",
    "MCPRequest",
    "MCPResponse",
    "Tool",
    "Resource",
    "ResourceContents",
]
