"""
MCP Protocol message schemas and data structures.

Defines the JSON-RPC 2.0 message formats for the Model Context Protocol,
including requests, responses, tool and resource descriptors, and the
protocol error taxonomy.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ["2024-11-05", "2025-03-26", "2025-06-18"]


class ErrorCode(IntEnum):
    """JSON-RPC error codes used by the protocol."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPError(Exception):
    """
    Protocol-level failure, rendered as a JSON-RPC error object.

    Subclasses fix the error code; the base class takes it explicitly.
    """

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = int(self.default_code if code is None else code)
        self.data = data or {}

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            error["data"] = self.data
        return error


class MCPInvalidRequestError(MCPError):
    """The request is well formed but cannot be served."""

    default_code = ErrorCode.INVALID_REQUEST


class MCPInvalidParamsError(MCPError):
    """Request parameters are missing or malformed."""

    default_code = ErrorCode.INVALID_PARAMS


class MCPMethodNotFoundError(MCPError):
    """Unknown method or tool."""

    default_code = ErrorCode.METHOD_NOT_FOUND


class MCPInternalError(MCPError):
    default_code = ErrorCode.INTERNAL_ERROR


# Envelopes
class MCPMessage(BaseModel):
    """Common JSON-RPC 2.0 envelope."""

    model_config = ConfigDict(extra="forbid")

    jsonrpc: str = "2.0"


class MCPRequest(MCPMessage):
    """A message expecting exactly one response."""

    id: Union[str, int]
    method: str
    params: Optional[Dict[str, Any]] = None

    def param(self, name: str, default: Any = None) -> Any:
        """Get a single parameter, tolerating a missing params object."""
        return (self.params or {}).get(name, default)


class MCPResponse(MCPMessage):
    """
    Reply to a request.

    Carries either ``result`` or ``error``, never both. ``id`` is null
    only when the request id could not be determined.
    """

    id: Optional[Union[str, int]]
    result: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None

    def model_dump(self, **kwargs) -> Dict[str, Any]:
        data = super().model_dump(**kwargs)
        if self.error is not None:
            data.pop("result", None)
        else:
            data.pop("error", None)
            if data.get("result") is None:
                data["result"] = {}
        return data

    @classmethod
    def from_error(cls, request_id: Optional[Union[str, int]], error: MCPError) -> "MCPResponse":
        return cls(id=request_id, error=error.to_dict())


class MCPNotification(MCPMessage):
    """A message without id; never answered."""

    method: str
    params: Optional[Dict[str, Any]] = None


class ClientInfo(BaseModel):
    name: str
    version: str


class ServerInfo(BaseModel):
    """Name and version reported in the initialize result."""

    name: str = "memory-mcp-server"
    version: str = "1.0.0"


# Tool structures
class ToolParameter(BaseModel):
    """Tool parameter definition."""

    type: str = Field(description="Parameter type")
    description: Optional[str] = Field(default=None, description="Parameter description")
    enum: Optional[List[Any]] = Field(default=None, description="Allowed values")
    default: Optional[Any] = Field(default=None, description="Default value")


class ToolSchema(BaseModel):
    """Tool input schema definition."""

    type: str = Field(default="object", description="Schema type")
    properties: Dict[str, ToolParameter] = Field(description="Tool parameters")
    required: List[str] = Field(default_factory=list, description="Required parameters")


class Tool(BaseModel):
    """Tool definition."""

    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description")
    inputSchema: ToolSchema = Field(description="Tool input schema")

    def to_dict(self) -> Dict[str, Any]:
        """Render the tool for a tools/list result."""
        return self.model_dump(exclude_none=True)


# Resource structures
class Resource(BaseModel):
    """Resource definition."""

    uri: str = Field(description="Resource URI")
    name: str = Field(description="Human readable name")
    description: Optional[str] = Field(default=None, description="Resource description")
    mimeType: str = Field(default="application/json", description="Content MIME type")

    def to_dict(self) -> Dict[str, Any]:
        """Render the resource for a resources/list result."""
        return self.model_dump(exclude_none=True)


class ResourceContent(BaseModel):
    """A single item of resource contents."""

    uri: str
    mimeType: str
    text: str


class ResourceContents(BaseModel):
    """Contents returned by a resource read."""

    contents: List[ResourceContent] = Field(default_factory=list)

    @classmethod
    def text(cls, uri: str, text: str, mime_type: str = "application/json") -> "ResourceContents":
        """Create contents holding one text item."""
        return cls(contents=[ResourceContent(uri=uri, mimeType=mime_type, text=text)])


# Initialize protocol
class MCPInitializeRequest(MCPRequest):
    """Initialize request from client."""

    method: str = Field(default="initialize", frozen=True)
    params: Dict[str, Any] = Field(default_factory=dict, description="Initialize parameters")

    @property
    def protocol_version(self) -> str:
        """Get protocol version from params."""
        version = self.params.get("protocolVersion", DEFAULT_PROTOCOL_VERSION)
        return str(version)

    @property
    def client_info(self) -> Optional[ClientInfo]:
        """Get client info from params."""
        client_data = self.params.get("clientInfo")
        return ClientInfo(**client_data) if client_data else None

    @property
    def capabilities(self) -> Dict[str, Any]:
        """Get client capabilities from params."""
        caps = self.params.get("capabilities", {})
        return caps if isinstance(caps, dict) else {}


class MCPInitializeResponse(MCPResponse):
    """Initialize response to client."""

    def __init__(
        self,
        request_id: Union[str, int],
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        server_info: Optional[ServerInfo] = None,
        capabilities: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            id=request_id,
            result={
                "protocolVersion": protocol_version,
                "serverInfo": (server_info or ServerInfo()).model_dump(),
                "capabilities": capabilities or {"tools": {}, "resources": {}},
            },
        )


# List tools
class MCPListToolsRequest(MCPRequest):
    """List tools request from client."""

    method: str = Field(default="tools/list", frozen=True)


class MCPListToolsResponse(MCPResponse):
    """List tools response to client."""

    def __init__(self, request_id: Union[str, int], tools: List[Tool]):
        super().__init__(
            id=request_id,
            result={"tools": [tool.to_dict() for tool in tools]},
        )


# Call tool
class MCPCallToolRequest(MCPRequest):
    """Call tool request from client."""

    method: str = Field(default="tools/call", frozen=True)

    @property
    def tool_name(self) -> str:
        """Get tool name from params."""
        name = self.param("name", "")
        return str(name) if name is not None else ""

    @property
    def tool_arguments(self) -> Any:
        """Get raw tool arguments from params; validation happens per tool."""
        args = self.param("arguments")
        return {} if args is None else args


class MCPCallToolResponse(MCPResponse):
    """Call tool response to client."""

    def __init__(self, request_id: Union[str, int], content: List[Dict[str, Any]]):
        super().__init__(
            id=request_id,
            result={"content": content},
        )


# List resources
class MCPListResourcesRequest(MCPRequest):
    """List resources request from client."""

    method: str = Field(default="resources/list", frozen=True)


class MCPListResourcesResponse(MCPResponse):
    """List resources response to client."""

    def __init__(self, request_id: Union[str, int], resources: List[Resource]):
        super().__init__(
            id=request_id,
            result={"resources": [resource.to_dict() for resource in resources]},
        )


# Read resource
class MCPReadResourceRequest(MCPRequest):
    """Read resource request from client."""

    method: str = Field(default="resources/read", frozen=True)

    @property
    def uri(self) -> Optional[str]:
        """Get the requested URI from params."""
        uri = self.param("uri")
        return uri if isinstance(uri, str) else None


class MCPReadResourceResponse(MCPResponse):
    """Read resource response to client."""

    def __init__(self, request_id: Union[str, int], contents: ResourceContents):
        super().__init__(
            id=request_id,
            result=contents.model_dump(),
        )
