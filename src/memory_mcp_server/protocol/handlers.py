"""
MCP Protocol message handlers.

Implements the core logic for handling MCP protocol messages,
routing them to the tool and resource registries, and normalizing
failures into protocol errors.
"""

from typing import Optional

import structlog

from ..resources.registry import ResourceRegistry
from ..tools.registry import ToolRegistry
from .schemas import (
    SUPPORTED_PROTOCOL_VERSIONS,
    MCPCallToolRequest,
    MCPCallToolResponse,
    MCPError,
    MCPInitializeRequest,
    MCPInitializeResponse,
    MCPInternalError,
    MCPInvalidParamsError,
    MCPListResourcesResponse,
    MCPListToolsResponse,
    MCPMethodNotFoundError,
    MCPReadResourceRequest,
    MCPReadResourceResponse,
    MCPRequest,
    MCPResponse,
    ServerInfo,
)

logger = structlog.get_logger(__name__)


class MCPHandler:
    """
    Main handler for MCP protocol messages.

    Routes incoming requests to the registries it was constructed with and
    is the single place where failures become protocol errors. Every
    request yields exactly one response carrying either a result or an
    error.
    """

    def __init__(
        self,
        tools: ToolRegistry,
        resources: ResourceRegistry,
        server_info: Optional[ServerInfo] = None,
    ):
        self.tools = tools
        self.resources = resources
        self.server_info = server_info or ServerInfo()
        self._initialized = False

        # Protocol capabilities
        self._capabilities = {
            "tools": {},
            "resources": {},
        }

        self._routes = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
            "resources/list": self._handle_list_resources,
            "resources/read": self._handle_read_resource,
        }

    async def handle_request(self, request: MCPRequest) -> MCPResponse:
        """
        Handle incoming MCP request.

        Args:
            request: Incoming request

        Returns:
            Response to send back to client
        """
        logger.debug(
            "Handling request",
            method=request.method,
            request_id=request.id,
        )

        try:
            route = self._routes.get(request.method)
            if route is None:
                raise MCPMethodNotFoundError(f"Method not found: {request.method}")
            return await route(request)

        except MCPError as e:
            logger.warning(
                "MCP error handling request",
                method=request.method,
                request_id=request.id,
                error_code=e.code,
                error_message=e.message,
            )
            return MCPResponse.from_error(request.id, e)

        except Exception as e:
            logger.error(
                "Unexpected error handling request",
                method=request.method,
                request_id=request.id,
                error=str(e),
                exc_info=True,
            )
            return MCPResponse.from_error(
                request.id, MCPInternalError("Internal error", data={"details": str(e)})
            )

    async def _handle_initialize(self, request: MCPRequest) -> MCPInitializeResponse:
        """Handle initialize request."""
        try:
            init_request = MCPInitializeRequest(id=request.id, params=request.params or {})
            client_info = init_request.client_info
        except Exception as e:
            raise MCPInvalidParamsError(f"Invalid initialize request: {e}")

        logger.info(
            "Initializing MCP session",
            protocol_version=init_request.protocol_version,
            client_info=client_info.model_dump() if client_info else None,
        )

        if init_request.protocol_version not in SUPPORTED_PROTOCOL_VERSIONS:
            # Continue anyway, the version is echoed back
            logger.warning(
                "Unsupported protocol version",
                requested=init_request.protocol_version,
                supported=SUPPORTED_PROTOCOL_VERSIONS,
            )

        self._initialized = True

        return MCPInitializeResponse(
            request_id=request.id,
            protocol_version=init_request.protocol_version,
            server_info=self.server_info,
            capabilities=self._capabilities,
        )

    async def _handle_ping(self, request: MCPRequest) -> MCPResponse:
        """Handle ping request."""
        return MCPResponse(id=request.id, result={})

    async def _handle_list_tools(self, request: MCPRequest) -> MCPListToolsResponse:
        """Handle list tools request."""
        tools = self.tools.list()
        logger.info("Listing tools", tool_count=len(tools))
        return MCPListToolsResponse(request.id, tools)

    async def _handle_list_resources(self, request: MCPRequest) -> MCPListResourcesResponse:
        """Handle list resources request."""
        resources = self.resources.list()
        logger.info("Listing resources", resource_count=len(resources))
        return MCPListResourcesResponse(request.id, resources)

    async def _handle_call_tool(self, request: MCPRequest) -> MCPCallToolResponse:
        """
        Handle call tool request.

        Error results and unexpected exceptions become InternalError with
        the original message. Protocol errors raised by the tool keep their
        code.
        """
        call_request = MCPCallToolRequest(id=request.id, params=request.params)
        tool_name = call_request.tool_name
        arguments = call_request.tool_arguments

        logger.info(
            "Calling tool",
            tool_name=tool_name,
            arguments=arguments,
        )

        tool = self.tools.get(tool_name)
        if tool is None:
            raise MCPMethodNotFoundError(f"Unknown tool: {tool_name}")

        try:
            result = await tool(arguments)
        except MCPError:
            raise
        except Exception as e:
            logger.error(
                "Tool execution failed",
                tool_name=tool_name,
                error=str(e),
                exc_info=True,
            )
            raise MCPInternalError(str(e) or type(e).__name__)

        if result.is_error:
            raise MCPInternalError(
                result.message,
                data={"error_code": result.error_code, **result.details},
            )

        logger.info("Tool execution completed", tool_name=tool_name)
        return MCPCallToolResponse(request_id=request.id, content=result.content)

    async def _handle_read_resource(self, request: MCPRequest) -> MCPReadResourceResponse:
        """Handle read resource request."""
        read_request = MCPReadResourceRequest(id=request.id, params=request.params)
        uri = read_request.uri
        if uri is None:
            raise MCPInvalidParamsError("Missing required parameter: uri")

        logger.info("Reading resource", uri=uri)

        try:
            contents = await self.resources.read(uri)
        except MCPError:
            raise
        except Exception as e:
            logger.error("Resource read failed", uri=uri, error=str(e), exc_info=True)
            raise MCPInternalError(str(e) or type(e).__name__)

        return MCPReadResourceResponse(request.id, contents)

    @property
    def initialized(self) -> bool:
        """Check if the handler is initialized."""
        return self._initialized
