"""
Main memory MCP server implementation.

Coordinates the store, registries, protocol handler and transport to
serve tools and resources over stdio.
"""

import asyncio
import signal
import sys
from typing import Any, Dict, List, Optional

import structlog

from .config.settings import Config, ToolConfig
from .protocol.handlers import MCPHandler
from .protocol.schemas import Resource, ServerInfo
from .protocol.transport import StdioTransport
from .resources.registry import ResourceRegistry
from .store import MemoryStore
from .tools.base import BaseTool
from .tools.calculate import CalculateTool
from .tools.echo import EchoTool
from .tools.memory import GetMemoryTool, SetMemoryTool
from .tools.registry import ToolRegistry

logger = structlog.get_logger(__name__)

DEFAULT_RESOURCES: List[Dict[str, str]] = [
    {
        "key": "config",
        "name": "Configuration Settings",
        "description": "Application configuration data",
    },
    {
        "key": "data",
        "name": "Application Data",
        "description": "Sample application data including users and tasks",
    },
]


class MemoryMCPServer:
    """
    MCP server exposing the built-in tools and memory resources.

    Owns one memory store, shared by the memory tools and the resource
    registry. Independent instances share no state.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        resources: Optional[List[Dict[str, str]]] = None,
    ):
        """
        Initialize the MCP server.

        Args:
            config: Server configuration
            resources: Memory resources to register, as dicts with
                key, name and description
        """
        self.config = config or Config()
        self._running = False
        self._shutdown_event = asyncio.Event()

        self.store = MemoryStore(self.config.store.seed)
        self.tool_registry = ToolRegistry()
        self.resource_registry = ResourceRegistry(self.store)

        self.mcp_handler = MCPHandler(
            tools=self.tool_registry,
            resources=self.resource_registry,
            server_info=ServerInfo(
                name=self.config.server.name,
                version=self.config.server.version,
            ),
        )
        self.transport: Optional[StdioTransport] = None

        self._register_tools()
        self._register_resources(DEFAULT_RESOURCES if resources is None else resources)

    def _register_tools(self) -> None:
        """Register all enabled tools with the tool registry."""
        tools_config = self.config.tools
        candidates = [
            (tools_config.echo, lambda cfg: EchoTool(cfg)),
            (tools_config.calculate, lambda cfg: CalculateTool(cfg)),
            (tools_config.get_memory, lambda cfg: GetMemoryTool(self.store, cfg)),
            (tools_config.set_memory, lambda cfg: SetMemoryTool(self.store, cfg)),
        ]

        for tool_config, factory in candidates:
            if tool_config.enabled:
                self.register_tool(factory(tool_config.model_dump()))

        logger.info(
            "Tools registered successfully",
            enabled_tools=self.tool_registry.names,
            total_tools=len(self.tool_registry),
        )

    def _register_resources(self, resources: List[Dict[str, str]]) -> None:
        for spec in resources:
            self.resource_registry.register_memory_resource(
                spec["key"], spec["name"], spec.get("description")
            )

    def register_tool(self, tool: BaseTool) -> None:
        """Register an additional tool."""
        self.tool_registry.register(tool)

    def register_resource(self, resource: Resource, producer: Any = None) -> None:
        """Register an additional resource."""
        self.resource_registry.register(resource, producer)

    async def connect(self, transport: StdioTransport) -> None:
        """
        Attach a transport and serve requests until it stops.

        The initialize handshake is the first request the transport
        delivers to the handler.
        """
        if self._running:
            raise RuntimeError("Server is already connected")

        self.transport = transport
        transport.set_message_handler(self.mcp_handler.handle_request)
        self._running = True

        logger.info(
            "Server connected",
            server=self.config.server.name,
            tools=self.tool_registry.names,
            resources=len(self.resource_registry),
        )

        try:
            await transport.start()
        finally:
            self._running = False
            self._shutdown_event.set()

    async def stop(self) -> None:
        """Stop the MCP server."""
        if not self._running:
            return

        logger.info("Stopping memory MCP server")
        self._running = False
        self._shutdown_event.set()
        if self.transport:
            await self.transport.stop()

    async def run_stdio(self) -> None:
        """
        Run the server with stdio transport.

        Returns on EOF, SIGINT or SIGTERM.
        """
        self._setup_signal_handlers()
        transport_task = asyncio.create_task(self.connect(StdioTransport()))
        shutdown_task = asyncio.create_task(self._shutdown_event.wait())

        try:
            await asyncio.wait(
                {transport_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            shutdown_task.cancel()
            if not transport_task.done():
                await self.stop()
                transport_task.cancel()

        try:
            await transport_task
        except asyncio.CancelledError:
            logger.info("Server operation cancelled")

        logger.info("Server stopped")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        if sys.platform == "win32":
            return

        loop = asyncio.get_running_loop()

        def signal_handler(signum: int) -> None:
            logger.info("Received signal, initiating shutdown", signal=signum)
            self._shutdown_event.set()

        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, signal_handler, signum)

    @property
    def running(self) -> bool:
        """Check if server is running."""
        return self._running


def create_example_server(name: str = "example-server", version: str = "1.0.0") -> MemoryMCPServer:
    """
    Create a pre-configured server with a single echo tool and one
    example resource.

    Invalid echo arguments are reported as InvalidRequest.
    """
    config = Config(
        server={"name": name, "version": version},
        store={"seed": {"example": {"message": "Hello from example server!"}}},
        tools={
            "echo": ToolConfig(reject_invalid_arguments=True),
            "calculate": ToolConfig(enabled=False),
            "get_memory": ToolConfig(enabled=False),
            "set_memory": ToolConfig(enabled=False),
        },
    )
    return MemoryMCPServer(
        config,
        resources=[
            {
                "key": "example",
                "name": "Example Data",
                "description": "Example data stored in memory",
            }
        ],
    )


async def start_example_server(name: str = "example-server", version: str = "1.0.0") -> MemoryMCPServer:
    """Create an example server and serve it over stdio until EOF."""
    server = create_example_server(name, version)
    await server.run_stdio()
    return server
