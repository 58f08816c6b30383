"""
Pytest configuration and fixtures for memory MCP server tests.
"""

import pytest

from memory_mcp_server.config.settings import Config, ServerConfig, StoreConfig
from memory_mcp_server.protocol.handlers import MCPHandler
from memory_mcp_server.protocol.schemas import MCPInitializeRequest
from memory_mcp_server.resources.registry import ResourceRegistry
from memory_mcp_server.server import MemoryMCPServer
from memory_mcp_server.store import MemoryStore
from memory_mcp_server.tools.registry import ToolRegistry

SEED = {
    "config": {"theme": "dark", "language": "en"},
    "data": {"users": ["alice", "bob"], "tasks": ["task1", "task2"]},
}


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        version="1.0.0-test",
        server=ServerConfig(name="test-server", version="0.0.1", log_level="DEBUG"),
        store=StoreConfig(seed=SEED),
    )


@pytest.fixture
def store():
    """Create a store seeded like the default server."""
    return MemoryStore(SEED)


@pytest.fixture
def tool_registry():
    return ToolRegistry()


@pytest.fixture
def resource_registry(store):
    return ResourceRegistry(store)


@pytest.fixture
def handler(tool_registry, resource_registry):
    """Create a bare MCP handler with empty registries."""
    return MCPHandler(tools=tool_registry, resources=resource_registry)


@pytest.fixture
def server(test_config):
    """Create a fully wired server."""
    return MemoryMCPServer(test_config)


@pytest.fixture
def init_request():
    return MCPInitializeRequest(
        id="init-1",
        params={
            "protocolVersion": "2024-11-05",
            "clientInfo": {"name": "test-client", "version": "1.0.0"},
            "capabilities": {},
        },
    )
