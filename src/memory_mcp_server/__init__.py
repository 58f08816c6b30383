"""
Memory MCP Server

A Model Context Protocol server exposing example tools and in-memory
JSON resources over stdio, with a companion stdio client.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .client import MCPClient, MCPClientError
from .config.settings import Config, load_config
from .server import MemoryMCPServer, create_example_server
from .store import MemoryStore

__all__ = [
    "MemoryMCPServer",
    "create_example_server",
    "MemoryStore",
    "MCPClient",
    "MCPClientError",
    "Config",
    "load_config",
    "__version__",
    "__license__",
]
