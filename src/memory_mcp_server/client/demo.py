"""
Example client conversations.

Drives a server through discovery and a few tool calls, printing what it
sees. Used by the ``client`` and ``quickstart`` CLI commands.
"""

import json
import time
from typing import Any, Callable, Dict, List

import click
import structlog

from ..server import create_example_server
from .mcp_client import MCPClient, MCPClientError

logger = structlog.get_logger(__name__)

Echo = Callable[[str], None]


def _first(items: List[Dict[str, Any]]) -> Any:
    return items[0] if items else None


async def run_example_client(client: MCPClient, echo: Echo = click.echo) -> None:
    """
    Connect and exercise every tool and the config resource.

    Raises:
        MCPClientError: If the server rejects any of the calls
    """
    try:
        await client.connect()
        echo("Connected to MCP server")

        echo("\n=== Available Tools ===")
        tools = await client.list_tools()
        for tool in tools:
            echo(f"- {tool['name']}: {tool['description']}")

        echo("\n=== Available Resources ===")
        for resource in await client.list_resources():
            echo(f"- {resource['uri']}: {resource.get('description', '')}")

        echo("\n=== Testing Echo Tool ===")
        content = await client.call_tool("echo", {"text": "Hello from MCP client!"})
        echo(f"Echo result: {_first(content)}")

        echo("\n=== Testing Calculate Tool ===")
        content = await client.call_tool("calculate", {"operation": "add", "a": 10, "b": 5})
        echo(f"Calculate result: {_first(content)}")

        echo("\n=== Reading Config Resource ===")
        contents = await client.read_resource("memory://config")
        echo(f"Config resource: {_first(contents)}")

        echo("\n=== Testing Memory Tools ===")
        value = json.dumps({"message": "Hello from client", "timestamp": int(time.time() * 1000)})
        content = await client.call_tool("set_memory", {"key": "test", "value": value})
        echo(f"Set result: {_first(content)}")

        content = await client.call_tool("get_memory", {"key": "test"})
        echo(f"Get result: {_first(content)}")

    finally:
        await client.close()
        echo("\nClient disconnected")


async def run_discovery_client(client: MCPClient, echo: Echo = click.echo) -> None:
    """Connect, list tools and resources, and try echo when the server has it."""
    try:
        await client.connect()
        echo("Connected to MCP server")

        echo("\n=== Listing Tools ===")
        tools = await client.list_tools()
        for tool in tools:
            echo(f"- {tool['name']}: {tool['description']}")

        echo("\n=== Listing Resources ===")
        for resource in await client.list_resources():
            echo(f"- {resource['uri']}: {resource.get('description', '')}")

        if any(tool["name"] == "echo" for tool in tools):
            echo("\n=== Testing Echo Tool ===")
            content = await client.call_tool("echo", {"text": "Hello from example client!"})
            echo(f"Result: {_first(content)}")

    finally:
        await client.close()
        echo("Client disconnected")


async def verify_server_client(client: MCPClient, echo: Echo = click.echo) -> bool:
    """
    Run the discovery conversation and report whether it succeeded.

    Failures to spawn or talk to the server are reported, not raised.
    """
    try:
        await run_discovery_client(client, echo)
    except (MCPClientError, OSError) as e:
        logger.error("Server check failed", error=str(e))
        echo(f"Server check failed: {e}")
        return False
    echo("Server check passed")
    return True


def quickstart_demo(echo: Echo = click.echo) -> None:
    """Build an example server and print what it offers and how to use it."""
    echo("MCP Memory Server - Quick Start\n")

    echo("1. Creating example server...")
    server = create_example_server("quickstart-server", "1.0.0")
    echo("   Server created with default tools and resources\n")

    echo("2. Server capabilities:")
    resources = ", ".join(resource.uri for resource in server.resource_registry.list())
    echo(f"   Resources: {resources}")
    echo(f"   Tools: {', '.join(server.tool_registry.names)}")
    echo("   Transport: stdio\n")

    echo("3. To test this server:")
    echo("   Start server: memory-mcp-server serve")
    echo("   Test with client: memory-mcp-server client\n")

    echo("4. To register it with an MCP host, point the host at:")
    echo("   memory-mcp-server serve\n")

    echo("5. Next steps:")
    echo("   Add tools by subclassing BaseTool and calling register_tool")
    echo("   Add resources with register_resource")
    echo("   Seed the store from the config file")
