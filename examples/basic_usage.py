#!/usr/bin/env python3
"""
Basic usage example for the memory MCP server.

Drives a server in-process through its protocol handler, registers a
custom tool and resource, and prints what comes back. No subprocess or
MCP host is involved.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict

# Add the src directory to the path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from memory_mcp_server.config.settings import Config
from memory_mcp_server.protocol.schemas import (
    MCPCallToolRequest,
    MCPInitializeRequest,
    MCPListResourcesRequest,
    MCPListToolsRequest,
    MCPReadResourceRequest,
    Resource,
    ResourceContents,
    Tool,
)
from memory_mcp_server.server import MemoryMCPServer
from memory_mcp_server.tools.base import BaseTool, ToolResult


class ReverseTool(BaseTool):
    """Reverse the provided text."""

    name = "reverse"
    description = "Reverse the provided text"

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={"text": self._create_parameter("string", "Text to reverse")},
            required=["text"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> ToolResult:
        return ToolResult.success(arguments["text"][::-1])


def show(response) -> None:
    body = response.error if response.error else response.result
    print(f"   {json.dumps(body, indent=2)}")


async def main():
    """Run the example conversation."""
    server = MemoryMCPServer(Config(server={"log_level": "DEBUG"}))
    server.register_tool(ReverseTool())

    async def clock():
        return ResourceContents.text("memory://clock", json.dumps({"now": "12:00"}))

    server.register_resource(
        Resource(uri="memory://clock", name="Clock", description="Current time"), clock
    )
    handler = server.mcp_handler

    print("1. Initialize")
    show(
        await handler.handle_request(
            MCPInitializeRequest(
                id="init",
                params={
                    "protocolVersion": "2025-06-18",
                    "clientInfo": {"name": "basic-usage", "version": "1.0.0"},
                    "capabilities": {},
                },
            )
        )
    )

    print("\n2. List tools and resources")
    tools = (await handler.handle_request(MCPListToolsRequest(id="tools"))).result["tools"]
    for tool in tools:
        print(f"   - {tool['name']}: {tool['description']}")
    resources = (await handler.handle_request(MCPListResourcesRequest(id="res"))).result["resources"]
    for resource in resources:
        print(f"   - {resource['uri']}: {resource.get('description', '')}")

    print("\n3. Call tools")
    calls = [
        ("reverse", {"text": "stressed"}),
        ("calculate", {"operation": "divide", "a": 7, "b": 2}),
        ("calculate", {"operation": "divide", "a": 7, "b": 0}),
        ("set_memory", {"key": "notes", "value": json.dumps(["buy milk"])}),
        ("get_memory", {"key": "notes"}),
    ]
    for index, (name, arguments) in enumerate(calls):
        print(f"   {name} {arguments}")
        show(
            await handler.handle_request(
                MCPCallToolRequest(id=f"call-{index}", params={"name": name, "arguments": arguments})
            )
        )

    print("\n4. Read resources")
    for uri in ("memory://notes", "memory://clock", "file:///etc/hosts"):
        print(f"   {uri}")
        show(await handler.handle_request(MCPReadResourceRequest(id=uri, params={"uri": uri})))


if __name__ == "__main__":
    asyncio.run(main())
