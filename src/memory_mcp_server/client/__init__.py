"""Stdio client for MCP servers."""

from .mcp_client import MCPClient, MCPClientError, default_server_command

__all__ = ["MCPClient", "MCPClientError", "default_server_command"]
