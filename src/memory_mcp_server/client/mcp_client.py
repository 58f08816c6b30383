"""
Stdio MCP client.

Spawns an MCP server as a subprocess and exchanges newline-delimited
JSON-RPC messages with it over the child's stdin/stdout.
"""

import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

import structlog

from ..protocol.schemas import DEFAULT_PROTOCOL_VERSION, ErrorCode

logger = structlog.get_logger(__name__)


def default_server_command() -> List[str]:
    """Command running this package's stdio server with the current interpreter."""
    return [sys.executable, "-m", "memory_mcp_server.main"]


class MCPClientError(Exception):
    """Error reported by the server or raised by the client itself."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data or {}

    @classmethod
    def from_response(cls, error: Dict[str, Any]) -> "MCPClientError":
        return cls(
            str(error.get("message", "Unknown error")),
            code=error.get("code"),
            data=error.get("data"),
        )

    @property
    def error_code(self) -> Optional[ErrorCode]:
        """The protocol error code, if it is a known one."""
        try:
            return ErrorCode(self.code)
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"[{self.code}] {self.message}"


class MCPClient:
    """
    MCP client speaking JSON-RPC over a subprocess' stdio.

    Requests are sent one at a time; each call waits for the response
    carrying its id.
    """

    def __init__(
        self,
        command: Optional[List[str]] = None,
        name: str = "memory-mcp-client",
        version: str = "1.0.0",
        timeout_seconds: float = 30.0,
    ):
        self.command = command or default_server_command()
        self.client_info = {"name": name, "version": version}
        self.timeout_seconds = timeout_seconds
        self.server_info: Optional[Dict[str, Any]] = None
        self.server_capabilities: Dict[str, Any] = {}
        self._process: Optional[Any] = None
        self._request_id = 0
        self._lock = asyncio.Lock()

    async def connect(self, process: Optional[Any] = None) -> Dict[str, Any]:
        """
        Start the server (or adopt a started process) and run the
        initialize handshake.

        Returns:
            The initialize result
        """
        if self._process is not None:
            raise MCPClientError("Client is already connected")

        if process is None:
            logger.info("Spawning MCP server", command=self.command)
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
        self._process = process

        try:
            result = await self.request(
                "initialize",
                {
                    "protocolVersion": DEFAULT_PROTOCOL_VERSION,
                    "capabilities": {},
                    "clientInfo": self.client_info,
                },
            )
            await self.notify("notifications/initialized")
        except Exception:
            await self.close()
            raise

        self.server_info = result.get("serverInfo")
        self.server_capabilities = result.get("capabilities", {})
        logger.info("Connected to MCP server", server_info=self.server_info)
        return result

    async def close(self) -> None:
        """Close stdin and wait for the server to exit."""
        process = self._process
        if process is None:
            return
        self._process = None

        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

        if process.returncode is None:
            try:
                await asyncio.wait_for(process.wait(), timeout=5.0)
            except asyncio.TimeoutError:
                logger.warning("MCP server did not exit, terminating")
                process.terminate()
                await process.wait()

        logger.info("Disconnected from MCP server")

    async def __aenter__(self) -> "MCPClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._process is not None

    async def request(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a request and wait for its result.

        Raises:
            MCPClientError: If the server answers with an error, closes
                the connection or does not answer in time
        """
        async with self._lock:
            self._request_id += 1
            request_id = self._request_id

            message: Dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
            if params is not None:
                message["params"] = params

            await self._write(message)
            try:
                response = await asyncio.wait_for(
                    self._read_response(request_id), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError:
                raise MCPClientError(f"Request timed out: {method}")

        if "error" in response:
            raise MCPClientError.from_response(response["error"])
        return response.get("result", {})

    async def notify(self, method: str, params: Optional[Dict[str, Any]] = None) -> None:
        """Send a notification; no response is expected."""
        message: Dict[str, Any] = {"jsonrpc": "2.0", "method": method}
        if params is not None:
            message["params"] = params
        await self._write(message)

    async def ping(self) -> None:
        await self.request("ping")

    async def list_tools(self) -> List[Dict[str, Any]]:
        result = await self.request("tools/list")
        return result.get("tools", [])

    async def list_resources(self) -> List[Dict[str, Any]]:
        result = await self.request("resources/list")
        return result.get("resources", [])

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Call a tool and return its content items."""
        result = await self.request("tools/call", {"name": name, "arguments": arguments or {}})
        return result.get("content", [])

    async def read_resource(self, uri: str) -> List[Dict[str, Any]]:
        """Read a resource and return its content items."""
        result = await self.request("resources/read", {"uri": uri})
        return result.get("contents", [])

    async def _write(self, message: Dict[str, Any]) -> None:
        if self._process is None:
            raise MCPClientError("Client is not connected")

        self._process.stdin.write((json.dumps(message) + "\n").encode("utf-8"))
        await self._process.stdin.drain()

    async def _read_response(self, request_id: int) -> Dict[str, Any]:
        while True:
            line = await self._process.stdout.readline()
            if not line:
                raise MCPClientError("Server closed the connection")

            try:
                message = json.loads(line.decode("utf-8"))
            except json.JSONDecodeError:
                logger.warning("Ignoring non-JSON output from server", line=line[:100])
                continue

            if not isinstance(message, dict):
                continue

            if message.get("id") == request_id:
                return message

            if "method" in message:
                logger.debug("Ignoring server message", method=message["method"])
            elif message.get("id") is None and "error" in message:
                raise MCPClientError.from_response(message["error"])
            else:
                logger.warning("Ignoring response for another request", response_id=message.get("id"))
