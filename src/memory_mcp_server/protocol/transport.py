"""
Stdio transport for MCP.

Reads one JSON-RPC message per line from stdin and writes one message
per line to stdout. Lines are handled strictly one after another, so
responses leave in the order their requests arrived.
"""

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, TextIO, Union

import structlog
from pydantic import ValidationError

from ..utils import strict_json
from .schemas import (
    ErrorCode,
    MCPError,
    MCPInternalError,
    MCPInvalidRequestError,
    MCPMessage,
    MCPNotification,
    MCPRequest,
    MCPResponse,
)

logger = structlog.get_logger(__name__)

MessageHandler = Union[
    Callable[[MCPRequest], MCPResponse],
    Callable[[MCPRequest], Awaitable[MCPResponse]],
]


class TransportError(Exception):
    """Raised when the transport cannot run or cannot write."""


class StdioTransport:
    """
    Line-delimited JSON-RPC over a pair of text streams.

    The streams default to the process' stdin and stdout. Blocking reads
    and writes run in the default executor.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._handler: Optional[MessageHandler] = None
        self._running = False

    def set_message_handler(self, handler: MessageHandler) -> None:
        """Install the callable that turns requests into responses."""
        self._handler = handler

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """
        Serve stdin until EOF or stop().

        Raises:
            TransportError: If already running or no handler is installed
        """
        if self._running:
            raise TransportError("Transport is already running")
        if self._handler is None:
            raise TransportError("Message handler not set")

        self._running = True
        logger.info("Stdio transport started")
        loop = asyncio.get_running_loop()

        try:
            while self._running:
                line = await loop.run_in_executor(None, self._stdin.readline)
                if not line:
                    logger.info("Stdin closed")
                    break
                await self.process_line(line)
        finally:
            self._running = False
            logger.info("Stdio transport stopped")

    async def stop(self) -> None:
        """Stop after the line currently being handled."""
        self._running = False

    async def send_message(self, message: MCPMessage) -> None:
        """
        Write one message as a compact JSON line and flush.

        Raises:
            TransportError: If the message cannot be serialized or written
        """
        try:
            payload = _encode(message)
        except (TypeError, ValueError) as e:
            raise TransportError(f"Cannot serialize message: {e}") from e

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, payload)
        except OSError as e:
            logger.error("Write to stdout failed", error=str(e))
            raise TransportError(f"Failed to send message: {e}") from e

    def _write(self, payload: str) -> None:
        self._stdout.write(payload)
        self._stdout.flush()

    async def process_line(self, line: str) -> None:
        """
        Handle one input line.

        Requests produce exactly one response line, notifications and blank
        lines produce none. Malformed input is answered with a protocol
        error rather than raised.
        """
        line = line.strip()
        if not line:
            return

        try:
            data = strict_json.loads(line)
        except ValueError as e:
            logger.warning("Unparseable input", error=str(e), line=line[:100])
            await self._reply_error(None, MCPError("Parse error", code=ErrorCode.PARSE_ERROR))
            return

        if not isinstance(data, dict):
            await self._reply_error(None, MCPInvalidRequestError("Invalid request"))
            return

        if "method" not in data:
            logger.warning("Ignoring message without method", message=data)
            return

        if "id" not in data:
            self._notification(data)
            return

        try:
            request = MCPRequest(**data)
        except ValidationError as e:
            request_id = data["id"] if isinstance(data["id"], (str, int)) else None
            logger.warning("Malformed request", request_id=request_id, error=str(e))
            await self._reply_error(request_id, MCPInvalidRequestError(f"Invalid request: {e}"))
            return

        logger.info("Handling request", method=request.method, request_id=request.id)
        await self._send_response(await self._dispatch(request))

    def _notification(self, data: Dict[str, Any]) -> None:
        try:
            notification = MCPNotification(**data)
        except ValidationError as e:
            logger.warning("Malformed notification", error=str(e))
            return
        logger.info("Notification received", method=notification.method)

    async def _dispatch(self, request: MCPRequest) -> MCPResponse:
        try:
            response = self._handler(request)
            if asyncio.iscoroutine(response):
                response = await response
        except Exception as e:
            logger.error("Message handler failed", request_id=request.id, exc_info=True)
            return MCPResponse.from_error(request.id, MCPInternalError(f"Internal error: {e}"))
        return response

    async def _reply_error(self, request_id: Optional[Union[str, int]], error: MCPError) -> None:
        await self.send_message(MCPResponse.from_error(request_id, error))

    async def _send_response(self, response: MCPResponse) -> None:
        try:
            _encode(response)
        except (TypeError, ValueError) as e:
            logger.error("Response is not valid JSON", request_id=response.id, error=str(e))
            response = MCPResponse.from_error(
                response.id, MCPInternalError("Response is not serializable as JSON")
            )
        await self.send_message(response)


def _encode(message: MCPMessage) -> str:
    return json.dumps(message.model_dump(), separators=(",", ":"), allow_nan=False) + "\n"
