"""
Unit tests for the stdio transport.
"""

import io
import json

import pytest

from memory_mcp_server.protocol.schemas import ErrorCode, MCPResponse
from memory_mcp_server.protocol.transport import StdioTransport, TransportError


def lines(text):
    return [json.loads(line) for line in text.splitlines() if line]


def request(request_id, method, params=None):
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return json.dumps(message)


@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture
def transport(server, stdout):
    transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)
    transport.set_message_handler(server.mcp_handler.handle_request)
    return transport


class TestStdioTransport:
    """Test line processing and the read loop."""

    @pytest.mark.asyncio
    async def test_request_gets_response(self, transport, stdout):
        await transport.process_line(request(1, "tools/call", {"name": "echo", "arguments": {"text": "hi"}}))

        assert lines(stdout.getvalue()) == [
            {
                "jsonrpc": "2.0",
                "id": 1,
                "result": {"content": [{"type": "text", "text": "Echo: hi"}]},
            }
        ]

    @pytest.mark.asyncio
    async def test_error_response(self, transport, stdout):
        await transport.process_line(request("r", "tools/call", {"name": "nope", "arguments": {}}))

        (response,) = lines(stdout.getvalue())
        assert response["id"] == "r"
        assert "result" not in response
        assert response["error"] == {"code": ErrorCode.METHOD_NOT_FOUND, "message": "Unknown tool: nope"}

    @pytest.mark.asyncio
    async def test_notification_gets_no_response(self, transport, stdout):
        await transport.process_line(json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}))

        assert stdout.getvalue() == ""

    @pytest.mark.asyncio
    async def test_parse_error(self, transport, stdout):
        await transport.process_line("{not json")

        assert lines(stdout.getvalue()) == [
            {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e999"])
    async def test_non_finite_numbers_are_parse_errors(self, transport, stdout, literal):
        line = (
            '{"jsonrpc":"2.0","id":5,"method":"tools/call","params":{"name":"calculate",'
            f'"arguments":{{"operation":"add","a":{literal},"b":1}}}}}}'
        )

        await transport.process_line(line)

        (response,) = lines(stdout.getvalue())
        assert response["id"] is None
        assert response["error"]["code"] == ErrorCode.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_unserializable_result_becomes_internal_error(self, stdout):
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)
        transport.set_message_handler(lambda req: MCPResponse(id=req.id, result={"x": float("nan")}))

        await transport.process_line(request(6, "ping"))

        output = stdout.getvalue()
        assert "NaN" not in output
        (response,) = lines(output)
        assert response["id"] == 6
        assert response["error"] == {
            "code": ErrorCode.INTERNAL_ERROR,
            "message": "Response is not serializable as JSON",
        }

    @pytest.mark.asyncio
    async def test_invalid_request_shape(self, transport, stdout):
        await transport.process_line(json.dumps({"jsonrpc": "2.0", "id": 4, "method": "ping", "params": [1]}))

        (response,) = lines(stdout.getvalue())
        assert response["id"] == 4
        assert response["error"]["code"] == ErrorCode.INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_non_object_message(self, transport, stdout):
        await transport.process_line("[1, 2]")

        (response,) = lines(stdout.getvalue())
        assert response["error"]["code"] == ErrorCode.INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_internal_error(self, stdout):
        def broken_handler(request):
            raise RuntimeError("boom")

        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)
        transport.set_message_handler(broken_handler)

        await transport.process_line(request(9, "ping"))

        (response,) = lines(stdout.getvalue())
        assert response["id"] == 9
        assert response["error"]["code"] == ErrorCode.INTERNAL_ERROR
        assert "boom" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_sync_handler(self, stdout):
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)
        transport.set_message_handler(lambda req: MCPResponse(id=req.id, result={"sync": True}))

        await transport.process_line(request(2, "ping"))

        assert lines(stdout.getvalue())[0]["result"] == {"sync": True}

    @pytest.mark.asyncio
    async def test_start_processes_requests_in_order_until_eof(self, server, stdout):
        stdin = io.StringIO(
            "\n".join(
                [
                    request(1, "initialize", {"protocolVersion": "2025-06-18", "capabilities": {}}),
                    json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
                    "",
                    request(2, "tools/call", {"name": "set_memory", "arguments": {"key": "k", "value": "1"}}),
                    request(3, "tools/call", {"name": "get_memory", "arguments": {"key": "k"}}),
                    request(4, "resources/read", {"uri": "memory://k"}),
                ]
            )
            + "\n"
        )
        transport = StdioTransport(stdin=stdin, stdout=stdout)
        transport.set_message_handler(server.mcp_handler.handle_request)

        await transport.start()

        responses = lines(stdout.getvalue())
        assert [response["id"] for response in responses] == [1, 2, 3, 4]
        assert responses[0]["result"]["serverInfo"] == {"name": "test-server", "version": "0.0.1"}
        assert responses[2]["result"]["content"][0]["text"] == "1"
        assert responses[3]["result"]["contents"][0]["text"] == "1"
        assert not transport.running

    @pytest.mark.asyncio
    async def test_start_requires_handler(self):
        transport = StdioTransport(stdin=io.StringIO(), stdout=io.StringIO())

        with pytest.raises(TransportError):
            await transport.start()
