import io
import json

import pytest

from sverigesradio_mcp.mcp.methods import MessageProcessor
from sverigesradio_mcp.services.transports import LegacySessionRegistry, StreamableTransport, format_sse
from sverigesradio_mcp.stdio import serve


def test_format_sse():
    assert format_sse({"a": 1}, event="message") == 'event: message\ndata: {"a": 1}\n\n'
    assert format_sse("line1\nline2") == "data: line1\ndata: line2\n\n"


async def test_legacy_stream_starts_with_endpoint_event():
    registry = LegacySessionRegistry()
    session = registry.open()

    await session.send({"jsonrpc": "2.0", "id": 1, "result": {}})
    registry.close(session.id)
    frames = [frame async for frame in session.stream()]

    assert frames[0] == f"event: endpoint\ndata: /messages?sessionId={session.id}\n\n"
    assert frames[1].startswith("event: message\n")
    assert json.loads(frames[1].split("data: ", 1)[1]) == {"jsonrpc": "2.0", "id": 1, "result": {}}
    assert len(frames) == 2
    assert session.id not in registry


async def test_send_after_close_fails():
    registry = LegacySessionRegistry()
    session = registry.open()
    registry.close(session.id)

    with pytest.raises(RuntimeError):
        await session.send({"jsonrpc": "2.0", "id": 1, "result": {}})


async def test_streamable_transport_processes_messages(dispatcher):
    transport = StreamableTransport("abc", MessageProcessor(dispatcher))

    response = await transport.handle({"jsonrpc": "2.0", "id": 7, "method": "ping"})

    assert response == {"jsonrpc": "2.0", "id": 7, "result": {}}


async def test_closed_streamable_transport_rejects_messages(dispatcher):
    transport = StreamableTransport("abc", MessageProcessor(dispatcher))
    await transport.close()

    with pytest.raises(RuntimeError):
        await transport.handle({"jsonrpc": "2.0", "id": 7, "method": "ping"})


async def test_stdio_answers_requests_line_by_line(dispatcher):
    reader = io.StringIO(
        "\n".join(
            [
                json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
                json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
                "",
                "{broken",
                json.dumps({"jsonrpc": "2.0", "id": 2, "method": "ping"}),
            ]
        )
        + "\n"
    )
    writer = io.StringIO()

    await serve(MessageProcessor(dispatcher), reader=reader, writer=writer)

    lines = [json.loads(line) for line in writer.getvalue().splitlines()]
    assert [line.get("id") for line in lines] == [1, None, 2]
    assert lines[0]["result"]["protocolVersion"] == "2025-03-26"
    assert lines[1]["error"]["code"] == -32700
