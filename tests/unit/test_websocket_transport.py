from __future__ import annotations

import asyncio
from typing import Any
from collections.abc import AsyncIterator

import orjson
import pytest

from voice_bridge.realtime.transport import ResponseFrame
from voice_bridge.realtime.websocket_transport import WebSocketDuplexTransport, to_response_frame


class _FakeConnection:
    def __init__(self, incoming: list[str]) -> None:
        self.incoming = incoming
        self.sent: list[str] = []
        self.closed = asyncio.Event()

    async def send(self, text: str) -> None:
        self.sent.append(text)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed.set()

    async def __aiter__(self) -> AsyncIterator[str]:
        for message in self.incoming:
            yield message
        await self.closed.wait()


async def _frames(*events: dict[str, Any]) -> AsyncIterator[bytes]:
    for event in events:
        yield orjson.dumps(event)


def test_to_response_frame_maps_error_keys() -> None:
    assert to_response_frame('{"modelStreamErrorException": {"message": "x"}}') == ResponseFrame(
        model_stream_error={"message": "x"}
    )
    assert to_response_frame('{"internalServerException": "down"}') == ResponseFrame(internal_server_error="down")
    assert to_response_frame('{"event": {"textOutput": {}}}').chunk == b'{"event": {"textOutput": {}}}'
    assert to_response_frame(b"garbage").chunk == b"garbage"


@pytest.mark.asyncio
async def test_open_stream_sends_and_receives() -> None:
    connection = _FakeConnection(['{"event": {"textOutput": {"content": "hi"}}}'])
    captured: dict[str, Any] = {}

    async def connect(url: str, **kwargs: Any) -> _FakeConnection:
        captured["url"] = url
        captured.update(kwargs)
        return connection

    transport = WebSocketDuplexTransport(url="ws://gateway.test/stream", api_key="k", connect=connect)
    responses = await transport.open_stream(_frames({"event": {"sessionStart": {}}}, {"event": {"sessionEnd": {}}}))
    received = [frame async for frame in responses]

    assert captured["url"] == "ws://gateway.test/stream"
    assert captured["additional_headers"] == [("Authorization", "Bearer k")]
    assert [orjson.loads(text) for text in connection.sent] == [
        {"event": {"sessionStart": {}}},
        {"event": {"sessionEnd": {}}},
    ]
    assert len(received) == 1
    assert orjson.loads(received[0].chunk) == {"event": {"textOutput": {"content": "hi"}}}
    assert connection.closed.is_set()
