from __future__ import annotations

from typing import Any
from types import SimpleNamespace

import orjson
import pytest
from fastapi import WebSocketDisconnect

from voice_bridge.engine.engine import SessionEngine
from voice_bridge.handlers.connections import ConnectionManager
from voice_bridge.handlers.websocket.parser import parse_client_message
from voice_bridge.handlers.websocket.auth import get_api_key, validate_api_key
from voice_bridge.handlers.websocket.message_loop import run_message_loop


class _ScriptedWebSocket:
    def __init__(self, messages: list[Any]) -> None:
        self._incoming = [m if isinstance(m, str) else orjson.dumps(m).decode("utf-8") for m in messages]
        self.sent: list[dict[str, Any]] = []

    async def receive_text(self) -> str:
        if not self._incoming:
            raise WebSocketDisconnect(code=1000)
        return self._incoming.pop(0)

    async def send_text(self, text: str) -> None:
        self.sent.append(orjson.loads(text))

    def of_type(self, msg_type: str) -> list[dict[str, Any]]:
        return [m for m in self.sent if m["type"] == msg_type]


def test_parse_client_message_normalizes() -> None:
    msg = parse_client_message('{"type": " ping ", "payload": null}')
    assert msg == {"type": "ping", "session_id": "", "payload": {}}


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '{"payload": {}}',
        '{"type": ""}',
        '{"type": "ping", "session_id": 3}',
        '{"type": "ping", "payload": [1]}',
    ],
)
def test_parse_client_message_rejects(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_client_message(raw)


def test_api_key_sources() -> None:
    from_query = SimpleNamespace(query_params={"api_key": " k1 "}, headers={"x-api-key": "k2"})
    from_header = SimpleNamespace(query_params={}, headers={"x-api-key": "k2"})
    assert get_api_key(from_query) == "k1"
    assert get_api_key(from_header) == "k2"


def test_validate_api_key() -> None:
    assert validate_api_key("", "") is True
    assert validate_api_key("anything", "") is True
    assert validate_api_key("secret", "secret") is True
    assert validate_api_key("wrong", "secret") is False
    assert validate_api_key("", "secret") is False


@pytest.mark.asyncio
async def test_connection_manager_caps_admissions() -> None:
    manager = ConnectionManager(max_connections=1)
    first, second = object(), object()
    assert await manager.connect(first) is True
    assert await manager.connect(second) is False
    await manager.disconnect(first)
    assert await manager.connect(second) is True
    assert manager.get_connection_count() == 1


@pytest.mark.asyncio
async def test_message_loop_drives_a_session(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    record = engine.get_session("s1")
    assert record is not None
    ws = _ScriptedWebSocket(
        [
            {"type": "voiceConfig", "payload": {"voiceId": "matthew"}},
            {"type": "promptStart"},
            {"type": "systemPrompt", "payload": {"content": "be brief"}},
            {"type": "audioStart"},
            {"type": "audioInput", "payload": {"audio": "AAAA"}},
            {"type": "stopAudio"},
            {"type": "ping"},
        ]
    )

    stopped = await run_message_loop(ws, handle)

    assert stopped is True
    assert ws.of_type("voiceConfigConfirmed")[0]["payload"] == {"voiceId": "matthew"}
    assert ws.of_type("pong") == []
    assert [e.kind for e in record.outbound] == [
        "promptStart",
        "contentStart",
        "textInput",
        "contentEnd",
        "contentStart",
        "audioInput",
        "contentEnd",
        "promptEnd",
        "sessionEnd",
    ]
    prompt_start = list(record.outbound)[0]
    assert prompt_start.body["audioOutputConfiguration"]["voiceId"] == "matthew"
    assert engine.get_session("s1") is None


@pytest.mark.asyncio
async def test_message_loop_reports_bad_messages(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    ws = _ScriptedWebSocket(
        [
            "{broken",
            {"type": "dance"},
            {"type": "audioInput", "payload": {"audio": "***"}},
            {"type": "audioInput", "payload": {}},
            {"type": "voiceConfig", "payload": {}},
            {"type": "ping"},
        ]
    )

    stopped = await run_message_loop(ws, handle)

    assert stopped is False
    codes = [m["payload"]["code"] for m in ws.of_type("error")]
    assert codes == [
        "invalid_message",
        "invalid_message",
        "invalid_payload",
        "invalid_payload",
        "invalid_payload",
    ]
    assert all(m["session_id"] == "s1" for m in ws.sent)
    assert len(ws.of_type("pong")) == 1
    assert engine.is_active("s1")


@pytest.mark.asyncio
async def test_message_loop_reports_closed_session(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    handle.force_close()
    ws = _ScriptedWebSocket([{"type": "audioInput", "payload": {"audio": "AAAA"}}])

    assert await run_message_loop(ws, handle) is False
    [error] = ws.of_type("error")
    assert error["payload"]["code"] == "session_failed"
