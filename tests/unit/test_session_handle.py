from __future__ import annotations

import asyncio

import pytest

from voice_bridge.engine.engine import SessionEngine
from voice_bridge.session.handle import SessionHandle
from voice_bridge.config.models import DEFAULT_VOICE_ID
from voice_bridge.errors import InvalidSessionStateError
from voice_bridge.session.audio_buffer import AudioJitterBuffer


def _audio_chunks(engine: SessionEngine, session_id: str) -> list[str]:
    record = engine.get_session(session_id)
    assert record is not None
    return [e.body["content"] for e in record.outbound if e.kind == "audioInput"]


@pytest.mark.asyncio
async def test_prompt_start_merges_voice(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    assert handle.voice_id == DEFAULT_VOICE_ID
    handle.voice_id = "matthew"

    await handle.setup_prompt_start({"sampleRateHertz": 16000})

    record = engine.get_session("s1")
    assert record is not None
    [envelope] = list(record.outbound)
    config = envelope.body["audioOutputConfiguration"]
    assert config["voiceId"] == "matthew"
    assert config["sampleRateHertz"] == 16000
    assert config["mediaType"] == "audio/lpcm"


@pytest.mark.asyncio
async def test_buffer_evicts_oldest_when_full() -> None:
    forwarded: list[bytes] = []
    buffer = AudioJitterBuffer(forwarded.append, capacity=200, batch_size=5, auto_drain=False)

    for n in range(205):
        buffer.push(n.to_bytes(2, "big"))

    assert len(buffer) == 200
    assert buffer.dropped == 5
    buffer.flush()
    assert forwarded[0] == (5).to_bytes(2, "big")
    assert forwarded[-1] == (204).to_bytes(2, "big")


@pytest.mark.asyncio
async def test_buffer_drains_in_batches() -> None:
    forwarded: list[bytes] = []
    buffer = AudioJitterBuffer(forwarded.append, capacity=50, batch_size=5, auto_drain=False)
    for n in range(12):
        buffer.push(bytes([n]))

    buffer.drain()
    await asyncio.sleep(0)
    assert len(forwarded) == 5
    await asyncio.sleep(0)
    assert len(forwarded) == 10
    await asyncio.sleep(0)
    assert len(forwarded) == 12
    assert not buffer.is_draining


@pytest.mark.asyncio
async def test_buffer_sink_failure_drops_backlog() -> None:
    calls: list[bytes] = []

    def sink(chunk: bytes) -> None:
        calls.append(chunk)
        raise InvalidSessionStateError(session_id="s1")

    buffer = AudioJitterBuffer(sink, capacity=10, batch_size=5, auto_drain=False)
    for n in range(4):
        buffer.push(bytes([n]))

    buffer.drain()
    await asyncio.sleep(0)

    assert len(calls) == 1
    assert len(buffer) == 0
    assert not buffer.is_draining


def test_stopped_buffer_rejects_pushes() -> None:
    buffer = AudioJitterBuffer(lambda chunk: None, auto_drain=False)
    buffer.push(b"\x00")
    buffer.stop()
    assert buffer.push(b"\x01") is False
    assert len(buffer) == 0


@pytest.mark.asyncio
async def test_stream_audio_reaches_engine(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    await handle.setup_start_audio()
    await handle.stream_audio(b"\x00\x00")
    await handle.stream_audio(b"\xff\xff")
    await asyncio.sleep(0)

    assert _audio_chunks(engine, "s1") == ["AAA=", "//8="]


@pytest.mark.asyncio
async def test_end_audio_content_flushes_buffer_first(engine: SessionEngine) -> None:
    handle = SessionHandle("s1", engine, auto_drain=False)
    engine.create_session("s1")
    await handle.setup_start_audio()
    await handle.stream_audio(b"\x01")

    await handle.end_audio_content()

    record = engine.get_session("s1")
    assert record is not None
    assert [e.kind for e in record.outbound] == ["contentStart", "audioInput", "contentEnd"]


@pytest.mark.asyncio
async def test_stream_audio_on_closed_session_raises(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    handle.force_close()
    assert handle.is_active is False
    with pytest.raises(InvalidSessionStateError):
        await handle.stream_audio(b"\x00")


@pytest.mark.asyncio
async def test_close_is_graceful_and_idempotent(engine: SessionEngine) -> None:
    handle = engine.create_session("s1")
    record = engine.get_session("s1")
    assert record is not None
    await handle.setup_prompt_start()
    await handle.setup_start_audio()

    await handle.close()
    await handle.close()

    assert [e.kind for e in record.outbound][-3:] == ["contentEnd", "promptEnd", "sessionEnd"]
    assert engine.get_session("s1") is None
