from __future__ import annotations

import asyncio

import pytest

from voice_bridge.events.envelope import Envelope
from voice_bridge.engine.channel import SessionChannel
from voice_bridge.engine.outbound import OutboundSequence
from voice_bridge.state.session import SessionRecord


def _envelope(n: int) -> Envelope:
    return Envelope("audioInput", {"n": n})


def _record(session_id: str = "s1") -> SessionRecord:
    return SessionRecord(
        session_id=session_id,
        prompt_name="p1",
        audio_content_id="a1",
        inference_config={},
        outbound=SessionChannel(),
    )


def test_channel_is_fifo() -> None:
    channel = SessionChannel()
    for n in range(3):
        channel.put(_envelope(n))
    assert [channel.pop().body["n"] for _ in range(3)] == [0, 1, 2]
    assert channel.pop() is None
    assert not channel.data_ready.is_set()


@pytest.mark.asyncio
async def test_channel_wait_wakes_on_put() -> None:
    channel = SessionChannel()
    waiter = asyncio.create_task(channel.wait())
    await asyncio.sleep(0)
    channel.put(_envelope(1))
    assert await asyncio.wait_for(waiter, timeout=1.0) is True


@pytest.mark.asyncio
async def test_channel_closing_wins_over_queued_data() -> None:
    channel = SessionChannel()
    channel.put(_envelope(1))
    channel.close()
    assert await channel.wait() is False


@pytest.mark.asyncio
async def test_channel_wait_wakes_on_close() -> None:
    channel = SessionChannel()
    waiter = asyncio.create_task(channel.wait())
    await asyncio.sleep(0)
    channel.close()
    assert await asyncio.wait_for(waiter, timeout=1.0) is False


@pytest.mark.asyncio
async def test_outbound_yields_in_order_then_ends_on_close() -> None:
    record = _record()
    sessions = {record.session_id: record}
    outbound = OutboundSequence(record, sessions)
    for n in range(3):
        record.outbound.put(_envelope(n))

    received = [await outbound.__anext__() for _ in range(3)]
    assert received == [_envelope(n).encode() for n in range(3)]
    assert outbound.yielded == 3

    pending = asyncio.create_task(outbound.__anext__())
    await asyncio.sleep(0)
    record.outbound.close()
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(pending, timeout=1.0)


@pytest.mark.asyncio
async def test_outbound_ends_when_session_was_never_active() -> None:
    record = _record()
    record.is_active = False
    record.outbound.put(_envelope(1))
    outbound = OutboundSequence(record, {record.session_id: record})
    with pytest.raises(StopAsyncIteration):
        await outbound.__anext__()


@pytest.mark.asyncio
async def test_outbound_ends_when_session_is_unregistered() -> None:
    record = _record()
    sessions: dict[str, SessionRecord] = {record.session_id: record}
    outbound = OutboundSequence(record, sessions)
    record.outbound.put(_envelope(1))
    del sessions[record.session_id]
    with pytest.raises(StopAsyncIteration):
        await outbound.__anext__()


@pytest.mark.asyncio
async def test_outbound_aclose_marks_session_inactive() -> None:
    record = _record()
    outbound = OutboundSequence(record, {record.session_id: record})
    await outbound.aclose()
    assert record.is_active is False


@pytest.mark.asyncio
async def test_outbound_athrow_marks_inactive_and_reraises() -> None:
    record = _record()
    outbound = OutboundSequence(record, {record.session_id: record})
    with pytest.raises(RuntimeError, match="boom"):
        await outbound.athrow(RuntimeError("boom"))
    assert record.is_active is False
