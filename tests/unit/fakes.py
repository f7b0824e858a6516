"""Test doubles shared by the unit tests."""

from __future__ import annotations

import asyncio
from typing import Any
from collections.abc import Callable, AsyncIterator

import orjson

from voice_bridge.state.context import TeardownTimings
from voice_bridge.realtime.transport import ResponseFrame

_END = object()

FAST_TIMINGS = TeardownTimings(content_end_delay_s=0.01, prompt_end_delay_s=0.01, session_end_delay_s=0.01)


class FakeTransport:
    """In-memory duplex transport: records what is sent, replays scripted responses.

    Every opened stream gets its own response queue, keyed by session id.
    Calls without ``session_id`` target the most recently opened stream.
    """

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.sent_by_session: dict[str, list[dict[str, Any]]] = {}
        self.opened = asyncio.Event()
        self.outbound_done = asyncio.Event()
        self.open_error: Exception | None = None
        self._responses: dict[str, asyncio.Queue[Any]] = {}
        self._latest: str | None = None
        self._senders: list[asyncio.Task] = []

    async def open_stream(self, frames: AsyncIterator[bytes]) -> AsyncIterator[ResponseFrame]:
        if self.open_error is not None:
            raise self.open_error
        session_id = getattr(frames, "session_id", "")
        queue: asyncio.Queue[Any] = asyncio.Queue()
        self._responses[session_id] = queue
        self.sent_by_session[session_id] = []
        self._latest = session_id
        self._senders.append(asyncio.create_task(self._drain(session_id, frames)))
        self.opened.set()
        return self._iter_responses(queue)

    def is_open(self, session_id: str) -> bool:
        return session_id in self._responses

    async def _drain(self, session_id: str, frames: AsyncIterator[bytes]) -> None:
        async for payload in frames:
            message = orjson.loads(payload)
            self.sent.append(message)
            self.sent_by_session[session_id].append(message)
        self.outbound_done.set()
        # The remote side hangs up once the outbound stream ends.
        self._responses[session_id].put_nowait(_END)

    @staticmethod
    async def _iter_responses(queue: asyncio.Queue[Any]) -> AsyncIterator[ResponseFrame]:
        while True:
            item = await queue.get()
            if item is _END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    def _queue(self, session_id: str | None) -> asyncio.Queue[Any]:
        key = self._latest if session_id is None else session_id
        if key is None or key not in self._responses:
            raise AssertionError(f"no stream open for session {key!r}")
        return self._responses[key]

    def push_event(self, event: dict[str, Any], *, session_id: str | None = None) -> None:
        self._queue(session_id).put_nowait(ResponseFrame(chunk=orjson.dumps({"event": event})))

    def push_frame(self, frame: ResponseFrame, *, session_id: str | None = None) -> None:
        self._queue(session_id).put_nowait(frame)

    def fail(self, exc: BaseException, *, session_id: str | None = None) -> None:
        self._queue(session_id).put_nowait(exc)

    def finish(self, *, session_id: str | None = None) -> None:
        self._queue(session_id).put_nowait(_END)

    def sent_kinds(self, session_id: str | None = None) -> list[str]:
        messages = self.sent if session_id is None else self.sent_by_session.get(session_id, [])
        return [next(iter(message["event"])) for message in messages]


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout=timeout)
