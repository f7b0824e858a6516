"""Pull-based view of a session's outbound queue for the duplex transport."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Mapping

from voice_bridge.state.session import SessionRecord

logger = logging.getLogger(__name__)


class OutboundSequence:
    """Async iterator yielding encoded envelopes until the session ends.

    Ends when the session was never active, has become inactive, is no longer
    registered, or its closing signal fires. ``aclose``/``athrow`` mark the
    session inactive so producers stop enqueuing.
    """

    def __init__(self, record: SessionRecord, sessions: Mapping[str, SessionRecord]) -> None:
        self._record = record
        self._sessions = sessions
        self._was_active = record.is_active
        self._yielded = 0

    @property
    def session_id(self) -> str:
        return self._record.session_id

    @property
    def yielded(self) -> int:
        return self._yielded

    def _is_live(self) -> bool:
        record = self._record
        return record.is_active and self._sessions.get(record.session_id) is record

    def __aiter__(self) -> OutboundSequence:
        return self

    async def __anext__(self) -> bytes:
        if not self._was_active:
            raise StopAsyncIteration
        channel = self._record.outbound
        while True:
            if not self._is_live():
                logger.debug("outbound sequence ended for session %s", self.session_id)
                raise StopAsyncIteration
            if not len(channel):
                if not await channel.wait():
                    logger.debug("outbound sequence closed for session %s", self.session_id)
                    raise StopAsyncIteration
                continue
            envelope = channel.pop()
            if envelope is None:
                continue
            self._yielded += 1
            return envelope.encode()

    async def aclose(self) -> None:
        self._record.is_active = False

    async def athrow(self, typ: Any, val: Any = None, tb: Any = None) -> bytes:
        self._record.is_active = False
        if val is None:
            val = typ() if isinstance(typ, type) else typ
        if tb is not None:
            val = val.with_traceback(tb)
        raise val


__all__ = ["OutboundSequence"]
