"""Inbound demultiplexer: response frames to typed handler notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from datetime import datetime, timezone
from collections.abc import AsyncIterator

import orjson

from voice_bridge.events.names import SessionEvent
from voice_bridge.events.inbound import InboundKind, InboundEvent, classify_event
from voice_bridge.state.session import PendingToolUse, SessionRecord
from voice_bridge.errors import ModelStreamError, RemoteStreamError, InternalServerError, ResponseStreamError

if TYPE_CHECKING:
    from voice_bridge.realtime.transport import ResponseFrame

    from .engine import SessionEngine

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class InboundDemultiplexer:
    """Reads one session's response frames in order and routes each to handlers.

    Tool content-ends suspend the loop for the tool round-trip, so a session
    has at most one tool invocation outstanding.
    """

    def __init__(self, engine: SessionEngine) -> None:
        self._engine = engine

    async def run(self, record: SessionRecord, frames: AsyncIterator[ResponseFrame]) -> None:
        """Consume ``frames`` until they end or the session goes inactive.

        Error frames and iterator failures are dispatched as ``error`` and then
        raised as ``RemoteStreamError`` subclasses.
        """
        try:
            async for frame in frames:
                if not record.is_active:
                    logger.debug("session %s inactive; dropping remaining frames", record.session_id)
                    break
                record.touch()
                await self._handle_frame(record, frame)
        except (RemoteStreamError, asyncio.CancelledError):
            raise
        except Exception as exc:
            logger.warning("response stream failed for session %s: %s", record.session_id, exc)
            await self._engine.dispatch_to(
                record,
                SessionEvent.ERROR,
                {"source": ResponseStreamError.tag, "message": str(exc)},
            )
            raise ResponseStreamError(str(exc)) from exc
        finally:
            aclose = getattr(frames, "aclose", None)
            if aclose is not None:
                await aclose()

        await self._engine.dispatch_to(record, SessionEvent.STREAM_COMPLETE, {"timestamp": _utc_timestamp()})

    async def _handle_frame(self, record: SessionRecord, frame: ResponseFrame) -> None:
        if frame.model_stream_error is not None:
            await self._raise_remote_error(record, ModelStreamError(frame.model_stream_error))
        if frame.internal_server_error is not None:
            await self._raise_remote_error(record, InternalServerError(frame.internal_server_error))
        if not frame.chunk:
            return

        try:
            message = orjson.loads(frame.chunk)
        except orjson.JSONDecodeError:
            logger.warning("session %s: undecodable response chunk skipped", record.session_id)
            logger.debug("raw chunk: %r", frame.chunk[:200])
            return

        event = classify_event(message)
        if event is not None:
            await self._route(record, event)

    async def _raise_remote_error(self, record: SessionRecord, error: RemoteStreamError) -> None:
        logger.error("session %s: remote reported %s: %s", record.session_id, error.tag, error.details)
        await self._engine.dispatch_to(record, SessionEvent.ERROR, {"type": error.tag, "details": error.details})
        raise error

    async def _route(self, record: SessionRecord, event: InboundEvent) -> None:
        kind = event.kind
        if kind is InboundKind.TOOL_USE:
            data: dict[str, Any] = event.data if isinstance(event.data, dict) else {}
            # A second toolUse before resolution replaces the first.
            record.pending_tool_use = PendingToolUse(
                tool_use_id=str(data.get("toolUseId") or ""),
                tool_name=str(data.get("toolName") or ""),
                raw_content=data,
            )
            await self._engine.dispatch_to(record, SessionEvent.TOOL_USE, event.data)
        elif kind is InboundKind.TOOL_CONTENT_END:
            await self._engine.run_tool_round_trip(record)
        else:
            await self._engine.dispatch_to(record, event.name, event.data)


__all__ = ["InboundDemultiplexer"]
