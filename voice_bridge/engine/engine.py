"""Session engine: owns every live conversation and its outbound/inbound pumps."""

from __future__ import annotations

import uuid
import base64
import asyncio
import inspect
import logging
from typing import Any

from voice_bridge.tools.registry import ToolRegistry
from voice_bridge.session.handle import SessionHandle
from voice_bridge.state.context import EngineContext
from voice_bridge.events.envelope import Envelope
from voice_bridge.events.names import SessionEvent, event_key
from voice_bridge.state.session import EventCallback, SessionRecord, TeardownState
from voice_bridge.errors import (
    RemoteStreamError,
    ToolNotFoundError,
    ToolInvocationError,
    SessionNotFoundError,
    DuplicateSessionError,
    InvalidSessionStateError,
)
from voice_bridge.config.models import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEXT_CONFIGURATION,
    DEFAULT_AUDIO_INPUT_CONFIGURATION,
    DEFAULT_AUDIO_OUTPUT_CONFIGURATION,
)
from voice_bridge.events.builder import (
    build_prompt_end,
    build_audio_input,
    build_audio_start,
    build_content_end,
    build_session_end,
    build_tool_result,
    build_prompt_start,
    build_session_start,
    build_system_prompt,
)

from .demux import InboundDemultiplexer
from .channel import SessionChannel
from .outbound import OutboundSequence

logger = logging.getLogger(__name__)


class SessionEngine:
    """Multiplexes many concurrent sessions over one duplex transport.

    All state lives on the running event loop; nothing here takes a lock.
    """

    def __init__(self, context: EngineContext) -> None:
        self._context = context
        self._sessions: dict[str, SessionRecord] = {}
        self._cleanup_in_progress: dict[str, SessionRecord] = {}
        self._demux = InboundDemultiplexer(self)

    @property
    def context(self) -> EngineContext:
        return self._context

    @property
    def tools(self) -> ToolRegistry:
        return self._context.tools

    # ------------------------------------------------------------------ #
    # Registry
    # ------------------------------------------------------------------ #
    def create_session(
        self,
        session_id: str | None = None,
        *,
        inference_config: dict[str, Any] | None = None,
    ) -> SessionHandle:
        session_id = session_id or str(uuid.uuid4())
        if session_id in self._sessions:
            raise DuplicateSessionError(session_id=session_id)

        record = SessionRecord(
            session_id=session_id,
            prompt_name=str(uuid.uuid4()),
            audio_content_id=str(uuid.uuid4()),
            inference_config=dict(inference_config or self._context.inference_config),
            outbound=SessionChannel(),
        )
        self._sessions[session_id] = record
        logger.info("session %s created (active: %d)", session_id, len(self._sessions))
        return SessionHandle(
            session_id,
            self,
            voice_id=self._context.default_voice_id,
            buffer_capacity=self._context.audio_buffer_capacity,
            batch_size=self._context.audio_batch_size,
        )

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self._sessions.get(session_id)

    def is_active(self, session_id: str) -> bool:
        record = self._sessions.get(session_id)
        return record is not None and record.is_active

    def list_active(self) -> list[str]:
        return [session_id for session_id, record in self._sessions.items() if record.is_active]

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def last_activity(self, session_id: str) -> float | None:
        record = self._sessions.get(session_id)
        return record.last_activity_at if record is not None else None

    def is_cleanup_in_progress(self, session_id: str) -> bool:
        return session_id in self._cleanup_in_progress

    def _require(self, session_id: str) -> SessionRecord:
        record = self._sessions.get(session_id)
        if record is None:
            raise SessionNotFoundError(session_id=session_id)
        return record

    def _is_current(self, record: SessionRecord) -> bool:
        return record.is_active and self._sessions.get(record.session_id) is record

    # ------------------------------------------------------------------ #
    # Streaming
    # ------------------------------------------------------------------ #
    async def start(self, session_id: str) -> None:
        """Open the duplex stream and pump responses until it ends.

        Failures are reported to the session's ``error`` handler and end the
        session gracefully; they are not raised to the caller.
        """
        record = self._require(session_id)
        self._enqueue_record(record, build_session_start(record.inference_config))
        outbound = OutboundSequence(record, self._sessions)

        try:
            frames = await self._context.transport.open_stream(outbound)
            await self._demux.run(record, frames)
        except asyncio.CancelledError:
            raise
        except RemoteStreamError as exc:
            # Already dispatched by the demultiplexer.
            logger.warning("session %s: stream ended with %s", session_id, exc.tag)
        except Exception as exc:
            logger.exception("session %s: bidirectional stream failed", session_id)
            await self.dispatch_to(
                record,
                SessionEvent.ERROR,
                {"source": "bidirectionalStream", "message": str(exc)},
            )
        else:
            logger.info("session %s: response stream complete", session_id)
            self._release_if_stale(record)
            return

        if self._is_current(record):
            await self.close_graceful(session_id)
        else:
            self._release_if_stale(record)

    def enqueue(self, session_id: str, envelope: Envelope) -> bool:
        record = self._sessions.get(session_id)
        if record is None:
            logger.debug("enqueue to unknown session %s ignored", session_id)
            return False
        return self._enqueue_record(record, envelope)

    def _enqueue_record(self, record: SessionRecord, envelope: Envelope) -> bool:
        if not record.is_active:
            logger.debug("enqueue to inactive session %s ignored (%s)", record.session_id, envelope.kind)
            return False
        record.outbound.put(envelope)
        record.touch()
        return True

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #
    def register_handler(self, session_id: str, event_type: str | SessionEvent, callback: EventCallback) -> None:
        record = self._require(session_id)
        record.handlers[event_key(event_type)] = callback

    async def dispatch(self, session_id: str, event_type: str | SessionEvent, data: Any) -> None:
        record = self._sessions.get(session_id)
        if record is not None:
            await self.dispatch_to(record, event_type, data)

    async def dispatch_to(self, record: SessionRecord, event_type: str | SessionEvent, data: Any) -> None:
        key = event_key(event_type)
        handler = record.handlers.get(key)
        if handler is not None:
            await self._invoke_handler(record, key, handler, data)
        any_handler = record.handlers.get(SessionEvent.ANY.value)
        if any_handler is not None:
            await self._invoke_handler(record, SessionEvent.ANY.value, any_handler, {"type": key, "data": data})

    async def _invoke_handler(self, record: SessionRecord, key: str, handler: EventCallback, data: Any) -> None:
        try:
            result = handler(data)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("session %s: %s handler failed", record.session_id, key)

    # ------------------------------------------------------------------ #
    # Tool round-trip
    # ------------------------------------------------------------------ #
    async def run_tool_round_trip(self, record: SessionRecord) -> None:
        pending = record.pending_tool_use
        record.pending_tool_use = None
        if pending is None:
            logger.warning("session %s: tool content ended without a pending tool use", record.session_id)
            return

        await self.dispatch_to(
            record,
            SessionEvent.TOOL_END,
            {
                "toolUseContent": pending.raw_content,
                "toolUseId": pending.tool_use_id,
                "toolName": pending.tool_name,
            },
        )

        try:
            result = await self.tools.invoke(pending.tool_name, pending.raw_content)
        except (ToolNotFoundError, ToolInvocationError) as exc:
            logger.warning("session %s: tool %s failed: %s", record.session_id, pending.tool_name, exc)
            # No tool-result is sent; the remote side sees no answer for this tool use.
            await self.dispatch_to(
                record,
                SessionEvent.ERROR,
                {
                    "source": "toolUse",
                    "toolName": pending.tool_name,
                    "toolUseId": pending.tool_use_id,
                    "message": str(exc),
                },
            )
            return

        for envelope in build_tool_result(record.prompt_name, pending.tool_use_id, result):
            self._enqueue_record(record, envelope)
        await self.dispatch_to(record, SessionEvent.TOOL_RESULT, {"toolUseId": pending.tool_use_id, "result": result})

    # ------------------------------------------------------------------ #
    # Producer helpers
    # ------------------------------------------------------------------ #
    def setup_prompt_start(self, session_id: str, audio_output_config: dict[str, Any] | None = None) -> None:
        record = self._require(session_id)
        envelope = build_prompt_start(
            record.prompt_name,
            audio_output_config or DEFAULT_AUDIO_OUTPUT_CONFIGURATION,
            self.tools.tool_specs(),
        )
        if self._enqueue_record(record, envelope):
            record.is_prompt_start_sent = True

    def setup_system_prompt(
        self,
        session_id: str,
        text_config: dict[str, Any] | None = None,
        content: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        record = self._require(session_id)
        for envelope in build_system_prompt(record.prompt_name, text_config or DEFAULT_TEXT_CONFIGURATION, content):
            self._enqueue_record(record, envelope)

    def setup_start_audio(self, session_id: str, audio_config: dict[str, Any] | None = None) -> None:
        record = self._require(session_id)
        envelope = build_audio_start(
            record.prompt_name,
            record.audio_content_id,
            audio_config or DEFAULT_AUDIO_INPUT_CONFIGURATION,
        )
        if self._enqueue_record(record, envelope):
            record.is_audio_content_start_sent = True

    def stream_audio_chunk(self, session_id: str, data: bytes | str) -> None:
        record = self._sessions.get(session_id)
        if record is None or not record.is_active:
            raise InvalidSessionStateError(session_id=session_id)
        audio_b64 = data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
        self._enqueue_record(record, build_audio_input(record.prompt_name, record.audio_content_id, audio_b64))

    async def send_content_end(self, session_id: str) -> bool:
        record = self._sessions.get(session_id)
        return record is not None and await self._end_content(record)

    async def send_prompt_end(self, session_id: str) -> bool:
        record = self._sessions.get(session_id)
        return record is not None and await self._end_prompt(record)

    async def send_session_end(self, session_id: str) -> None:
        record = self._sessions.get(session_id)
        if record is not None:
            await self._end_session(record)

    async def _end_content(self, record: SessionRecord) -> bool:
        if not self._is_current(record) or not record.is_audio_content_start_sent or record.is_audio_content_end_sent:
            return False
        self._enqueue_record(record, build_content_end(record.prompt_name, record.audio_content_id))
        record.is_audio_content_end_sent = True
        await asyncio.sleep(self._context.timings.content_end_delay_s)
        return True

    async def _end_prompt(self, record: SessionRecord) -> bool:
        if not self._is_current(record) or not record.is_prompt_start_sent or record.is_prompt_end_sent:
            return False
        self._enqueue_record(record, build_prompt_end(record.prompt_name))
        record.is_prompt_end_sent = True
        await asyncio.sleep(self._context.timings.prompt_end_delay_s)
        return True

    async def _end_session(self, record: SessionRecord) -> None:
        if self._is_current(record):
            self._enqueue_record(record, build_session_end())
            await asyncio.sleep(self._context.timings.session_end_delay_s)
        self._release(record, TeardownState.CLOSED)

    def _release(self, record: SessionRecord, final_state: TeardownState) -> None:
        record.is_active = False
        record.outbound.close()
        if self._sessions.get(record.session_id) is record:
            del self._sessions[record.session_id]
            if record.teardown is not TeardownState.FORCED_CLOSED:
                record.teardown = final_state
            logger.info("session %s %s (active: %d)", record.session_id, record.teardown.value, len(self._sessions))

    def _release_if_stale(self, record: SessionRecord) -> None:
        # Outbound sequence ended without a teardown.
        if self._sessions.get(record.session_id) is not record or record.is_active:
            return
        if self._cleanup_in_progress.get(record.session_id) is record:
            return
        logger.info("session %s: stream ended while inactive; releasing", record.session_id)
        self._release(record, TeardownState.CLOSED)

    # ------------------------------------------------------------------ #
    # Teardown
    # ------------------------------------------------------------------ #
    @staticmethod
    def _advance(record: SessionRecord, state: TeardownState) -> None:
        if record.teardown is not TeardownState.FORCED_CLOSED:
            record.teardown = state

    async def close_graceful(self, session_id: str) -> None:
        """End content, prompt, then session, pausing between steps.

        A second call while a teardown for the same id is running returns
        immediately. Unexpected failures fall back to ``close_forced``.
        """
        if session_id in self._cleanup_in_progress:
            return
        record = self._sessions.get(session_id)
        if record is None:
            return

        self._cleanup_in_progress[session_id] = record
        logger.info("session %s: graceful close started", session_id)
        try:
            self._advance(record, TeardownState.ENDING_CONTENT)
            await self._end_content(record)
            self._advance(record, TeardownState.ENDING_PROMPT)
            await self._end_prompt(record)
            self._advance(record, TeardownState.ENDING_SESSION)
            await self._end_session(record)
        except asyncio.CancelledError:
            self.close_forced(session_id)
            raise
        except Exception:
            logger.exception("session %s: graceful close failed; forcing", session_id)
            self.close_forced(session_id)
        finally:
            if self._cleanup_in_progress.get(session_id) is record:
                del self._cleanup_in_progress[session_id]

    def close_forced(self, session_id: str) -> None:
        record = self._sessions.get(session_id)
        self._cleanup_in_progress.pop(session_id, None)
        if record is None:
            return
        record.teardown = TeardownState.FORCED_CLOSED
        self._release(record, TeardownState.FORCED_CLOSED)

    async def close_all(self, *, timeout_s: float) -> None:
        """Gracefully close every session, forcing those that overrun ``timeout_s``."""
        session_ids = list(self._sessions)
        if not session_ids:
            return
        logger.info("closing %d sessions", len(session_ids))
        results = await asyncio.gather(
            *(asyncio.wait_for(self.close_graceful(session_id), timeout=timeout_s) for session_id in session_ids),
            return_exceptions=True,
        )
        for session_id, result in zip(session_ids, results):
            if isinstance(result, BaseException):
                logger.warning("session %s: close timed out or failed (%s); forcing", session_id, result)
            self.close_forced(session_id)


__all__ = ["SessionEngine"]
