"""Caller-facing handle for one session."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from voice_bridge.errors import InvalidSessionStateError
from voice_bridge.events.names import SessionEvent
from voice_bridge.state.session import EventCallback
from voice_bridge.config.models import DEFAULT_VOICE_ID, DEFAULT_SYSTEM_PROMPT, DEFAULT_AUDIO_OUTPUT_CONFIGURATION
from voice_bridge.config.session import HANDLE_CLOSE_PAUSE_S, DEFAULT_AUDIO_BATCH_SIZE, DEFAULT_AUDIO_BUFFER_CAPACITY

from .audio_buffer import AudioJitterBuffer

if TYPE_CHECKING:
    from voice_bridge.engine.engine import SessionEngine

logger = logging.getLogger(__name__)


class SessionHandle:
    def __init__(
        self,
        session_id: str,
        engine: SessionEngine,
        *,
        voice_id: str = DEFAULT_VOICE_ID,
        buffer_capacity: int = DEFAULT_AUDIO_BUFFER_CAPACITY,
        batch_size: int = DEFAULT_AUDIO_BATCH_SIZE,
        auto_drain: bool = True,
    ) -> None:
        self._session_id = session_id
        self._engine = engine
        self.voice_id = voice_id
        self._audio = AudioJitterBuffer(
            self._forward_audio,
            capacity=buffer_capacity,
            batch_size=batch_size,
            auto_drain=auto_drain,
        )

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def is_active(self) -> bool:
        return self._engine.is_active(self._session_id)

    @property
    def audio_buffer(self) -> AudioJitterBuffer:
        return self._audio

    def on_event(self, event_type: str | SessionEvent, callback: EventCallback) -> SessionHandle:
        self._engine.register_handler(self._session_id, event_type, callback)
        return self

    async def setup_prompt_start(self, audio_output_config: dict[str, Any] | None = None) -> None:
        # The voice is read at call time so a voiceConfig message can still change it.
        config = {**DEFAULT_AUDIO_OUTPUT_CONFIGURATION, "voiceId": self.voice_id, **(audio_output_config or {})}
        self._engine.setup_prompt_start(self._session_id, config)

    async def setup_system_prompt(
        self,
        content: str = DEFAULT_SYSTEM_PROMPT,
        text_config: dict[str, Any] | None = None,
    ) -> None:
        self._engine.setup_system_prompt(self._session_id, text_config, content)

    async def setup_start_audio(self, audio_config: dict[str, Any] | None = None) -> None:
        self._engine.setup_start_audio(self._session_id, audio_config)

    async def stream_audio(self, chunk: bytes) -> None:
        if not self.is_active:
            raise InvalidSessionStateError(session_id=self._session_id)
        self._audio.push(chunk)

    def _forward_audio(self, chunk: bytes) -> None:
        self._engine.stream_audio_chunk(self._session_id, chunk)

    async def end_audio_content(self) -> None:
        # Buffered audio belongs to the content being ended.
        self._audio.flush()
        await self._engine.send_content_end(self._session_id)

    async def end_prompt(self) -> None:
        await self._engine.send_prompt_end(self._session_id)

    async def close(self) -> None:
        if self._engine.get_session(self._session_id) is None:
            return
        self._audio.stop()
        await asyncio.sleep(HANDLE_CLOSE_PAUSE_S)
        await self._engine.close_graceful(self._session_id)

    def force_close(self) -> None:
        logger.info("session %s: force close requested", self._session_id)
        self._audio.stop()
        self._engine.close_forced(self._session_id)


__all__ = ["SessionHandle"]
