"""Process-wide context handed to the session engine at construction."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from dataclasses import field, dataclass

from voice_bridge.config.models import DEFAULT_VOICE_ID, DEFAULT_TOP_P, DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from voice_bridge.config.session import (
    DEFAULT_AUDIO_BATCH_SIZE,
    DEFAULT_PROMPT_END_DELAY_S,
    DEFAULT_CONTENT_END_DELAY_S,
    DEFAULT_SESSION_END_DELAY_S,
    DEFAULT_AUDIO_BUFFER_CAPACITY,
)

if TYPE_CHECKING:
    from voice_bridge.tools.registry import ToolRegistry
    from voice_bridge.realtime.transport import DuplexTransport


def default_inference_config() -> dict[str, Any]:
    return {"maxTokens": DEFAULT_MAX_TOKENS, "topP": DEFAULT_TOP_P, "temperature": DEFAULT_TEMPERATURE}


@dataclass(frozen=True, slots=True)
class TeardownTimings:
    content_end_delay_s: float = DEFAULT_CONTENT_END_DELAY_S
    prompt_end_delay_s: float = DEFAULT_PROMPT_END_DELAY_S
    session_end_delay_s: float = DEFAULT_SESSION_END_DELAY_S


@dataclass(frozen=True, slots=True)
class EngineContext:
    """Everything an engine needs besides its sessions.

    Built once per process (or per test) so several engines can coexist.
    """

    tools: ToolRegistry
    transport: DuplexTransport
    inference_config: dict[str, Any] = field(default_factory=default_inference_config)
    timings: TeardownTimings = field(default_factory=TeardownTimings)
    audio_buffer_capacity: int = DEFAULT_AUDIO_BUFFER_CAPACITY
    audio_batch_size: int = DEFAULT_AUDIO_BATCH_SIZE
    default_voice_id: str = DEFAULT_VOICE_ID


__all__ = ["EngineContext", "TeardownTimings", "default_inference_config"]
