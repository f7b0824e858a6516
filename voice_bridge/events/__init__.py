from .envelope import Envelope
from .names import SessionEvent, event_key
from .inbound import InboundKind, InboundEvent, classify_event
from .builder import (
    build_prompt_end,
    build_audio_input,
    build_audio_start,
    build_content_end,
    build_session_end,
    build_tool_result,
    build_prompt_start,
    build_session_start,
    build_system_prompt,
    serialize_tool_result,
)

__all__ = [
    "Envelope",
    "InboundEvent",
    "InboundKind",
    "SessionEvent",
    "build_audio_input",
    "build_audio_start",
    "build_content_end",
    "build_prompt_end",
    "build_prompt_start",
    "build_session_end",
    "build_session_start",
    "build_system_prompt",
    "build_tool_result",
    "classify_event",
    "event_key",
    "serialize_tool_result",
]
