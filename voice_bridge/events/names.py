"""Closed set of notification names emitted to per-session handlers."""

from __future__ import annotations

from enum import Enum


class SessionEvent(str, Enum):
    CONTENT_START = "contentStart"
    TEXT_OUTPUT = "textOutput"
    AUDIO_OUTPUT = "audioOutput"
    TOOL_USE = "toolUse"
    TOOL_END = "toolEnd"
    TOOL_RESULT = "toolResult"
    CONTENT_END = "contentEnd"
    STREAM_COMPLETE = "streamComplete"
    ERROR = "error"
    ANY = "any"


def event_key(event_type: str | SessionEvent) -> str:
    """Normalize an enum member or a raw name to the handler-map key."""
    if isinstance(event_type, SessionEvent):
        return event_type.value
    return str(event_type)


__all__ = ["SessionEvent", "event_key"]
