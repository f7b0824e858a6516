"""Classification of decoded response events into a closed set of kinds."""

from __future__ import annotations

from enum import Enum
from typing import Any
from dataclasses import dataclass


class InboundKind(str, Enum):
    CONTENT_START = "contentStart"
    TEXT_OUTPUT = "textOutput"
    AUDIO_OUTPUT = "audioOutput"
    TOOL_USE = "toolUse"
    TOOL_CONTENT_END = "toolContentEnd"
    CONTENT_END = "contentEnd"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class InboundEvent:
    kind: InboundKind
    # Notification name used for dispatch; differs from ``kind`` for OTHER events.
    name: str
    data: Any


# Probe order matters: the first present key wins.
_DIRECT_KINDS: tuple[InboundKind, ...] = (
    InboundKind.CONTENT_START,
    InboundKind.TEXT_OUTPUT,
    InboundKind.AUDIO_OUTPUT,
    InboundKind.TOOL_USE,
)


def classify_event(message: Any) -> InboundEvent | None:
    """Map one decoded response object to its kind.

    Returns None for empty objects, which carry nothing to dispatch.
    """
    if not isinstance(message, dict) or not message:
        return None

    event = message.get("event")
    if not isinstance(event, dict):
        return InboundEvent(InboundKind.UNKNOWN, InboundKind.UNKNOWN.value, message)

    for kind in _DIRECT_KINDS:
        payload = event.get(kind.value)
        if payload is not None:
            return InboundEvent(kind, kind.value, payload)

    content_end = event.get("contentEnd")
    if content_end is not None:
        if isinstance(content_end, dict) and content_end.get("type") == "TOOL":
            return InboundEvent(InboundKind.TOOL_CONTENT_END, "contentEnd", content_end)
        return InboundEvent(InboundKind.CONTENT_END, "contentEnd", content_end)

    if event:
        return InboundEvent(InboundKind.OTHER, next(iter(event)), event)
    return InboundEvent(InboundKind.UNKNOWN, InboundKind.UNKNOWN.value, message)


__all__ = ["InboundEvent", "InboundKind", "classify_event"]
