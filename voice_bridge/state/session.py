"""Per-conversation state owned by the session engine."""

from __future__ import annotations

import time
from enum import Enum
from typing import TYPE_CHECKING, Any
from dataclasses import field, dataclass
from collections.abc import Callable

if TYPE_CHECKING:
    from voice_bridge.engine.channel import SessionChannel

EventCallback = Callable[[Any], Any]


class TeardownState(str, Enum):
    ACTIVE = "active"
    ENDING_CONTENT = "ending_content"
    ENDING_PROMPT = "ending_prompt"
    ENDING_SESSION = "ending_session"
    CLOSED = "closed"
    FORCED_CLOSED = "forced_closed"


@dataclass(frozen=True, slots=True)
class PendingToolUse:
    tool_use_id: str
    tool_name: str
    raw_content: dict[str, Any]


@dataclass(slots=True)
class SessionRecord:
    session_id: str
    prompt_name: str
    audio_content_id: str
    inference_config: dict[str, Any]
    outbound: SessionChannel
    is_active: bool = True
    is_prompt_start_sent: bool = False
    is_audio_content_start_sent: bool = False
    is_audio_content_end_sent: bool = False
    is_prompt_end_sent: bool = False
    last_activity_at: float = field(default_factory=time.monotonic)
    pending_tool_use: PendingToolUse | None = None
    handlers: dict[str, EventCallback] = field(default_factory=dict)
    teardown: TeardownState = TeardownState.ACTIVE

    def touch(self) -> None:
        self.last_activity_at = time.monotonic()


__all__ = ["EventCallback", "PendingToolUse", "SessionRecord", "TeardownState"]
