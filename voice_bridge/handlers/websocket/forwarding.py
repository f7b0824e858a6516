"""Forwarding of session notifications to the caller's WebSocket."""

from __future__ import annotations

from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from voice_bridge.events.names import SessionEvent
from voice_bridge.session.handle import SessionHandle

from .errors import safe_send_envelope

FORWARDED_EVENTS: tuple[SessionEvent, ...] = tuple(event for event in SessionEvent if event is not SessionEvent.ANY)


def _forwarder(ws: WebSocket, session_id: str, event_name: str) -> Callable[[Any], Awaitable[None]]:
    async def forward(data: Any) -> None:
        await safe_send_envelope(ws, msg_type=event_name, session_id=session_id, payload=data)

    return forward


def attach_forwarders(ws: WebSocket, handle: SessionHandle) -> None:
    for event in FORWARDED_EVENTS:
        handle.on_event(event, _forwarder(ws, handle.session_id, event.value))


__all__ = ["FORWARDED_EVENTS", "attach_forwarders"]
