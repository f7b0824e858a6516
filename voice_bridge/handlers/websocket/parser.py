"""Client message parsing/validation."""

from __future__ import annotations

from typing import Any

import orjson

from voice_bridge.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD, WS_KEY_SESSION_ID


def parse_client_message(raw: str | bytes) -> dict[str, Any]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ValueError("message missing non-empty 'type'")

    # The server assigns the session id; a client-sent one is informational.
    session_id = msg.get(WS_KEY_SESSION_ID)
    if session_id is not None and not isinstance(session_id, str):
        raise ValueError("message 'session_id' must be a string")

    payload = msg.get(WS_KEY_PAYLOAD, {})
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError("message 'payload' must be an object")

    # Normalize
    msg[WS_KEY_TYPE] = msg_type.strip()
    msg[WS_KEY_SESSION_ID] = (session_id or "").strip()
    msg[WS_KEY_PAYLOAD] = payload
    return msg


__all__ = ["parse_client_message"]
