"""Error helpers for the caller-facing WebSocket JSON envelope."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from voice_bridge.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD, WS_KEY_SESSION_ID, WS_UNKNOWN_SESSION_ID

logger = logging.getLogger(__name__)


def build_error_payload(code: str, message: str, *, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"code": code, "message": message, "details": dict(details or {})}


def build_envelope(msg_type: str, session_id: str, payload: Any = None) -> dict[str, Any]:
    return {
        WS_KEY_TYPE: msg_type,
        WS_KEY_SESSION_ID: session_id,
        WS_KEY_PAYLOAD: payload if payload is not None else {},
    }


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_envelope(
    ws: WebSocket,
    *,
    msg_type: str,
    session_id: str,
    payload: Any = None,
) -> bool:
    data = build_envelope(msg_type, session_id, payload)
    return await safe_send_text(ws, orjson.dumps(data, default=str).decode("utf-8"))


async def send_error(
    ws: WebSocket,
    *,
    session_id: str | None,
    error_code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> bool:
    return await safe_send_envelope(
        ws,
        msg_type="error",
        session_id=session_id or WS_UNKNOWN_SESSION_ID,
        payload=build_error_payload(error_code, message, details=details),
    )


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        logger.debug("accept before reject failed", exc_info=True)
        return
    await send_error(ws, session_id=WS_UNKNOWN_SESSION_ID, error_code=error_code, message=message)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        logger.debug("close after reject failed", exc_info=True)


__all__ = [
    "build_envelope",
    "build_error_payload",
    "reject_connection",
    "safe_send_envelope",
    "safe_send_text",
    "send_error",
]
