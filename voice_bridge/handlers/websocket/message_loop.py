"""WebSocket message loop and dispatch for one caller session."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket, WebSocketDisconnect

from voice_bridge.errors import InvalidSessionStateError
from voice_bridge.session.handle import SessionHandle
from voice_bridge.config.models import DEFAULT_SYSTEM_PROMPT
from voice_bridge.config.websocket import (
    WS_MSG_PING,
    WS_MSG_PONG,
    WS_ERROR_INTERNAL,
    WS_MSG_STOP_AUDIO,
    WS_MSG_AUDIO_INPUT,
    WS_MSG_AUDIO_START,
    WS_MSG_PROMPT_START,
    WS_MSG_VOICE_CONFIG,
    WS_MSG_SYSTEM_PROMPT,
    WS_ERROR_SESSION_FAILED,
    WS_ERROR_INVALID_MESSAGE,
    WS_ERROR_INVALID_PAYLOAD,
    WS_MSG_VOICE_CONFIG_CONFIRMED,
)

from .parser import parse_client_message
from .errors import send_error, safe_send_envelope

logger = logging.getLogger(__name__)

# Handlers return False to end the loop.
HandlerFn = Callable[[WebSocket, SessionHandle, dict[str, Any]], Awaitable[bool]]


def _optional_dict(payload: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = payload.get(key)
    return value if isinstance(value, dict) else None


async def _handle_audio_input(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    audio = payload.get("audio")
    if not isinstance(audio, str) or not audio.strip():
        await send_error(
            ws,
            session_id=handle.session_id,
            error_code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.audio (base64 pcm16) is required",
        )
        return True
    try:
        pcm = base64.b64decode(audio, validate=True)
    except binascii.Error:
        await send_error(
            ws,
            session_id=handle.session_id,
            error_code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.audio is not valid base64",
        )
        return True
    await handle.stream_audio(pcm)
    return True


async def _handle_prompt_start(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    await handle.setup_prompt_start(_optional_dict(payload, "audioOutputConfiguration"))
    return True


async def _handle_system_prompt(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    content = payload.get("content")
    if not isinstance(content, str) or not content.strip():
        content = DEFAULT_SYSTEM_PROMPT
    await handle.setup_system_prompt(content)
    return True


async def _handle_voice_config(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    voice_id = payload.get("voiceId")
    if not isinstance(voice_id, str) or not voice_id.strip():
        await send_error(
            ws,
            session_id=handle.session_id,
            error_code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.voiceId is required",
        )
        return True
    handle.voice_id = voice_id.strip()
    await safe_send_envelope(
        ws,
        msg_type=WS_MSG_VOICE_CONFIG_CONFIRMED,
        session_id=handle.session_id,
        payload={"voiceId": handle.voice_id},
    )
    return True


async def _handle_audio_start(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    await handle.setup_start_audio(_optional_dict(payload, "audioInputConfiguration"))
    return True


async def _handle_stop_audio(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    logger.info("session %s: stop requested by caller", handle.session_id)
    await handle.end_audio_content()
    await handle.end_prompt()
    await handle.close()
    return False


async def _handle_ping(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    await safe_send_envelope(ws, msg_type=WS_MSG_PONG, session_id=handle.session_id, payload={})
    return True


async def _handle_pong(ws: WebSocket, handle: SessionHandle, payload: dict[str, Any]) -> bool:
    return True


HANDLERS: dict[str, HandlerFn] = {
    WS_MSG_AUDIO_INPUT: _handle_audio_input,
    WS_MSG_PROMPT_START: _handle_prompt_start,
    WS_MSG_SYSTEM_PROMPT: _handle_system_prompt,
    WS_MSG_VOICE_CONFIG: _handle_voice_config,
    WS_MSG_AUDIO_START: _handle_audio_start,
    WS_MSG_STOP_AUDIO: _handle_stop_audio,
    WS_MSG_PING: _handle_ping,
    WS_MSG_PONG: _handle_pong,
}


async def _parse_or_send_error(ws: WebSocket, raw: str, session_id: str) -> dict[str, Any] | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(ws, session_id=session_id, error_code=WS_ERROR_INVALID_MESSAGE, message=str(exc))
        return None


async def _dispatch(ws: WebSocket, handle: SessionHandle, msg_type: str, payload: dict[str, Any]) -> bool:
    handler = HANDLERS.get(msg_type)
    if handler is None:
        await send_error(
            ws,
            session_id=handle.session_id,
            error_code=WS_ERROR_INVALID_MESSAGE,
            message=f"message type '{msg_type}' is not supported",
        )
        return True
    try:
        return await handler(ws, handle, payload)
    except InvalidSessionStateError as exc:
        await send_error(ws, session_id=handle.session_id, error_code=WS_ERROR_SESSION_FAILED, message=str(exc))
        return True
    except WebSocketDisconnect:
        raise
    except Exception:
        logger.exception("session %s: %s handler failed", handle.session_id, msg_type)
        await send_error(
            ws,
            session_id=handle.session_id,
            error_code=WS_ERROR_INTERNAL,
            message=f"failed to process '{msg_type}'",
        )
        return True


async def run_message_loop(ws: WebSocket, handle: SessionHandle) -> bool:
    """Serve caller messages until disconnect or ``stopAudio``.

    Returns True when the caller asked to stop, False on disconnect.
    """
    try:
        while True:
            raw = await ws.receive_text()
            msg = await _parse_or_send_error(ws, raw, handle.session_id)
            if msg is None:
                continue
            if not await _dispatch(ws, handle, msg["type"], msg["payload"]):
                return True
    except WebSocketDisconnect:
        return False


__all__ = ["HANDLERS", "run_message_loop"]
