"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket

from voice_bridge.state import RuntimeDeps
from voice_bridge.session.handle import SessionHandle
from voice_bridge.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_ERROR_AUTH_FAILED,
    WS_MSG_SESSION_READY,
    WS_CLOSE_UNAUTHORIZED_CODE,
    WS_ERROR_SERVER_AT_CAPACITY,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .auth import authenticate_websocket
from .errors import reject_connection, safe_send_envelope
from .forwarding import attach_forwarders
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> bool:
    if not await authenticate_websocket(ws, expected_api_key=runtime_deps.settings.auth.api_key):
        await reject_connection(
            ws,
            error_code=WS_ERROR_AUTH_FAILED,
            message=(
                "Authentication required. Provide valid API key via 'api_key' query parameter or 'X-API-Key' header."
            ),
            close_code=WS_CLOSE_UNAUTHORIZED_CODE,
        )
        return False

    if not await runtime_deps.connections.connect(ws):
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new sessions. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        raise
    return True


async def _end_session(runtime_deps: RuntimeDeps, handle: SessionHandle, stream_task: asyncio.Task) -> None:
    timeout_s = runtime_deps.settings.session.disconnect_timeout_s
    if runtime_deps.engine.get_session(handle.session_id) is not None:
        try:
            await asyncio.wait_for(handle.close(), timeout=timeout_s)
        except TimeoutError:
            logger.warning("session %s: graceful close timed out after %.1fs", handle.session_id, timeout_s)
        except Exception:
            logger.exception("session %s: graceful close failed", handle.session_id)
        # No-op when the graceful close already removed the session.
        handle.force_close()

    try:
        await asyncio.wait_for(asyncio.shield(stream_task), timeout=timeout_s)
    except TimeoutError:
        stream_task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await stream_task
    except Exception:
        logger.debug("session %s: stream task ended with error", handle.session_id, exc_info=True)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    if not await _prepare_connection(ws, runtime_deps):
        return

    handle: SessionHandle | None = None
    stream_task: asyncio.Task | None = None
    try:
        handle = runtime_deps.engine.create_session()
        attach_forwarders(ws, handle)
        stream_task = asyncio.create_task(runtime_deps.engine.start(handle.session_id))
        logger.info(
            "WebSocket connection accepted session_id=%s. Active: %s",
            handle.session_id,
            runtime_deps.connections.get_connection_count(),
        )
        await safe_send_envelope(
            ws,
            msg_type=WS_MSG_SESSION_READY,
            session_id=handle.session_id,
            payload={"voiceId": handle.voice_id, "tools": runtime_deps.tools.names()},
        )

        if await run_message_loop(ws, handle):
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
    finally:
        if handle is not None and stream_task is not None:
            await _end_session(runtime_deps, handle, stream_task)

        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        logger.info(
            "WebSocket connection closed session_id=%s. Active: %s",
            handle.session_id if handle is not None else None,
            runtime_deps.connections.get_connection_count(),
        )


__all__ = ["handle_websocket_connection"]
