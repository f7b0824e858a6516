"""Duplex transport over a WebSocket to an inference gateway."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, AsyncIterator

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from voice_bridge.config.transport import (
    DEFAULT_INFERENCE_WS_URL,
    DEFAULT_INFERENCE_OPEN_TIMEOUT_S,
    DEFAULT_INFERENCE_MAX_MESSAGE_BYTES,
)

from .transport import ResponseFrame

logger = logging.getLogger(__name__)

_MODEL_STREAM_ERROR_KEY = "modelStreamErrorException"
_INTERNAL_SERVER_ERROR_KEY = "internalServerException"


def to_response_frame(message: str | bytes) -> ResponseFrame:
    chunk = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    try:
        decoded = orjson.loads(chunk)
    except orjson.JSONDecodeError:
        # Passed through; the demultiplexer logs and skips it.
        return ResponseFrame(chunk=chunk)
    if isinstance(decoded, dict):
        if _MODEL_STREAM_ERROR_KEY in decoded:
            return ResponseFrame(model_stream_error=decoded[_MODEL_STREAM_ERROR_KEY])
        if _INTERNAL_SERVER_ERROR_KEY in decoded:
            return ResponseFrame(internal_server_error=decoded[_INTERNAL_SERVER_ERROR_KEY])
    return ResponseFrame(chunk=chunk)


class WebSocketDuplexTransport:
    """One WebSocket connection per session stream.

    Outbound envelopes are sent as text frames by a background task; every
    inbound message becomes one ``ResponseFrame``. The connection is closed
    once the outbound sequence ends.
    """

    def __init__(
        self,
        *,
        url: str = DEFAULT_INFERENCE_WS_URL,
        api_key: str = "",
        max_message_bytes: int = DEFAULT_INFERENCE_MAX_MESSAGE_BYTES,
        open_timeout_s: float = DEFAULT_INFERENCE_OPEN_TIMEOUT_S,
        connect: Callable[..., Any] = websockets.connect,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._max_message_bytes = max_message_bytes
        self._open_timeout_s = open_timeout_s
        self._connect = connect

    def _headers(self) -> list[tuple[str, str]]:
        if not self._api_key:
            return []
        return [("Authorization", f"Bearer {self._api_key}")]

    async def open_stream(self, frames: AsyncIterator[bytes]) -> AsyncIterator[ResponseFrame]:
        ws = await self._connect(
            self._url,
            additional_headers=self._headers(),
            max_size=self._max_message_bytes,
            open_timeout=self._open_timeout_s,
        )
        sender = asyncio.create_task(self._send_all(ws, frames))
        return self._receive_all(ws, frames, sender)

    async def _send_all(self, ws: Any, frames: AsyncIterator[bytes]) -> None:
        try:
            async for payload in frames:
                await ws.send(payload.decode("utf-8"))
        except ConnectionClosed:
            logger.debug("inference connection closed while sending")
            return
        except Exception:
            logger.exception("outbound pump failed")
            with contextlib.suppress(Exception):
                await ws.close(code=1011, reason="outbound failure")
            return
        with contextlib.suppress(Exception):
            await ws.close()

    async def _receive_all(
        self,
        ws: Any,
        frames: AsyncIterator[bytes],
        sender: asyncio.Task,
    ) -> AsyncIterator[ResponseFrame]:
        try:
            async for message in ws:
                yield to_response_frame(message)
        except ConnectionClosedOK:
            return
        finally:
            if not sender.done():
                sender.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await sender
            aclose = getattr(frames, "aclose", None)
            if aclose is not None:
                with contextlib.suppress(Exception):
                    await aclose()
            with contextlib.suppress(Exception):
                await ws.close()


__all__ = ["WebSocketDuplexTransport", "to_response_frame"]
