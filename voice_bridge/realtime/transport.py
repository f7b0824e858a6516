"""Duplex transport interface between the engine and the remote service."""

from __future__ import annotations

from typing import Any, Protocol
from dataclasses import dataclass
from collections.abc import AsyncIterator


@dataclass(frozen=True, slots=True)
class ResponseFrame:
    """One item of the remote response stream.

    Exactly one field is normally set: ``chunk`` holds a UTF-8 JSON event,
    the error fields carry the remote service's error details.
    """

    chunk: bytes | None = None
    model_stream_error: Any = None
    internal_server_error: Any = None


class DuplexTransport(Protocol):
    async def open_stream(self, frames: AsyncIterator[bytes]) -> AsyncIterator[ResponseFrame]:
        """Start sending ``frames`` and return the response stream.

        The transport pulls from ``frames`` concurrently with the caller
        reading the returned iterator.
        """
        ...


__all__ = ["DuplexTransport", "ResponseFrame"]
