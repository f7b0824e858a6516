"""Bounded jitter buffer between a caller's audio pushes and the engine."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections import deque
from collections.abc import Callable

from voice_bridge.config.session import DEFAULT_AUDIO_BATCH_SIZE, DEFAULT_AUDIO_BUFFER_CAPACITY

logger = logging.getLogger(__name__)

AudioSink = Callable[[bytes], Any]


class AudioJitterBuffer:
    """Ring buffer of audio chunks drained in small batches.

    When full, a push evicts the oldest chunk. Each drain activation forwards
    at most ``batch_size`` chunks and yields to the loop before the next one,
    so a long backlog on one session does not starve the others.
    """

    def __init__(
        self,
        sink: AudioSink,
        *,
        capacity: int = DEFAULT_AUDIO_BUFFER_CAPACITY,
        batch_size: int = DEFAULT_AUDIO_BATCH_SIZE,
        auto_drain: bool = True,
    ) -> None:
        self._sink = sink
        self._chunks: deque[bytes] = deque(maxlen=max(1, int(capacity)))
        self._batch_size = max(1, int(batch_size))
        self._auto_drain = auto_drain
        self._draining = False
        self._accepting = True
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._chunks.maxlen or 0

    @property
    def dropped(self) -> int:
        return self._dropped

    @property
    def is_draining(self) -> bool:
        return self._draining

    def push(self, chunk: bytes) -> bool:
        if not self._accepting:
            return False
        if len(self._chunks) == self._chunks.maxlen:
            self._dropped += 1
        self._chunks.append(chunk)
        if self._auto_drain:
            self._schedule()
        return True

    def drain(self) -> None:
        """Start batch draining on the running loop; no-op while a drain is scheduled."""
        if self._chunks:
            self._schedule()

    def _schedule(self) -> None:
        if self._draining:
            return
        self._draining = True
        asyncio.get_running_loop().call_soon(self._drain_batch)

    def _drain_batch(self) -> None:
        forwarded = 0
        while self._chunks and forwarded < self._batch_size:
            chunk = self._chunks.popleft()
            if not self._forward(chunk):
                return
            forwarded += 1
        if self._chunks and self._accepting:
            asyncio.get_running_loop().call_soon(self._drain_batch)
        else:
            self._draining = False

    def _forward(self, chunk: bytes) -> bool:
        try:
            self._sink(chunk)
        except Exception as exc:
            logger.warning("audio sink failed, dropping %d buffered chunks: %s", len(self._chunks), exc)
            self._chunks.clear()
            self._draining = False
            return False
        return True

    def flush(self) -> int:
        """Forward everything buffered right now; returns the number forwarded."""
        forwarded = 0
        while self._chunks:
            if not self._forward(self._chunks.popleft()):
                break
            forwarded += 1
        return forwarded

    def stop(self) -> None:
        self._accepting = False
        self._chunks.clear()

    def __len__(self) -> int:
        return len(self._chunks)


__all__ = ["AudioJitterBuffer", "AudioSink"]
