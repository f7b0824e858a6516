"""Per-session outbound queue with data-ready and closing wake signals."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Iterator

from voice_bridge.events.envelope import Envelope


class SessionChannel:
    """Strict FIFO of outbound envelopes.

    Producers append and set ``data_ready``; the single consumer waits on
    whichever of ``data_ready`` and ``closing`` fires first. Closing wins ties.
    """

    def __init__(self) -> None:
        self._queue: deque[Envelope] = deque()
        self.data_ready = asyncio.Event()
        self.closing = asyncio.Event()

    def put(self, envelope: Envelope) -> None:
        self._queue.append(envelope)
        self.data_ready.set()

    def pop(self) -> Envelope | None:
        if not self._queue:
            return None
        envelope = self._queue.popleft()
        if not self._queue:
            self.data_ready.clear()
        return envelope

    def close(self) -> None:
        self.closing.set()

    @property
    def is_closing(self) -> bool:
        return self.closing.is_set()

    async def wait(self) -> bool:
        """Block until data arrives or the channel closes.

        Returns True when data is available, False when closing fired.
        """
        if self.closing.is_set():
            return False
        if self._queue:
            return True
        data_task = asyncio.ensure_future(self.data_ready.wait())
        close_task = asyncio.ensure_future(self.closing.wait())
        try:
            await asyncio.wait({data_task, close_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (data_task, close_task):
                if not task.done():
                    task.cancel()
        if self.closing.is_set():
            return False
        return bool(self._queue)

    def clear(self) -> None:
        self._queue.clear()
        self.data_ready.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[Envelope]:
        return iter(tuple(self._queue))


__all__ = ["SessionChannel"]
