"""Periodic eviction of sessions with no recent activity."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING
from collections.abc import Callable

from voice_bridge.config.session import DEFAULT_SESSION_IDLE_TIMEOUT_S, DEFAULT_SESSION_SWEEP_INTERVAL_S

if TYPE_CHECKING:
    from voice_bridge.engine.engine import SessionEngine

logger = logging.getLogger(__name__)


class IdleSessionSweeper:
    def __init__(
        self,
        engine: SessionEngine,
        *,
        idle_timeout_s: float = DEFAULT_SESSION_IDLE_TIMEOUT_S,
        interval_s: float = DEFAULT_SESSION_SWEEP_INTERVAL_S,
        now_fn: Callable[[], float] = time.monotonic,
    ) -> None:
        self._engine = engine
        self._idle_timeout_s = float(idle_timeout_s)
        self._interval_s = float(interval_s)
        self._now_fn = now_fn
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    def sweep_once(self) -> list[str]:
        """Force-close every registered session idle for longer than the timeout."""
        if self._idle_timeout_s <= 0:
            return []
        now = self._now_fn()
        evicted: list[str] = []
        for session_id in self._engine.list_sessions():
            last = self._engine.last_activity(session_id)
            if last is None or now - last <= self._idle_timeout_s:
                continue
            logger.info("closing session %s after %.0fs of inactivity", session_id, now - last)
            self._engine.close_forced(session_id)
            evicted.append(session_id)
        return evicted

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await self._task
        self._task = None

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                logger.debug("session idle sweep (registered: %d)", len(self._engine.list_sessions()))
                self.sweep_once()
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception("idle sweeper exiting due to unexpected error")


__all__ = ["IdleSessionSweeper"]
