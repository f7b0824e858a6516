"""Log noise filters for third-party libraries.

Only logger levels are adjusted; set SHOW_THIRD_PARTY_LOGS=1 to see
everything.
"""

from __future__ import annotations

import logging

from voice_bridge.config.logging import SHOW_THIRD_PARTY_LOGS

# Per-frame websocket and per-request HTTP logs drown out session logs.
NOISY_LOGGERS: tuple[str, ...] = ("websockets", "httpx", "httpcore", "mcp", "uvicorn.access")


def configure(show_third_party_logs: bool = SHOW_THIRD_PARTY_LOGS) -> None:
    if show_third_party_logs:
        return
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["NOISY_LOGGERS", "configure"]
