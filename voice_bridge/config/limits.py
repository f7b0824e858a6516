"""Admission control configuration."""

from __future__ import annotations

ENV_MAX_CONCURRENT_SESSIONS = "MAX_CONCURRENT_SESSIONS"

# Mirrors the concurrent stream cap of the upstream HTTP/2 client.
DEFAULT_MAX_CONCURRENT_SESSIONS: int = 20

__all__ = [
    "DEFAULT_MAX_CONCURRENT_SESSIONS",
    "ENV_MAX_CONCURRENT_SESSIONS",
]
