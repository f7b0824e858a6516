"""Configuration module exports (env names, defaults and protocol constants only)."""

from .limits import DEFAULT_MAX_CONCURRENT_SESSIONS
from .session import DEFAULT_AUDIO_BATCH_SIZE, DEFAULT_AUDIO_BUFFER_CAPACITY

__all__ = [
    "DEFAULT_AUDIO_BATCH_SIZE",
    "DEFAULT_AUDIO_BUFFER_CAPACITY",
    "DEFAULT_MAX_CONCURRENT_SESSIONS",
]
