"""Session lifecycle configuration: teardown delays, audio buffering, idle eviction."""

from __future__ import annotations

ENV_CONTENT_END_DELAY_S = "CONTENT_END_DELAY_S"
ENV_PROMPT_END_DELAY_S = "PROMPT_END_DELAY_S"
ENV_SESSION_END_DELAY_S = "SESSION_END_DELAY_S"
ENV_AUDIO_BUFFER_CAPACITY = "AUDIO_BUFFER_CAPACITY"
ENV_AUDIO_BATCH_SIZE = "AUDIO_BATCH_SIZE"
ENV_SESSION_IDLE_TIMEOUT_S = "SESSION_IDLE_TIMEOUT_S"
ENV_SESSION_SWEEP_INTERVAL_S = "SESSION_SWEEP_INTERVAL_S"
ENV_SESSION_DISCONNECT_TIMEOUT_S = "SESSION_DISCONNECT_TIMEOUT_S"

# The duplex channel has no step acknowledgments, so each teardown step waits
# for the remote side to flush output tied to it.
DEFAULT_CONTENT_END_DELAY_S: float = 0.5
DEFAULT_PROMPT_END_DELAY_S: float = 0.3
DEFAULT_SESSION_END_DELAY_S: float = 0.3

# Pause between a handle stopping its audio buffer and the graceful close.
HANDLE_CLOSE_PAUSE_S: float = 0.1

DEFAULT_AUDIO_BUFFER_CAPACITY: int = 200
DEFAULT_AUDIO_BATCH_SIZE: int = 5

DEFAULT_SESSION_IDLE_TIMEOUT_S: float = 5 * 60.0
DEFAULT_SESSION_SWEEP_INTERVAL_S: float = 60.0
DEFAULT_SESSION_DISCONNECT_TIMEOUT_S: float = 3.0

__all__ = [
    "DEFAULT_AUDIO_BATCH_SIZE",
    "DEFAULT_AUDIO_BUFFER_CAPACITY",
    "DEFAULT_CONTENT_END_DELAY_S",
    "DEFAULT_PROMPT_END_DELAY_S",
    "DEFAULT_SESSION_DISCONNECT_TIMEOUT_S",
    "DEFAULT_SESSION_END_DELAY_S",
    "DEFAULT_SESSION_IDLE_TIMEOUT_S",
    "DEFAULT_SESSION_SWEEP_INTERVAL_S",
    "ENV_AUDIO_BATCH_SIZE",
    "ENV_AUDIO_BUFFER_CAPACITY",
    "ENV_CONTENT_END_DELAY_S",
    "ENV_PROMPT_END_DELAY_S",
    "ENV_SESSION_DISCONNECT_TIMEOUT_S",
    "ENV_SESSION_END_DELAY_S",
    "ENV_SESSION_IDLE_TIMEOUT_S",
    "ENV_SESSION_SWEEP_INTERVAL_S",
    "HANDLE_CLOSE_PAUSE_S",
]
