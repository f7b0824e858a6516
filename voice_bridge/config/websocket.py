"""WebSocket protocol configuration and constants (caller-facing side)."""

from __future__ import annotations

import os

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_SESSION_ID = "session_id"
WS_KEY_PAYLOAD = "payload"

WS_UNKNOWN_SESSION_ID = "unknown"

ENV_WS_ENDPOINT_PATH = "WS_ENDPOINT_PATH"
DEFAULT_WS_ENDPOINT_PATH = "/ws"
# Resolved at import: the FastAPI route is registered before settings load.
WS_ENDPOINT_PATH: str = (os.getenv(ENV_WS_ENDPOINT_PATH) or "").strip() or DEFAULT_WS_ENDPOINT_PATH

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_UNAUTHORIZED_CODE = 4001
WS_CLOSE_BUSY_CODE = 4002

# Client message types
WS_MSG_AUDIO_INPUT = "audioInput"
WS_MSG_PROMPT_START = "promptStart"
WS_MSG_SYSTEM_PROMPT = "systemPrompt"
WS_MSG_VOICE_CONFIG = "voiceConfig"
WS_MSG_AUDIO_START = "audioStart"
WS_MSG_STOP_AUDIO = "stopAudio"
WS_MSG_PING = "ping"
WS_MSG_PONG = "pong"

# Server-only message types
WS_MSG_SESSION_READY = "sessionReady"
WS_MSG_VOICE_CONFIG_CONFIRMED = "voiceConfigConfirmed"

# Errors (payload.code values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_SESSION_FAILED = "session_failed"
WS_ERROR_INTERNAL = "internal_error"

__all__ = [
    "DEFAULT_WS_ENDPOINT_PATH",
    "ENV_WS_ENDPOINT_PATH",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_INTERNAL",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_SESSION_FAILED",
    "WS_KEY_PAYLOAD",
    "WS_KEY_SESSION_ID",
    "WS_KEY_TYPE",
    "WS_MSG_AUDIO_INPUT",
    "WS_MSG_AUDIO_START",
    "WS_MSG_PING",
    "WS_MSG_PONG",
    "WS_MSG_PROMPT_START",
    "WS_MSG_SESSION_READY",
    "WS_MSG_STOP_AUDIO",
    "WS_MSG_SYSTEM_PROMPT",
    "WS_MSG_VOICE_CONFIG",
    "WS_MSG_VOICE_CONFIG_CONFIRMED",
    "WS_ENDPOINT_PATH",
    "WS_UNKNOWN_SESSION_ID",
]
