"""Environment parsing for runtime settings.

Env names and defaults live in ``voice_bridge.config``; this module turns the
current environment into the frozen dataclasses of ``voice_bridge.state.settings``.
"""

from __future__ import annotations

import os
from pathlib import Path

from voice_bridge.config.limits import ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS
from voice_bridge.config.secrets import ENV_BRIDGE_API_KEY, ENV_INFERENCE_API_KEY
from voice_bridge.config.websocket import WS_ENDPOINT_PATH
from voice_bridge.state.settings import (
    AppSettings,
    AuthSettings,
    ToolSettings,
    ModelSettings,
    LimitsSettings,
    SessionSettings,
    TransportSettings,
    WebSocketSettings,
)
from voice_bridge.config.tools import (
    ENV_TOOL_TIMEZONE,
    ENV_MCP_CONFIG_PATH,
    ENV_WEATHER_API_URL,
    DEFAULT_TOOL_TIMEZONE,
    ENV_WEATHER_TIMEOUT_S,
    DEFAULT_WEATHER_API_URL,
    DEFAULT_WEATHER_TIMEOUT_S,
)
from voice_bridge.config.transport import (
    ENV_INFERENCE_WS_URL,
    DEFAULT_INFERENCE_WS_URL,
    ENV_INFERENCE_OPEN_TIMEOUT_S,
    ENV_INFERENCE_MAX_MESSAGE_BYTES,
    DEFAULT_INFERENCE_OPEN_TIMEOUT_S,
    DEFAULT_INFERENCE_MAX_MESSAGE_BYTES,
)
from voice_bridge.config.models import (
    ENV_TOP_P,
    ENV_MODEL_ID,
    DEFAULT_TOP_P,
    ENV_MAX_TOKENS,
    ENV_TEMPERATURE,
    DEFAULT_MODEL_ID,
    DEFAULT_VOICE_ID,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ENV_DEFAULT_VOICE_ID,
)
from voice_bridge.config.session import (
    ENV_AUDIO_BATCH_SIZE,
    ENV_PROMPT_END_DELAY_S,
    ENV_CONTENT_END_DELAY_S,
    ENV_SESSION_END_DELAY_S,
    DEFAULT_AUDIO_BATCH_SIZE,
    ENV_AUDIO_BUFFER_CAPACITY,
    ENV_SESSION_IDLE_TIMEOUT_S,
    DEFAULT_PROMPT_END_DELAY_S,
    DEFAULT_CONTENT_END_DELAY_S,
    DEFAULT_SESSION_END_DELAY_S,
    ENV_SESSION_SWEEP_INTERVAL_S,
    DEFAULT_AUDIO_BUFFER_CAPACITY,
    DEFAULT_SESSION_IDLE_TIMEOUT_S,
    DEFAULT_SESSION_SWEEP_INTERVAL_S,
    ENV_SESSION_DISCONNECT_TIMEOUT_S,
    DEFAULT_SESSION_DISCONNECT_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _path_env(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    return Path(raw).expanduser() if raw else None


def _non_negative(name: str, value: float) -> float:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _load_auth_settings() -> AuthSettings:
    # An empty key disables caller authentication.
    return AuthSettings(api_key=(os.getenv(ENV_BRIDGE_API_KEY) or "").strip())


def _load_limits_settings() -> LimitsSettings:
    return LimitsSettings(
        max_concurrent_sessions=max(1, _int_env(ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS))
    )


def _load_websocket_settings() -> WebSocketSettings:
    path = WS_ENDPOINT_PATH
    if not path.startswith("/"):
        path = f"/{path}"
    return WebSocketSettings(endpoint_path=path)


def _load_session_settings() -> SessionSettings:
    return SessionSettings(
        content_end_delay_s=_non_negative(
            ENV_CONTENT_END_DELAY_S, _float_env(ENV_CONTENT_END_DELAY_S, DEFAULT_CONTENT_END_DELAY_S)
        ),
        prompt_end_delay_s=_non_negative(
            ENV_PROMPT_END_DELAY_S, _float_env(ENV_PROMPT_END_DELAY_S, DEFAULT_PROMPT_END_DELAY_S)
        ),
        session_end_delay_s=_non_negative(
            ENV_SESSION_END_DELAY_S, _float_env(ENV_SESSION_END_DELAY_S, DEFAULT_SESSION_END_DELAY_S)
        ),
        audio_buffer_capacity=max(1, _int_env(ENV_AUDIO_BUFFER_CAPACITY, DEFAULT_AUDIO_BUFFER_CAPACITY)),
        audio_batch_size=max(1, _int_env(ENV_AUDIO_BATCH_SIZE, DEFAULT_AUDIO_BATCH_SIZE)),
        idle_timeout_s=_float_env(ENV_SESSION_IDLE_TIMEOUT_S, DEFAULT_SESSION_IDLE_TIMEOUT_S),
        sweep_interval_s=_float_env(ENV_SESSION_SWEEP_INTERVAL_S, DEFAULT_SESSION_SWEEP_INTERVAL_S),
        disconnect_timeout_s=_float_env(ENV_SESSION_DISCONNECT_TIMEOUT_S, DEFAULT_SESSION_DISCONNECT_TIMEOUT_S),
    )


def _load_model_settings() -> ModelSettings:
    return ModelSettings(
        model_id=_str_env(ENV_MODEL_ID, DEFAULT_MODEL_ID),
        default_voice_id=_str_env(ENV_DEFAULT_VOICE_ID, DEFAULT_VOICE_ID),
        inference_config={
            "maxTokens": _int_env(ENV_MAX_TOKENS, DEFAULT_MAX_TOKENS),
            "topP": _float_env(ENV_TOP_P, DEFAULT_TOP_P),
            "temperature": _float_env(ENV_TEMPERATURE, DEFAULT_TEMPERATURE),
        },
    )


def _load_transport_settings() -> TransportSettings:
    return TransportSettings(
        ws_url=_str_env(ENV_INFERENCE_WS_URL, DEFAULT_INFERENCE_WS_URL),
        api_key=(os.getenv(ENV_INFERENCE_API_KEY) or "").strip(),
        max_message_bytes=_int_env(ENV_INFERENCE_MAX_MESSAGE_BYTES, DEFAULT_INFERENCE_MAX_MESSAGE_BYTES),
        open_timeout_s=_float_env(ENV_INFERENCE_OPEN_TIMEOUT_S, DEFAULT_INFERENCE_OPEN_TIMEOUT_S),
    )


def _load_tool_settings() -> ToolSettings:
    return ToolSettings(
        mcp_config_path=_path_env(ENV_MCP_CONFIG_PATH),
        weather_api_url=_str_env(ENV_WEATHER_API_URL, DEFAULT_WEATHER_API_URL),
        weather_timeout_s=_float_env(ENV_WEATHER_TIMEOUT_S, DEFAULT_WEATHER_TIMEOUT_S),
        timezone=_str_env(ENV_TOOL_TIMEZONE, DEFAULT_TOOL_TIMEZONE),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        session=_load_session_settings(),
        model=_load_model_settings(),
        transport=_load_transport_settings(),
        tools=_load_tool_settings(),
    )


__all__ = ["load_settings"]
