"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from typing import Any
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_sessions: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str


@dataclass(frozen=True, slots=True)
class SessionSettings:
    content_end_delay_s: float
    prompt_end_delay_s: float
    session_end_delay_s: float
    audio_buffer_capacity: int
    audio_batch_size: int
    idle_timeout_s: float
    sweep_interval_s: float
    disconnect_timeout_s: float


@dataclass(frozen=True, slots=True)
class ModelSettings:
    model_id: str
    default_voice_id: str
    inference_config: dict[str, Any]


@dataclass(frozen=True, slots=True)
class TransportSettings:
    ws_url: str
    api_key: str
    max_message_bytes: int
    open_timeout_s: float


@dataclass(frozen=True, slots=True)
class ToolSettings:
    mcp_config_path: Path | None
    weather_api_url: str
    weather_timeout_s: float
    timezone: str


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    session: SessionSettings
    model: ModelSettings
    transport: TransportSettings
    tools: ToolSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "LimitsSettings",
    "ModelSettings",
    "SessionSettings",
    "ToolSettings",
    "TransportSettings",
    "WebSocketSettings",
]
