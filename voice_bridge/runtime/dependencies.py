"""Runtime dependency construction (tools, transport, engine, admission control)."""

from __future__ import annotations

import logging

from voice_bridge.state import RuntimeDeps
from voice_bridge.tools.weather import WeatherTool
from voice_bridge.engine.engine import SessionEngine
from voice_bridge.state.settings import AppSettings
from voice_bridge.tools.registry import ToolRegistry
from voice_bridge.tools.builtin import register_builtin_tools
from voice_bridge.tools.mcp_config import load_mcp_config
from voice_bridge.handlers.connections import ConnectionManager
from voice_bridge.realtime.transport import DuplexTransport
from voice_bridge.tools.mcp_providers import McpToolProviders
from voice_bridge.state.context import EngineContext, TeardownTimings
from voice_bridge.realtime.websocket_transport import WebSocketDuplexTransport

from .sweeper import IdleSessionSweeper
from .settings import load_settings

logger = logging.getLogger(__name__)


def build_transport(settings: AppSettings) -> WebSocketDuplexTransport:
    return WebSocketDuplexTransport(
        url=settings.transport.ws_url,
        api_key=settings.transport.api_key,
        max_message_bytes=settings.transport.max_message_bytes,
        open_timeout_s=settings.transport.open_timeout_s,
    )


def build_engine_context(settings: AppSettings, tools: ToolRegistry, transport: DuplexTransport) -> EngineContext:
    return EngineContext(
        tools=tools,
        transport=transport,
        inference_config=dict(settings.model.inference_config),
        timings=TeardownTimings(
            content_end_delay_s=settings.session.content_end_delay_s,
            prompt_end_delay_s=settings.session.prompt_end_delay_s,
            session_end_delay_s=settings.session.session_end_delay_s,
        ),
        audio_buffer_capacity=settings.session.audio_buffer_capacity,
        audio_batch_size=settings.session.audio_batch_size,
        default_voice_id=settings.model.default_voice_id,
    )


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    transport: DuplexTransport | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()

    tools = ToolRegistry()
    weather = WeatherTool(base_url=settings.tools.weather_api_url, timeout_s=settings.tools.weather_timeout_s)
    register_builtin_tools(tools, weather=weather, tz_name=settings.tools.timezone)

    mcp = McpToolProviders(tools, load_mcp_config(settings.tools.mcp_config_path))
    await mcp.start()
    logger.info("tools: %s", ", ".join(tools.names()))

    engine = SessionEngine(build_engine_context(settings, tools, transport or build_transport(settings)))
    sweeper = IdleSessionSweeper(
        engine,
        idle_timeout_s=settings.session.idle_timeout_s,
        interval_s=settings.session.sweep_interval_s,
    )
    sweeper.start()

    return RuntimeDeps(
        settings=settings,
        tools=tools,
        weather=weather,
        mcp=mcp,
        engine=engine,
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_sessions),
        sweeper=sweeper,
    )


__all__ = ["RuntimeDeps", "build_engine_context", "build_runtime_deps", "build_transport"]
