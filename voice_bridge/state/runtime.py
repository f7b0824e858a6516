"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from voice_bridge.tools.weather import WeatherTool
    from voice_bridge.state.settings import AppSettings
    from voice_bridge.tools.registry import ToolRegistry
    from voice_bridge.engine.engine import SessionEngine
    from voice_bridge.runtime.sweeper import IdleSessionSweeper
    from voice_bridge.handlers.connections import ConnectionManager
    from voice_bridge.tools.mcp_providers import McpToolProviders


@dataclass(slots=True)
class RuntimeDeps:
    settings: AppSettings
    tools: ToolRegistry
    weather: WeatherTool
    mcp: McpToolProviders
    engine: SessionEngine
    connections: ConnectionManager
    sweeper: IdleSessionSweeper

    async def shutdown(self) -> None:
        """Stop sweeping, close tool providers, then end every session."""
        await self.sweeper.stop()
        try:
            await self.mcp.close()
        except Exception:
            logger.exception("closing MCP tool providers failed")
        try:
            await self.engine.close_all(timeout_s=self.settings.session.disconnect_timeout_s)
        except Exception:
            logger.exception("closing sessions failed")
        try:
            await self.weather.aclose()
        except Exception:
            logger.exception("closing weather client failed")


__all__ = ["RuntimeDeps"]
