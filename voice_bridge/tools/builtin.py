"""Registration of the built-in tools."""

from __future__ import annotations

from voice_bridge.config.tools import (
    WEATHER_TOOL_NAME,
    WEATHER_TOOL_SCHEMA,
    BUILTIN_PROVIDER_NAME,
    DEFAULT_TOOL_TIMEZONE,
    DATE_AND_TIME_TOOL_NAME,
)

from .clock import DateAndTimeTool
from .weather import WeatherTool
from .registry import ToolRegistry
from .registration import ToolRegistration


def register_builtin_tools(
    registry: ToolRegistry,
    *,
    weather: WeatherTool,
    tz_name: str = DEFAULT_TOOL_TIMEZONE,
) -> None:
    registry.register(
        ToolRegistration(
            name=DATE_AND_TIME_TOOL_NAME,
            invoke=DateAndTimeTool(tz_name),
            provider_name=BUILTIN_PROVIDER_NAME,
            description="Get information about the current date and time.",
            auto_approved=True,
        )
    )
    registry.register(
        ToolRegistration(
            name=WEATHER_TOOL_NAME,
            invoke=weather,
            provider_name=BUILTIN_PROVIDER_NAME,
            description=(
                "Get the current weather for a given location, based on its WGS84 coordinates. "
                "Use this tool when the user asks about the weather."
            ),
            input_schema=WEATHER_TOOL_SCHEMA,
            auto_approved=True,
        )
    )


__all__ = ["register_builtin_tools"]
