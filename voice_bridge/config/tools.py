"""Tool configuration: built-in tool names, schemas and provider settings."""

from __future__ import annotations

import orjson

ENV_MCP_CONFIG_PATH = "MCP_CONFIG_PATH"
ENV_WEATHER_API_URL = "WEATHER_API_URL"
ENV_WEATHER_TIMEOUT_S = "WEATHER_TIMEOUT_S"
ENV_TOOL_TIMEZONE = "TOOL_TIMEZONE"

DEFAULT_MCP_CONFIG_FILENAME = "mcp_config.json"
DEFAULT_WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_WEATHER_TIMEOUT_S: float = 5.0
DEFAULT_TOOL_TIMEZONE = "America/Los_Angeles"

WEATHER_USER_AGENT = "voice-bridge/1.0"

BUILTIN_PROVIDER_NAME = "builtin"
DATE_AND_TIME_TOOL_NAME = "getDateAndTimeTool"
WEATHER_TOOL_NAME = "getWeatherTool"

# The remote protocol expects JSON schemas as strings.
DEFAULT_TOOL_SCHEMA: str = orjson.dumps({"type": "object", "properties": {}, "required": []}).decode("utf-8")
WEATHER_TOOL_SCHEMA: str = orjson.dumps(
    {
        "type": "object",
        "properties": {
            "latitude": {"type": "string", "description": "Geographical WGS84 latitude of the location."},
            "longitude": {"type": "string", "description": "Geographical WGS84 longitude of the location."},
        },
        "required": ["latitude", "longitude"],
    }
).decode("utf-8")

MCP_TRANSPORT_STDIO = "stdio"
MCP_TRANSPORT_SSE = "sse"
MCP_TRANSPORT_STREAMABLE_HTTP = "streamable_http"

__all__ = [
    "BUILTIN_PROVIDER_NAME",
    "DATE_AND_TIME_TOOL_NAME",
    "DEFAULT_MCP_CONFIG_FILENAME",
    "DEFAULT_TOOL_SCHEMA",
    "DEFAULT_TOOL_TIMEZONE",
    "DEFAULT_WEATHER_API_URL",
    "DEFAULT_WEATHER_TIMEOUT_S",
    "ENV_MCP_CONFIG_PATH",
    "ENV_TOOL_TIMEZONE",
    "ENV_WEATHER_API_URL",
    "ENV_WEATHER_TIMEOUT_S",
    "MCP_TRANSPORT_SSE",
    "MCP_TRANSPORT_STDIO",
    "MCP_TRANSPORT_STREAMABLE_HTTP",
    "WEATHER_TOOL_NAME",
    "WEATHER_TOOL_SCHEMA",
    "WEATHER_USER_AGENT",
]
