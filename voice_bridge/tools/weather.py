"""Weather built-in tool backed by an Open-Meteo compatible HTTP API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from voice_bridge.errors import ToolInvocationError
from voice_bridge.config.tools import (
    WEATHER_TOOL_NAME,
    WEATHER_USER_AGENT,
    DEFAULT_WEATHER_API_URL,
    DEFAULT_WEATHER_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


def parse_coordinates(content: dict[str, Any]) -> tuple[Any, Any] | None:
    """Extract latitude/longitude from a tool-use's JSON ``content`` string."""
    raw = content.get("content") if isinstance(content, dict) else None
    if not isinstance(raw, str):
        return None
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("weather tool: content is not JSON")
        return None
    if not isinstance(parsed, dict):
        return None
    latitude, longitude = parsed.get("latitude"), parsed.get("longitude")
    if latitude is None or longitude is None:
        return None
    return latitude, longitude


class WeatherTool:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_WEATHER_API_URL,
        timeout_s: float = DEFAULT_WEATHER_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout_s,
            headers={"User-Agent": WEATHER_USER_AGENT, "Accept": "application/json"},
        )

    async def fetch(self, latitude: Any, longitude: Any) -> dict[str, Any]:
        params = {"latitude": latitude, "longitude": longitude, "current_weather": "true"}
        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ToolInvocationError(tool_name=WEATHER_TOOL_NAME, message=f"weather request failed: {exc}") from exc
        return {"weather_data": response.json()}

    async def __call__(self, content: dict[str, Any]) -> dict[str, Any]:
        coordinates = parse_coordinates(content)
        if coordinates is None:
            raise ToolInvocationError(tool_name=WEATHER_TOOL_NAME, message="latitude and longitude are required")
        return await self.fetch(*coordinates)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["WeatherTool", "parse_coordinates"]
