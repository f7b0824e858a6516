"""Date and time built-in tool."""

from __future__ import annotations

from typing import Any
from datetime import datetime
from zoneinfo import ZoneInfo

from voice_bridge.config.tools import DEFAULT_TOOL_TIMEZONE


def date_and_time(tz_name: str = DEFAULT_TOOL_TIMEZONE, *, now: datetime | None = None) -> dict[str, Any]:
    tz = ZoneInfo(tz_name)
    current = now.astimezone(tz) if now is not None else datetime.now(tz)
    return {
        "date": current.date().isoformat(),
        "year": current.year,
        "month": current.month,
        "day": current.day,
        "dayOfWeek": current.strftime("%A").upper(),
        "timezone": current.strftime("%Z"),
        "formattedTime": current.strftime("%I:%M %p"),
    }


class DateAndTimeTool:
    def __init__(self, tz_name: str = DEFAULT_TOOL_TIMEZONE) -> None:
        self._tz_name = tz_name

    async def __call__(self, _content: dict[str, Any]) -> dict[str, Any]:
        return date_and_time(self._tz_name)


__all__ = ["DateAndTimeTool", "date_and_time"]
