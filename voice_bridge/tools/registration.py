"""Tool registration record."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass
from collections.abc import Callable, Awaitable

from voice_bridge.config.tools import DEFAULT_TOOL_SCHEMA

ToolInvoker = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolRegistration:
    name: str
    invoke: ToolInvoker
    provider_name: str
    description: str = ""
    # JSON schema as a string, as the prompt-start manifest carries it.
    input_schema: str = DEFAULT_TOOL_SCHEMA
    auto_approved: bool = False

    def to_tool_spec(self) -> dict[str, Any]:
        return {
            "toolSpec": {
                "name": self.name,
                "description": self.description or f"MCP tool: {self.name}",
                "inputSchema": {"json": self.input_schema},
            }
        }


__all__ = ["ToolInvoker", "ToolRegistration"]
