"""Dynamic tool providers backed by MCP servers."""

from __future__ import annotations

import logging
from typing import Any
from functools import partial

import orjson

from .registry import ToolRegistry
from .mcp_config import McpConfig
from .mcp_server import McpServerConnection
from .registration import ToolRegistration

logger = logging.getLogger(__name__)


class McpToolProviders:
    """Connects configured MCP servers and mirrors their tools into a registry."""

    def __init__(self, registry: ToolRegistry, config: McpConfig) -> None:
        self._registry = registry
        self._config = config
        self._connections: dict[str, McpServerConnection] = {}

    @property
    def config(self) -> McpConfig:
        return self._config

    def is_connected(self, server_name: str) -> bool:
        return server_name in self._connections

    async def start(self) -> None:
        # One at a time on the calling task; close() must run on that same task.
        for server in self._config.servers.values():
            if server.disabled:
                logger.info("MCP server %s is disabled; skipping", server.name)
                continue
            connection = McpServerConnection(server)
            try:
                tools = await connection.connect()
            except Exception:
                logger.exception("failed to connect to MCP server %s", server.name)
                continue
            self._connections[server.name] = connection
            for tool in tools:
                self._registry.register(
                    ToolRegistration(
                        name=tool.name,
                        invoke=partial(connection.call_tool, tool.name),
                        provider_name=server.name,
                        description=tool.description or "",
                        input_schema=orjson.dumps(tool.inputSchema).decode("utf-8"),
                        # Every MCP tool is auto-approved.
                        auto_approved=True,
                    )
                )

    def servers_info(self) -> list[dict[str, Any]]:
        info: list[dict[str, Any]] = []
        for server in self._config.servers.values():
            entry = server.describe()
            entry["connected"] = self.is_connected(server.name)
            entry["tools"] = [
                {"name": reg.name, "description": reg.description}
                for reg in self._registry.registrations(server.name)
            ]
            info.append(entry)
        return info

    async def close(self) -> None:
        for name in reversed(list(self._connections)):
            connection = self._connections.pop(name)
            self._registry.unregister_provider(name)
            try:
                await connection.close()
            except Exception:
                logger.warning("failed to close MCP server %s", name, exc_info=True)
            else:
                logger.info("MCP server %s closed", name)


__all__ = ["McpToolProviders"]
