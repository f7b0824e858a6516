"""Client connection to one MCP tool server."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import AsyncExitStack

import orjson
from mcp import types
from mcp.client.sse import sse_client
from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from mcp.client.stdio import StdioServerParameters, stdio_client, get_default_environment

from voice_bridge.errors import ToolInvocationError
from voice_bridge.config.tools import MCP_TRANSPORT_SSE, MCP_TRANSPORT_STREAMABLE_HTTP

from .mcp_config import McpServerConfig

logger = logging.getLogger(__name__)


def tool_arguments(content: dict[str, Any]) -> dict[str, Any]:
    """Arguments for ``call_tool`` from the tool-use's JSON ``content`` string."""
    raw = content.get("content") if isinstance(content, dict) else None
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("tool-use content is not JSON; calling with no arguments")
        return {}
    return parsed if isinstance(parsed, dict) else {}


class McpServerConnection:
    """Owns the transport and client session for one configured server.

    ``connect`` and ``close`` must run on the same task: the stdio and HTTP
    transports hold cancel scopes bound to the task that entered them.
    """

    def __init__(self, config: McpServerConfig) -> None:
        self.config = config
        self.session: ClientSession | None = None
        self.tools: list[types.Tool] = []
        self._exit_stack = AsyncExitStack()

    @property
    def name(self) -> str:
        return self.config.name

    def _transport(self) -> Any:
        config = self.config
        if config.transport_type == MCP_TRANSPORT_STREAMABLE_HTTP:
            if not config.base_url:
                raise ValueError(f"MCP server {config.name}: baseUrl is required for streamable_http")
            return streamablehttp_client(url=config.base_url, headers=config.headers or None)
        if config.transport_type == MCP_TRANSPORT_SSE:
            if not config.sse_url:
                raise ValueError(f"MCP server {config.name}: sseUrl is required for sse")
            return sse_client(url=config.sse_url, headers=config.headers or None)
        if not config.command:
            raise ValueError(f"MCP server {config.name}: command is required for stdio")
        return stdio_client(
            StdioServerParameters(
                command=config.command,
                args=list(config.args),
                env={**get_default_environment(), **config.env},
            )
        )

    async def connect(self) -> list[types.Tool]:
        logger.info("connecting to MCP server %s (%s)", self.name, self.config.transport_type)
        try:
            transport = await self._exit_stack.enter_async_context(self._transport())
            session = await self._exit_stack.enter_async_context(ClientSession(transport[0], transport[1]))
            await session.initialize()
            listed = await session.list_tools()
        except BaseException:
            await self._exit_stack.aclose()
            raise
        self.session = session
        self.tools = list(listed.tools)
        logger.info("MCP server %s tools: %s", self.name, ", ".join(tool.name for tool in self.tools))
        return self.tools

    async def call_tool(self, tool_name: str, content: dict[str, Any]) -> list[dict[str, Any]]:
        if self.session is None:
            raise ToolInvocationError(tool_name=tool_name, message=f"MCP server {self.name} is not connected")
        result = await self.session.call_tool(tool_name, arguments=tool_arguments(content))
        blocks = [block.model_dump(mode="json", exclude_none=True) for block in result.content]
        if result.isError:
            text = " ".join(str(block.get("text", "")) for block in blocks).strip()
            raise ToolInvocationError(tool_name=tool_name, message=text or "tool reported an error")
        return blocks

    async def close(self) -> None:
        self.session = None
        self.tools = []
        await self._exit_stack.aclose()


__all__ = ["McpServerConnection", "tool_arguments"]
