"""Loading of the MCP tool-server configuration file.

The file has the shape ``{"mcpServers": {name: {...}}}``; unknown keys are
ignored and a missing or unreadable file yields an empty configuration.
"""

from __future__ import annotations

import logging
from typing import Any
from pathlib import Path
from dataclasses import field, dataclass

import orjson

from voice_bridge.config.tools import (
    MCP_TRANSPORT_SSE,
    MCP_TRANSPORT_STDIO,
    DEFAULT_MCP_CONFIG_FILENAME,
    MCP_TRANSPORT_STREAMABLE_HTTP,
)

logger = logging.getLogger(__name__)

# Legacy marker for HTTP servers configured before transportType existed.
_RESTFUL_COMMAND = "restful"
_TRANSPORTS = {MCP_TRANSPORT_STDIO, MCP_TRANSPORT_SSE, MCP_TRANSPORT_STREAMABLE_HTTP}


@dataclass(frozen=True, slots=True)
class McpServerConfig:
    name: str
    command: str = ""
    args: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)
    disabled: bool = False
    transport_type: str = MCP_TRANSPORT_STDIO
    sse_url: str | None = None
    base_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    auto_approve: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, name: str, raw: dict[str, Any]) -> McpServerConfig:
        command = str(raw.get("command") or "")
        transport_type = raw.get("transportType")
        if transport_type not in _TRANSPORTS:
            transport_type = MCP_TRANSPORT_STREAMABLE_HTTP if command == _RESTFUL_COMMAND else MCP_TRANSPORT_STDIO
        return cls(
            name=name,
            command=command,
            args=tuple(str(arg) for arg in raw.get("args") or ()),
            env={str(k): str(v) for k, v in (raw.get("env") or {}).items()},
            disabled=bool(raw.get("disabled", False)),
            transport_type=transport_type,
            sse_url=raw.get("sseUrl"),
            base_url=raw.get("baseUrl"),
            headers={str(k): str(v) for k, v in (raw.get("headers") or {}).items()},
            auto_approve=tuple(str(tool) for tool in raw.get("autoApprove") or ()),
        )

    def describe(self) -> dict[str, Any]:
        """Public view of the server; env values and headers are not exposed."""
        return {
            "name": self.name,
            "command": self.command,
            "args": list(self.args),
            "transportType": self.transport_type,
            "url": self.base_url or self.sse_url,
            "disabled": self.disabled,
        }


@dataclass(frozen=True, slots=True)
class McpConfig:
    servers: dict[str, McpServerConfig] = field(default_factory=dict)
    source: Path | None = None


def parse_mcp_config(raw: Any, *, source: Path | None = None) -> McpConfig:
    servers_raw = raw.get("mcpServers") if isinstance(raw, dict) else None
    if not isinstance(servers_raw, dict):
        return McpConfig(source=source)
    servers = {
        str(name): McpServerConfig.from_dict(str(name), value)
        for name, value in servers_raw.items()
        if isinstance(value, dict)
    }
    return McpConfig(servers=servers, source=source)


def candidate_paths(explicit: Path | None) -> list[Path]:
    paths = [explicit] if explicit is not None else []
    paths.append(Path.cwd() / DEFAULT_MCP_CONFIG_FILENAME)
    return paths


def load_mcp_config(explicit: Path | None = None) -> McpConfig:
    for path in candidate_paths(explicit):
        if not path.is_file():
            continue
        try:
            raw = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            logger.error("failed to load MCP config %s: %s", path, exc)
            continue
        config = parse_mcp_config(raw, source=path)
        logger.info("loaded MCP config from %s (%d servers)", path, len(config.servers))
        return config
    logger.info("no MCP config found; only built-in tools are available")
    return McpConfig()


__all__ = ["McpConfig", "McpServerConfig", "candidate_paths", "load_mcp_config", "parse_mcp_config"]
