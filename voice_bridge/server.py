"""Main FastAPI server for the speech-to-speech session bridge."""

from __future__ import annotations

import logging
from typing import Any
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from voice_bridge.state import RuntimeDeps
from voice_bridge.runtime.logging import configure_logging
from voice_bridge.config.websocket import WS_ENDPOINT_PATH
from voice_bridge.runtime.dependencies import build_runtime_deps
from voice_bridge.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = await build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    logger.info("runtime: ready (ws endpoint %s)", runtime_deps.settings.websocket.endpoint_path)
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()
        logger.info("runtime: shut down")


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


def _runtime_deps() -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


@app.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/mcp-servers")
async def mcp_servers() -> dict[str, Any]:
    return {"servers": _runtime_deps().mcp.servers_info()}


@app.websocket(WS_ENDPOINT_PATH)
async def websocket_endpoint(websocket: WebSocket) -> None:
    await handle_websocket_connection(websocket, _runtime_deps())


__all__ = ["app"]
