from __future__ import annotations

import pytest
from fakes import FAST_TIMINGS, FakeTransport

from voice_bridge.engine.engine import SessionEngine
from voice_bridge.tools.registry import ToolRegistry
from voice_bridge.state.context import EngineContext


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


@pytest.fixture
def engine(registry: ToolRegistry, transport: FakeTransport) -> SessionEngine:
    return SessionEngine(EngineContext(tools=registry, transport=transport, timings=FAST_TIMINGS))
