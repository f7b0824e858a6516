from .runtime import RuntimeDeps
from .context import EngineContext, TeardownTimings
from .session import PendingToolUse, SessionRecord, TeardownState
from .settings import AppSettings

__all__ = [
    "AppSettings",
    "EngineContext",
    "PendingToolUse",
    "RuntimeDeps",
    "SessionRecord",
    "TeardownState",
    "TeardownTimings",
]
