"""Shared error types for the session bridge."""

from __future__ import annotations

from typing import Any, ClassVar
from dataclasses import dataclass


class SessionError(Exception):
    """Base class for errors tied to one conversation."""


@dataclass(frozen=True, slots=True)
class DuplicateSessionError(SessionError):
    """Raised when a session is created with an id that is already registered."""

    session_id: str

    def __str__(self) -> str:
        return f"session {self.session_id} already exists"


@dataclass(frozen=True, slots=True)
class SessionNotFoundError(SessionError):
    session_id: str

    def __str__(self) -> str:
        return f"session {self.session_id} does not exist"


@dataclass(frozen=True, slots=True)
class InvalidSessionStateError(SessionError):
    """Raised when an operation needs an active session but the session is gone or closing."""

    session_id: str
    reason: str = "session is not active"

    def __str__(self) -> str:
        return f"session {self.session_id}: {self.reason}"


@dataclass(frozen=True, slots=True)
class RemoteStreamError(Exception):
    """Failure reported by (or while reading) the remote response stream.

    The demultiplexer notifies handlers before raising these, so callers should
    not dispatch a second ``error`` notification for them.
    """

    details: Any = None

    tag: ClassVar[str] = "remoteStreamError"

    def __str__(self) -> str:
        return f"{self.tag}: {self.details}" if self.details is not None else self.tag


@dataclass(frozen=True, slots=True)
class ModelStreamError(RemoteStreamError):
    tag: ClassVar[str] = "modelStreamErrorException"


@dataclass(frozen=True, slots=True)
class InternalServerError(RemoteStreamError):
    tag: ClassVar[str] = "internalServerException"


@dataclass(frozen=True, slots=True)
class ResponseStreamError(RemoteStreamError):
    tag: ClassVar[str] = "responseStream"


@dataclass(frozen=True, slots=True)
class ToolNotFoundError(Exception):
    tool_name: str

    def __str__(self) -> str:
        return f"unsupported tool {self.tool_name}"


@dataclass(frozen=True, slots=True)
class ToolInvocationError(Exception):
    """Raised when a registered tool fails; wraps the provider's message."""

    tool_name: str
    message: str

    def __str__(self) -> str:
        return f"tool {self.tool_name} failed: {self.message}"


__all__ = [
    "DuplicateSessionError",
    "InternalServerError",
    "InvalidSessionStateError",
    "ModelStreamError",
    "RemoteStreamError",
    "ResponseStreamError",
    "SessionError",
    "SessionNotFoundError",
    "ToolInvocationError",
    "ToolNotFoundError",
]
