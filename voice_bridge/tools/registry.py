"""Process-wide mapping from tool name to an async invocation capability."""

from __future__ import annotations

import logging
from typing import Any

from voice_bridge.config.tools import BUILTIN_PROVIDER_NAME
from voice_bridge.errors import ToolNotFoundError, ToolInvocationError

from .registration import ToolRegistration

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Read-mostly after startup; shared by every session of an engine."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolRegistration] = {}

    def register(self, registration: ToolRegistration) -> None:
        logger.info(
            "registering tool %s/%s (auto-approve: %s)",
            registration.provider_name,
            registration.name,
            registration.auto_approved,
        )
        self._tools[registration.name] = registration

    def unregister(self, name: str) -> bool:
        return self._tools.pop(name, None) is not None

    def unregister_provider(self, provider_name: str) -> list[str]:
        removed = [name for name, reg in self._tools.items() if reg.provider_name == provider_name]
        for name in removed:
            del self._tools[name]
        if removed:
            logger.info("unregistered %d tools from provider %s", len(removed), provider_name)
        return removed

    def get(self, name: str) -> ToolRegistration | None:
        registration = self._tools.get(name)
        if registration is not None:
            return registration
        # Built-in names are matched case-insensitively.
        folded = name.casefold()
        for candidate in self._tools.values():
            if candidate.name.casefold() == folded:
                return candidate
        return None

    def names(self) -> list[str]:
        return list(self._tools)

    def registrations(self, provider_name: str | None = None) -> list[ToolRegistration]:
        if provider_name is None:
            return list(self._tools.values())
        return [reg for reg in self._tools.values() if reg.provider_name == provider_name]

    def provider_of(self, name: str) -> str | None:
        registration = self._tools.get(name)
        return registration.provider_name if registration is not None else None

    def is_auto_approved(self, name: str) -> bool:
        registration = self._tools.get(name)
        return registration.auto_approved if registration is not None else False

    def tool_specs(self) -> list[dict[str, Any]]:
        """Manifest for prompt-start: built-ins first, then dynamic tools in registration order."""
        builtins = [reg for reg in self._tools.values() if reg.provider_name == BUILTIN_PROVIDER_NAME]
        dynamic = [reg for reg in self._tools.values() if reg.provider_name != BUILTIN_PROVIDER_NAME]
        return [reg.to_tool_spec() for reg in (*builtins, *dynamic)]

    async def invoke(self, name: str, content: dict[str, Any]) -> Any:
        registration = self.get(name)
        if registration is None:
            raise ToolNotFoundError(tool_name=name)
        logger.info("invoking tool %s/%s", registration.provider_name, registration.name)
        try:
            return await registration.invoke(content)
        except ToolInvocationError:
            raise
        except Exception as exc:
            logger.warning("tool %s failed: %s", registration.name, exc)
            raise ToolInvocationError(tool_name=registration.name, message=str(exc)) from exc

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


__all__ = ["ToolRegistry"]
