"""Runtime package.

Keep this module dependency-light: importing `voice_bridge.runtime.*` from unit
tests should not open MCP connections or network clients.
"""

__all__: list[str] = []
