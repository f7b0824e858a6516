"""Outbound event envelope."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson


@dataclass(frozen=True, slots=True)
class Envelope:
    """One outbound protocol event, rendered on the wire as ``{"event": {kind: body}}``."""

    kind: str
    body: dict[str, Any]

    def to_event(self) -> dict[str, Any]:
        return {"event": {self.kind: self.body}}

    def encode(self) -> bytes:
        return orjson.dumps(self.to_event())


__all__ = ["Envelope"]
