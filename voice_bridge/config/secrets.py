"""Secrets and authentication configuration."""

from __future__ import annotations

ENV_BRIDGE_API_KEY = "BRIDGE_API_KEY"
ENV_INFERENCE_API_KEY = "INFERENCE_API_KEY"

__all__ = ["ENV_BRIDGE_API_KEY", "ENV_INFERENCE_API_KEY"]
