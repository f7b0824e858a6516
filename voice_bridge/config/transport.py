"""Duplex transport configuration for the remote inference service."""

from __future__ import annotations

ENV_INFERENCE_WS_URL = "INFERENCE_WS_URL"
ENV_INFERENCE_MAX_MESSAGE_BYTES = "INFERENCE_MAX_MESSAGE_BYTES"
ENV_INFERENCE_OPEN_TIMEOUT_S = "INFERENCE_OPEN_TIMEOUT_S"

DEFAULT_INFERENCE_WS_URL = "ws://localhost:9000/v1/stream"
# Audio output frames carry base64 PCM and can be large.
DEFAULT_INFERENCE_MAX_MESSAGE_BYTES: int = 16 * 1024 * 1024
DEFAULT_INFERENCE_OPEN_TIMEOUT_S: float = 10.0

__all__ = [
    "DEFAULT_INFERENCE_MAX_MESSAGE_BYTES",
    "DEFAULT_INFERENCE_OPEN_TIMEOUT_S",
    "DEFAULT_INFERENCE_WS_URL",
    "ENV_INFERENCE_MAX_MESSAGE_BYTES",
    "ENV_INFERENCE_OPEN_TIMEOUT_S",
    "ENV_INFERENCE_WS_URL",
]
