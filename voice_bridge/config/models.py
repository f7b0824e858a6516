"""Inference model configuration and default content configurations."""

from __future__ import annotations

from typing import Any

ENV_MODEL_ID = "MODEL_ID"
ENV_MAX_TOKENS = "MAX_TOKENS"
ENV_TOP_P = "TOP_P"
ENV_TEMPERATURE = "TEMPERATURE"
ENV_DEFAULT_VOICE_ID = "DEFAULT_VOICE_ID"

DEFAULT_MODEL_ID = "amazon.nova-sonic-v1:0"
DEFAULT_MAX_TOKENS: int = 1024
DEFAULT_TOP_P: float = 0.9
DEFAULT_TEMPERATURE: float = 1.0
DEFAULT_VOICE_ID = "tiffany"

DEFAULT_AUDIO_INPUT_CONFIGURATION: dict[str, Any] = {
    "audioType": "SPEECH",
    "encoding": "base64",
    "mediaType": "audio/lpcm",
    "sampleRateHertz": 16000,
    "sampleSizeBits": 16,
    "channelCount": 1,
}

# Output audio is 24kHz; the voice is filled in per session handle.
DEFAULT_AUDIO_OUTPUT_CONFIGURATION: dict[str, Any] = {
    **DEFAULT_AUDIO_INPUT_CONFIGURATION,
    "sampleRateHertz": 24000,
    "voiceId": DEFAULT_VOICE_ID,
}

DEFAULT_TEXT_CONFIGURATION: dict[str, Any] = {"mediaType": "text/plain"}

DEFAULT_SYSTEM_PROMPT = (
    "You are a friend. The user and you will engage in a spoken dialog exchanging the transcripts of a natural "
    "real-time conversation. Keep your responses short, generally two or three sentences for chatty scenarios."
)

__all__ = [
    "DEFAULT_AUDIO_INPUT_CONFIGURATION",
    "DEFAULT_AUDIO_OUTPUT_CONFIGURATION",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL_ID",
    "DEFAULT_SYSTEM_PROMPT",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TEXT_CONFIGURATION",
    "DEFAULT_TOP_P",
    "DEFAULT_VOICE_ID",
    "ENV_DEFAULT_VOICE_ID",
    "ENV_MAX_TOKENS",
    "ENV_MODEL_ID",
    "ENV_TEMPERATURE",
    "ENV_TOP_P",
]
