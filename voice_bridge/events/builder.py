"""Constructors for the outbound protocol events.

Every function is pure given its arguments; the only hidden input is a fresh
uuid4 for multi-part contents when the caller does not pass ``content_name``.
Field names and nesting are the remote service's wire contract and must not
be renamed.
"""

from __future__ import annotations

import uuid
from typing import Any
from collections.abc import Sequence

import orjson

from .envelope import Envelope


def _new_content_name() -> str:
    return str(uuid.uuid4())


def build_session_start(inference_config: dict[str, Any]) -> Envelope:
    return Envelope("sessionStart", {"inferenceConfiguration": dict(inference_config)})


def build_prompt_start(
    prompt_name: str,
    audio_output_config: dict[str, Any],
    tool_specs: Sequence[dict[str, Any]],
) -> Envelope:
    return Envelope(
        "promptStart",
        {
            "promptName": prompt_name,
            "textOutputConfiguration": {"mediaType": "text/plain"},
            "audioOutputConfiguration": dict(audio_output_config),
            "toolUseOutputConfiguration": {"mediaType": "application/json"},
            "toolConfiguration": {"tools": list(tool_specs)},
        },
    )


def build_system_prompt(
    prompt_name: str,
    text_config: dict[str, Any],
    content: str,
    *,
    content_name: str | None = None,
) -> list[Envelope]:
    name = content_name or _new_content_name()
    return [
        Envelope(
            "contentStart",
            {
                "promptName": prompt_name,
                "contentName": name,
                "type": "TEXT",
                "interactive": True,
                "role": "SYSTEM",
                "textInputConfiguration": dict(text_config),
            },
        ),
        Envelope("textInput", {"promptName": prompt_name, "contentName": name, "content": content}),
        Envelope("contentEnd", {"promptName": prompt_name, "contentName": name}),
    ]


def build_audio_start(prompt_name: str, audio_content_id: str, audio_config: dict[str, Any]) -> Envelope:
    return Envelope(
        "contentStart",
        {
            "promptName": prompt_name,
            "contentName": audio_content_id,
            "type": "AUDIO",
            "interactive": True,
            "role": "USER",
            "audioInputConfiguration": dict(audio_config),
        },
    )


def build_audio_input(prompt_name: str, audio_content_id: str, audio_b64: str) -> Envelope:
    return Envelope(
        "audioInput",
        {"promptName": prompt_name, "contentName": audio_content_id, "content": audio_b64},
    )


def serialize_tool_result(result: Any) -> str:
    """Render a tool result as the single text block the remote side expects.

    Only the first element of a non-empty list is kept: providers that return
    several content blocks must collapse them before returning.
    """
    if isinstance(result, list) and result:
        return orjson.dumps(result[0]).decode("utf-8")
    if isinstance(result, str):
        return result
    return orjson.dumps(result).decode("utf-8")


def build_tool_result(
    prompt_name: str,
    tool_use_id: str,
    result: Any,
    *,
    content_name: str | None = None,
) -> list[Envelope]:
    name = content_name or _new_content_name()
    return [
        Envelope(
            "contentStart",
            {
                "promptName": prompt_name,
                "contentName": name,
                "interactive": False,
                "type": "TOOL",
                "role": "TOOL",
                "toolResultInputConfiguration": {
                    "toolUseId": tool_use_id,
                    "type": "TEXT",
                    "textInputConfiguration": {"mediaType": "text/plain"},
                },
            },
        ),
        Envelope(
            "toolResult",
            {"promptName": prompt_name, "contentName": name, "content": serialize_tool_result(result)},
        ),
        Envelope("contentEnd", {"promptName": prompt_name, "contentName": name}),
    ]


def build_content_end(prompt_name: str, content_name: str) -> Envelope:
    return Envelope("contentEnd", {"promptName": prompt_name, "contentName": content_name})


def build_prompt_end(prompt_name: str) -> Envelope:
    return Envelope("promptEnd", {"promptName": prompt_name})


def build_session_end() -> Envelope:
    return Envelope("sessionEnd", {})


__all__ = [
    "build_audio_input",
    "build_audio_start",
    "build_content_end",
    "build_prompt_end",
    "build_prompt_start",
    "build_session_end",
    "build_session_start",
    "build_system_prompt",
    "build_tool_result",
    "serialize_tool_result",
]
