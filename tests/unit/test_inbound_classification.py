from __future__ import annotations

import pytest

from voice_bridge.events.inbound import InboundKind, classify_event


@pytest.mark.parametrize(
    ("key", "kind"),
    [
        ("contentStart", InboundKind.CONTENT_START),
        ("textOutput", InboundKind.TEXT_OUTPUT),
        ("audioOutput", InboundKind.AUDIO_OUTPUT),
        ("toolUse", InboundKind.TOOL_USE),
    ],
)
def test_direct_kinds(key: str, kind: InboundKind) -> None:
    event = classify_event({"event": {key: {"x": 1}}})
    assert event is not None
    assert event.kind is kind
    assert event.name == key
    assert event.data == {"x": 1}


def test_tool_content_end_is_distinguished() -> None:
    event = classify_event({"event": {"contentEnd": {"type": "TOOL", "contentId": "c"}}})
    assert event is not None
    assert event.kind is InboundKind.TOOL_CONTENT_END
    assert event.name == "contentEnd"


def test_plain_content_end() -> None:
    event = classify_event({"event": {"contentEnd": {"type": "AUDIO"}}})
    assert event is not None
    assert event.kind is InboundKind.CONTENT_END


def test_other_event_uses_first_key() -> None:
    event = classify_event({"event": {"usageEvent": {"tokens": 3}}})
    assert event is not None
    assert event.kind is InboundKind.OTHER
    assert event.name == "usageEvent"
    assert event.data == {"usageEvent": {"tokens": 3}}


def test_missing_event_is_unknown() -> None:
    message = {"something": "else"}
    event = classify_event(message)
    assert event is not None
    assert event.kind is InboundKind.UNKNOWN
    assert event.name == "unknown"
    assert event.data == message


def test_empty_objects_are_ignored() -> None:
    assert classify_event({}) is None
    assert classify_event([]) is None


def test_empty_content_end_is_still_content_end() -> None:
    event = classify_event({"event": {"contentEnd": {}}})
    assert event is not None
    assert event.kind is InboundKind.CONTENT_END
    assert event.name == "contentEnd"
    assert event.data == {}


def test_empty_text_output_keeps_its_kind() -> None:
    event = classify_event({"event": {"textOutput": {}}})
    assert event is not None
    assert event.kind is InboundKind.TEXT_OUTPUT
    assert event.data == {}
