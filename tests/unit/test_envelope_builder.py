from __future__ import annotations

import orjson

from voice_bridge.events.envelope import Envelope
from voice_bridge.events.builder import (
    build_prompt_end,
    build_audio_input,
    build_audio_start,
    build_session_end,
    build_tool_result,
    build_prompt_start,
    build_session_start,
    build_system_prompt,
    serialize_tool_result,
)


def test_envelope_encodes_single_key_event() -> None:
    envelope = Envelope("promptEnd", {"promptName": "p1"})
    assert orjson.loads(envelope.encode()) == {"event": {"promptEnd": {"promptName": "p1"}}}


def test_session_start_wraps_inference_configuration() -> None:
    config = {"maxTokens": 1024, "topP": 0.9, "temperature": 0.7}
    envelope = build_session_start(config)
    assert envelope.to_event() == {"event": {"sessionStart": {"inferenceConfiguration": config}}}


def test_prompt_start_carries_tool_configuration() -> None:
    tools = [{"toolSpec": {"name": "getDateAndTimeTool"}}]
    envelope = build_prompt_start("p1", {"voiceId": "matthew"}, tools)
    body = envelope.body
    assert envelope.kind == "promptStart"
    assert body["promptName"] == "p1"
    assert body["textOutputConfiguration"] == {"mediaType": "text/plain"}
    assert body["audioOutputConfiguration"] == {"voiceId": "matthew"}
    assert body["toolUseOutputConfiguration"] == {"mediaType": "application/json"}
    assert body["toolConfiguration"] == {"tools": tools}


def test_system_prompt_shares_one_content_name() -> None:
    envelopes = build_system_prompt("p1", {"mediaType": "text/plain"}, "be brief")
    assert [e.kind for e in envelopes] == ["contentStart", "textInput", "contentEnd"]
    names = {e.body["contentName"] for e in envelopes}
    assert len(names) == 1
    start = envelopes[0].body
    assert start["type"] == "TEXT"
    assert start["role"] == "SYSTEM"
    assert start["interactive"] is True
    assert envelopes[1].body["content"] == "be brief"


def test_system_prompt_generates_fresh_content_names() -> None:
    first = build_system_prompt("p1", {}, "a")[0].body["contentName"]
    second = build_system_prompt("p1", {}, "a")[0].body["contentName"]
    assert first != second


def test_audio_start_and_input_use_audio_content_id() -> None:
    start = build_audio_start("p1", "audio-1", {"sampleRateHertz": 16000})
    chunk = build_audio_input("p1", "audio-1", "AAAA")
    assert start.body["contentName"] == "audio-1"
    assert start.body["type"] == "AUDIO"
    assert start.body["role"] == "USER"
    assert start.body["audioInputConfiguration"] == {"sampleRateHertz": 16000}
    assert chunk.body == {"promptName": "p1", "contentName": "audio-1", "content": "AAAA"}


def test_tool_result_triple() -> None:
    envelopes = build_tool_result("p1", "tu-1", "sunny", content_name="c1")
    assert [e.kind for e in envelopes] == ["contentStart", "toolResult", "contentEnd"]
    start = envelopes[0].body
    assert start["interactive"] is False
    assert start["type"] == "TOOL"
    assert start["role"] == "TOOL"
    assert start["toolResultInputConfiguration"]["toolUseId"] == "tu-1"
    assert envelopes[1].body == {"promptName": "p1", "contentName": "c1", "content": "sunny"}
    assert envelopes[2].body == {"promptName": "p1", "contentName": "c1"}


def test_serialize_tool_result_keeps_first_list_element() -> None:
    result = [{"type": "text", "text": "first"}, {"type": "text", "text": "second"}]
    assert orjson.loads(serialize_tool_result(result)) == {"type": "text", "text": "first"}


def test_serialize_tool_result_passes_strings_through() -> None:
    assert serialize_tool_result('{"already": "json"}') == '{"already": "json"}'


def test_serialize_tool_result_encodes_other_values() -> None:
    assert orjson.loads(serialize_tool_result({"weather_data": {"t": 3}})) == {"weather_data": {"t": 3}}
    assert serialize_tool_result([]) == "[]"
    assert serialize_tool_result(None) == "null"


def test_end_events() -> None:
    assert build_prompt_end("p1").to_event() == {"event": {"promptEnd": {"promptName": "p1"}}}
    assert build_session_end().to_event() == {"event": {"sessionEnd": {}}}
