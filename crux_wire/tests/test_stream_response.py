"""Lazy stream semantics over a scripted transport.

Covers:
- nothing is sent until the stream is iterated
- accessors (text, usage, finish reason, tool calls only once terminal)
- early close releases the transport and logs the finalize event once
- http, timeout and in-band api errors end the stream with an error
"""
from __future__ import annotations

from crux_wire.base.errors import ErrorCode
from crux_wire.base.streaming import ErrorDelta, TextDelta
from crux_wire.executor import stream_object, stream_text
from crux_wire.tests.helpers import ScriptedTransport, sse

MODEL = "openai:gpt-4o"


def _chunk(content=None, finish=None, tool_calls=None, **extra):
    delta = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    choice = {"index": 0, "delta": delta}
    if finish is not None:
        choice["finish_reason"] = finish
    return {"id": "chatcmpl-42", "choices": [choice], **extra}


def _text_chunks():
    return [
        sse(_chunk("Hel")),
        sse(_chunk("lo")),
        sse(_chunk(finish="stop")),
        sse({"id": "chatcmpl-42", "choices": [], "usage": {"prompt_tokens": 4, "completion_tokens": 2, "total_tokens": 6}}),
        sse("[DONE]"),
    ]


def test_stream_is_lazy_and_accumulates(api_keys, catalog):
    transport = ScriptedTransport(_text_chunks())
    stream = stream_text(MODEL, "hi", catalog=catalog, transport=transport).unwrap()
    assert transport.requests == []  # nosec B101
    assert stream.finish_reason is None  # nosec B101

    deltas = list(stream)
    texts = [d.text for d in deltas if isinstance(d, TextDelta)]
    assert texts == ["Hel", "lo"]  # nosec B101
    assert stream.text() == "Hello"  # nosec B101
    assert stream.terminated  # nosec B101
    assert stream.error is None  # nosec B101
    assert stream.finish_reason == "stop"  # nosec B101
    assert stream.response_id == "chatcmpl-42"  # nosec B101
    assert stream.usage() == {"input_tokens": 4, "output_tokens": 2, "total_tokens": 6}  # nosec B101
    assert stream.tool_calls() == []  # nosec B101
    assert transport.closed  # nosec B101


def test_tool_calls_hidden_until_terminal(api_keys, catalog):
    chunks = [
        sse(_chunk(tool_calls=[{"index": 0, "id": "call_1", "function": {"name": "get_weather", "arguments": ""}}])),
        sse(_chunk(tool_calls=[{"index": 0, "function": {"arguments": '{"location":'}}])),
        sse(_chunk(tool_calls=[{"index": 0, "function": {"arguments": '"Paris"}'}}])),
        sse(_chunk(finish="tool_calls")),
        sse("[DONE]"),
    ]
    stream = stream_text(MODEL, "weather?", catalog=catalog, transport=ScriptedTransport(chunks)).unwrap()
    next(stream)
    assert stream.tool_calls() is None  # nosec B101
    stream.drain()
    [call] = stream.tool_calls()
    assert call.id == "call_1" and call.args_map() == {"location": "Paris"}  # nosec B101
    assert stream.finish_reason == "tool_calls"  # nosec B101
    message = stream.to_message()
    assert message.role == "assistant" and message.tool_calls == [call]  # nosec B101


def test_early_close_releases_transport_and_logs_once(api_keys, catalog, log_records):
    chunks = [sse(_chunk(str(i))) for i in range(5)] + [sse("[DONE]")]
    transport = ScriptedTransport(chunks)
    stream = stream_text(MODEL, "count", catalog=catalog, transport=transport).unwrap()
    first = next(stream)
    assert first == TextDelta("0")  # nosec B101
    stream.close()
    stream.close()
    assert transport.closed  # nosec B101
    assert transport.delivered == 1  # nosec B101
    assert list(stream) == []  # nosec B101
    finals = [r for r in log_records if r.get("event") in ("stream.end", "stream.error")]
    assert len(finals) == 1  # nosec B101
    assert finals[0]["emitted_count"] == 1  # nosec B101


def test_context_manager_closes(api_keys, catalog):
    transport = ScriptedTransport(_text_chunks())
    with stream_text(MODEL, "hi", catalog=catalog, transport=transport).unwrap() as stream:
        next(stream)
    assert transport.closed  # nosec B101


def test_http_error_status(api_keys, catalog, log_records):
    transport = ScriptedTransport(_text_chunks(), status=500)
    stream = stream_text(MODEL, "hi", catalog=catalog, transport=transport).unwrap()
    assert list(stream) == []  # nosec B101
    assert stream.error.code is ErrorCode.HTTP_ERROR  # nosec B101
    assert stream.error.status == 500  # nosec B101
    assert stream.error.provider == "openai" and stream.error.model == "gpt-4o"  # nosec B101
    assert stream.finish_reason == "error"  # nosec B101
    [final] = [r for r in log_records if r.get("event") == "stream.error"]
    assert final["error_code"] == "http_error"  # nosec B101
    assert final["provider"] == "openai"  # nosec B101


def test_timeout_keeps_partial_text(api_keys, catalog):
    transport = ScriptedTransport([sse(_chunk("partial"))], finish="timeout")
    stream = stream_text(MODEL, "hi", catalog=catalog, transport=transport).unwrap().drain()
    assert stream.text() == "partial"  # nosec B101
    assert stream.error.code is ErrorCode.TIMEOUT  # nosec B101


def test_exhausted_transport_without_done_terminates_cleanly(api_keys, catalog):
    transport = ScriptedTransport([sse(_chunk("x"))], finish=None)
    stream = stream_text(MODEL, "hi", catalog=catalog, transport=transport).unwrap().drain()
    assert stream.terminated and stream.error is None  # nosec B101
    assert stream.finish_reason == "stop"  # nosec B101


def test_in_band_api_error(api_keys, catalog):
    chunks = [sse(_chunk("a")), sse({"error": {"message": "rate limited", "type": "rate_limit_error"}}), sse("[DONE]")]
    stream = stream_text(MODEL, "hi", catalog=catalog, transport=ScriptedTransport(chunks)).unwrap()
    deltas = list(stream)
    assert ErrorDelta(message="rate limited", type="rate_limit_error") in deltas  # nosec B101
    assert stream.error.code is ErrorCode.API_ERROR  # nosec B101
    assert stream.error.details["type"] == "rate_limit_error"  # nosec B101
    assert stream.finish_reason == "error"  # nosec B101


def test_stream_object_partial_parse(api_keys, catalog):
    chunks = [sse(_chunk('{"name": "Ad')), sse(_chunk('a"}')), sse(_chunk(finish="stop")), sse("[DONE]")]
    stream = stream_object(
        MODEL, "who?", [("name", {"type": "string"})], catalog=catalog, transport=ScriptedTransport(chunks)
    ).unwrap()
    next(stream)
    assert stream.object() is None  # nosec B101
    stream.drain()
    assert stream.object() == {"name": "Ada"}  # nosec B101
    assert stream.operation == "object"  # nosec B101
