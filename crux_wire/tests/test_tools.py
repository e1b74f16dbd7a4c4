"""Tool definitions, routing, streamed call accumulation and execution."""
from __future__ import annotations

import pytest

from crux_wire.base.errors import ErrorCode, ProviderError
from crux_wire.base.models import Context, ToolCall
from crux_wire.base.streaming import TextDelta, ToolCallDelta, ToolCallStart
from crux_wire.base.tools import SimpleToolRouter, Tool, ToolCallAccumulator, execute_and_append_tools


def _weather(args):
    return {"location": args["location"], "temp_c": 18}


def _boom(args):
    raise RuntimeError("service down")


WEATHER = Tool.new(
    "get_weather",
    "Current weather",
    _weather,
    parameter_schema=[("location", {"type": "string", "required": True})],
)
BROKEN = Tool.new("broken", "Always fails", _boom)


def test_accumulator_reconstructs_fragmented_arguments():
    acc = ToolCallAccumulator().extend(
        [
            ToolCallStart(index=0, id="call_1", name="get_weather"),
            TextDelta("ignored"),
            ToolCallDelta(index=0, arguments_fragment='{"location":'),
            ToolCallDelta(index=0, arguments_fragment='"Paris"}'),
        ]
    )
    assert acc.arguments(0) == '{"location":"Paris"}'  # nosec B101
    [call] = acc.finalize()
    assert (call.id, call.name, call.args_map()) == ("call_1", "get_weather", {"location": "Paris"})  # nosec B101


def test_accumulator_orders_by_index_and_restart_overwrites():
    acc = ToolCallAccumulator()
    for delta in (
        ToolCallStart(index=1, id="b", name="second"),
        ToolCallStart(index=0, id="a", name="first"),
        ToolCallDelta(index=0, arguments_fragment="{stale"),
        ToolCallStart(index=0, id="a2", name="first"),
        ToolCallDelta(index=0, arguments_fragment="{}"),
    ):
        acc.apply(delta)
    calls = acc.finalize()
    assert [c.id for c in calls] == ["a2", "b"]  # nosec B101
    assert calls[0].arguments == "{}"  # nosec B101
    assert not ToolCallAccumulator()  # nosec B101


def test_tool_definition_validation():
    with pytest.raises(ProviderError) as exc:
        Tool.new("bad name", "x", _weather)
    assert exc.value.code is ErrorCode.INVALID_PARAMETER  # nosec B101
    with pytest.raises(ProviderError):
        Tool.new("ok", "x", "not callable")  # type: ignore[arg-type]
    with pytest.raises(ProviderError) as schema:
        Tool.new("ok", "x", _weather, parameter_schema=[("a", {"type": "wat"})])
    assert schema.value.code is ErrorCode.INVALID_SCHEMA  # nosec B101


def test_tool_schema_formats():
    openai = WEATHER.to_schema("openai")
    assert openai["type"] == "function"  # nosec B101
    assert openai["function"]["parameters"]["required"] == ["location"]  # nosec B101
    assert WEATHER.to_schema("anthropic")["input_schema"]["properties"]["location"] == {"type": "string"}  # nosec B101
    assert "additionalProperties" not in WEATHER.to_schema("google")["parameters"]  # nosec B101
    with pytest.raises(ProviderError):
        WEATHER.to_schema("carrier")


def test_router_outcomes():
    router = SimpleToolRouter([WEATHER, BROKEN])
    assert router.invoke("get_weather", {"location": "Rome"}).content == {"location": "Rome", "temp_c": 18}  # nosec B101
    missing = router.invoke("nope", {})
    assert (missing.ok, missing.code) == (False, "not_found")  # nosec B101
    invalid = router.invoke("get_weather", {})
    assert invalid.code == "validation_failed"  # nosec B101
    failed = router.invoke("broken", {})
    assert failed.code == "callback_failed" and failed.error == "service down"  # nosec B101


def test_execute_and_append_tools_absorbs_failures_in_order(log_records):
    calls = [
        ToolCall.new("c1", "get_weather", '{"location":"Paris"}'),
        ToolCall.new("c2", "broken", "{}"),
        ToolCall.new("c3", "unknown_tool", "{}"),
        ToolCall.new("c4", "get_weather", "{not json"),
    ]
    ctx = Context.new([Context.user("weather?"), Context.assistant("", tool_calls=calls)])
    out = execute_and_append_tools(ctx, calls, [WEATHER, BROKEN])
    results = out.to_list()[2:]
    assert [m.tool_call_id for m in results] == ["c1", "c2", "c3", "c4"]  # nosec B101
    assert all(m.role == "tool" for m in results)  # nosec B101
    assert results[0].text() == '{"location": "Paris", "temp_c": 18}'  # nosec B101
    assert results[1].text() == "Error: service down"  # nosec B101
    assert results[2].text() == "Error: tool 'unknown_tool' not found"  # nosec B101
    assert results[3].text().startswith("Error: could not parse arguments")  # nosec B101
    assert out.is_valid  # nosec B101
    assert len(ctx) == 2  # nosec B101
    events = [r for r in log_records if r.get("event") == "tools.execute"]
    assert [e["tool_call_id"] for e in events] == ["c1", "c2", "c3", "c4"]  # nosec B101
    assert events[1]["error_code"] == "callback_failed"  # nosec B101


def test_execute_accepts_wire_shaped_mappings():
    ctx = Context.new([Context.user("q"), Context.assistant("", tool_calls=[ToolCall.new("w1", "get_weather", {})])])
    out = execute_and_append_tools(
        ctx,
        [{"id": "w1", "function": {"name": "get_weather", "arguments": '{"location":"Oslo"}'}}],
        SimpleToolRouter([WEATHER]),
    )
    assert out.to_list()[-1].text() == '{"location": "Oslo", "temp_c": 18}'  # nosec B101


def test_results_keyed_by_non_strings_are_absorbed():
    by_code = Tool.new("by_code", "Status text by numeric code", lambda args: {1: "x"})
    nested = Tool.new("nested", "Grid keyed by coordinates", lambda args: {"grid": {(0, 1): "x"}})
    assert by_code.execute({}).content == '{"1": "x"}'  # nosec B101
    failed = nested.execute({})
    assert (failed.ok, failed.code) == (False, "callback_failed")  # nosec B101

    calls = [
        ToolCall.new("k1", "by_code", "{}"),
        ToolCall.new("k2", "nested", "{}"),
        ToolCall.new("k3", "get_weather", '{"location":"Lima"}'),
    ]
    ctx = Context.new([Context.user("q"), Context.assistant("", tool_calls=calls)])
    results = execute_and_append_tools(ctx, calls, [by_code, nested, WEATHER]).to_list()[2:]
    assert [m.tool_call_id for m in results] == ["k1", "k2", "k3"]  # nosec B101
    assert results[0].text() == '{"1": "x"}'  # nosec B101
    assert results[1].text().startswith("Error: ")  # nosec B101
    assert results[2].text() == '{"location": "Lima", "temp_c": 18}'  # nosec B101
