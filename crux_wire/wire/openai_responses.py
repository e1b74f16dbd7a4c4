"""OpenAI Responses dialect (reasoning models: o1, o3, o4, gpt-5).

Request path ``/responses`` relative to the ``/v1`` base URL. Differences from
chat completions:

- ``input`` holds typed items instead of ``messages``; tool-role messages are
  omitted because this dialect cannot carry them inline.
- ``system`` becomes ``developer``; assistant text is ``output_text`` and
  every other role's text is ``input_text``.
- ``max_output_tokens`` replaces ``max_tokens``; ``reasoning.effort`` is set
  from ``reasoning_effort``.
- Streaming uses ``response.*`` event types; reasoning arrives as thinking.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.catalog import Model
from ..base.models import Message
from ..base.schema import DeclaredSchema, to_json
from ..base.streaming import (
    MaybeDelta,
    MetaDelta,
    SSEEvent,
    TextDelta,
    ThinkingDelta,
    ToolCallDelta,
    ToolCallStart,
    UsageDelta,
    normalize_finish_reason,
)
from ..base.tools import Tool
from ..config.defaults import OBJECT_SCHEMA_NAME
from .base import DONE_MARKER, Body, Prompt, WireProtocol, api_error, decode_json, maybe_add, part_url, to_context
from .registry import WireProtocolId

_TOOL_CHOICE_STRINGS = ("auto", "none", "required")

_IGNORED_EVENTS = frozenset(
    {
        "response.output_text.done",
        "response.output_item.done",
        "response.function_call_arguments.done",
    }
)


def _positive(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) and value > 0 else 0


def _usage(data: Mapping[str, Any], *, explicit_total: bool) -> Dict[str, int]:
    input_tokens = _positive(data.get("input_tokens"))
    output_tokens = _positive(data.get("output_tokens"))
    total = _positive(data.get("total_tokens")) if explicit_total else 0
    out = {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": total or input_tokens + output_tokens,
    }
    output_details = data.get("output_tokens_details")
    reasoning = _positive(output_details.get("reasoning_tokens")) if isinstance(output_details, Mapping) else 0
    reasoning = reasoning or _positive(data.get("reasoning_tokens"))
    if reasoning:
        out["reasoning_tokens"] = reasoning
    input_details = data.get("input_tokens_details")
    cached = _positive(input_details.get("cached_tokens")) if isinstance(input_details, Mapping) else 0
    if cached:
        out["cache_read_tokens"] = cached
    return out


def _index(data: Mapping[str, Any]) -> int:
    for key in ("output_index", "index"):
        value = data.get(key)
        if isinstance(value, int):
            return value
    return 0


class OpenAIResponses(WireProtocol):
    id = WireProtocolId.OPENAI_RESPONSES

    def endpoint(self) -> str:
        return "/responses"

    # ------------------------------------------------------------ encoding
    @staticmethod
    def _encode_message(msg: Message) -> Dict[str, Any]:
        role = "developer" if msg.role == "system" else msg.role
        text_type = "output_text" if msg.role == "assistant" else "input_text"
        content: List[Dict[str, Any]] = []
        for part in msg.content:
            if part.type == "text":
                content.append({"type": text_type, "text": part.text or ""})
                continue
            url = part_url(part)
            if url is not None:
                content.append({"type": "image_url", "image_url": {"url": url}})
        return {"role": role, "content": content}

    @staticmethod
    def _encode_tool(tool: Any) -> Dict[str, Any]:
        if not isinstance(tool, Tool):
            return dict(tool)
        function = tool.to_schema("openai")["function"]
        return {
            "type": "function",
            "name": function["name"],
            "description": function["description"],
            "parameters": function["parameters"],
            "strict": True,
        }

    @staticmethod
    def _encode_tool_choice(choice: Any) -> Any:
        if isinstance(choice, str):
            return choice if choice in _TOOL_CHOICE_STRINGS else None
        if not isinstance(choice, Mapping):
            return None
        if choice.get("type") == "function" and isinstance(choice.get("function"), Mapping):
            return {"type": "function", "name": choice["function"].get("name")}
        if choice.get("type") in ("tool", "function") and choice.get("name"):
            return {"type": "function", "name": choice["name"]}
        return None

    def encode_body(self, model: Model, prompt: Prompt, opts: Mapping[str, Any]) -> Body:
        context = to_context(prompt)
        body: Body = {
            "model": model.id,
            "input": [self._encode_message(m) for m in context if m.role != "tool"],
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        maybe_add(
            body,
            "max_output_tokens",
            opts.get("max_output_tokens") or opts.get("max_completion_tokens") or opts.get("max_tokens"),
        )
        effort = opts.get("reasoning_effort")
        if effort:
            body["reasoning"] = {"effort": str(effort)}
        tools = opts.get("tools")
        if tools:
            body["tools"] = [self._encode_tool(t) for t in tools]
        maybe_add(body, "tool_choice", self._encode_tool_choice(opts.get("tool_choice")))
        compiled = opts.get("compiled_schema")
        if opts.get("operation") == "object" and compiled is not None:
            body["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": OBJECT_SCHEMA_NAME,
                    "strict": True,
                    "schema": to_json(compiled),
                }
            }
        return body

    def options_schema(self) -> DeclaredSchema:
        return (
            ("max_output_tokens", {"type": "pos_integer", "doc": "Maximum output tokens to generate"}),
            ("max_completion_tokens", {"type": "pos_integer", "doc": "Alias for max_output_tokens"}),
            ("max_tokens", {"type": "pos_integer", "doc": "Alias for max_output_tokens (normalized)"}),
            (
                "reasoning_effort",
                {"type": ("in", ["minimal", "low", "medium", "high"]), "doc": "Reasoning computation intensity"},
            ),
        )

    # ------------------------------------------------------------ decoding
    def decode_sse_event(self, event: SSEEvent, model: Optional[Model]) -> List[MaybeDelta]:
        if event.data == DONE_MARKER:
            return [None]
        payload, failure = decode_json(event.data)
        if failure is not None:
            return [failure]
        if not isinstance(payload, Mapping):
            return []
        if "error" in payload and payload.get("type") in (None, "error"):
            return [api_error(payload)]
        return self._decode_event(payload, payload.get("type") or event.event)

    def _decode_event(self, data: Mapping[str, Any], event_type: Optional[str]) -> List[MaybeDelta]:
        if event_type in _IGNORED_EVENTS:
            return []
        if event_type == "response.output_text.delta":
            text = data.get("delta")
            return [TextDelta(text)] if isinstance(text, str) and text else []
        if event_type == "response.reasoning.delta":
            text = data.get("delta")
            return [ThinkingDelta(text)] if isinstance(text, str) and text else []
        if event_type == "response.output_item.added":
            return self._output_item_added(data)
        if event_type == "response.function_call_arguments.delta":
            fragment = data.get("delta")
            if isinstance(fragment, str) and fragment:
                return [ToolCallDelta(index=_index(data), arguments_fragment=fragment)]
            return []
        if event_type == "response.function_call.delta":
            return self._function_call_delta(data)
        if event_type == "response.usage":
            usage = data.get("usage")
            return [UsageDelta(usage=_usage(usage if isinstance(usage, Mapping) else {}, explicit_total=False))]
        if event_type == "response.completed":
            return self._completed(data)
        if event_type == "response.incomplete":
            return self._incomplete(data)
        if event_type == "error":
            return [api_error({"error": {"message": data.get("message"), "code": data.get("code")}})]
        if event_type == "response.failed":
            response = data.get("response") if isinstance(data.get("response"), Mapping) else {}
            return [api_error({"error": response.get("error") or "response failed"})]
        return []

    @staticmethod
    def _output_item_added(data: Mapping[str, Any]) -> List[MaybeDelta]:
        item = data.get("item")
        if not isinstance(item, Mapping) or item.get("type") != "function_call":
            return []
        name = item.get("name")
        if not name:
            return []
        index = data.get("output_index") if isinstance(data.get("output_index"), int) else 0
        return [ToolCallStart(index=index, id=item.get("call_id") or item.get("id"), name=name)]

    @staticmethod
    def _function_call_delta(data: Mapping[str, Any]) -> List[MaybeDelta]:
        delta = data.get("delta")
        if not isinstance(delta, Mapping):
            return []
        index = _index(data)
        out: List[MaybeDelta] = []
        name = delta.get("name")
        if isinstance(name, str) and name:
            out.append(ToolCallStart(index=index, id=data.get("call_id") or data.get("id"), name=name))
        fragment = delta.get("arguments")
        if isinstance(fragment, str) and fragment:
            out.append(ToolCallDelta(index=index, arguments_fragment=fragment))
        return out

    @staticmethod
    def _completed(data: Mapping[str, Any]) -> List[MaybeDelta]:
        response = data.get("response") if isinstance(data.get("response"), Mapping) else {}
        meta = MetaDelta(terminal=True, finish_reason="stop", response_id=response.get("id"))
        usage = response.get("usage")
        if isinstance(usage, Mapping):
            return [UsageDelta(usage=_usage(usage, explicit_total=True)), meta]
        return [meta]

    @staticmethod
    def _incomplete(data: Mapping[str, Any]) -> List[MaybeDelta]:
        reason = data.get("reason")
        response = data.get("response")
        if reason is None and isinstance(response, Mapping):
            details = response.get("incomplete_details")
            reason = details.get("reason") if isinstance(details, Mapping) else None
        return [MetaDelta(terminal=True, finish_reason=normalize_finish_reason(reason or "incomplete"))]


__all__ = ["OpenAIResponses"]
