"""OpenAI Chat Completions dialect.

Serves every OpenAI-compatible chat endpoint (OpenAI, Groq, OpenRouter, xAI).
Request path ``/chat/completions`` relative to a ``/v1`` base URL.

Decoding:
    ``choices[0].delta.content``     -> TextDelta
    ``choices[0].delta.tool_calls``  -> ToolCallStart (when a function name is present)
                                        then ToolCallDelta (argument text)
    ``choices[0].finish_reason``     -> MetaDelta(terminal=True)
    top-level ``usage``              -> UsageDelta (normalized)
    ``{"error": ...}``               -> ErrorDelta
    ``[DONE]``                       -> None sentinel
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.catalog import Model
from ..base.models import ContentPart, Message
from ..base.schema import DeclaredSchema, to_json
from ..base.streaming import (
    MaybeDelta,
    MetaDelta,
    SSEEvent,
    TextDelta,
    ToolCallDelta,
    ToolCallStart,
    UsageDelta,
    normalize_finish_reason,
)
from ..base.tokens import normalize_usage
from ..base.tools import Tool
from ..config.defaults import OBJECT_SCHEMA_NAME
from .base import DONE_MARKER, Body, Prompt, WireProtocol, api_error, decode_json, maybe_add, part_url, to_context
from .registry import WireProtocolId

_PASSTHROUGH_OPTIONS = (
    "max_tokens",
    "max_completion_tokens",
    "temperature",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "reasoning_effort",
)


def _encode_part(part: ContentPart) -> Optional[Dict[str, Any]]:
    if part.type == "text":
        return {"type": "text", "text": part.text or ""}
    url = part_url(part)
    if url is not None:
        return {"type": "image_url", "image_url": {"url": url}}
    return None


def encode_content(parts: List[ContentPart]) -> Any:
    """A lone text part encodes as a bare string, anything else as a part list."""
    if len(parts) == 1 and parts[0].type == "text":
        return parts[0].text or ""
    return [encoded for encoded in (_encode_part(p) for p in parts) if encoded is not None]


def encode_message(msg: Message) -> Dict[str, Any]:
    if msg.role == "tool":
        return {"role": "tool", "tool_call_id": msg.tool_call_id, "content": encode_content(msg.content)}
    out: Dict[str, Any] = {"role": msg.role, "content": encode_content(msg.content)}
    if msg.role == "assistant" and msg.tool_calls:
        out["tool_calls"] = [tc.to_dict() for tc in msg.tool_calls]
    if msg.name and msg.role == "user":
        out["name"] = msg.name
    return out


def encode_tool(tool: Any) -> Dict[str, Any]:
    return tool.to_schema("openai") if isinstance(tool, Tool) else dict(tool)


def encode_tool_choice(choice: Any) -> Any:
    if isinstance(choice, Mapping) and choice.get("type") == "tool" and choice.get("name"):
        return {"type": "function", "function": {"name": choice["name"]}}
    return choice


def response_format(opts: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    compiled = opts.get("compiled_schema")
    if opts.get("operation") != "object" or compiled is None:
        return None
    return {
        "type": "json_schema",
        "json_schema": {"name": OBJECT_SCHEMA_NAME, "strict": True, "schema": to_json(compiled)},
    }


class OpenAIChat(WireProtocol):
    id = WireProtocolId.OPENAI_CHAT

    def endpoint(self) -> str:
        return "/chat/completions"

    def encode_body(self, model: Model, prompt: Prompt, opts: Mapping[str, Any]) -> Body:
        context = to_context(prompt)
        body: Body = {
            "model": model.id,
            "messages": [encode_message(m) for m in context],
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        for key in _PASSTHROUGH_OPTIONS:
            maybe_add(body, key, opts.get(key))
        maybe_add(body, "response_format", response_format(opts))
        tools = opts.get("tools")
        if tools:
            body["tools"] = [encode_tool(t) for t in tools]
        if opts.get("tool_choice") is not None:
            body["tool_choice"] = encode_tool_choice(opts["tool_choice"])
        return body

    def options_schema(self) -> DeclaredSchema:
        return (
            ("max_tokens", {"type": "pos_integer", "doc": "Maximum tokens to generate"}),
            ("temperature", {"type": "float", "doc": "Sampling temperature (0.0-2.0)"}),
            ("top_p", {"type": "float", "doc": "Nucleus sampling parameter"}),
            ("frequency_penalty", {"type": "float", "doc": "Frequency penalty (-2.0 to 2.0)"}),
            ("presence_penalty", {"type": "float", "doc": "Presence penalty (-2.0 to 2.0)"}),
        )

    def decode_sse_event(self, event: SSEEvent, model: Optional[Model]) -> List[MaybeDelta]:
        if event.data == DONE_MARKER:
            return [None]
        payload, failure = decode_json(event.data)
        if failure is not None:
            return [failure]
        if not isinstance(payload, Mapping):
            return []
        if "error" in payload:
            return [api_error(payload)]
        out: List[MaybeDelta] = []
        choices = payload.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], Mapping):
            choice = choices[0]
            delta = choice.get("delta")
            if isinstance(delta, Mapping):
                out.extend(self._decode_delta(delta))
            if choice.get("finish_reason"):
                out.append(
                    MetaDelta(
                        terminal=True,
                        finish_reason=normalize_finish_reason(choice["finish_reason"]),
                        response_id=payload.get("id"),
                    )
                )
        usage = normalize_usage(payload.get("usage")) if isinstance(payload.get("usage"), Mapping) else None
        if usage is not None:
            out.append(UsageDelta(usage=usage))
        return out

    @staticmethod
    def _decode_delta(delta: Mapping[str, Any]) -> List[MaybeDelta]:
        out: List[MaybeDelta] = []
        content = delta.get("content")
        if isinstance(content, str) and content:
            out.append(TextDelta(content))
        for tc in delta.get("tool_calls") or ():
            if not isinstance(tc, Mapping):
                continue
            index = tc.get("index") or 0
            function = tc.get("function") if isinstance(tc.get("function"), Mapping) else {}
            name = function.get("name")
            if isinstance(name, str) and name:
                out.append(ToolCallStart(index=index, id=tc.get("id"), name=name))
            arguments = function.get("arguments")
            if isinstance(arguments, str) and arguments:
                out.append(ToolCallDelta(index=index, arguments_fragment=arguments))
        return out


__all__ = ["OpenAIChat", "encode_content", "encode_message", "encode_tool", "encode_tool_choice", "response_format"]
