"""Anthropic Messages dialect.

Purpose:
    Encode canonical contexts for ``/v1/messages`` and decode its typed SSE
    events (``message_start``, ``content_block_*``, ``message_delta``,
    ``message_stop``) into canonical deltas.

Extended thinking:
    Enabled with an explicit ``thinking`` mapping
    (``{"type": "enabled", "budget_tokens": 4096}``) or with
    ``reasoning_effort`` (low/medium/high), whose budget comes from the
    configurable table returned by ``get_reasoning_budgets``. While thinking
    is on, ``temperature`` is never sent. ``thinking=False`` or
    ``{"type": "disabled"}`` turns it off even when ``reasoning_effort`` is set.

Prompt caching:
    ``anthropic_prompt_cache=True`` turns the system prompt into a text block
    carrying ``cache_control`` (``anthropic_prompt_cache_ttl`` adds a ttl) and
    adds the prompt-caching beta flag.
"""
from __future__ import annotations

import base64
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..base.adapters.anthropic_thinking import thinking_enabled
from ..base.catalog import Model
from ..base.models import ContentPart, Message
from ..base.schema import DeclaredSchema
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
from ..base.tokens import normalize_usage
from ..base.tools import Tool
from ..config import get_reasoning_budgets
from ..config.defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_BETA_INTERLEAVED_THINKING,
    ANTHROPIC_BETA_PROMPT_CACHING,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    DEFAULT_REASONING_EFFORT,
)
from .base import Body, Header, Prompt, WireProtocol, api_error, decode_json, maybe_add, to_context
from .registry import WireProtocolId


def has_thinking(opts: Mapping[str, Any]) -> bool:
    return thinking_enabled(opts)


def has_prompt_caching(opts: Mapping[str, Any]) -> bool:
    return opts.get("anthropic_prompt_cache") is True


def reasoning_budget(effort: Any) -> int:
    """Thinking budget for an effort level; unknown levels fall back to medium."""
    budgets = get_reasoning_budgets()
    level = getattr(effort, "value", effort)
    return budgets.get(str(level), budgets[DEFAULT_REASONING_EFFORT])


def _cache_control(opts: Mapping[str, Any]) -> Dict[str, Any]:
    ttl = opts.get("anthropic_prompt_cache_ttl")
    return {"type": "ephemeral", "ttl": ttl} if ttl else {"type": "ephemeral"}


def _encode_part(part: ContentPart) -> Optional[Dict[str, Any]]:
    if part.type == "text":
        return {"type": "text", "text": part.text or ""}
    if part.type == "image_url":
        return {"type": "image", "source": {"type": "url", "url": part.url}}
    if part.type == "image" and part.data is not None:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": part.media_type or "image/png",
                "data": base64.b64encode(part.data).decode("ascii"),
            },
        }
    return None


def _encode_content(parts: List[ContentPart]) -> Any:
    if len(parts) == 1 and parts[0].type == "text":
        return parts[0].text or ""
    return [encoded for encoded in (_encode_part(p) for p in parts) if encoded is not None]


def _encode_message(msg: Message) -> Dict[str, Any]:
    if msg.role == "tool":
        return {
            "role": "user",
            "content": [
                {"type": "tool_result", "tool_use_id": msg.tool_call_id, "content": _encode_content(msg.content)}
            ],
        }
    if msg.role == "assistant" and msg.tool_calls:
        blocks: List[Dict[str, Any]] = []
        text = msg.text()
        if text:
            blocks.append({"type": "text", "text": text})
        for call in msg.tool_calls:
            blocks.append({"type": "tool_use", "id": call.id, "name": call.name, "input": call.args_map() or {}})
        return {"role": "assistant", "content": blocks}
    return {"role": msg.role, "content": _encode_content(msg.content)}


def _split_system(prompt: Prompt) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    context = to_context(prompt)
    system: Optional[str] = None
    messages: List[Dict[str, Any]] = []
    for msg in context:
        if msg.role == "system":
            system = msg.text()
            continue
        messages.append(_encode_message(msg))
    return system, messages


def _encode_tool(tool: Any) -> Dict[str, Any]:
    return tool.to_schema("anthropic") if isinstance(tool, Tool) else dict(tool)


class AnthropicMessages(WireProtocol):
    id = WireProtocolId.ANTHROPIC

    def endpoint(self) -> str:
        return "/v1/messages"

    def headers(self, opts: Mapping[str, Any]) -> Sequence[Header]:
        flags: List[str] = []
        if has_thinking(opts):
            flags.append(ANTHROPIC_BETA_INTERLEAVED_THINKING)
        if has_prompt_caching(opts):
            flags.append(ANTHROPIC_BETA_PROMPT_CACHING)
        out: List[Header] = [
            ("anthropic-version", ANTHROPIC_API_VERSION),
            ("content-type", "application/json"),
        ]
        if flags:
            out.insert(0, ("anthropic-beta", ",".join(flags)))
        return out

    def encode_body(self, model: Model, prompt: Prompt, opts: Mapping[str, Any]) -> Body:
        system, messages = _split_system(prompt)
        body: Body = {
            "model": model.id,
            "messages": messages,
            "stream": True,
            "max_tokens": opts.get("max_tokens") or ANTHROPIC_DEFAULT_MAX_TOKENS,
        }
        if system is not None:
            if has_prompt_caching(opts):
                body["system"] = [{"type": "text", "text": system, "cache_control": _cache_control(opts)}]
            else:
                body["system"] = system
        if not has_thinking(opts):
            maybe_add(body, "temperature", opts.get("temperature"))
        maybe_add(body, "top_p", opts.get("top_p"))
        maybe_add(body, "top_k", opts.get("top_k"))
        thinking = opts.get("thinking")
        if isinstance(thinking, Mapping):
            body["thinking"] = dict(thinking)
        elif has_thinking(opts):
            body["thinking"] = {"type": "enabled", "budget_tokens": reasoning_budget(opts.get("reasoning_effort"))}
        tools = opts.get("tools")
        if tools:
            body["tools"] = [_encode_tool(t) for t in tools]
        choice = opts.get("tool_choice")
        if isinstance(choice, Mapping) and choice.get("type") == "tool":
            body["tool_choice"] = {"type": "tool", "name": choice.get("name")}
        elif choice is not None:
            body["tool_choice"] = choice
        return body

    def options_schema(self) -> DeclaredSchema:
        return (
            ("max_tokens", {"type": "pos_integer", "default": ANTHROPIC_DEFAULT_MAX_TOKENS, "doc": "Maximum tokens to generate"}),
            ("temperature", {"type": "float", "doc": "Sampling temperature (0.0-1.0)"}),
            ("top_p", {"type": "float", "doc": "Nucleus sampling parameter"}),
            ("top_k", {"type": "pos_integer", "doc": "Top-k sampling parameter"}),
        )

    def decode_sse_event(self, event: SSEEvent, model: Optional[Model]) -> List[MaybeDelta]:
        payload, failure = decode_json(event.data)
        if failure is not None:
            return [failure]
        if not isinstance(payload, Mapping):
            return []
        kind = payload.get("type") or event.event
        if kind == "message_stop":
            return [None]
        if kind == "error":
            return [api_error(payload)]
        if kind == "message_start":
            return self._message_start(payload)
        if kind == "message_delta":
            return self._message_delta(payload)
        if kind == "content_block_start":
            return self._block_start(payload)
        if kind == "content_block_delta":
            return self._block_delta(payload)
        return []

    @staticmethod
    def _message_start(payload: Mapping[str, Any]) -> List[MaybeDelta]:
        message = payload.get("message") if isinstance(payload.get("message"), Mapping) else {}
        out: List[MaybeDelta] = []
        if message.get("id"):
            out.append(MetaDelta(terminal=False, response_id=message["id"]))
        usage = normalize_usage(message.get("usage")) if isinstance(message.get("usage"), Mapping) else None
        if usage is not None:
            out.append(UsageDelta(usage=usage))
        return out

    @staticmethod
    def _message_delta(payload: Mapping[str, Any]) -> List[MaybeDelta]:
        out: List[MaybeDelta] = []
        usage = normalize_usage(payload.get("usage")) if isinstance(payload.get("usage"), Mapping) else None
        if usage is not None:
            out.append(UsageDelta(usage=usage))
        delta = payload.get("delta")
        if isinstance(delta, Mapping) and delta.get("stop_reason"):
            out.append(MetaDelta(terminal=True, finish_reason=normalize_finish_reason(delta["stop_reason"])))
        return out

    @staticmethod
    def _block_start(payload: Mapping[str, Any]) -> List[MaybeDelta]:
        block = payload.get("content_block")
        if not isinstance(block, Mapping):
            return []
        if block.get("type") == "tool_use":
            index = payload.get("index") if isinstance(payload.get("index"), int) else 0
            return [ToolCallStart(index=index, id=block.get("id"), name=block.get("name") or "")]
        if block.get("type") == "thinking":
            text = block.get("thinking") or block.get("text") or ""
            return [ThinkingDelta(text)] if text else []
        return []

    @staticmethod
    def _block_delta(payload: Mapping[str, Any]) -> List[MaybeDelta]:
        delta = payload.get("delta")
        if not isinstance(delta, Mapping):
            return []
        kind = delta.get("type")
        if kind == "input_json_delta":
            fragment = delta.get("partial_json")
            if isinstance(fragment, str) and fragment:
                index = payload.get("index") if isinstance(payload.get("index"), int) else 0
                return [ToolCallDelta(index=index, arguments_fragment=fragment)]
            return []
        if kind == "thinking_delta":
            text = delta.get("thinking") or delta.get("text")
            return [ThinkingDelta(text)] if isinstance(text, str) and text else []
        text = delta.get("text")
        return [TextDelta(text)] if isinstance(text, str) and text else []


__all__ = ["AnthropicMessages", "has_thinking", "has_prompt_caching", "reasoning_budget"]
