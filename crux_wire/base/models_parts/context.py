"""
Canonical conversation context.

Purpose:
    Hold the ordered message list sent to every dialect and grow it across
    turns. A :class:`Context` is immutable: ``append``, ``prepend`` and
    ``concat`` return new instances.

Invariants (checked by :meth:`Context.validate`):
    - at most one ``system`` message;
    - every ``tool`` message carries a ``tool_call_id`` that answers a tool
      call requested by an earlier ``assistant`` message.

Normalization:
    :meth:`Context.normalize` turns the loose prompt shapes callers pass to the
    public operations (string, message, context, lists of those, role/content
    mappings) into a validated context, raising ``invalid_prompt`` otherwise.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import ErrorCode, ProviderError
from .content_part import ContentPart
from .message import ROLES, Message
from .tool_call import ToolCall

MessageContent = Union[str, Sequence[ContentPart]]


def _as_parts(content: MessageContent) -> List[ContentPart]:
    if isinstance(content, str):
        return [ContentPart.text_part(content)]
    return list(content)


def _coerce_tool_call(call: Any) -> ToolCall:
    """Accept a ToolCall, a ``(name, args)`` pair or a mapping with name/arguments."""
    if isinstance(call, ToolCall):
        return call
    if isinstance(call, tuple) and len(call) == 2:
        return ToolCall.new(None, call[0], call[1])
    if isinstance(call, Mapping):
        return ToolCall.new(call.get("id"), call["name"], call.get("arguments", ""))
    raise ProviderError(ErrorCode.INVALID_PROMPT, f"invalid tool call: {call!r}")


def _invalid(reason: str) -> ProviderError:
    return ProviderError(ErrorCode.INVALID_PROMPT, reason)


@dataclass(frozen=True)
class Context:
    """Ordered, immutable sequence of messages."""

    messages: Tuple[Message, ...] = ()

    # ------------------------------------------------------------ construction
    @classmethod
    def new(cls, messages: Iterable[Message] = ()) -> "Context":
        return cls(tuple(messages))

    def append(self, item: Union[Message, Iterable[Message]]) -> "Context":
        if isinstance(item, Message):
            return Context(self.messages + (item,))
        return Context(self.messages + tuple(item))

    def prepend(self, message: Message) -> "Context":
        return Context((message,) + self.messages)

    def concat(self, other: "Context") -> "Context":
        return Context(self.messages + other.messages)

    def to_list(self) -> List[Message]:
        return list(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    def __repr__(self) -> str:
        roles = ",".join(m.role for m in self.messages[:4])
        more = ",..." if len(self.messages) > 4 else ""
        return f"Context<{len(self.messages)} msgs: {roles}{more}>"

    # ------------------------------------------------------------ message helpers
    @staticmethod
    def text(role: str, content: MessageContent, metadata: Optional[Dict[str, Any]] = None) -> Message:
        if role not in ROLES:
            raise _invalid(f"invalid role: {role!r}")
        return Message(role=role, content=_as_parts(content), metadata=dict(metadata or {}))  # type: ignore[arg-type]

    @staticmethod
    def user(content: MessageContent, metadata: Optional[Dict[str, Any]] = None) -> Message:
        return Context.text("user", content, metadata)

    @staticmethod
    def system(content: MessageContent, metadata: Optional[Dict[str, Any]] = None) -> Message:
        return Context.text("system", content, metadata)

    @staticmethod
    def assistant(
        content: MessageContent = "",
        *,
        tool_calls: Optional[Sequence[Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Message:
        calls = [_coerce_tool_call(c) for c in tool_calls] if tool_calls else None
        return Message(
            role="assistant",
            content=_as_parts(content),
            tool_calls=calls,
            metadata=dict(metadata or {}),
        )

    @staticmethod
    def tool_result(
        tool_call_id: str,
        output: Any,
        *,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Message:
        """Build a ``tool`` message; non-string output is JSON encoded."""
        text = output if isinstance(output, str) else json.dumps(output, separators=(",", ":"), default=str)
        return Message(
            role="tool",
            content=[ContentPart.text_part(text)],
            name=name,
            tool_call_id=tool_call_id,
            metadata=dict(metadata or {}),
        )

    @staticmethod
    def with_image(role: str, text: str, url: str, metadata: Optional[Dict[str, Any]] = None) -> Message:
        return Context.text(role, [ContentPart.text_part(text), ContentPart.image_url_part(url)], metadata)

    @staticmethod
    def build(role: str, parts: Sequence[ContentPart], **fields: Any) -> Message:
        if role not in ROLES:
            raise _invalid(f"invalid role: {role!r}")
        return Message(role=role, content=list(parts), **fields)  # type: ignore[arg-type]

    # ------------------------------------------------------------ validation
    def validation_error(self) -> Optional[str]:
        """Return the first invariant violation, or ``None`` for a valid context."""
        system_count = 0
        known_call_ids: set = set()
        for idx, msg in enumerate(self.messages):
            if not isinstance(msg, Message) or not msg.is_valid():
                return f"message {idx} has invalid content or tool_calls"
            if msg.role == "system":
                system_count += 1
            elif msg.role == "assistant" and msg.tool_calls:
                known_call_ids.update(tc.id for tc in msg.tool_calls)
            elif msg.role == "tool":
                if not msg.tool_call_id:
                    return f"tool message {idx} is missing tool_call_id"
                if msg.tool_call_id not in known_call_ids:
                    return f"tool message {idx} references unknown tool_call_id {msg.tool_call_id!r}"
        if system_count > 1:
            return "context may contain at most one system message"
        return None

    @property
    def is_valid(self) -> bool:
        return self.validation_error() is None

    def validate(self) -> "Context":
        """Return ``self`` when valid, otherwise raise ``invalid_prompt``."""
        reason = self.validation_error()
        if reason is not None:
            raise _invalid(f"Invalid context: {reason}")
        return self

    def has_images(self) -> bool:
        return any(m.has_images() for m in self.messages)

    # ------------------------------------------------------------ normalization
    @classmethod
    def normalize(
        cls,
        prompt: Any,
        *,
        system_prompt: Optional[str] = None,
        validate: bool = True,
        convert_loose: bool = True,
    ) -> "Context":
        """Coerce a prompt into a :class:`Context`.

        Accepted shapes: string (single user message), :class:`Message`,
        :class:`Context`, role/content mapping (when ``convert_loose``), or a
        list mixing those. ``system_prompt`` is prepended only when no system
        message exists yet.

        Raises:
            ProviderError: ``invalid_prompt`` for unsupported input, unknown
                roles, empty nested contexts and (when ``validate``) contexts
                breaking the invariants.
        """
        messages = cls._collect(prompt, convert_loose=convert_loose, top_level=True)
        ctx = cls(tuple(messages))
        if system_prompt and not any(m.role == "system" for m in ctx.messages):
            ctx = ctx.prepend(cls.system(system_prompt))
        return ctx.validate() if validate else ctx

    @classmethod
    def _collect(cls, item: Any, *, convert_loose: bool, top_level: bool) -> List[Message]:
        if isinstance(item, Context):
            if not top_level and not item.messages:
                raise _invalid("empty context in prompt list")
            return list(item.messages)
        if isinstance(item, Message):
            return [item]
        if isinstance(item, str):
            return [cls.user(item)]
        if isinstance(item, Mapping) and convert_loose:
            return [cls._from_loose(item)]
        if isinstance(item, (list, tuple)) and top_level:
            out: List[Message] = []
            for sub in item:
                out.extend(cls._collect(sub, convert_loose=convert_loose, top_level=False))
            return out
        raise _invalid(f"invalid prompt: {type(item).__name__}")

    @classmethod
    def _from_loose(cls, data: Mapping[str, Any]) -> Message:
        role = data.get("role")
        content = data.get("content", "")
        if role not in ROLES:
            raise _invalid(f"invalid role: {role!r}")
        if not isinstance(content, (str, list, tuple)):
            raise _invalid(f"invalid content for role {role}")
        return Message(
            role=role,
            content=_as_parts(content),
            name=data.get("name"),
            tool_call_id=data.get("tool_call_id"),
            tool_calls=[_coerce_tool_call(c) for c in data["tool_calls"]] if data.get("tool_calls") else None,
            metadata=dict(data.get("metadata") or {}),
        )


__all__ = ["Context", "MessageContent"]
