"""Canonical stream delta vocabulary.

Every dialect decoder emits only these types. A decoder may also emit
``None``: the terminal sentinel for wires that end with a bare marker
instead of a structured event. The state machine drops it.

Ordering contract: for one tool-call ``index`` a :class:`ToolCallStart` is
emitted before any :class:`ToolCallDelta`; fragments are concatenated in
arrival order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Union


@dataclass(frozen=True)
class TextDelta:
    text: str
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class ThinkingDelta:
    text: str
    kind: ClassVar[str] = "thinking"


@dataclass(frozen=True)
class ToolCallStart:
    index: int
    id: Optional[str]
    name: str
    kind: ClassVar[str] = "tool_call_start"


@dataclass(frozen=True)
class ToolCallDelta:
    index: int
    arguments_fragment: str
    kind: ClassVar[str] = "tool_call_delta"


@dataclass(frozen=True)
class UsageDelta:
    usage: Dict[str, int] = field(default_factory=dict)
    kind: ClassVar[str] = "usage"


@dataclass(frozen=True)
class MetaDelta:
    terminal: bool = False
    finish_reason: Optional[str] = None
    response_id: Optional[str] = None
    kind: ClassVar[str] = "meta"


@dataclass(frozen=True)
class ErrorDelta:
    message: str
    type: str = "api_error"
    code: Optional[str] = None
    kind: ClassVar[str] = "error"


Delta = Union[TextDelta, ThinkingDelta, ToolCallStart, ToolCallDelta, UsageDelta, MetaDelta, ErrorDelta]
MaybeDelta = Optional[Delta]

FINISH_REASONS = ("stop", "length", "tool_calls", "content_filter", "error")


def normalize_finish_reason(reason: Optional[str]) -> str:
    """Map wire stop reasons onto the canonical finish reasons."""
    if reason in (None, "", "stop", "end_turn", "stop_sequence", "completed"):
        return "stop"
    if reason in ("length", "max_tokens", "max_output_tokens"):
        return "length"
    if reason in ("tool_calls", "tool_use", "function_call"):
        return "tool_calls"
    if reason == "content_filter":
        return "content_filter"
    return "error"


__all__ = [
    "TextDelta",
    "ThinkingDelta",
    "ToolCallStart",
    "ToolCallDelta",
    "UsageDelta",
    "MetaDelta",
    "ErrorDelta",
    "Delta",
    "MaybeDelta",
    "FINISH_REASONS",
    "normalize_finish_reason",
]
