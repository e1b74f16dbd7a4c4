"""Reassemble complete tool calls from streamed deltas.

A record per delta ``index`` holds the id, name and argument text received so
far. ``ToolCallStart`` (re)initializes the record for its index and
``ToolCallDelta`` appends its fragment. Arguments stay raw text until
:meth:`ToolCallAccumulator.finalize`, so partial JSON never has to parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..models import ToolCall
from ..streaming.deltas import Delta, ToolCallDelta, ToolCallStart


@dataclass
class _PendingCall:
    id: Optional[str] = None
    name: str = ""
    fragments: List[str] = field(default_factory=list)

    @property
    def arguments(self) -> str:
        return "".join(self.fragments)


class ToolCallAccumulator:
    """Index-keyed builder of :class:`ToolCall` objects."""

    def __init__(self) -> None:
        self._pending: Dict[int, _PendingCall] = {}

    def apply(self, delta: Optional[Delta]) -> None:
        """Fold one delta in; anything other than tool-call deltas is ignored."""
        if isinstance(delta, ToolCallStart):
            self._pending[delta.index] = _PendingCall(id=delta.id, name=delta.name)
        elif isinstance(delta, ToolCallDelta):
            record = self._pending.setdefault(delta.index, _PendingCall())
            record.fragments.append(delta.arguments_fragment)

    def extend(self, deltas: Iterable[Optional[Delta]]) -> "ToolCallAccumulator":
        for delta in deltas:
            self.apply(delta)
        return self

    def arguments(self, index: int) -> Optional[str]:
        record = self._pending.get(index)
        return record.arguments if record is not None else None

    def __bool__(self) -> bool:
        return bool(self._pending)

    def finalize(self) -> List[ToolCall]:
        """Return one ToolCall per index, ordered by index."""
        return [
            ToolCall.new(record.id, record.name, record.arguments)
            for _, record in sorted(self._pending.items())
        ]


__all__ = ["ToolCallAccumulator"]
