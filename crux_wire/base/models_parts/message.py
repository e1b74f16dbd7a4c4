"""
Canonical conversation message.

``content`` is always a list of :class:`ContentPart`, never a bare string, so
every encoder walks the same shape regardless of how the message was built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from .content_part import ContentPart
from .tool_call import ToolCall

Role = Literal["system", "user", "assistant", "tool"]
ROLES = ("system", "user", "assistant", "tool")


@dataclass(frozen=True)
class Message:
    """A single conversation turn.

    Attributes:
        role: Author role.
        content: Ordered content parts.
        name: Optional author or tool name.
        tool_call_id: For ``tool`` messages, the id of the call answered.
        tool_calls: For ``assistant`` messages, the calls requested.
        metadata: Free-form annotations.
        reasoning_details: Provider reasoning metadata to carry across turns.
    """

    role: Role
    content: List[ContentPart] = field(default_factory=list)
    name: Optional[str] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    reasoning_details: Optional[List[Dict[str, Any]]] = None

    def is_valid(self) -> bool:
        """True when the role is known and content is a list of parts."""
        if self.role not in ROLES or not isinstance(self.content, list):
            return False
        if not all(isinstance(p, ContentPart) for p in self.content):
            return False
        return self.tool_calls is None or isinstance(self.tool_calls, list)

    def text(self) -> str:
        """Concatenate the text parts in order."""
        return "".join(p.text or "" for p in self.content if p.type == "text")

    def thinking(self) -> str:
        return "".join(p.text or "" for p in self.content if p.type == "thinking")

    def has_images(self) -> bool:
        return any(p.is_image for p in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        out: Dict[str, Any] = {"role": self.role, "content": [p.to_dict() for p in self.content]}
        if self.name is not None:
            out["name"] = self.name
        if self.tool_call_id is not None:
            out["tool_call_id"] = self.tool_call_id
        if self.tool_calls:
            out["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.reasoning_details:
            out["reasoning_details"] = list(self.reasoning_details)
        return out


__all__ = [
    "Message",
    "Role",
    "ROLES",
]
