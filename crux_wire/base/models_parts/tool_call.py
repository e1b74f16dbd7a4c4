"""
Tool call requested by the model.

Arguments are kept as the raw JSON text the model produced. Parsing happens
on demand through :meth:`ToolCall.args_map`, which returns ``None`` for
malformed text instead of raising, so partially streamed arguments are safe to
hold at any time.
"""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional


def generate_call_id() -> str:
    """Return a fresh ``call_<hex>`` identifier."""
    return f"call_{uuid.uuid4().hex[:24]}"


@dataclass(frozen=True)
class ToolCall:
    """A complete tool call: id, function name and raw argument JSON."""

    id: str
    name: str
    arguments: str = ""
    type: str = "function"

    @classmethod
    def new(cls, id: Optional[str], name: str, arguments: Any = "") -> "ToolCall":  # noqa: A002
        """Build a tool call, generating the id when absent.

        ``arguments`` may be raw JSON text or a mapping, which is serialized.
        """
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments if arguments is not None else {})
        return cls(id=id or generate_call_id(), name=name, arguments=arguments)

    def args_map(self) -> Optional[Dict[str, Any]]:
        """Parse the argument text; ``None`` when it is not a JSON object."""
        text = self.arguments.strip() if self.arguments else ""
        if not text:
            return {}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None

    def matches_name(self, name: str) -> bool:
        return self.name == name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "function": {"name": self.name, "arguments": self.arguments},
        }

    @staticmethod
    def find_args(calls: Iterable["ToolCall"], name: str) -> Optional[Dict[str, Any]]:
        """Return the parsed arguments of the first call named ``name``."""
        for call in calls:
            if call.matches_name(name):
                return call.args_map()
        return None


__all__ = ["ToolCall", "generate_call_id"]
