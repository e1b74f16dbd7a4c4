"""Outcome envelope for one tool execution.

Tool failures never propagate as exceptions; they travel in this DTO and end
up as the text of a tool-role message, so one failing call cannot abort the
batch it belongs to.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class ToolResultDTO(BaseModel):
    """Result envelope for a tool invocation.

    Attributes:
        name: The tool name that was invoked.
        ok: True when the callback returned normally.
        content: Result payload (text or JSON-like dict) when ``ok``.
        code: Failure kind when not ``ok``: ``not_found``, ``invalid_input``,
            ``validation_failed`` or ``callback_failed``.
        error: Human-readable error string when not ``ok``.
        metadata: Free-form metadata (tool_call_id, duration) for logging.
    """

    name: str
    ok: bool
    content: Optional[Union[str, Dict[str, Any]]] = None
    code: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_text(self) -> str:
        """Render the payload placed in the tool-role message."""
        if not self.ok:
            return f"Error: {self.error or self.code or 'tool failed'}"
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return json.dumps(self.content, ensure_ascii=False, default=str)


__all__ = ["ToolResultDTO"]
