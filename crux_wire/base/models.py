"""
Canonical conversation model public surface.

This module re-exports the one-class-per-file implementations under
``crux_wire.base.models_parts`` behind a stable import path.
"""

from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.tool_call import ToolCall, generate_call_id
from .models_parts.message import Message, Role, ROLES
from .models_parts.context import Context, MessageContent

__all__ = [
    "ContentPart",
    "ContentPartType",
    "ToolCall",
    "generate_call_id",
    "Message",
    "Role",
    "ROLES",
    "Context",
    "MessageContent",
]
