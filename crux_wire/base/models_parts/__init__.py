"""Models parts package public surface.

Re-exports the canonical conversation types so callers can import from
``crux_wire.base.models_parts`` if needed, while ``crux_wire.base.models``
remains the primary stable import path.
"""

from .content_part import ContentPart, ContentPartType
from .tool_call import ToolCall, generate_call_id
from .message import Message, Role, ROLES
from .context import Context, MessageContent

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
