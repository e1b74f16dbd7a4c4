"""
Runtime Base Package

Provider-agnostic building blocks shared by the wire dialects and the
executor:

- Models: canonical conversation (Context/Message/ContentPart/ToolCall)
- Catalog: model metadata records and lookup
- Errors: ErrorCode taxonomy, ProviderError and Result
- Streaming: delta vocabulary, SSE framing and the stream state machine
- Tools, schema compilation, usage normalization, constraints, adapters
"""

from .errors import ErrorCode, ProviderError, Result
from .models import ContentPart, ContentPartType, Context, Message, Role, ToolCall
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "ErrorCode",
    "ProviderError",
    "Result",
    "ContentPart",
    "ContentPartType",
    "Context",
    "Message",
    "Role",
    "ToolCall",
    "TimeoutConfig",
    "get_timeout_config",
]
