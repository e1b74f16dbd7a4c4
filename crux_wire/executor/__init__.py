"""Public operations and the objects they return."""

from .executor import embed, generate_object, generate_text, stream_object, stream_text
from .response import Response, StreamResponse, merge_usage
from .transport import (
    HttpRequest,
    HttpResponse,
    HttpxTransport,
    Transport,
    get_default_transport,
    set_default_transport,
)

__all__ = [
    "generate_text",
    "stream_text",
    "generate_object",
    "stream_object",
    "embed",
    "Response",
    "StreamResponse",
    "merge_usage",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "Transport",
    "get_default_transport",
    "set_default_transport",
]
