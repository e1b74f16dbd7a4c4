"""Wire dialects, their registry and the model → dialect resolver."""

from .anthropic import AnthropicMessages
from .base import DONE_MARKER, WireProtocol
from .openai_chat import OpenAIChat
from .openai_embeddings import OPENAI_EMBEDDINGS, OpenAIEmbeddings
from .openai_responses import OpenAIResponses
from .registry import WireProtocolId, get_embeddings_protocol, get_protocol, streaming_protocols
from .resolver import ResolvedRoute, resolve, responses_api, wire_protocol_id

__all__ = [
    "WireProtocol",
    "WireProtocolId",
    "DONE_MARKER",
    "OpenAIChat",
    "OpenAIResponses",
    "AnthropicMessages",
    "OpenAIEmbeddings",
    "OPENAI_EMBEDDINGS",
    "get_protocol",
    "get_embeddings_protocol",
    "streaming_protocols",
    "ResolvedRoute",
    "resolve",
    "responses_api",
    "wire_protocol_id",
]
