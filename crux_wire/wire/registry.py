"""Wire protocol identifiers and the immutable dialect registry.

The registry maps each :class:`WireProtocolId` to one shared, stateless
dialect instance. It is built once on first use and never mutated.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from .base import WireProtocol
    from .openai_embeddings import OpenAIEmbeddings


class WireProtocolId(str, Enum):
    OPENAI_CHAT = "openai_chat"
    OPENAI_RESPONSES = "openai_responses"
    ANTHROPIC = "anthropic"
    OPENAI_EMBEDDINGS = "openai_embeddings"


_REGISTRY: Optional[Mapping[WireProtocolId, "WireProtocol"]] = None


def _build() -> Mapping[WireProtocolId, "WireProtocol"]:
    from .anthropic import AnthropicMessages
    from .openai_chat import OpenAIChat
    from .openai_responses import OpenAIResponses

    return MappingProxyType(
        {
            WireProtocolId.OPENAI_CHAT: OpenAIChat(),
            WireProtocolId.OPENAI_RESPONSES: OpenAIResponses(),
            WireProtocolId.ANTHROPIC: AnthropicMessages(),
        }
    )


def streaming_protocols() -> Mapping[WireProtocolId, "WireProtocol"]:
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = _build()
    return _REGISTRY


def get_protocol(protocol_id: WireProtocolId) -> "WireProtocol":
    """Return the streaming dialect registered under ``protocol_id``.

    Raises:
        KeyError: for ids without a streaming dialect (embeddings).
    """
    return streaming_protocols()[protocol_id]


def get_embeddings_protocol() -> "OpenAIEmbeddings":
    from .openai_embeddings import OPENAI_EMBEDDINGS

    return OPENAI_EMBEDDINGS


__all__ = ["WireProtocolId", "streaming_protocols", "get_protocol", "get_embeddings_protocol"]
