"""Model → (provider, wire dialect) resolution.

Wire selection precedence:
    1. explicit ``extra.wire.protocol`` hint on the model record;
    2. provider inference: OpenAI reasoning models (``o1``/``o3``/``o4``/
       ``gpt-5`` prefixes or ``extra.api == "responses"``) use the responses
       dialect, other OpenAI models and every OpenAI-compatible provider use
       chat completions, Anthropic uses messages;
    3. chat completions as the default.

Embeddings resolve separately and are only available for OpenAI.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..base.catalog import Model
from ..base.errors import ProviderError
from ..providers import ProviderSpec, get_provider
from .base import WireProtocol
from .openai_embeddings import OpenAIEmbeddings
from .registry import WireProtocolId, get_embeddings_protocol, get_protocol

RESPONSES_PREFIXES = ("o1", "o3", "o4", "gpt-5")

_PROVIDER_DEFAULTS = {
    "groq": WireProtocolId.OPENAI_CHAT,
    "openrouter": WireProtocolId.OPENAI_CHAT,
    "xai": WireProtocolId.OPENAI_CHAT,
    "anthropic": WireProtocolId.ANTHROPIC,
}


@dataclass(frozen=True)
class ResolvedRoute:
    provider: ProviderSpec
    wire: Union[WireProtocol, OpenAIEmbeddings]

    @property
    def wire_id(self) -> WireProtocolId:
        return self.wire.id


def responses_api(model: Model) -> bool:
    """True when ``model`` speaks the OpenAI responses dialect."""
    if model.extra.get("api") == "responses":
        return True
    return isinstance(model.id, str) and model.id.startswith(RESPONSES_PREFIXES)


def wire_protocol_id(model: Model) -> WireProtocolId:
    """Pick the streaming dialect id for ``model``.

    Raises:
        ProviderError: ``unsupported_capability`` for an unknown explicit hint.
    """
    hint = model.wire_hint()
    if hint is not None:
        try:
            protocol = WireProtocolId(hint)
        except ValueError:
            raise ProviderError.unsupported(
                f"Unknown wire protocol: {hint}", provider=model.provider, model=model.id
            ) from None
        if protocol is WireProtocolId.OPENAI_EMBEDDINGS:
            raise ProviderError.unsupported(
                f"Wire protocol {hint} cannot stream", provider=model.provider, model=model.id
            )
        return protocol
    if model.provider == "openai":
        return WireProtocolId.OPENAI_RESPONSES if responses_api(model) else WireProtocolId.OPENAI_CHAT
    return _PROVIDER_DEFAULTS.get(model.provider, WireProtocolId.OPENAI_CHAT)


def resolve(model: Model, operation: str = "text") -> ResolvedRoute:
    """Resolve the provider transport settings and wire dialect for an operation.

    Raises:
        ProviderError: ``unsupported_capability`` when the provider cannot serve
            ``operation`` (embeddings outside OpenAI, unknown provider).
    """
    provider = get_provider(model.provider)
    if operation == "embed":
        if model.provider != "openai":
            raise ProviderError.unsupported(
                f"Provider {model.provider} does not support embeddings",
                provider=model.provider,
                model=model.id,
            )
        return ResolvedRoute(provider=provider, wire=get_embeddings_protocol())
    return ResolvedRoute(provider=provider, wire=get_protocol(wire_protocol_id(model)))


__all__ = ["ResolvedRoute", "resolve", "responses_api", "wire_protocol_id", "RESPONSES_PREFIXES"]
