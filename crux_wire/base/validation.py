"""Operation checks against model metadata.

Raised errors are ``unsupported_capability``. Checks, in order:

1. Operation vs model kind: embedding models only embed; other models never do.
2. Image content requires ``image`` among the model's input modalities.
3. ``tools`` requires ``capabilities.tools.enabled``; streaming requires
   ``capabilities.streaming.text``.
"""
from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from .catalog import Model
from .errors import ProviderError
from .models import Context

Operation = Literal["text", "object", "embed"]


def model_kind(model: Model) -> str:
    """``embedding``, ``reasoning`` or ``chat``, from ``extra`` first, then capabilities."""
    kind = model.extra.get("kind")
    if kind:
        return str(kind)
    if model.extra.get("type") == "embedding":
        return "embedding"
    embeddings = model.capabilities.get("embeddings")
    if embeddings is True or (isinstance(embeddings, Mapping) and embeddings):
        return "embedding"
    reasoning = model.capabilities.get("reasoning")
    if reasoning is True or (isinstance(reasoning, Mapping) and reasoning.get("enabled") is True):
        return "reasoning"
    return "chat"


def _unsupported(model: Model, message: str) -> ProviderError:
    return ProviderError.unsupported(message, provider=model.provider, model=model.id)


def validate_operation(model: Model, operation: Operation) -> None:
    kind = model_kind(model)
    if kind == "embedding" and operation == "text":
        raise _unsupported(model, f"Embedding model {model.id} cannot generate text")
    if kind == "embedding" and operation == "object":
        raise _unsupported(model, f"Embedding model {model.id} cannot generate objects")
    if kind != "embedding" and operation == "embed":
        raise _unsupported(model, f"Model {model.id} does not support embeddings")


def validate_modalities(model: Model, context: Optional[Context]) -> None:
    if context is not None and context.has_images() and not model.supports_image_input():
        raise _unsupported(model, f"Model {model.id} does not support image inputs")


def validate_capabilities(model: Model, opts: Mapping[str, Any], *, stream: bool = False) -> None:
    if opts.get("tools") and not model.has("tools", "enabled"):
        raise _unsupported(model, f"Model {model.id} does not support tool calling")
    if stream and not model.has("streaming", "text"):
        raise _unsupported(model, f"Model {model.id} does not support streaming")


def validate_request(
    model: Model,
    operation: Operation,
    context: Optional[Context],
    opts: Mapping[str, Any],
    *,
    stream: bool = False,
) -> None:
    """Run every check; raises the first ``unsupported_capability`` found."""
    validate_operation(model, operation)
    validate_modalities(model, context)
    validate_capabilities(model, opts, stream=stream)


__all__ = [
    "Operation",
    "model_kind",
    "validate_operation",
    "validate_modalities",
    "validate_capabilities",
    "validate_request",
]
