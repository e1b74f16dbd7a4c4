"""Fixed, ordered adapter registry.

Order is part of the contract: adapters touch overlapping option keys, so
they always run in registry order. The registry is a tuple built at import
time and never mutated.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Tuple

from ..catalog import Model
from .adapter_base import APPLIED_KEY, ModelAdapter, Options
from .anthropic_thinking import AnthropicThinkingAdapter
from .gpt4o_mini import GPT4oMiniAdapter
from .openai_reasoning import OpenAIReasoningAdapter

ADAPTERS: Tuple[ModelAdapter, ...] = (
    OpenAIReasoningAdapter(),
    GPT4oMiniAdapter(),
    AnthropicThinkingAdapter(),
)


def adapters_for(model: Model, registry: Sequence[ModelAdapter] = ADAPTERS) -> List[ModelAdapter]:
    """Adapters whose ``matches`` accepts ``model``, in registry order."""
    return [adapter for adapter in registry if adapter.matches(model)]


def apply_adapters(model: Model, opts: Mapping[str, Any], registry: Sequence[ModelAdapter] = ADAPTERS) -> Options:
    """Fold every matching adapter's ``transform_opts`` over ``opts``."""
    out: Options = dict(opts)
    for adapter in adapters_for(model, registry):
        out = adapter.transform_opts(model, out)
    return out


def applied_adapters(opts: Mapping[str, Any]) -> List[str]:
    """Names recorded by adapters that fired, in firing order."""
    return list(opts.get(APPLIED_KEY, ()))


__all__ = ["ADAPTERS", "adapters_for", "apply_adapters", "applied_adapters"]
