"""Per-model option adapters and their ordered pipeline."""

from .adapter_base import APPLIED_KEY, ModelAdapter
from .anthropic_thinking import AnthropicThinkingAdapter
from .gpt4o_mini import GPT4oMiniAdapter
from .openai_reasoning import OpenAIReasoningAdapter
from .pipeline import ADAPTERS, adapters_for, applied_adapters, apply_adapters

__all__ = [
    "APPLIED_KEY",
    "ModelAdapter",
    "OpenAIReasoningAdapter",
    "GPT4oMiniAdapter",
    "AnthropicThinkingAdapter",
    "ADAPTERS",
    "adapters_for",
    "apply_adapters",
    "applied_adapters",
]
