"""Adapter pipeline: matching, ordering, purity and per-adapter rules."""
from __future__ import annotations

from crux_wire.base.adapters import (
    ADAPTERS,
    AnthropicThinkingAdapter,
    GPT4oMiniAdapter,
    ModelAdapter,
    OpenAIReasoningAdapter,
    adapters_for,
    applied_adapters,
    apply_adapters,
)
from crux_wire.base.catalog import Model

O1 = Model(id="o1", provider="openai")
GPT4O_MINI = Model(id="gpt-4o-mini", provider="openai")
CLAUDE = Model(id="claude-sonnet-4-20250514", provider="anthropic")


def _strip(opts):
    return {k: v for k, v in opts.items() if k != "_adapter_applied"}


def test_reasoning_adapter_moves_max_tokens_to_max_output_tokens():
    out = OpenAIReasoningAdapter().transform_opts(O1, {"max_tokens": 1000})
    assert out["max_output_tokens"] == 1000  # nosec B101
    assert "max_tokens" not in out  # nosec B101
    assert "max_completion_tokens" not in out  # nosec B101


def test_reasoning_adapter_defaults_when_nothing_set():
    out = OpenAIReasoningAdapter().transform_opts(O1, {"temperature": 0.5})
    assert _strip(out) == {"max_completion_tokens": 16000, "receive_timeout": 300000}  # nosec B101
    assert applied_adapters(out) == ["openai_reasoning"]  # nosec B101


def test_reasoning_adapter_keeps_explicit_values():
    adapter = OpenAIReasoningAdapter()
    explicit = adapter.transform_opts(O1, {"max_completion_tokens": 500, "max_tokens": 9, "receive_timeout": 10})
    assert _strip(explicit) == {"max_completion_tokens": 500, "receive_timeout": 10}  # nosec B101
    both = adapter.transform_opts(O1, {"max_output_tokens": 700, "max_tokens": 9})
    assert both["max_output_tokens"] == 700 and "max_tokens" not in both  # nosec B101


def test_transform_does_not_mutate_input():
    opts = {"max_tokens": 1000, "temperature": 1.0}
    OpenAIReasoningAdapter().transform_opts(O1, opts)
    assert opts == {"max_tokens": 1000, "temperature": 1.0}  # nosec B101


def test_gpt4o_mini_default_temperature_only_when_unset():
    adapter = GPT4oMiniAdapter()
    assert adapter.matches(GPT4O_MINI) and not adapter.matches(Model(id="gpt-4o", provider="openai"))  # nosec B101
    assert adapter.transform_opts(GPT4O_MINI, {})["temperature"] == 0.7  # nosec B101
    assert adapter.transform_opts(GPT4O_MINI, {"temperature": 0.1})["temperature"] == 0.1  # nosec B101


def test_anthropic_thinking_passthrough_without_thinking():
    adapter = AnthropicThinkingAdapter()
    opts = {"temperature": 0.4, "max_tokens": 10}
    assert adapter.transform_opts(CLAUDE, opts) == opts  # nosec B101
    disabled = {"thinking": {"type": "disabled"}, "temperature": 0.4}
    assert adapter.transform_opts(CLAUDE, disabled) == disabled  # nosec B101


def test_anthropic_thinking_false_is_off_even_with_effort():
    adapter = AnthropicThinkingAdapter()
    opts = {"thinking": False, "temperature": 0.2, "top_k": 3}
    assert adapter.transform_opts(CLAUDE, opts) == opts  # nosec B101
    with_effort = {"thinking": False, "reasoning_effort": "low", "temperature": 0.2}
    assert adapter.transform_opts(CLAUDE, with_effort) == with_effort  # nosec B101


def test_anthropic_thinking_rules():
    out = AnthropicThinkingAdapter().transform_opts(
        CLAUDE,
        {"thinking": {"type": "enabled", "budget_tokens": 4096}, "temperature": 0.4, "top_k": 5, "top_p": 0.5},
    )
    assert "temperature" not in out and "top_k" not in out  # nosec B101
    assert out["top_p"] == 0.95  # nosec B101
    assert out["max_tokens"] == 4096 + 1 + 200  # nosec B101
    assert out["receive_timeout"] == 300000  # nosec B101


def test_anthropic_thinking_never_lowers_max_tokens():
    out = AnthropicThinkingAdapter().transform_opts(CLAUDE, {"reasoning_effort": "low", "max_tokens": 8000})
    assert out["max_tokens"] == 8000  # nosec B101
    raised = AnthropicThinkingAdapter().transform_opts(CLAUDE, {"reasoning_effort": "low", "max_tokens": 100})
    assert raised["max_tokens"] == 1024 + 201  # nosec B101


def test_pipeline_order_and_matching():
    assert [a.name for a in ADAPTERS] == ["openai_reasoning", "gpt4o_mini", "anthropic_thinking"]  # nosec B101
    assert [a.name for a in adapters_for(O1)] == ["openai_reasoning"]  # nosec B101
    assert adapters_for(Model(id="llama", provider="groq")) == []  # nosec B101
    assert applied_adapters(apply_adapters(GPT4O_MINI, {})) == ["gpt4o_mini"]  # nosec B101


def test_pipeline_is_deterministic_and_folds_in_order():
    class Tag(ModelAdapter):
        def __init__(self, name):
            self.name = name

        def matches(self, model):
            return True

        def transform_opts(self, model, opts):
            out = dict(opts)
            out["trail"] = out.get("trail", "") + self.name
            return self.mark(out)

    registry = (Tag("a"), Tag("b"), Tag("c"))
    first = apply_adapters(GPT4O_MINI, {}, registry)
    second = apply_adapters(GPT4O_MINI, {}, registry)
    assert first == second  # nosec B101
    assert first["trail"] == "abc"  # nosec B101
    assert applied_adapters(first) == ["a", "b", "c"]  # nosec B101
