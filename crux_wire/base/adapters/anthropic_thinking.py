"""Adapter for Anthropic extended thinking.

Fires when ``thinking`` or ``reasoning_effort`` is set, unless ``thinking`` is
``False`` or ``{"type": "disabled"}``; otherwise options pass through
untouched. When it fires:

- ``receive_timeout`` defaults to 300000 ms;
- ``temperature`` and ``top_k`` are removed;
- ``top_p`` is clamped into [0.95, 1.0];
- ``max_tokens`` is raised to ``budget_tokens + 1 + 200`` when lower (or
  unset), never lowered.

Budgets for effort levels come from the configurable table
(:func:`crux_wire.config.get_reasoning_budgets`).
"""

from __future__ import annotations

from typing import Any, Mapping

from ...config import get_reasoning_budgets
from ...config.defaults import DEFAULT_REASONING_EFFORT, THINKING_SAFETY_MARGIN_TOKENS
from ..catalog import Model
from ..timeouts import EXTENDED_RECEIVE_TIMEOUT_MS
from .adapter_base import ModelAdapter, Options

TOP_P_RANGE = (0.95, 1.0)


def thinking_disabled(opts: Mapping[str, Any]) -> bool:
    thinking = opts.get("thinking")
    return thinking is False or (isinstance(thinking, Mapping) and thinking.get("type") == "disabled")


def thinking_enabled(opts: Mapping[str, Any]) -> bool:
    """True when thinking is requested; an explicit disable beats ``reasoning_effort``."""
    if thinking_disabled(opts):
        return False
    return opts.get("thinking") is not None or opts.get("reasoning_effort") is not None


def thinking_budget(opts: Mapping[str, Any]) -> int:
    thinking = opts.get("thinking")
    if isinstance(thinking, Mapping):
        budget = thinking.get("budget_tokens")
        return budget if isinstance(budget, int) and not isinstance(budget, bool) else 0
    effort = opts.get("reasoning_effort")
    if effort is None:
        return 0
    budgets = get_reasoning_budgets()
    level = str(getattr(effort, "value", effort))
    return budgets.get(level, budgets[DEFAULT_REASONING_EFFORT])


class AnthropicThinkingAdapter(ModelAdapter):
    name = "anthropic_thinking"

    def matches(self, model: Model) -> bool:
        return model.provider == "anthropic"

    def transform_opts(self, model: Model, opts: Mapping[str, Any]) -> Options:
        out: Options = dict(opts)
        if not thinking_enabled(out):
            return out
        out.setdefault("receive_timeout", EXTENDED_RECEIVE_TIMEOUT_MS)
        out.pop("temperature", None)
        out.pop("top_k", None)
        top_p = out.get("top_p")
        if top_p is not None:
            low, high = TOP_P_RANGE
            out["top_p"] = min(max(top_p, low), high)
        budget = thinking_budget(out)
        if budget > 0:
            required = budget + 1 + THINKING_SAFETY_MARGIN_TOKENS
            current = out.get("max_tokens")
            if current is None or current < required:
                out["max_tokens"] = required
        return self.mark(out)


__all__ = ["AnthropicThinkingAdapter", "thinking_disabled", "thinking_enabled", "thinking_budget", "TOP_P_RANGE"]
