"""Metadata-driven option constraints.

Applied to caller options before the adapter pipeline. Every rule is read
from ``model.extra["constraints"]``; nothing here inspects model names.

Supported keys:
    token_limit_key = "max_completion_tokens"   rename ``max_tokens``
    temperature     = "fixed_1" | "unsupported"
    sampling        = "unsupported"             drop ``top_p`` and ``top_k``
    min_output_tokens = <int>                   raise a positive limit below it
    reasoning_effort  = "required" | "unsupported"
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from .catalog import Model

Options = Dict[str, Any]


def _token_limit_key(opts: Options, constraints: Mapping[str, Any]) -> None:
    if constraints.get("token_limit_key") == "max_completion_tokens" and opts.get("max_tokens") is not None:
        opts["max_completion_tokens"] = opts.pop("max_tokens")


def _temperature(opts: Options, constraints: Mapping[str, Any]) -> None:
    rule = constraints.get("temperature")
    if rule == "fixed_1":
        opts["temperature"] = 1.0
    elif rule == "unsupported":
        opts.pop("temperature", None)


def _sampling(opts: Options, constraints: Mapping[str, Any]) -> None:
    if constraints.get("sampling") == "unsupported":
        opts.pop("top_p", None)
        opts.pop("top_k", None)


def _min_output_tokens(opts: Options, constraints: Mapping[str, Any]) -> None:
    minimum = constraints.get("min_output_tokens")
    if not isinstance(minimum, int) or isinstance(minimum, bool):
        return
    key = "max_completion_tokens" if "max_completion_tokens" in opts else "max_tokens"
    current = opts.get(key) or 0
    if 0 < current < minimum:
        opts[key] = minimum


def _reasoning_effort(opts: Options, constraints: Mapping[str, Any]) -> None:
    rule = constraints.get("reasoning_effort")
    if rule == "required":
        opts.setdefault("reasoning_effort", "medium")
    elif rule == "unsupported":
        opts.pop("reasoning_effort", None)


def apply_constraints(model: Model, opts: Mapping[str, Any]) -> Options:
    """Return a new options dict with the model's constraints applied."""
    out: Options = dict(opts)
    constraints = model.constraints()
    if not constraints:
        return out
    _token_limit_key(out, constraints)
    _temperature(out, constraints)
    _sampling(out, constraints)
    _min_output_tokens(out, constraints)
    _reasoning_effort(out, constraints)
    return out


__all__ = ["apply_constraints", "Options"]
