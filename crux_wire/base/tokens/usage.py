"""Token usage normalization.

This module converts provider-specific token accounting maps into the one
canonical usage shape consumed by streaming deltas, responses and structured
logging:

    {"input_tokens": int, "output_tokens": int, "total_tokens": int,
     "reasoning_tokens"?: int, "cache_read_tokens"?: int,
     "cache_creation_tokens"?: int}

Shape Detection
---------------
Detection is by key presence, in priority order:

1. Chat-completion shape: a ``prompt_tokens`` key exists. Reasoning tokens are
   read from ``completion_tokens_details.reasoning_tokens`` and cached prompt
   tokens from ``prompt_tokens_details.cached_tokens``.
2. Anthropic shape: any of ``input_tokens``, ``output_tokens``,
   ``cache_read_input_tokens`` or ``cache_creation_input_tokens`` exists.
3. Generic fallback: both key families are tried.

``total_tokens`` uses an explicit total when present and the sum of input and
output otherwise. Optional fields appear only when their source value is
present and non-zero.

Failure Modes
-------------
* ``None`` or an empty mapping → ``None`` (no usage known)
* Non-integer / negative values → coerced to ``0`` for required fields and
  dropped for optional fields; coercion never raises.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

Usage = Dict[str, int]

OPTIONAL_USAGE_KEYS = ("reasoning_tokens", "cache_read_tokens", "cache_creation_tokens")

_ANTHROPIC_KEYS = ("input_tokens", "output_tokens", "cache_read_input_tokens", "cache_creation_input_tokens")


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce arbitrary value to a non-negative ``int`` or ``None``.

    Booleans are rejected so a stray flag never reads as a token count.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _first(usage: Mapping[str, Any], keys: Sequence[str]) -> Optional[int]:
    for key in keys:
        if key in usage:
            value = _coerce_int(usage.get(key))
            if value is not None:
                return value
    return None


def _nested(usage: Mapping[str, Any], outer: str, inner: str) -> Optional[int]:
    details = usage.get(outer)
    if isinstance(details, Mapping):
        return _coerce_int(details.get(inner))
    return None


def _maybe_put(out: Usage, key: str, value: Optional[int]) -> None:
    if value:
        out[key] = value


def _base(input_tokens: int, output_tokens: int, total: Optional[int]) -> Usage:
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": total if total is not None else input_tokens + output_tokens,
    }


def _reasoning(usage: Mapping[str, Any]) -> Optional[int]:
    return _nested(usage, "completion_tokens_details", "reasoning_tokens") or _first(usage, ("reasoning_tokens",))


def _normalize_chat(usage: Mapping[str, Any]) -> Usage:
    out = _base(
        _first(usage, ("prompt_tokens",)) or 0,
        _first(usage, ("completion_tokens",)) or 0,
        _first(usage, ("total_tokens",)),
    )
    _maybe_put(out, "reasoning_tokens", _reasoning(usage))
    _maybe_put(out, "cache_read_tokens", _nested(usage, "prompt_tokens_details", "cached_tokens"))
    return out


def _normalize_anthropic(usage: Mapping[str, Any]) -> Usage:
    out = _base(
        _first(usage, ("input_tokens",)) or 0,
        _first(usage, ("output_tokens",)) or 0,
        _first(usage, ("total_tokens",)),
    )
    _maybe_put(out, "cache_read_tokens", _first(usage, ("cache_read_input_tokens",)))
    _maybe_put(out, "cache_creation_tokens", _first(usage, ("cache_creation_input_tokens",)))
    return out


def _normalize_generic(usage: Mapping[str, Any]) -> Usage:
    out = _base(
        _first(usage, ("input_tokens", "prompt_tokens")) or 0,
        _first(usage, ("output_tokens", "completion_tokens")) or 0,
        _first(usage, ("total_tokens",)),
    )
    _maybe_put(out, "reasoning_tokens", _reasoning(usage))
    return out


def normalize_usage(raw: Optional[Mapping[str, Any]]) -> Optional[Usage]:
    """Normalize a raw provider usage mapping into the canonical shape.

    Args:
        raw: Provider usage mapping (string keys), or ``None``.

    Returns:
        Usage | None: Canonical usage, or ``None`` for missing/empty input.
    """
    if not raw or not isinstance(raw, Mapping):
        return None
    if "prompt_tokens" in raw:
        return _normalize_chat(raw)
    if any(k in raw for k in _ANTHROPIC_KEYS):
        return _normalize_anthropic(raw)
    return _normalize_generic(raw)


__all__ = ["Usage", "normalize_usage", "OPTIONAL_USAGE_KEYS"]
