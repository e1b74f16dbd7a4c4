"""crux_wire.config.env
====================

Provider → environment variable mapping and credential lookup helpers.

Design Notes
------------
- Canonical names live in ``ENV_MAP``; ``ENV_ALIASES`` lists extra accepted
  names with the canonical one first.
- Values that look like placeholders (``changeme``, ``your-key-here``...) are
  never returned as credentials.
- Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "xai": "XAI_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "xai": ("XAI_API_KEY", "GROK_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a credential.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme``,
    ``example`` or ``your-``/``your_``, or starts with ``test_``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or "your-" in v
        or "your_" in v
        or v.startswith("test_")
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Canonical env var name for ``provider`` (``<PROVIDER>_API_KEY`` when unmapped)."""
    if not provider:
        return None
    return ENV_MAP.get(provider.lower(), f"{provider.upper()}_API_KEY")


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable env var names for ``provider``, canonical first."""
    canonical = get_env_var_name(provider)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get((provider or "").lower(), ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first real credential found.

    ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
