"""crux_wire.config.defaults
=========================

Central place for small, stable default values used across the runtime.
These can be overridden via environment variables, the external config file
or per-call options, but provide sensible fallbacks for local development
and tests.

This module avoids importing from other runtime packages to prevent circular
dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Provider endpoints ----
# OpenAI-style base URLs include the version segment; dialect paths are relative.
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"
# Anthropic paths carry their own version segment.
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"

ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_BETA_INTERLEAVED_THINKING = "interleaved-thinking-2025-05-14"
ANTHROPIC_BETA_PROMPT_CACHING = "prompt-caching-2024-07-31"

# ---- Token limits ----
# Anthropic requires max_tokens; used when the caller sets none.
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024
# Reasoning dialect output cap when the caller sets none.
REASONING_DEFAULT_MAX_COMPLETION_TOKENS = 16000
# Headroom kept above a thinking budget so visible output still fits.
THINKING_SAFETY_MARGIN_TOKENS = 200

# ---- Reasoning effort ----
# Effort level -> Anthropic thinking budget. Overridable under
# ``anthropic.reasoning_budgets`` in the config file.
DEFAULT_REASONING_BUDGETS = {
    "low": 1024,
    "medium": 2048,
    "high": 4096,
}
DEFAULT_REASONING_EFFORT = "medium"

# ---- Object generation ----
OBJECT_SCHEMA_NAME = "object"

# Default temperature applied to gpt-4o-mini when the caller sets none.
GPT4O_MINI_DEFAULT_TEMPERATURE = 0.7


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "GROQ_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "XAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_BETA_INTERLEAVED_THINKING",
    "ANTHROPIC_BETA_PROMPT_CACHING",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "REASONING_DEFAULT_MAX_COMPLETION_TOKENS",
    "THINKING_SAFETY_MARGIN_TOKENS",
    "DEFAULT_REASONING_BUDGETS",
    "DEFAULT_REASONING_EFFORT",
    "OBJECT_SCHEMA_NAME",
    "GPT4O_MINI_DEFAULT_TEMPERATURE",
]
