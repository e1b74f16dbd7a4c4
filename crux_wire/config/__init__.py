"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (base URLs, reasoning budgets).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by CRUX_WIRE_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_API_KEY, OPENAI_BASE_URL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_API_KEY, <PROVIDER>_BASE_URL, e.g. ANTHROPIC_API_KEY, GROQ_BASE_URL.
A ``.env`` file (path from DOTENV_FILE, default ``.env``) is loaded once before
the first lookup; it only fills variables that are unset or hold placeholders.

External Config File (Optional)
-------------------------------
JSON is tried first, then YAML. ``${VAR}`` references in string values are
expanded from the environment. Structure example:

```
openai:
  api_key: ${OPENAI_API_KEY}
anthropic:
  reasoning_budgets:
    low: 1024
    medium: 2048
    high: 8192
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_reasoning_budgets() -> dict
* read_structured_file(path) -> Any
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..base.logging import get_logger, log_event
from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    DEFAULT_REASONING_BUDGETS,
    GROQ_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_BASE_URL,
    XAI_DEFAULT_BASE_URL,
)
from .env import is_placeholder, resolve_provider_key

_logger = get_logger("crux_wire.config")

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"base_url": ANTHROPIC_DEFAULT_BASE_URL},
    "groq": {"base_url": GROQ_DEFAULT_BASE_URL},
    "openrouter": {"base_url": OPENROUTER_DEFAULT_BASE_URL},
    "xai": {"base_url": XAI_DEFAULT_BASE_URL},
}

ENV_FIELD_MAP = {
    "base_url": "BASE_URL",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    variables are only replaced when they currently hold a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                if k.startswith("export "):
                    k = k[len("export "):].strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def read_structured_file(path: str | Path) -> Any:
    """Parse a JSON or YAML file, JSON first.

    Raises:
        OSError: when the file cannot be read.
        yaml.YAMLError: when the content is neither valid JSON nor YAML.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return yaml.safe_load(text)


def _expand(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("CRUX_WIRE_CONFIG_FILE")
    data: Any = {}
    if path and Path(path).exists():
        try:
            data = read_structured_file(path)
        except (OSError, yaml.YAMLError) as exc:
            log_event(_logger, "config.file.error", path=path, error=str(exc))
            data = {}
    _FILE_CACHE = _expand(data) if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the parsed config file and the .env marker (used by tests)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    A placeholder ``api_key`` from any source is dropped.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if is_placeholder(cfg.get("api_key")) or not cfg.get("api_key"):
        cfg.pop("api_key", None)
    return cfg


def get_reasoning_budgets() -> Dict[str, int]:
    """Effort level → thinking budget, defaults merged with ``anthropic.reasoning_budgets``."""
    budgets = dict(DEFAULT_REASONING_BUDGETS)
    configured = get_provider_config("anthropic").get("reasoning_budgets")
    if isinstance(configured, dict):
        for level, value in configured.items():
            try:
                budgets[str(level)] = int(value)
            except (TypeError, ValueError):
                log_event(_logger, "config.reasoning_budget.invalid", level=level, value=value)
    return budgets


__all__ = [
    "get_provider_config",
    "get_reasoning_budgets",
    "read_structured_file",
    "reset_config_cache",
    "DEFAULTS",
]
