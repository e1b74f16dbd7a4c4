"""Provider transport settings: base URL, credential lookup and auth headers.

Providers own HTTP concerns only. Which wire dialect a model speaks is decided
by the resolver, so one provider may serve several dialects (OpenAI chat and
responses) and one dialect may serve several providers (every
OpenAI-compatible endpoint).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..base.errors import ErrorCode, ProviderError, Result
from ..config import get_provider_config
from ..config.defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    GROQ_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_BASE_URL,
    XAI_DEFAULT_BASE_URL,
)

Header = Tuple[str, str]


class AuthStyle(str, Enum):
    BEARER = "bearer"
    X_API_KEY = "x_api_key"


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one provider endpoint family.

    Attributes:
        name: Provider key used in model specs (``"openai"``).
        base_url: Built-in base URL; config, env and per-call options may override it.
        env_key: Primary environment variable holding the API key.
        auth_style: How the key is presented on the wire.
    """

    name: str
    base_url: str
    env_key: str
    auth_style: AuthStyle = AuthStyle.BEARER

    def config(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return get_provider_config(self.name, overrides)

    def resolve_base_url(self, opts: Mapping[str, Any]) -> str:
        """Per-call ``base_url`` option, else configured value, else the built-in default."""
        return opts.get("base_url") or self.config().get("base_url") or self.base_url

    def api_key(self, opts: Mapping[str, Any]) -> Result[str]:
        """Look up the API key without raising.

        Order: ``api_key`` option, then the merged provider configuration
        (config file, environment, ``.env``).
        """
        key = opts.get("api_key") or self.config().get("api_key")
        if key:
            return Result.success(key)
        return Result.failure(
            ProviderError(
                ErrorCode.MISSING_CREDENTIALS,
                f"{self.env_key} not set",
                provider=self.name,
            )
        )

    def auth_headers(self, api_key: str) -> List[Header]:
        if self.auth_style is AuthStyle.X_API_KEY:
            return [("x-api-key", api_key)]
        return [("Authorization", f"Bearer {api_key}")]

    def request_headers(self, api_key: str, wire_headers: Sequence[Header], *, stream: bool = True) -> List[Header]:
        """Auth headers, then dialect headers (JSON content type when none), then Accept."""
        headers = self.auth_headers(api_key)
        headers.extend(wire_headers or [("Content-Type", "application/json")])
        if stream:
            headers.append(("Accept", "text/event-stream"))
        return headers


PROVIDERS: Mapping[str, ProviderSpec] = {
    "openai": ProviderSpec("openai", OPENAI_DEFAULT_BASE_URL, "OPENAI_API_KEY"),
    "anthropic": ProviderSpec("anthropic", ANTHROPIC_DEFAULT_BASE_URL, "ANTHROPIC_API_KEY", AuthStyle.X_API_KEY),
    "groq": ProviderSpec("groq", GROQ_DEFAULT_BASE_URL, "GROQ_API_KEY"),
    "openrouter": ProviderSpec("openrouter", OPENROUTER_DEFAULT_BASE_URL, "OPENROUTER_API_KEY"),
    "xai": ProviderSpec("xai", XAI_DEFAULT_BASE_URL, "XAI_API_KEY"),
}


def get_provider(name: str) -> ProviderSpec:
    """Return the spec registered for ``name``.

    Raises:
        ProviderError: ``unsupported_capability`` for an unknown provider.
    """
    spec = PROVIDERS.get((name or "").lower())
    if spec is None:
        raise ProviderError.unsupported(f"unknown provider: {name}", provider=name)
    return spec


def list_providers() -> List[str]:
    return sorted(PROVIDERS)


__all__ = ["AuthStyle", "ProviderSpec", "PROVIDERS", "get_provider", "list_providers", "Header"]
