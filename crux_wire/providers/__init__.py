"""Provider registry public surface."""

from .provider_spec import PROVIDERS, AuthStyle, ProviderSpec, get_provider, list_providers

__all__ = ["PROVIDERS", "AuthStyle", "ProviderSpec", "get_provider", "list_providers"]
