"""Token usage helpers."""

from .usage import OPTIONAL_USAGE_KEYS, Usage, normalize_usage

__all__ = ["Usage", "normalize_usage", "OPTIONAL_USAGE_KEYS"]
