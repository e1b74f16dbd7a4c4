"""Errors parts package public surface.

Prefer importing from ``crux_wire.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, to_provider_error
from .result import Result

__all__ = ["ErrorCode", "ProviderError", "classify_exception", "to_provider_error", "Result"]
