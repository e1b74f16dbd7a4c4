"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Used at the transport seam where httpx, JSON decoding and callers' own
exceptions meet the runtime taxonomy.
"""
from __future__ import annotations

import json
from typing import Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Checked in order: ``exc.status_code``, ``exc.status``,
    ``exc.response.status_code``. Returns ``None`` when nothing valid is found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeouts (builtin and httpx).
        3. JSON decoding failures.
        4. Anything carrying an HTTP status.
        5. httpx transport failures.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, json.JSONDecodeError):
        return ErrorCode.DECODE_ERROR
    if _extract_status(exc) is not None:
        return ErrorCode.HTTP_ERROR
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSPORT_ERROR
    return ErrorCode.UNKNOWN


def to_provider_error(exc: Exception, *, provider: Optional[str] = None, model: Optional[str] = None) -> ProviderError:
    """Wrap ``exc`` in a :class:`ProviderError`, keeping an existing one as is."""
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(
        classify_exception(exc),
        str(exc) or exc.__class__.__name__,
        provider=provider,
        model=model,
        status=_extract_status(exc),
        details={"exception": exc.__class__.__name__},
    )


__all__ = [
    "classify_exception",
    "to_provider_error",
    "_extract_status",
]
