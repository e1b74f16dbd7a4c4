"""Structured logging context carried through a single request.

:class:`LogContext` holds the fields every event of one request shares
(provider, model, wire dialect, request/response ids) plus free-form extras.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for runtime logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    wire: Optional[str] = None
    operation: Optional[str] = None
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}

    def with_fields(self, **changes: Any) -> "LogContext":
        """Return a copy with the given attributes replaced."""
        return replace(self, **changes)


__all__ = ["LogContext"]
