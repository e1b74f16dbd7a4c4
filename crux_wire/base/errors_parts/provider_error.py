"""
Structured runtime error exception type.

Internal layers raise :class:`ProviderError`; public operations catch it at
their boundary and hand it back inside a ``Result``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a classified failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` for the failure.
        message: Human-readable message suitable for logging.
        provider: Provider key involved, when known (e.g. ``"openai"``).
        model: Model id involved, when known.
        status: HTTP status for ``http_error`` failures.
        errors: Every individual violation for ``validation_errors``.
        details: Extra diagnostic payload (raw body, api error type, spec).
    """

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    model: Optional[str] = None
    status: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider or '-'}:{self.model or '-'} {self.code.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly view used in log payloads."""
        data: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.status is not None:
            data["status"] = self.status
        if self.errors:
            data["errors"] = list(self.errors)
        return data

    @classmethod
    def model_not_found(cls, spec: Any) -> "ProviderError":
        return cls(ErrorCode.MODEL_NOT_FOUND, f"model not found: {spec}", details={"spec": spec})

    @classmethod
    def unsupported(cls, message: str, *, provider: Optional[str] = None, model: Optional[str] = None) -> "ProviderError":
        return cls(ErrorCode.UNSUPPORTED_CAPABILITY, message, provider=provider, model=model)

    @classmethod
    def invalid_parameter(cls, description: str) -> "ProviderError":
        return cls(ErrorCode.INVALID_PARAMETER, f"Invalid parameter: {description}")

    @classmethod
    def invalid_schema(cls, reason: str) -> "ProviderError":
        return cls(ErrorCode.INVALID_SCHEMA, f"Invalid schema: {reason}")

    @classmethod
    def http_error(cls, status: int, *, provider: Optional[str] = None, model: Optional[str] = None, body: Any = None) -> "ProviderError":
        details = {"body": body} if body is not None else {}
        return cls(
            ErrorCode.HTTP_ERROR,
            f"API request failed ({status})",
            provider=provider,
            model=model,
            status=status,
            details=details,
        )

    @classmethod
    def validation_errors(cls, errors: List[str], *, value: Any = None) -> "ProviderError":
        return cls(
            ErrorCode.VALIDATION_ERRORS,
            "Schema validation failed",
            errors=list(errors),
            details={"value": value} if value is not None else {},
        )


__all__ = ["ProviderError"]
