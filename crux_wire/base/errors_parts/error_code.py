"""
Normalized runtime error codes (taxonomy).

Values are lowercase snake_case and form a stable contract for logging and
for callers branching on ``Result.error.code``.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated failure categories surfaced by public operations."""

    MODEL_NOT_FOUND = "model_not_found"
    UNSUPPORTED_CAPABILITY = "unsupported_capability"
    INVALID_SCHEMA = "invalid_schema"
    INVALID_PARAMETER = "invalid_parameter"
    INVALID_PROMPT = "invalid_prompt"
    MISSING_CREDENTIALS = "missing_credentials"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"
    API_ERROR = "api_error"
    VALIDATION_ERRORS = "validation_errors"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
