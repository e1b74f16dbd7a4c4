"""Terminal logging for streams.

Kept in the streaming package so every dialect finishes with the same
normalized ``stream.end`` / ``stream.error`` record.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProviderError
from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext],
    metrics: StreamMetrics,
    error: Optional[ProviderError] = None,
    finish_reason: Optional[str] = None,
) -> None:
    """Stamp the duration on ``metrics`` and emit the consolidated finalize event."""
    metrics.mark_finished()
    normalized_log_event(
        logger,
        "stream.end" if error is None else "stream.error",
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens,
        error_code=error.code.value if error is not None else None,
        level=logging.INFO if error is None else logging.WARNING,
        emitted_count=metrics.emitted,
        time_to_first_delta_ms=metrics.time_to_first_delta_ms,
        total_duration_ms=metrics.total_duration_ms,
        finish_reason=finish_reason,
        error=error.message if error is not None else None,
    )


__all__ = ["finalize_stream"]
