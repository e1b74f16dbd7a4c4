"""Streaming metrics data structures.

One :class:`StreamMetrics` instance is kept per stream and folded into the
``stream.end`` / ``stream.error`` log event when the stream finishes.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single streamed request.

    Attributes:
        emitted: Number of deltas handed to the consumer.
        time_to_first_delta_ms: Latency from request start to first delta.
        total_duration_ms: Latency from request start to termination.
        tokens: Last normalized usage observed on the stream.
    """

    emitted: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    tokens: Optional[Dict[str, Any]] = None
    started_at: float = field(default_factory=time.perf_counter, repr=False)

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started_at) * 1000.0, 3)

    def mark_emitted(self) -> None:
        if self.emitted == 0:
            self.time_to_first_delta_ms = self._elapsed_ms()
        self.emitted += 1

    def mark_finished(self) -> None:
        if self.total_duration_ms is None:
            self.total_duration_ms = self._elapsed_ms()


__all__ = ["StreamMetrics"]
