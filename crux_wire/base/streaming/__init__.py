"""Streaming primitives: delta vocabulary, SSE framing, state machine, metrics."""

from .deltas import (
    FINISH_REASONS,
    Delta,
    ErrorDelta,
    MaybeDelta,
    MetaDelta,
    TextDelta,
    ThinkingDelta,
    ToolCallDelta,
    ToolCallStart,
    UsageDelta,
    normalize_finish_reason,
)
from .sse import SSEEvent, parse_frame, parse_frames
from .stream_state import StreamState, StreamStatus, TransportEvent, TransportEventKind
from .streaming_metrics import StreamMetrics
from .streaming_finalize import finalize_stream

__all__ = [
    "Delta",
    "MaybeDelta",
    "TextDelta",
    "ThinkingDelta",
    "ToolCallStart",
    "ToolCallDelta",
    "UsageDelta",
    "MetaDelta",
    "ErrorDelta",
    "FINISH_REASONS",
    "normalize_finish_reason",
    "SSEEvent",
    "parse_frame",
    "parse_frames",
    "StreamState",
    "StreamStatus",
    "TransportEvent",
    "TransportEventKind",
    "StreamMetrics",
    "finalize_stream",
]
