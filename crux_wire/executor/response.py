"""Result objects returned by the executor.

Key Components
--------------
Response
    Completed generation: evolved context, assistant message, optional
    structured object, usage and a canonical finish reason.

StreamResponse
    Lazy, pull-based view over one streaming request. Iterating it drives the
    transport, the state machine and the tool-call accumulator; accessors
    report what has been observed so far. ``tool_calls()`` stays ``None``
    until the stream is terminal. ``close()`` (or exhausting the iterator)
    releases the transport and emits the ``stream.end`` / ``stream.error``
    log event exactly once.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Generator
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..base.catalog import Model
from ..base.errors import ErrorCode, ProviderError
from ..base.logging import LogContext
from ..base.models import ContentPart, Context, Message, ToolCall
from ..base.streaming import (
    Delta,
    ErrorDelta,
    MetaDelta,
    StreamMetrics,
    StreamState,
    TextDelta,
    ThinkingDelta,
    ToolCallDelta,
    ToolCallStart,
    TransportEvent,
    UsageDelta,
    finalize_stream,
)
from ..base.tools import ToolCallAccumulator


def merge_usage(current: Optional[Dict[str, int]], update: Mapping[str, int]) -> Dict[str, int]:
    """Fold a later usage report into an earlier one.

    Non-zero values in ``update`` win. ``total_tokens`` never falls below
    ``input_tokens + output_tokens``.
    """
    out: Dict[str, int] = dict(current or {})
    for key, value in update.items():
        if value or key not in out:
            out[key] = value
    summed = out.get("input_tokens", 0) + out.get("output_tokens", 0)
    out["total_tokens"] = max(out.get("total_tokens", 0), summed)
    return out


def _error_from_delta(delta: ErrorDelta) -> ProviderError:
    code = ErrorCode.DECODE_ERROR if delta.type == "decode_error" else ErrorCode.API_ERROR
    details: Dict[str, Any] = {"type": delta.type}
    if delta.code is not None:
        details["code"] = delta.code
    return ProviderError(code, delta.message, details=details)


@dataclass
class Response:
    """Outcome of ``generate_text`` / ``generate_object``.

    Attributes:
        id: Locally generated response id.
        model: Model the request was served by.
        context: Input context with the assistant message appended.
        message: The assistant message.
        object: Validated structured output, for object generation.
        usage: Normalized usage, when the provider reported it.
        finish_reason: One of stop, length, tool_calls, content_filter, error.
        provider_meta: Provider response id and fired adapters.

    Failed requests never produce a ``Response``; they come back as
    ``Result.failure``.
    """

    id: str
    model: Model
    context: Context
    message: Optional[Message] = None
    object: Any = None
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None
    provider_meta: Dict[str, Any] = field(default_factory=dict)

    def text(self) -> str:
        return self.message.text() if self.message is not None else ""

    def thinking(self) -> str:
        return self.message.thinking() if self.message is not None else ""

    def tool_calls(self) -> List[ToolCall]:
        if self.message is None or not self.message.tool_calls:
            return []
        return list(self.message.tool_calls)

    def reasoning_tokens(self) -> int:
        return (self.usage or {}).get("reasoning_tokens", 0)


class StreamResponse:
    """Pull-based delta stream for one request."""

    def __init__(
        self,
        *,
        model: Model,
        context: Context,
        events: Iterator[TransportEvent],
        state: StreamState,
        logger: logging.Logger,
        log_ctx: Optional[LogContext] = None,
        operation: str = "text",
        adapters: Optional[List[str]] = None,
    ) -> None:
        self.model = model
        self.context = context
        self.operation = operation
        self.adapters = list(adapters or [])
        self.metrics = StreamMetrics()
        self._events = events
        self._state = state
        self._logger = logger
        self._log_ctx = log_ctx
        self._text: List[str] = []
        self._thinking: List[str] = []
        self._usage: Optional[Dict[str, int]] = None
        self._tools = ToolCallAccumulator()
        self._finish_reason: Optional[str] = None
        self._response_id: Optional[str] = None
        self._error: Optional[ProviderError] = None
        self._finalized = False
        self._deltas = self._run()

    # ------------------------------------------------------------ iteration
    def __iter__(self) -> Iterator[Delta]:
        return self

    def __next__(self) -> Delta:
        return next(self._deltas)

    def _run(self) -> Iterator[Delta]:
        try:
            for event in self._events:
                for delta in self._state.handle(event):
                    self._observe(delta)
                    self.metrics.mark_emitted()
                    yield delta
                if self._state.terminated:
                    break
            else:
                self._state.handle(TransportEvent.done())
            if self._state.error is not None and self._error is None:
                self._error = replace(self._state.error, provider=self.model.provider, model=self.model.id)
        except ProviderError as exc:
            self._error = exc
        finally:
            self._release()

    def _observe(self, delta: Delta) -> None:
        if isinstance(delta, TextDelta):
            self._text.append(delta.text)
        elif isinstance(delta, ThinkingDelta):
            self._thinking.append(delta.text)
        elif isinstance(delta, (ToolCallStart, ToolCallDelta)):
            self._tools.apply(delta)
        elif isinstance(delta, UsageDelta):
            self._usage = merge_usage(self._usage, delta.usage)
            self.metrics.tokens = dict(self._usage)
        elif isinstance(delta, MetaDelta):
            if delta.response_id:
                self._response_id = delta.response_id
            if delta.finish_reason:
                self._finish_reason = delta.finish_reason
        elif isinstance(delta, ErrorDelta) and self._error is None:
            self._error = _error_from_delta(delta)

    def _release(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        if isinstance(self._events, Generator):
            self._events.close()
        ctx = self._log_ctx.with_fields(response_id=self._response_id) if self._log_ctx else None
        finalize_stream(
            logger=self._logger,
            ctx=ctx,
            metrics=self.metrics,
            error=self._error,
            finish_reason=self.finish_reason if self.terminated else None,
        )

    # ------------------------------------------------------------ control
    def drain(self) -> "StreamResponse":
        """Consume every remaining delta."""
        for _ in self:
            pass
        return self

    def close(self) -> None:
        """Stop consuming and release the transport."""
        if isinstance(self._deltas, Generator):
            self._deltas.close()
        self._release()

    cancel = close

    def __enter__(self) -> "StreamResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------ accessors
    @property
    def terminated(self) -> bool:
        return self._state.terminated or self._error is not None

    @property
    def error(self) -> Optional[ProviderError]:
        return self._error

    @property
    def response_id(self) -> Optional[str]:
        return self._response_id

    @property
    def finish_reason(self) -> Optional[str]:
        """Canonical finish reason once terminal, otherwise the last one reported."""
        if self._error is not None:
            return "error"
        if self._finish_reason is not None:
            return self._finish_reason
        if not self.terminated:
            return None
        return "tool_calls" if self._tools else "stop"

    def text(self) -> str:
        return "".join(self._text)

    def thinking(self) -> str:
        return "".join(self._thinking)

    def usage(self) -> Optional[Dict[str, int]]:
        return dict(self._usage) if self._usage is not None else None

    def tool_calls(self) -> Optional[List[ToolCall]]:
        """Finalized tool calls, or ``None`` while the stream is still open."""
        if not self.terminated:
            return None
        return self._tools.finalize()

    def object(self) -> Any:
        """Parsed JSON of the text so far, or ``None`` when it does not parse yet."""
        try:
            return json.loads(self.text())
        except json.JSONDecodeError:
            return None

    def to_message(self) -> Message:
        """Assistant message built from everything observed."""
        parts: List[ContentPart] = []
        if self._thinking:
            parts.append(ContentPart.thinking_part(self.thinking()))
        parts.append(ContentPart.text_part(self.text()))
        return Context.assistant(parts, tool_calls=self.tool_calls() or None)


__all__ = ["Response", "StreamResponse", "merge_usage"]
