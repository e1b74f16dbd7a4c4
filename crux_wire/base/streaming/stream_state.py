"""Per-request streaming state machine.

States: ``INITIALIZING -> ACTIVE -> DONE | ERROR``. The machine consumes the
transport lifecycle events in :class:`TransportEvent` and returns, for each,
the canonical deltas it produced:

=========  ==============================================================
status     2xx continues silently; anything else halts with ``http_error``
headers    continues silently
data       appended to the buffer; every complete frame is decoded and its
           deltas returned, ``None`` sentinels dropped, the tail retained
done       halts successfully
timeout    halts with ``timeout``
=========  ==============================================================

Decoding is a pure function of one frame and the model; the only state carried
between frames is the byte buffer. Events arriving after a halt are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence, Tuple, Union

from ..errors import ErrorCode, ProviderError
from .deltas import Delta, MaybeDelta
from .sse import SSEEvent, parse_frames


class TransportEventKind(str, Enum):
    STATUS = "status"
    HEADERS = "headers"
    DATA = "data"
    DONE = "done"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class TransportEvent:
    """One raw lifecycle event delivered by a transport.

    Build with the classmethods; only the field implied by ``kind`` is set.
    """

    kind: TransportEventKind
    status: Optional[int] = None
    headers: Tuple[Tuple[str, str], ...] = ()
    data: bytes = b""

    @classmethod
    def status_event(cls, code: int) -> "TransportEvent":
        return cls(TransportEventKind.STATUS, status=code)

    @classmethod
    def headers_event(cls, headers: Sequence[Tuple[str, str]]) -> "TransportEvent":
        return cls(TransportEventKind.HEADERS, headers=tuple(headers))

    @classmethod
    def data_event(cls, data: Union[bytes, str]) -> "TransportEvent":
        return cls(TransportEventKind.DATA, data=data.encode("utf-8") if isinstance(data, str) else data)

    @classmethod
    def done(cls) -> "TransportEvent":
        return cls(TransportEventKind.DONE)

    @classmethod
    def timeout(cls) -> "TransportEvent":
        return cls(TransportEventKind.TIMEOUT)


class FrameDecoder(Protocol):
    def decode_sse_event(self, event: SSEEvent, model: Any) -> Sequence[MaybeDelta]: ...


class StreamStatus(str, Enum):
    INITIALIZING = "initializing"
    ACTIVE = "active"
    DONE = "done"
    ERROR = "error"


@dataclass
class StreamState:
    """Mutable session for one outbound streaming request.

    Attributes:
        wire: Decoder for the resolved dialect.
        model: Model metadata handed to the decoder.
        buffer: Bytes of the trailing incomplete frame.
        status: Current machine state.
        error: Terminal error when ``status`` is ``ERROR``.
        http_status: Status code reported by the transport, if any.
    """

    wire: FrameDecoder
    model: Any = None
    buffer: bytes = b""
    status: StreamStatus = StreamStatus.INITIALIZING
    error: Optional[ProviderError] = None
    http_status: Optional[int] = None
    headers: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def terminated(self) -> bool:
        return self.status in (StreamStatus.DONE, StreamStatus.ERROR)

    def _halt(self, error: Optional[ProviderError] = None) -> List[Delta]:
        self.status = StreamStatus.ERROR if error is not None else StreamStatus.DONE
        self.error = error
        return []

    def handle(self, event: TransportEvent) -> List[Delta]:
        """Advance the machine by one transport event and return emitted deltas."""
        if self.terminated:
            return []
        kind = event.kind
        if kind is TransportEventKind.STATUS:
            self.http_status = event.status
            if event.status is None or not 200 <= event.status < 300:
                return self._halt(ProviderError.http_error(event.status or 0))
            self.status = StreamStatus.ACTIVE
            return []
        if kind is TransportEventKind.HEADERS:
            self.headers.extend(event.headers)
            return []
        if kind is TransportEventKind.DATA:
            self.status = StreamStatus.ACTIVE
            events, self.buffer = parse_frames(self.buffer + event.data)
            out: List[Delta] = []
            for sse in events:
                out.extend(d for d in self.wire.decode_sse_event(sse, self.model) if d is not None)
            return out
        if kind is TransportEventKind.DONE:
            return self._halt()
        return self._halt(ProviderError(ErrorCode.TIMEOUT, "stream receive timeout"))


__all__ = [
    "TransportEvent",
    "TransportEventKind",
    "FrameDecoder",
    "StreamStatus",
    "StreamState",
]
