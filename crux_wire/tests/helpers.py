"""Test doubles shared across the suite.

``ScriptedTransport`` replays a canned transport lifecycle so executor and
stream tests run without network access; ``EchoDecoder`` turns every SSE
payload into a text delta for exercising the state machine in isolation.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from crux_wire.base.streaming import SSEEvent, TextDelta, TransportEvent
from crux_wire.executor.transport import HttpRequest, HttpResponse


def sse(*payloads: Union[str, Dict[str, Any]]) -> bytes:
    """Encode payloads as complete SSE frames; mappings become JSON."""
    frames = []
    for payload in payloads:
        data = payload if isinstance(payload, str) else json.dumps(payload)
        frames.append(f"data: {data}\n\n")
    return "".join(frames).encode("utf-8")


class EchoDecoder:
    """Decoder emitting the raw frame payload as one text delta."""

    def decode_sse_event(self, event: SSEEvent, model: Any) -> List[Any]:
        if event.data == "[END]":
            return [None]
        return [TextDelta(event.data)]


class ScriptedTransport:
    """Transport double replaying canned lifecycle events.

    ``chunks`` are delivered as data events after a status and a headers
    event. ``finish`` picks the closing event: ``"done"``, ``"timeout"`` or
    ``None`` for an iterator that simply stops.
    """

    def __init__(
        self,
        chunks: Sequence[Union[bytes, str]] = (),
        *,
        status: int = 200,
        finish: Optional[str] = "done",
        post_status: int = 200,
        post_body: Any = None,
    ) -> None:
        self.chunks = list(chunks)
        self.status = status
        self.finish = finish
        self.post_status = post_status
        self.post_body = post_body
        self.requests: List[HttpRequest] = []
        self.receive_timeouts: List[Optional[int]] = []
        self.closed = False
        self.delivered = 0

    def stream(self, request: HttpRequest, receive_timeout_ms: Optional[int] = None) -> Iterator[TransportEvent]:
        self.requests.append(request)
        self.receive_timeouts.append(receive_timeout_ms)
        try:
            yield TransportEvent.status_event(self.status)
            yield TransportEvent.headers_event([("content-type", "text/event-stream")])
            if not 200 <= self.status < 300:
                return
            for chunk in self.chunks:
                self.delivered += 1
                yield TransportEvent.data_event(chunk)
            if self.finish == "done":
                yield TransportEvent.done()
            elif self.finish == "timeout":
                yield TransportEvent.timeout()
        finally:
            self.closed = True

    def post(self, request: HttpRequest, timeout_s: Optional[float] = None) -> HttpResponse:
        self.requests.append(request)
        if isinstance(self.post_body, bytes):
            body = self.post_body
        else:
            body = json.dumps(self.post_body).encode("utf-8")
        return HttpResponse(status=self.post_status, content=body)

    @property
    def last_body(self) -> Dict[str, Any]:
        return self.requests[-1].body

    @property
    def last_headers(self) -> Dict[str, str]:
        return dict(self.requests[-1].headers)


__all__ = ["sse", "EchoDecoder", "ScriptedTransport"]
