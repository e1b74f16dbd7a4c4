"""HTTP transport seam.

Purpose:
    Deliver the raw lifecycle of one streaming request as an ordered sequence
    of :class:`TransportEvent` (status, headers, data chunks, then done or
    timeout) and run plain JSON POSTs for non-streaming calls.

External dependencies:
    - ``httpx`` through the pooled clients from ``base.http``.

Notes:
    ``stream`` is a generator; closing it (or abandoning it) exits the
    ``httpx`` response context and releases the connection. Connection-level
    failures surface as ``ProviderError`` (``transport_error``); a read
    timeout is reported in-band as a ``timeout`` event so the state machine
    owns the terminal decision.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple

import httpx

from ..base.errors import to_provider_error
from ..base.http import get_httpx_client
from ..base.streaming import TransportEvent
from ..base.timeouts import get_timeout_config, to_httpx_timeout

Header = Tuple[str, str]


@dataclass(frozen=True)
class HttpRequest:
    """Fully built outbound request.

    Attributes:
        url: Absolute URL (base URL plus dialect path).
        headers: Ordered header pairs.
        body: JSON body.
        base_url: Pool key for the shared client.
        provider: Provider key, for error attribution.
        model: Model id, for error attribution.
    """

    url: str
    headers: Tuple[Header, ...] = ()
    body: Dict[str, Any] = field(default_factory=dict)
    base_url: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    method: str = "POST"


@dataclass(frozen=True)
class HttpResponse:
    status: int
    content: bytes = b""
    headers: Tuple[Header, ...] = ()

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    def stream(self, request: HttpRequest, receive_timeout_ms: Optional[int] = None) -> Iterator[TransportEvent]: ...

    def post(self, request: HttpRequest, timeout_s: Optional[float] = None) -> HttpResponse: ...


class HttpxTransport:
    """Transport over the pooled ``httpx.Client`` instances."""

    def stream(self, request: HttpRequest, receive_timeout_ms: Optional[int] = None) -> Iterator[TransportEvent]:
        client = get_httpx_client(request.base_url, "stream")
        try:
            with client.stream(
                request.method,
                request.url,
                headers=list(request.headers),
                json=request.body,
                timeout=to_httpx_timeout(receive_timeout_ms),
            ) as response:
                yield TransportEvent.status_event(response.status_code)
                yield TransportEvent.headers_event(list(response.headers.items()))
                if not 200 <= response.status_code < 300:
                    return
                for chunk in response.iter_bytes():
                    yield TransportEvent.data_event(chunk)
            yield TransportEvent.done()
        except httpx.TimeoutException:
            yield TransportEvent.timeout()
        except httpx.HTTPError as exc:
            raise to_provider_error(exc, provider=request.provider, model=request.model) from exc

    def post(self, request: HttpRequest, timeout_s: Optional[float] = None) -> HttpResponse:
        """Send a JSON POST and return status, body and headers.

        Raises:
            ProviderError: ``timeout`` or ``transport_error`` when no response arrives.
        """
        cfg = get_timeout_config()
        timeout = httpx.Timeout(timeout_s or cfg.http_timeout_seconds, connect=cfg.connect_timeout_seconds)
        client = get_httpx_client(request.base_url, "embed")
        try:
            response = client.request(
                request.method,
                request.url,
                headers=list(request.headers),
                json=request.body,
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            raise to_provider_error(exc, provider=request.provider, model=request.model) from exc
        return HttpResponse(
            status=response.status_code,
            content=response.content,
            headers=tuple(response.headers.items()),
        )


_DEFAULT_TRANSPORT: Transport = HttpxTransport()


def get_default_transport() -> Transport:
    return _DEFAULT_TRANSPORT


def set_default_transport(transport: Transport) -> None:
    """Swap the process-wide transport (tests inject scripted fakes)."""
    global _DEFAULT_TRANSPORT
    _DEFAULT_TRANSPORT = transport


__all__ = [
    "HttpRequest",
    "HttpResponse",
    "Transport",
    "HttpxTransport",
    "get_default_transport",
    "set_default_transport",
]
