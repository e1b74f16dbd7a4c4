"""Unified timeout configuration for the runtime.

Key Components
--------------
TimeoutConfig
    Dataclass with the normalized timeout values. ``stream_receive_timeout_ms``
    bounds silence between two streamed chunks; expiry terminates the stream
    with a ``timeout`` error.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when one of them changes. Supported variables
    (all optional):
        CRUX_WIRE_STREAM_TIMEOUT_MS
        CRUX_WIRE_CONNECT_TIMEOUT_S
        CRUX_WIRE_HTTP_TIMEOUT_S

to_httpx_timeout(receive_timeout_ms)
    Builds the ``httpx.Timeout`` used for one request from the cached
    config and an optional per-request receive timeout.

Design Constraints
------------------
1. No ad-hoc timeout literals outside this module and the adapters that set
   a per-request ``receive_timeout`` option.
2. Avoid per-call env parsing (cache after first read).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import httpx

DEFAULT_STREAM_TIMEOUT_MS = 30_000
EXTENDED_RECEIVE_TIMEOUT_MS = 300_000


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values.

    Attributes:
        stream_receive_timeout_ms: Idle timeout between streamed chunks.
        connect_timeout_seconds: Timeout for establishing the connection.
        http_timeout_seconds: Timeout for non-streaming requests (embeddings).
    """

    stream_receive_timeout_ms: int = DEFAULT_STREAM_TIMEOUT_MS
    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 60.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None
_ENV_NAMES = (
    "CRUX_WIRE_STREAM_TIMEOUT_MS",
    "CRUX_WIRE_CONNECT_TIMEOUT_S",
    "CRUX_WIRE_HTTP_TIMEOUT_S",
)


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from ``name``; fall back to ``default`` otherwise."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        stream_receive_timeout_ms=int(_parse_env_float("CRUX_WIRE_STREAM_TIMEOUT_MS", DEFAULT_STREAM_TIMEOUT_MS)),
        connect_timeout_seconds=_parse_env_float("CRUX_WIRE_CONNECT_TIMEOUT_S", 10.0),
        http_timeout_seconds=_parse_env_float("CRUX_WIRE_HTTP_TIMEOUT_S", 60.0),
    )
    _ENV_GUARD = guard
    return _CACHED


def to_httpx_timeout(receive_timeout_ms: Optional[int] = None) -> httpx.Timeout:
    """Build an ``httpx.Timeout`` whose read timeout is the receive timeout.

    ``receive_timeout_ms`` of ``None`` selects the configured stream default.
    """
    cfg = get_timeout_config()
    receive_ms = receive_timeout_ms if receive_timeout_ms is not None else cfg.stream_receive_timeout_ms
    read_seconds = max(float(receive_ms), 1.0) / 1000.0
    return httpx.Timeout(
        connect=cfg.connect_timeout_seconds,
        read=read_seconds,
        write=cfg.http_timeout_seconds,
        pool=cfg.connect_timeout_seconds,
    )


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "to_httpx_timeout",
    "DEFAULT_STREAM_TIMEOUT_MS",
    "EXTENDED_RECEIVE_TIMEOUT_MS",
]
