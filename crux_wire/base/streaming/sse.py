"""Incremental Server-Sent Events frame parser.

``parse_frames(buffer)`` splits a byte buffer into complete frames (each
terminated by a blank line) and returns the parsed events together with the
unconsumed tail, which the caller keeps until more bytes arrive. The buffer
stays bytes so a multi-byte UTF-8 sequence split across chunks is decoded only
once its frame is complete.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

_FRAME_SEPARATOR = b"\n\n"


@dataclass(frozen=True)
class SSEEvent:
    """One dispatched SSE event.

    Attributes:
        data: Data lines joined with ``\\n``.
        event: Value of the ``event:`` field, when present.
        id: Value of the ``id:`` field, when present.
    """

    data: str
    event: Optional[str] = None
    id: Optional[str] = None


def parse_frame(frame: bytes) -> Optional[SSEEvent]:
    """Parse one complete frame; ``None`` when it carries no data lines."""
    data_lines: List[str] = []
    event: Optional[str] = None
    event_id: Optional[str] = None
    for line in frame.decode("utf-8", errors="replace").split("\n"):
        if not line or line.startswith(":"):
            continue
        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "data":
            data_lines.append(value)
        elif name == "event":
            event = value
        elif name == "id":
            event_id = value
    if not data_lines:
        return None
    return SSEEvent(data="\n".join(data_lines), event=event, id=event_id)


def parse_frames(buffer: bytes) -> Tuple[List[SSEEvent], bytes]:
    """Extract every complete frame from ``buffer``.

    Returns:
        (events, remaining): parsed events in order and the trailing incomplete
        frame (possibly empty).
    """
    buffer = buffer.replace(b"\r\n", b"\n")
    events: List[SSEEvent] = []
    while True:
        cut = buffer.find(_FRAME_SEPARATOR)
        if cut < 0:
            return events, buffer
        frame, buffer = buffer[:cut], buffer[cut + len(_FRAME_SEPARATOR):]
        parsed = parse_frame(frame)
        if parsed is not None:
            events.append(parsed)


__all__ = ["SSEEvent", "parse_frame", "parse_frames"]
