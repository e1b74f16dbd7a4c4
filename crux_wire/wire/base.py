"""Wire protocol contract shared by every dialect.

Purpose:
    A dialect owns one provider wire vocabulary: the request path, how a
    canonical context plus options becomes a JSON body, and how one SSE frame
    becomes canonical deltas. Dialects are stateless; decoding depends only on
    the frame and the model.

Notes:
    ``decode_sse_event`` never raises. Malformed payloads decode to an
    ``ErrorDelta`` with ``type="decode_error"``.
"""
from __future__ import annotations

import base64
import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..base.catalog import Model
from ..base.models import ContentPart, Context
from ..base.schema import DeclaredSchema
from ..base.streaming import ErrorDelta, MaybeDelta, SSEEvent
from .registry import WireProtocolId

Prompt = Union[str, Context]
Body = Dict[str, Any]
Header = Tuple[str, str]

DONE_MARKER = "[DONE]"


def to_context(prompt: Any) -> Context:
    """Coerce an encoder prompt into a Context without invariant checks."""
    if isinstance(prompt, Context):
        return prompt
    return Context.normalize(prompt, validate=False)


def maybe_add(body: Body, key: str, value: Any) -> Body:
    if value is not None:
        body[key] = value
    return body


def part_url(part: ContentPart) -> Optional[str]:
    """URL for an image part: the remote URL or a base64 data URL for inline bytes."""
    if part.type == "image_url":
        return part.url
    if part.type == "image" and part.data is not None:
        encoded = base64.b64encode(part.data).decode("ascii")
        return f"data:{part.media_type or 'image/png'};base64,{encoded}"
    return None


def decode_json(data: str) -> Tuple[Optional[Any], Optional[ErrorDelta]]:
    """Parse a frame payload, returning either the value or a decode_error delta."""
    try:
        return json.loads(data), None
    except json.JSONDecodeError as exc:
        return None, ErrorDelta(message=f"Failed to decode SSE event: {exc.msg}", type="decode_error")


def api_error(payload: Mapping[str, Any]) -> ErrorDelta:
    """Translate an ``{"error": {...}}`` payload (or a bare message) into an ErrorDelta."""
    error = payload.get("error")
    if not isinstance(error, Mapping):
        return ErrorDelta(message=str(error or "Unknown API error"), type="api_error")
    code = error.get("code")
    return ErrorDelta(
        message=str(error.get("message") or "Unknown API error"),
        type=str(error.get("type") or "api_error"),
        code=str(code) if code is not None else None,
    )


class WireProtocol(ABC):
    """Encode/decode contract for one streaming dialect."""

    id: ClassVar[WireProtocolId]

    @abstractmethod
    def endpoint(self) -> str:
        """Path appended to the provider base URL."""

    @abstractmethod
    def encode_body(self, model: Model, prompt: Prompt, opts: Mapping[str, Any]) -> Body:
        """Build the JSON request body."""

    @abstractmethod
    def decode_sse_event(self, event: SSEEvent, model: Optional[Model]) -> List[MaybeDelta]:
        """Translate one SSE frame into canonical deltas (``None`` = terminal sentinel)."""

    @abstractmethod
    def options_schema(self) -> DeclaredSchema:
        """Declared options this dialect understands."""

    def headers(self, opts: Mapping[str, Any]) -> Sequence[Header]:
        """Extra request headers; empty means ``Content-Type: application/json`` only."""
        return ()


__all__ = [
    "WireProtocol",
    "Prompt",
    "Body",
    "Header",
    "DONE_MARKER",
    "to_context",
    "maybe_add",
    "part_url",
    "decode_json",
    "api_error",
]
