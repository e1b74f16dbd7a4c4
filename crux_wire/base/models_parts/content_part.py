"""
Tagged content part of a canonical message.

A :class:`ContentPart` carries exactly the fields implied by its ``type``:

    text       -> text
    thinking   -> text
    image_url  -> url
    image      -> data (bytes), media_type
    file       -> data (bytes), filename, media_type

Every variant may also carry free-form ``metadata``. Construction through the
classmethods is the normal path; direct construction is checked in
``__post_init__`` so a part can never hold fields foreign to its tag.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

ContentPartType = Literal["text", "thinking", "image_url", "image", "file"]

_FIELDS_BY_TYPE: Dict[str, frozenset] = {
    "text": frozenset({"text"}),
    "thinking": frozenset({"text"}),
    "image_url": frozenset({"url"}),
    "image": frozenset({"data", "media_type"}),
    "file": frozenset({"data", "filename", "media_type"}),
}


@dataclass(frozen=True)
class ContentPart:
    """A single piece of message content.

    Attributes:
        type: The variant tag.
        text: Text for ``text`` and ``thinking`` parts.
        url: Location for ``image_url`` parts.
        data: Raw bytes for ``image`` and ``file`` parts.
        media_type: MIME type for binary parts.
        filename: File name for ``file`` parts.
        metadata: Free-form annotations.
    """

    type: ContentPartType
    text: Optional[str] = None
    url: Optional[str] = None
    data: Optional[bytes] = None
    media_type: Optional[str] = None
    filename: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        allowed = _FIELDS_BY_TYPE.get(self.type)
        if allowed is None:
            raise ValueError(f"unknown content part type: {self.type!r}")
        present = {
            name
            for name in ("text", "url", "data", "media_type", "filename")
            if getattr(self, name) is not None
        }
        if stray := present - allowed:
            raise ValueError(f"{self.type} part cannot carry {sorted(stray)}")

    @classmethod
    def text_part(cls, text: str, metadata: Optional[Dict[str, Any]] = None) -> "ContentPart":
        return cls(type="text", text=text, metadata=dict(metadata or {}))

    @classmethod
    def thinking_part(cls, text: str, metadata: Optional[Dict[str, Any]] = None) -> "ContentPart":
        return cls(type="thinking", text=text, metadata=dict(metadata or {}))

    @classmethod
    def image_url_part(cls, url: str, metadata: Optional[Dict[str, Any]] = None) -> "ContentPart":
        return cls(type="image_url", url=url, metadata=dict(metadata or {}))

    @classmethod
    def image_part(cls, data: bytes, media_type: str = "image/png", metadata: Optional[Dict[str, Any]] = None) -> "ContentPart":
        return cls(type="image", data=data, media_type=media_type, metadata=dict(metadata or {}))

    @classmethod
    def file_part(
        cls,
        data: bytes,
        filename: str,
        media_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ContentPart":
        return cls(type="file", data=data, filename=filename, media_type=media_type, metadata=dict(metadata or {}))

    @property
    def is_image(self) -> bool:
        return self.type in ("image", "image_url")

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary; bytes are base64 encoded."""
        out: Dict[str, Any] = {"type": self.type}
        for name in sorted(_FIELDS_BY_TYPE[self.type]):
            value = getattr(self, name)
            if isinstance(value, bytes):
                value = base64.b64encode(value).decode("ascii")
            out[name] = value
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


__all__ = [
    "ContentPart",
    "ContentPartType",
]
