"""
Model metadata record.

Purpose:
    Immutable description of one remote model as seen by the resolver,
    adapters and validators: provider, id, nested capability flags, input and
    output modalities, plus free-form ``extra`` metadata (``wire`` protocol
    hints, ``constraints``, ``kind``, ``api``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_CAPABILITIES: Dict[str, Any] = {
    "chat": True,
    "streaming": {"text": True},
    "tools": {"enabled": True},
}


@dataclass(frozen=True)
class Model:
    """Catalog entry for a model.

    Attributes:
        id: Provider-side model identifier, e.g. ``gpt-4o-mini``.
        provider: Provider key, e.g. ``openai``.
        capabilities: Nested capability flags (``tools.enabled``, ``reasoning.enabled``...).
        modalities: ``{"input": [...], "output": [...]}``.
        extra: Free-form metadata; see module docstring.
    """

    id: str
    provider: str
    capabilities: Dict[str, Any] = field(default_factory=dict)
    modalities: Dict[str, List[str]] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def spec(self) -> str:
        return f"{self.provider}:{self.id}"

    def capability(self, *path: str) -> Any:
        """Return the nested capability at ``path``; missing capabilities fall back to defaults."""
        node: Any = self.capabilities if self.capabilities else DEFAULT_CAPABILITIES
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node

    def has(self, *path: str) -> bool:
        return self.capability(*path) is True

    @property
    def input_modalities(self) -> List[str]:
        return list(self.modalities.get("input") or ["text"])

    def supports_image_input(self) -> bool:
        return "image" in self.input_modalities

    def constraints(self) -> Dict[str, Any]:
        value = self.extra.get("constraints")
        return dict(value) if isinstance(value, Mapping) else {}

    def wire_hint(self) -> Optional[str]:
        """Explicit ``extra.wire.protocol`` hint, when present."""
        wire = self.extra.get("wire")
        if isinstance(wire, Mapping) and wire.get("protocol"):
            return str(wire["protocol"])
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Model":
        """Build from a catalog record (``provider`` and ``id`` required)."""
        return cls(
            id=str(data["id"]),
            provider=str(data["provider"]),
            capabilities=dict(data.get("capabilities") or {}),
            modalities={k: list(v) for k, v in (data.get("modalities") or {}).items()},
            extra=dict(data.get("extra") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "provider": self.provider,
            "capabilities": dict(self.capabilities),
            "modalities": {k: list(v) for k, v in self.modalities.items()},
            "extra": dict(self.extra),
        }


__all__ = ["Model", "DEFAULT_CAPABILITIES"]
