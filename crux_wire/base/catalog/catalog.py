"""
In-memory model catalog.

Purpose:
    Map model spec strings (``"provider:id"``), ``(provider, id)`` tuples or
    ready :class:`Model` instances to catalog records. The process-default
    catalog is seeded with well-known OpenAI and Anthropic models and extended
    from the JSON/YAML file named by ``CRUX_WIRE_MODELS_FILE`` when set.

Notes:
    Lookups never guess: an unknown or malformed spec raises
    ``model_not_found`` carrying the original spec.
"""
from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..errors import ProviderError
from .model import Model

ModelSpec = Union[str, Tuple[str, str], Model]

_CHAT_TEXT = {"input": ["text"], "output": ["text"]}
_CHAT_VISION = {"input": ["text", "image"], "output": ["text"]}

_CHAT_CAPS: Dict[str, Any] = {
    "chat": True,
    "streaming": {"text": True, "tool_calls": True},
    "tools": {"enabled": True, "streaming": True, "parallel": True},
    "json": {"native": True, "schema": True, "strict": True},
}
_REASONING_CAPS: Dict[str, Any] = {**_CHAT_CAPS, "reasoning": {"enabled": True}}
_EMBED_CAPS: Dict[str, Any] = {"embeddings": True}

_SEED: List[Dict[str, Any]] = [
    {"provider": "openai", "id": "gpt-4o-mini", "capabilities": _CHAT_CAPS, "modalities": _CHAT_VISION},
    {"provider": "openai", "id": "gpt-4o", "capabilities": _CHAT_CAPS, "modalities": _CHAT_VISION},
    {"provider": "openai", "id": "gpt-4.1", "capabilities": _CHAT_CAPS, "modalities": _CHAT_VISION},
    {"provider": "openai", "id": "gpt-4.1-mini", "capabilities": _CHAT_CAPS, "modalities": _CHAT_VISION},
    {
        "provider": "openai",
        "id": "o1",
        "capabilities": _REASONING_CAPS,
        "modalities": _CHAT_VISION,
        "extra": {"constraints": {"temperature": "unsupported", "token_limit_key": "max_completion_tokens"}},
    },
    {
        "provider": "openai",
        "id": "o3-mini",
        "capabilities": _REASONING_CAPS,
        "modalities": _CHAT_TEXT,
        "extra": {"constraints": {"temperature": "unsupported", "token_limit_key": "max_completion_tokens"}},
    },
    {
        "provider": "openai",
        "id": "o4-mini",
        "capabilities": _REASONING_CAPS,
        "modalities": _CHAT_VISION,
        "extra": {"constraints": {"temperature": "unsupported", "token_limit_key": "max_completion_tokens"}},
    },
    {
        "provider": "openai",
        "id": "gpt-5",
        "capabilities": _REASONING_CAPS,
        "modalities": _CHAT_VISION,
        "extra": {"constraints": {"temperature": "unsupported", "token_limit_key": "max_completion_tokens"}},
    },
    {
        "provider": "openai",
        "id": "gpt-5-mini",
        "capabilities": _REASONING_CAPS,
        "modalities": _CHAT_VISION,
        "extra": {"constraints": {"temperature": "unsupported", "token_limit_key": "max_completion_tokens"}},
    },
    {"provider": "openai", "id": "text-embedding-3-small", "capabilities": _EMBED_CAPS, "extra": {"kind": "embedding"}},
    {"provider": "openai", "id": "text-embedding-3-large", "capabilities": _EMBED_CAPS, "extra": {"kind": "embedding"}},
    {"provider": "anthropic", "id": "claude-3-5-haiku-20241022", "capabilities": _CHAT_CAPS, "modalities": _CHAT_VISION},
    {"provider": "anthropic", "id": "claude-sonnet-4-20250514", "capabilities": _REASONING_CAPS, "modalities": _CHAT_VISION},
    {"provider": "anthropic", "id": "claude-opus-4-1-20250805", "capabilities": _REASONING_CAPS, "modalities": _CHAT_VISION},
]


def parse_spec(spec: Any) -> Tuple[str, str]:
    """Split a spec into ``(provider, id)``.

    Raises:
        ProviderError: ``model_not_found`` for anything other than a non-empty
            ``provider:id`` string or a two-string tuple.
    """
    if isinstance(spec, tuple) and len(spec) == 2 and all(isinstance(p, str) and p for p in spec):
        return spec[0], spec[1]
    if isinstance(spec, str):
        provider, sep, model_id = spec.partition(":")
        if sep and provider and model_id:
            return provider, model_id
    raise ProviderError.model_not_found(spec)


class ModelCatalog:
    """Thread-safe registry of :class:`Model` records keyed by ``(provider, id)``."""

    def __init__(self, models: Iterable[Model] = ()) -> None:
        self._models: Dict[Tuple[str, str], Model] = {}
        self._lock = threading.RLock()
        for model in models:
            self.register(model)

    @classmethod
    def seeded(cls) -> "ModelCatalog":
        return cls(Model.from_dict(record) for record in _SEED)

    def register(self, model: Model) -> Model:
        with self._lock:
            self._models[(model.provider, model.id)] = model
        return model

    def lookup(self, spec: ModelSpec) -> Model:
        """Resolve ``spec`` to a Model.

        Raises:
            ProviderError: ``model_not_found`` with the original spec.
        """
        if isinstance(spec, Model):
            return spec
        key = parse_spec(spec)
        with self._lock:
            model = self._models.get(key)
        if model is None:
            raise ProviderError.model_not_found(spec)
        return model

    def get(self, spec: ModelSpec) -> Optional[Model]:
        try:
            return self.lookup(spec)
        except ProviderError:
            return None

    def models(self, provider: Optional[str] = None) -> List[Model]:
        with self._lock:
            items = list(self._models.values())
        return [m for m in items if provider is None or m.provider == provider]

    def load_records(self, records: Iterable[Mapping[str, Any]]) -> int:
        count = 0
        for record in records:
            self.register(Model.from_dict(record))
            count += 1
        return count

    def load_file(self, path: Union[str, Path]) -> int:
        """Register every model record from a JSON or YAML list file.

        The file holds either a list of records or ``{"models": [...]}``.

        Returns:
            int: Number of models registered.
        """
        from ...config import read_structured_file

        data = read_structured_file(path)
        if isinstance(data, Mapping):
            data = data.get("models")
        if not isinstance(data, list):
            raise ValueError(f"model file {path} must contain a list of model records")
        return self.load_records(data)

    def __contains__(self, spec: object) -> bool:
        return self.get(spec) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._models)


_DEFAULT: Optional[ModelCatalog] = None
_DEFAULT_LOCK = threading.Lock()


def get_default_catalog() -> ModelCatalog:
    """Return the process-default catalog, creating it on first use."""
    global _DEFAULT
    if _DEFAULT is not None:
        return _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            catalog = ModelCatalog.seeded()
            extra_file = os.getenv("CRUX_WIRE_MODELS_FILE")
            if extra_file and Path(extra_file).exists():
                catalog.load_file(extra_file)
            _DEFAULT = catalog
    return _DEFAULT


def set_default_catalog(catalog: Optional[ModelCatalog]) -> None:
    """Replace (or with ``None`` reset) the process-default catalog."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = catalog


__all__ = ["ModelCatalog", "ModelSpec", "parse_spec", "get_default_catalog", "set_default_catalog"]
