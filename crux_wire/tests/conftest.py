"""Fixtures for the crux_wire test suite.

Provides an isolated environment (no provider keys, no config file, no
``.env``), a seeded model catalog with a few extra test models, and capture
of the structured events emitted on the ``crux_wire`` logger tree.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from crux_wire.base.catalog import Model, ModelCatalog, set_default_catalog
from crux_wire.config import reset_config_cache

_PROVIDER_ENV = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GROQ_API_KEY",
    "OPENROUTER_API_KEY",
    "XAI_API_KEY",
    "GROK_API_KEY",
    "OPENAI_BASE_URL",
    "ANTHROPIC_BASE_URL",
    "GROQ_BASE_URL",
    "CRUX_WIRE_CONFIG_FILE",
    "CRUX_WIRE_MODELS_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path) -> Iterator[None]:
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()
    set_default_catalog(None)


@pytest.fixture()
def api_keys(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-openai")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-live")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-live")
    reset_config_cache()


@pytest.fixture()
def catalog() -> ModelCatalog:
    cat = ModelCatalog.seeded()
    cat.register(
        Model(
            id="text-only-chat",
            provider="openai",
            capabilities={"chat": True, "streaming": {"text": True}, "tools": {"enabled": False}},
        )
    )
    cat.register(
        Model(
            id="llama-3.1-8b-instant",
            provider="groq",
            capabilities={"chat": True, "streaming": {"text": True}, "tools": {"enabled": True}},
        )
    )
    return cat


@pytest.fixture()
def log_records() -> Iterator[List[Dict[str, Any]]]:
    """Decoded JSON payloads of every record reaching the ``crux_wire`` logger."""
    records: List[Dict[str, Any]] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                records.append(json.loads(record.getMessage()))
            except json.JSONDecodeError:
                records.append({"msg": record.getMessage()})

    logger = logging.getLogger("crux_wire")
    handler = _ListHandler(level=logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield records
    finally:
        logger.removeHandler(handler)
