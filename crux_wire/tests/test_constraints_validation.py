"""Metadata constraints and request validation."""
from __future__ import annotations

import pytest

from crux_wire.base.catalog import Model
from crux_wire.base.constraints import apply_constraints
from crux_wire.base.errors import ErrorCode, ProviderError
from crux_wire.base.models import Context
from crux_wire.base.validation import model_kind, validate_request


def _model(**constraints):
    return Model(id="m", provider="openai", extra={"constraints": constraints})


def test_no_constraints_returns_copy():
    opts = {"max_tokens": 5}
    out = apply_constraints(Model(id="m", provider="openai"), opts)
    assert out == opts and out is not opts  # nosec B101


def test_token_limit_key_and_temperature_rules():
    out = apply_constraints(_model(token_limit_key="max_completion_tokens", temperature="fixed_1"), {"max_tokens": 10})
    assert out == {"max_completion_tokens": 10, "temperature": 1.0}  # nosec B101
    dropped = apply_constraints(_model(temperature="unsupported", sampling="unsupported"), {"temperature": 0.2, "top_p": 0.9, "top_k": 3})
    assert dropped == {}  # nosec B101


def test_min_output_tokens_and_reasoning_effort():
    out = apply_constraints(_model(min_output_tokens=256, reasoning_effort="required"), {"max_tokens": 16})
    assert out == {"max_tokens": 256, "reasoning_effort": "medium"}  # nosec B101
    untouched = apply_constraints(_model(min_output_tokens=256), {})
    assert untouched == {}  # nosec B101
    removed = apply_constraints(_model(reasoning_effort="unsupported"), {"reasoning_effort": "high"})
    assert removed == {}  # nosec B101


def test_model_kind_detection():
    assert model_kind(Model(id="e", provider="openai", extra={"kind": "embedding"})) == "embedding"  # nosec B101
    assert model_kind(Model(id="e", provider="openai", capabilities={"embeddings": True})) == "embedding"  # nosec B101
    assert model_kind(Model(id="r", provider="openai", capabilities={"reasoning": {"enabled": True}})) == "reasoning"  # nosec B101
    assert model_kind(Model(id="c", provider="openai")) == "chat"  # nosec B101


def test_embedding_models_only_embed():
    embed = Model(id="text-embedding-3-small", provider="openai", extra={"kind": "embedding"})
    with pytest.raises(ProviderError) as exc:
        validate_request(embed, "text", None, {})
    assert exc.value.code is ErrorCode.UNSUPPORTED_CAPABILITY  # nosec B101
    validate_request(embed, "embed", None, {})
    with pytest.raises(ProviderError):
        validate_request(Model(id="gpt-4o", provider="openai"), "embed", None, {})


def test_image_input_requires_modality():
    ctx = Context.new([Context.with_image("user", "what", "https://img")])
    text_only = Model(id="t", provider="openai", modalities={"input": ["text"]})
    with pytest.raises(ProviderError) as exc:
        validate_request(text_only, "text", ctx, {})
    assert "image" in exc.value.message  # nosec B101
    vision = Model(id="v", provider="openai", modalities={"input": ["text", "image"]})
    validate_request(vision, "text", ctx, {})


def test_tools_and_streaming_capabilities():
    no_tools = Model(id="n", provider="openai", capabilities={"streaming": {"text": True}, "tools": {"enabled": False}})
    with pytest.raises(ProviderError):
        validate_request(no_tools, "text", None, {"tools": [object()]})
    validate_request(no_tools, "text", None, {}, stream=True)
    no_stream = Model(id="s", provider="openai", capabilities={"chat": True})
    with pytest.raises(ProviderError) as exc:
        validate_request(no_stream, "text", None, {}, stream=True)
    assert "streaming" in exc.value.message  # nosec B101
