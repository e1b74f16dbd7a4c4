"""Error taxonomy helpers and the model catalog."""
from __future__ import annotations

import json

import httpx
import pytest

from crux_wire.base.catalog import Model, ModelCatalog, get_default_catalog, parse_spec, set_default_catalog
from crux_wire.base.errors import ErrorCode, ProviderError, Result, classify_exception, to_provider_error


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("boom", request=request, response=response)


@pytest.mark.parametrize(
    "exc,code",
    [
        (ProviderError(ErrorCode.INVALID_PROMPT, "bad"), ErrorCode.INVALID_PROMPT),
        (TimeoutError("slow"), ErrorCode.TIMEOUT),
        (httpx.ReadTimeout("slow"), ErrorCode.TIMEOUT),
        (json.JSONDecodeError("Expecting value", "x", 0), ErrorCode.DECODE_ERROR),
        (_status_error(502), ErrorCode.HTTP_ERROR),
        (httpx.ConnectError("refused"), ErrorCode.TRANSPORT_ERROR),
        (ValueError("other"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_exception(exc, code):
    assert classify_exception(exc) is code  # nosec B101


def test_to_provider_error_keeps_status_and_attribution():
    err = to_provider_error(_status_error(503), provider="openai", model="gpt-4o")
    assert (err.code, err.status, err.provider, err.model) == (ErrorCode.HTTP_ERROR, 503, "openai", "gpt-4o")  # nosec B101
    assert err.details == {"exception": "HTTPStatusError"}  # nosec B101
    original = ProviderError(ErrorCode.TIMEOUT, "late")
    assert to_provider_error(original) is original  # nosec B101


def test_provider_error_views():
    err = ProviderError.http_error(429, provider="groq", model="llama", body="slow down")
    assert str(err) == "groq:llama http_error: API request failed (429)"  # nosec B101
    assert err.to_dict() == {"code": "http_error", "message": "API request failed (429)", "status": 429}  # nosec B101
    assert err.details["body"] == "slow down"  # nosec B101
    failed = ProviderError.validation_errors(["a: is required"])
    assert failed.to_dict()["errors"] == ["a: is required"]  # nosec B101


def test_result_contract():
    ok = Result.success(3)
    assert ok.ok and ok.unwrap() == 3  # nosec B101
    err = ProviderError.model_not_found("x:y")
    failed = Result.failure(err)
    assert not failed.ok and failed.value is None  # nosec B101
    with pytest.raises(ProviderError) as exc:
        failed.unwrap()
    assert exc.value is err  # nosec B101


# ------------------------------------------------------------------ catalog
def test_parse_spec_forms():
    assert parse_spec("openai:gpt-4o") == ("openai", "gpt-4o")  # nosec B101
    assert parse_spec("openrouter:meta/llama:free") == ("openrouter", "meta/llama:free")  # nosec B101
    assert parse_spec(("anthropic", "claude")) == ("anthropic", "claude")  # nosec B101
    for bad in ("gpt-4o", ":gpt", "openai:", ("openai",), 42, None):
        with pytest.raises(ProviderError) as exc:
            parse_spec(bad)
        assert exc.value.code is ErrorCode.MODEL_NOT_FOUND  # nosec B101


def test_seeded_catalog_lookup():
    catalog = ModelCatalog.seeded()
    mini = catalog.lookup("openai:gpt-4o-mini")
    assert mini.spec == "openai:gpt-4o-mini"  # nosec B101
    assert catalog.lookup(mini) is mini  # nosec B101
    assert catalog.lookup(("openai", "gpt-4o-mini")) is mini  # nosec B101
    assert "openai:o1" in catalog and "openai:nope" not in catalog  # nosec B101
    assert catalog.get("openai:nope") is None  # nosec B101
    assert {m.provider for m in catalog.models("anthropic")} == {"anthropic"}  # nosec B101
    assert len(catalog.models()) == len(catalog)  # nosec B101
    o1 = catalog.lookup("openai:o1")
    assert o1.constraints()["temperature"] == "unsupported"  # nosec B101


def test_model_record_defaults_and_round_trip():
    model = Model.from_dict(
        {
            "id": "custom",
            "provider": "openai",
            "modalities": {"input": ["text", "image"]},
            "extra": {"wire": {"protocol": "openai_responses"}},
        }
    )
    assert model.has("tools", "enabled") and model.has("streaming", "text")  # nosec B101
    assert model.supports_image_input()  # nosec B101
    assert model.wire_hint() == "openai_responses"  # nosec B101
    assert Model.from_dict(model.to_dict()) == model  # nosec B101
    disabled = Model(id="x", provider="openai", capabilities={"tools": {"enabled": False}})
    assert not disabled.has("tools", "enabled")  # nosec B101
    assert not disabled.has("streaming", "text")  # nosec B101


def test_load_file_variants(tmp_path):
    catalog = ModelCatalog()
    listed = tmp_path / "models.yaml"
    listed.write_text("- id: local-llm\n  provider: openai\n", encoding="utf-8")
    wrapped = tmp_path / "models.json"
    wrapped.write_text(json.dumps({"models": [{"id": "b", "provider": "groq"}, {"id": "c", "provider": "xai"}]}))
    assert catalog.load_file(listed) == 1  # nosec B101
    assert catalog.load_file(wrapped) == 2  # nosec B101
    assert len(catalog) == 3  # nosec B101
    broken = tmp_path / "broken.yaml"
    broken.write_text("models: 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        catalog.load_file(broken)


def test_register_replaces_existing_record():
    catalog = ModelCatalog([Model(id="m", provider="openai")])
    catalog.register(Model(id="m", provider="openai", extra={"kind": "embedding"}))
    assert len(catalog) == 1  # nosec B101
    assert catalog.lookup("openai:m").extra == {"kind": "embedding"}  # nosec B101


def test_default_catalog_loads_extra_models_file(tmp_path, monkeypatch):
    path = tmp_path / "extra.yaml"
    path.write_text("models:\n  - id: house-model\n    provider: openrouter\n", encoding="utf-8")
    monkeypatch.setenv("CRUX_WIRE_MODELS_FILE", str(path))
    set_default_catalog(None)
    default = get_default_catalog()
    assert "openrouter:house-model" in default  # nosec B101
    assert "openai:gpt-4o" in default  # nosec B101
    assert get_default_catalog() is default  # nosec B101
    custom = ModelCatalog()
    set_default_catalog(custom)
    assert get_default_catalog() is custom  # nosec B101
