from __future__ import annotations

import json

from crux_wire.config import get_provider_config, get_reasoning_budgets, read_structured_file, reset_config_cache
from crux_wire.config.defaults import ANTHROPIC_DEFAULT_BASE_URL, DEFAULT_REASONING_BUDGETS, OPENAI_DEFAULT_BASE_URL
from crux_wire.config.env import ENV_ALIASES, get_env_var_name, is_placeholder, resolve_provider_key


def _config_file(tmp_path, monkeypatch, text: str, name: str = "providers.yaml") -> None:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    monkeypatch.setenv("CRUX_WIRE_CONFIG_FILE", str(path))
    reset_config_cache()


def test_defaults_without_any_source():
    cfg = get_provider_config("openai")
    assert cfg == {"base_url": OPENAI_DEFAULT_BASE_URL}  # nosec B101
    assert get_provider_config("ANTHROPIC ")["base_url"] == ANTHROPIC_DEFAULT_BASE_URL  # nosec B101
    assert get_provider_config("unknown") == {}  # nosec B101


def test_env_then_overrides_win(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_BASE_URL", "http://proxy.local/v1")
    cfg = get_provider_config("openai", {"base_url": "http://override/v1", "api_key": None})
    assert cfg["api_key"] == "sk-env"  # nosec B101
    assert cfg["base_url"] == "http://override/v1"  # nosec B101


def test_yaml_file_with_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("MY_GROQ_SECRET", "gsk-from-file")
    _config_file(
        tmp_path,
        monkeypatch,
        "groq:\n  api_key: ${MY_GROQ_SECRET}\n  base_url: http://groq.internal/v1\n",
    )
    cfg = get_provider_config("groq")
    assert cfg == {"base_url": "http://groq.internal/v1", "api_key": "gsk-from-file"}  # nosec B101

    monkeypatch.setenv("GROQ_API_KEY", "gsk-env")
    assert get_provider_config("groq")["api_key"] == "gsk-env"  # nosec B101


def test_json_file_is_read_first(tmp_path, monkeypatch):
    _config_file(tmp_path, monkeypatch, json.dumps({"xai": {"base_url": "http://xai.local/v1"}}), "providers.json")
    assert get_provider_config("xai")["base_url"] == "http://xai.local/v1"  # nosec B101


def test_unreadable_config_file_is_logged_and_ignored(tmp_path, monkeypatch, log_records):
    _config_file(tmp_path, monkeypatch, "openai: [unclosed\n")
    assert get_provider_config("openai") == {"base_url": OPENAI_DEFAULT_BASE_URL}  # nosec B101
    assert any(r.get("event") == "config.file.error" for r in log_records)  # nosec B101


def test_placeholder_keys_are_dropped(tmp_path, monkeypatch):
    _config_file(tmp_path, monkeypatch, "openai:\n  api_key: your-openai-key\n")
    assert "api_key" not in get_provider_config("openai")  # nosec B101
    monkeypatch.setenv("ANTHROPIC_API_KEY", "changeme")
    assert "api_key" not in get_provider_config("anthropic")  # nosec B101


def test_dotenv_fills_unset_and_placeholder_values(tmp_path, monkeypatch):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# local secrets\n"
        "OPENAI_API_KEY=sk-from-dotenv\n"
        'export GROQ_API_KEY="gsk-dotenv"\n'
        "ANTHROPIC_API_KEY=sk-ant-dotenv\n"
        "not a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DOTENV_FILE", str(dotenv))
    # preset so teardown restores every variable the loader writes
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-here")
    monkeypatch.setenv("GROQ_API_KEY", "placeholder")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-real")
    reset_config_cache()

    assert get_provider_config("openai")["api_key"] == "sk-from-dotenv"  # nosec B101
    assert get_provider_config("groq")["api_key"] == "gsk-dotenv"  # nosec B101
    assert get_provider_config("anthropic")["api_key"] == "sk-ant-real"  # nosec B101


def test_reasoning_budgets_default_and_configured(tmp_path, monkeypatch, log_records):
    assert get_reasoning_budgets() == DEFAULT_REASONING_BUDGETS  # nosec B101
    assert DEFAULT_REASONING_BUDGETS == {"low": 1024, "medium": 2048, "high": 4096}  # nosec B101

    _config_file(
        tmp_path,
        monkeypatch,
        "anthropic:\n  reasoning_budgets:\n    high: 8192\n    low: lots\n",
    )
    assert get_reasoning_budgets() == {"low": 1024, "medium": 2048, "high": 8192}  # nosec B101
    assert any(r.get("event") == "config.reasoning_budget.invalid" for r in log_records)  # nosec B101


def test_read_structured_file(tmp_path):
    yaml_path = tmp_path / "models.yaml"
    yaml_path.write_text("- id: a\n  provider: openai\n", encoding="utf-8")
    assert read_structured_file(yaml_path) == [{"id": "a", "provider": "openai"}]  # nosec B101
    json_path = tmp_path / "models.json"
    json_path.write_text('{"models": []}', encoding="utf-8")
    assert read_structured_file(str(json_path)) == {"models": []}  # nosec B101


def test_env_helpers(monkeypatch):
    assert get_env_var_name("openai") == "OPENAI_API_KEY"  # nosec B101
    assert get_env_var_name("mistral") == "MISTRAL_API_KEY"  # nosec B101
    assert ENV_ALIASES["xai"][0] == "XAI_API_KEY"  # nosec B101
    assert is_placeholder("ChangeMe123") and is_placeholder("test_token")  # nosec B101
    assert not is_placeholder("sk-real") and not is_placeholder(None)  # nosec B101

    monkeypatch.setenv("GROK_API_KEY", "xai-alias")
    assert resolve_provider_key("xai") == ("xai-alias", "GROK_API_KEY")  # nosec B101
    monkeypatch.setenv("XAI_API_KEY", "xai-canonical")
    assert resolve_provider_key("xai") == ("xai-canonical", "XAI_API_KEY")  # nosec B101
    assert resolve_provider_key("openai") == (None, None)  # nosec B101
