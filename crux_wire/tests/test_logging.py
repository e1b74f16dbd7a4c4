"""Unit coverage for structured logging utilities and helpers."""

from __future__ import annotations

import json
import logging

from crux_wire.base.log_support import JsonFormatter
from crux_wire.base.logging import (
    BASE_LOGGER_NAME,
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def test_child_loggers_propagate_to_the_base_logger(log_records):
    child = get_logger("crux_wire.tests.child")
    base = logging.getLogger(BASE_LOGGER_NAME)
    assert child.propagate and not base.propagate  # nosec B101
    log_event(child, "unit.event", LogContext(provider="openai"), value=1, dropped=None)
    assert log_records[-1] == {"event": "unit.event", "provider": "openai", "value": 1}  # nosec B101


def test_env_level_gates_events(monkeypatch, log_records):
    monkeypatch.setenv("CRUX_WIRE_LOG_LEVEL", "ERROR")
    try:
        logger = get_logger("crux_wire.tests.level", level=logging.DEBUG)
        log_event(logger, "quiet.event")
        log_event(logger, "loud.event", level=logging.ERROR)
        assert [r["event"] for r in log_records] == ["loud.event"]  # nosec B101
    finally:
        monkeypatch.delenv("CRUX_WIRE_LOG_LEVEL")
        get_logger()


def test_normalized_log_event_includes_required_keys(log_records):
    logger = get_logger("crux_wire.tests.normalized")
    ctx = LogContext(provider="p", model="m", request_id="r1")
    normalized_log_event(
        logger,
        "stream.end",
        ctx,
        phase="finalize",
        emitted=True,
        tokens={"input_tokens": 1, "output_tokens": 2, "total_tokens": 3},
        extra_field=123,
        skipped=None,
    )
    payload = log_records[-1]
    for key in REQUIRED_NORMALIZED_KEYS:
        if key != "error_code":
            assert key in payload  # nosec B101
    assert "error_code" not in payload  # nosec B101
    assert payload["attempt"] is None  # nosec B101
    assert payload["extra_field"] == 123  # nosec B101
    assert "skipped" not in payload  # nosec B101
    assert (payload["provider"], payload["model"], payload["request_id"]) == ("p", "m", "r1")  # nosec B101


def test_normalized_event_does_not_overwrite_canonical_keys(log_records):
    logger = get_logger("crux_wire.tests.overwrite")
    normalized_log_event(logger, "x", phase="start", error_code="timeout", tokens=[("input_tokens", 4)])
    payload = log_records[-1]
    assert payload["error_code"] == "timeout"  # nosec B101
    assert payload["tokens"] == {"input_tokens": 4}  # nosec B101


def test_json_formatter_hoists_json_message():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="crux_wire.test.json",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=json.dumps({"provider": "openai", "event": "request.start"}),
        args=(),
        exc_info=None,
    )
    data = json.loads(formatter.format(record))
    assert data["event"] == "request.start" and data["provider"] == "openai"  # nosec B101
    assert data["level"] == "INFO" and data["logger"] == "crux_wire.test.json"  # nosec B101
    assert "msg" not in data  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    target = tmp_path / "logs" / "wire.log"
    logger = configure_logger(level="DEBUG", file_path=str(target))
    try:
        assert logger.level == logging.DEBUG  # nosec B101
        log_event(get_logger("crux_wire.tests.file"), "file.event", level=logging.DEBUG, n=2)
        lines = target.read_text(encoding="utf-8").strip().splitlines()
        data = json.loads(lines[-1])
        assert data["event"] == "file.event" and data["n"] == 2  # nosec B101
    finally:
        configure_logger(level=logging.INFO, file_path=None)
    assert not [h for h in logger.handlers if isinstance(h, logging.FileHandler)]  # nosec B101
