"""
parameter-validation — unit tests for observability logging

File: tests/unit/observability/test_logging.py

Purpose
- Validate structured JSON logging with redaction, correlation metadata, and structlog routing.

What this test file should cover
- JSON line validity and redaction guarantees.
- Correlation field propagation.
- Library decision events reaching the configured sinks.
- Shutdown behavior.

Non-functional requirements
- Deterministic and non-flaky.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
import structlog

from parameter_validation.domain.data_types import ParameterDataType as DT
from parameter_validation.observability import (
    LoggingConfig,
    correlation_scope,
    default_log_redactor,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)
from parameter_validation.validation import ParameterCatalog, ParameterValidator

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _cleanup_logging() -> Iterator[None]:
    yield
    shutdown_logging()


def _logger_name() -> str:
    return f"parameter_validation.tests.logging.{uuid4().hex}"


def _read_json_lines(path: Path) -> list[dict[str, object]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    for line, event in zip(lines, events, strict=True):
        assert line == json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return events


def _flush_active() -> None:
    handle = get_active_logging_handle()
    assert handle is not None
    handle.flush()


def test_json_lines_are_canonical_and_redacted(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "paramval.jsonl"
    handle = setup_structured_logging(
        LoggingConfig(logger_name=_logger_name(), log_file=log_path, log_to_stdout=False)
    )

    handle.logger.info(
        "connecting with token=abc123",
        extra={"api_key": "k-1", "attempt": 2, "nested": {"password": "p", "ok": "v"}},
    )
    handle.flush()

    (event,) = _read_json_lines(log_path)
    assert event == {
        "event": "connecting with token=***REDACTED***",
        "level": "info",
        "logger": handle.logger.name,
        "timestamp": event["timestamp"],
        "api_key": "***REDACTED***",
        "attempt": 2,
        "nested": {"password": "***REDACTED***", "ok": "v"},
    }
    assert str(event["timestamp"]).endswith("Z")


def test_redaction_can_be_disabled(tmp_path: Path) -> None:
    log_path = tmp_path / "plain.jsonl"
    handle = setup_structured_logging(
        LoggingConfig(
            logger_name=_logger_name(),
            log_file=log_path,
            log_to_stdout=False,
            redact_secrets=False,
        )
    )
    handle.logger.warning("password=hunter2")
    handle.flush()

    (event,) = _read_json_lines(log_path)
    assert event["event"] == "password=hunter2"
    assert event["level"] == "warning"


def test_custom_redactor_composes_with_default(tmp_path: Path) -> None:
    def mask_hosts(value: object) -> object:
        if isinstance(value, str):
            return value.replace("db.internal", "<host>")
        return value

    log_path = tmp_path / "custom.jsonl"
    handle = setup_structured_logging(
        LoggingConfig(
            logger_name=_logger_name(),
            log_file=log_path,
            log_to_stdout=False,
            redactor=mask_hosts,  # type: ignore[arg-type]
        )
    )
    handle.logger.info("db.internal secret=s3")
    handle.flush()

    (event,) = _read_json_lines(log_path)
    assert event["event"] == "<host> secret=***REDACTED***"


def test_correlation_scope_binds_and_restores_fields(tmp_path: Path) -> None:
    log_path = tmp_path / "correlated.jsonl"
    handle = setup_structured_logging(
        LoggingConfig(logger_name=_logger_name(), log_file=log_path, log_to_stdout=False)
    )

    with correlation_scope(catalog="settings.yaml"):
        with correlation_scope(setting=" port "):
            assert get_correlation_context() == {"catalog": "settings.yaml", "setting": "port"}
            handle.logger.info("inner")
            with correlation_scope(catalog="other.yaml"):
                handle.logger.info("rebound")
        handle.logger.info("outer")
    handle.logger.info("after")
    handle.flush()

    inner, rebound, outer, after = _read_json_lines(log_path)
    assert (inner["catalog"], inner["setting"]) == ("settings.yaml", "port")
    assert (rebound["catalog"], rebound["setting"]) == ("other.yaml", "port")
    assert outer["catalog"] == "settings.yaml"
    assert "setting" not in outer
    assert "catalog" not in after
    assert get_correlation_context() == {}


@pytest.mark.parametrize("value", [" ", "", None, 3])
def test_correlation_fields_must_be_non_empty_strings(value: object) -> None:
    with pytest.raises(ValueError, match="correlation field 'setting' must be a non-empty string"):
        with correlation_scope(setting=value):  # type: ignore[arg-type]
            pass
    assert get_correlation_context() == {}


def test_structlog_events_reach_the_json_sink(tmp_path: Path) -> None:
    log_path = tmp_path / "decisions.jsonl"
    setup_logging({"log_level": "INFO", "log_file": str(log_path), "log_to_stdout": False})

    validator = ParameterValidator()
    validator.get_validation_results(70000, DT.INT32, "[MaxValue(65535)]", "port")
    _flush_active()

    events = [
        event
        for event in _read_json_lines(log_path)
        if event["event"] == "parameter_validation_failed"
    ]
    assert len(events) == 1
    (event,) = events
    assert str(event["logger"]).startswith("parameter_validation")
    assert event["level"] == "info"
    assert event["member_name"] == "port"
    assert event["data_type"] == "Int32"
    assert event["codes"] == ["value_too_large"]
    assert "catalog" not in event


def test_catalog_validation_events_name_the_catalog_and_setting(tmp_path: Path) -> None:
    source = tmp_path / "settings.yaml"
    source.write_text(
        "- name: port\n  data_type: Int32\n  constraints: '[MaxValue(65535)]'\n  value: 70000\n"
        "- name: host\n  data_type: String\n  constraints: '[MinLength(1)]'\n  value: db\n",
        encoding="utf-8",
    )
    log_path = tmp_path / "catalog.jsonl"
    setup_logging({"log_level": "INFO", "log_file": str(log_path), "log_to_stdout": False})

    failures = ParameterCatalog.load(source).validate(ParameterValidator())
    _flush_active()

    assert list(failures) == ["port"]
    (event,) = [
        event
        for event in _read_json_lines(log_path)
        if event["event"] == "parameter_validation_failed"
    ]
    assert event["catalog"] == "settings.yaml"
    assert event["setting"] == "port"
    assert event["member_name"] == "port"
    assert get_correlation_context() == {}


def test_level_threshold_filters_debug_events(tmp_path: Path) -> None:
    log_path = tmp_path / "filtered.jsonl"
    setup_logging({"log_level": "WARNING", "log_file": str(log_path), "log_to_stdout": False})

    structlog.get_logger("parameter_validation.tests").info("not_written")
    structlog.get_logger("parameter_validation.tests").warning("written", reason="check")
    _flush_active()

    (event,) = _read_json_lines(log_path)
    assert event["event"] == "written"
    assert event["level"] == "warning"
    assert event["logger"] == "parameter_validation.tests"
    assert event["reason"] == "check"


def test_setup_replaces_previous_handle_and_shutdown_is_idempotent(tmp_path: Path) -> None:
    name = _logger_name()
    first = setup_structured_logging(
        LoggingConfig(logger_name=name, log_file=tmp_path / "a.jsonl", log_to_stdout=False)
    )
    second = setup_structured_logging(
        LoggingConfig(logger_name=name, log_file=tmp_path / "b.jsonl", log_to_stdout=False)
    )

    assert first.is_shutdown
    assert get_active_logging_handle() is second
    assert len(logging.getLogger(name).handlers) == 1

    shutdown_logging()
    assert second.is_shutdown
    assert get_active_logging_handle() is None
    assert logging.getLogger(name).handlers == []
    shutdown_logging()
    second.shutdown()


def test_invalid_logging_config_is_rejected() -> None:
    with pytest.raises(ValueError, match="unsupported logging level"):
        setup_structured_logging(LoggingConfig(logger_name=_logger_name(), level="LOUD"))
    with pytest.raises(ValueError, match="logger_name must not be empty"):
        setup_structured_logging(LoggingConfig(logger_name="  "))


def test_default_redactor_walks_nested_values() -> None:
    payload = {
        "items": [{"Authorization": "Bearer x"}, "apikey: 42"],
        "count": 3,
    }
    assert default_log_redactor(payload) == {
        "items": [{"Authorization": "***REDACTED***"}, "apikey:***REDACTED***"],
        "count": 3,
    }
