"""
parameter-validation — structured logging.

File: src/parameter_validation/observability/logging.py

Purpose
- Write parser, factory, validator, and catalog decision events as JSON lines.

What should be included in this file
- One structlog processor chain shared by structlog loggers and plain stdlib records.
- Redaction of secret-looking keys and ``key=value`` assignments before rendering.
- Correlation fields bound through ``structlog.contextvars``.

Functional requirements
- Every line is a JSON object with sorted keys and compact separators.
- ``shutdown_logging`` detaches and closes every sink it attached.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor = Callable[[JSONValue], JSONValue]

_REDACTED_VALUE: Final[str] = "***REDACTED***"
_DEFAULT_LOGGER_NAME: Final[str] = "parameter_validation"

_SENSITIVE_KEY_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "passphrase",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "private_key",
)
_SENSITIVE_ASSIGNMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|authorization)\b\s*([:=])\s*([^\s,;]+)"
)

# Applied to structlog events before they are handed to stdlib, and to plain
# stdlib records inside the formatter.
_SHARED_PROCESSORS: Final[tuple[Processor, ...]] = (
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
)

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: StructuredLoggingHandle | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Configuration for JSON-lines logging of library decisions."""

    logger_name: str = _DEFAULT_LOGGER_NAME
    level: int | str = "INFO"
    log_file: Path | str | None = None
    log_to_stdout: bool = True
    redact_secrets: bool = True
    redactor: LogRedactor | None = None


class StructuredLoggingHandle:
    """Runtime handle for an active structured logging setup."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        log_path: Path | None,
        handlers: tuple[logging.Handler, ...],
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._handlers = handlers
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._is_shutdown:
                return
            for handler in self._handlers:
                self.logger.removeHandler(handler)
                handler.flush()
                handler.close()
            structlog.reset_defaults()
            self._is_shutdown = True


class _Redact:
    """Processor that masks secrets in every event value, after an optional custom pass."""

    __slots__ = ("_custom",)

    def __init__(self, custom: LogRedactor | None) -> None:
        self._custom = custom

    def __call__(
        self, logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        redacted: EventDict = {}
        for key, value in event_dict.items():
            if self._custom is not None:
                value = self._custom(value)
            redacted[key] = _redact_value(value, key_context=key)
        return redacted


def setup_logging(observability_config: Mapping[str, object] | None = None) -> logging.Logger:
    """Configure logging from an ``[observability]`` config section and return the logger."""

    cfg = dict(observability_config or {})
    raw_level = cfg.get("log_level", "INFO")
    raw_file = cfg.get("log_file")
    handle = setup_structured_logging(
        LoggingConfig(
            level=raw_level if isinstance(raw_level, (int, str)) else "INFO",
            log_file=raw_file if isinstance(raw_file, (str, Path)) else None,
            log_to_stdout=bool(cfg.get("log_to_stdout", True)),
            redact_secrets=bool(cfg.get("redact_secrets", True)),
        )
    )
    return handle.logger


def setup_structured_logging(config: LoggingConfig) -> StructuredLoggingHandle:
    """Attach JSON-lines sinks to the library logger and route ``structlog`` through them."""

    _shutdown_previous_active_handle()

    logger_name = _validate_logger_name(config.logger_name)
    level = _parse_log_level(config.level)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.ExtraAdder(),
            *_SHARED_PROCESSORS,
        ],
        processors=_render_chain(config),
    )

    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if config.log_file is not None:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if config.log_to_stdout:
        handlers.append(logging.StreamHandler())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handle = StructuredLoggingHandle(logger=logger, log_path=log_path, handlers=tuple(handlers))
    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = handle
    return handle


def shutdown_logging(handle: StructuredLoggingHandle | None = None) -> None:
    """Detach and close all sinks of ``handle`` (default: the active one)."""

    resolved = handle if handle is not None else get_active_logging_handle()
    if resolved is None:
        return
    resolved.shutdown()

    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        if _ACTIVE_HANDLE is resolved:
            _ACTIVE_HANDLE = None


def get_active_logging_handle() -> StructuredLoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


def get_correlation_context() -> dict[str, Any]:
    """Return the correlation fields bound in the current context."""

    return dict(structlog.contextvars.get_contextvars())


@contextmanager
def correlation_scope(**fields: str) -> Iterator[None]:
    """Bind correlation fields to every event logged in scope; outer values come back after."""

    cleaned: dict[str, str] = {}
    for key, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"correlation field {key!r} must be a non-empty string")
        cleaned[key] = value.strip()
    with structlog.contextvars.bound_contextvars(**cleaned):
        yield


def default_log_redactor(value: JSONValue) -> JSONValue:
    """Deep redaction of secret-looking keys and ``key=value`` assignments."""

    return _redact_value(value, key_context=None)


def _render_chain(config: LoggingConfig) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.processors.format_exc_info,
    ]
    if config.redact_secrets:
        chain.append(_Redact(config.redactor))
    chain.append(
        structlog.processors.JSONRenderer(
            sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    )
    return chain


def _shutdown_previous_active_handle() -> None:
    existing = get_active_logging_handle()
    if existing is not None:
        existing.shutdown()
    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = None


def _validate_logger_name(logger_name: str) -> str:
    if not isinstance(logger_name, str):
        raise ValueError(f"logger_name must be a string, got {type(logger_name).__name__}")
    normalized = logger_name.strip()
    if not normalized:
        raise ValueError("logger_name must not be empty")
    return normalized


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")
    parsed = logging.getLevelName(value.strip().upper())
    if isinstance(parsed, int):
        return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _redact_value(value: Any, *, key_context: str | None) -> Any:
    if key_context is not None and _requires_redaction_for_key(key_context):
        return _REDACTED_VALUE
    if isinstance(value, str):
        return _SENSITIVE_ASSIGNMENT_PATTERN.sub(
            lambda match: f"{match.group(1)}{match.group(2)}{_REDACTED_VALUE}", value
        )
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, key_context=None) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _redact_value(item, key_context=str(key)) for key, item in value.items()}
    return value


def _requires_redaction_for_key(key: str) -> bool:
    key_lower = key.lower()
    return any(term in key_lower for term in _SENSITIVE_KEY_TERMS)


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LogRedactor",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "correlation_scope",
    "default_log_redactor",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
