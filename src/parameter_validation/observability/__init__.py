"""
parameter-validation observability package.

File: src/parameter_validation/observability/__init__.py

Purpose
- Export structured logging setup used to record parser and validator decisions.

Functional requirements
- JSON-lines output with deterministic key ordering, rendered by structlog.
- Redaction of secret-looking keys before anything is written.
"""

from parameter_validation.observability.logging import (
    JSONScalar,
    JSONValue,
    LoggingConfig,
    LogRedactor,
    StructuredLoggingHandle,
    correlation_scope,
    default_log_redactor,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

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
