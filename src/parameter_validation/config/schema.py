"""
parameter-validation — configuration schema and validation.

File: src/parameter_validation/config/schema.py

Purpose
- Define the defaults and field rules of ``paramval.toml``.

What should be included in this file
- One rule table per section: field name, whether it is required, and its check.
- Schema versioning and migration guidance.
- Deep merge used to layer defaults, file, env, and CLI values.

Functional requirements
- Validate config payloads and return structured errors (field path + message).
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, NotRequired, TypeAlias, TypedDict

from parameter_validation.constants import CONFIG_SCHEMA_VERSION

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

PATH_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("catalog", "path"),
    ("observability", "log_file"),
)


class MetaConfig(TypedDict):
    schema_version: int


class ParserConfig(TypedDict):
    unknown_constraint_handlers: list[str]


class CatalogConfig(TypedDict):
    path: NotRequired[str]


class ObservabilityConfig(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_to_stdout: bool
    redact_secrets: bool
    log_file: NotRequired[str]


class ParameterValidationConfig(TypedDict):
    meta: MetaConfig
    parser: ParserConfig
    catalog: CatalogConfig
    observability: ObservabilityConfig


DEFAULT_CONFIG: Final[ParameterValidationConfig] = {
    "meta": {"schema_version": ConfigSchemaVersion},
    "parser": {"unknown_constraint_handlers": []},
    "catalog": {},
    "observability": {
        "log_level": "INFO",
        "log_to_stdout": False,
        "redact_secrets": True,
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


_Issues: TypeAlias = list[ConfigValidationIssue]
_FieldCheck: TypeAlias = Callable[[object, str, _Issues], Any]


@dataclass(frozen=True, slots=True)
class _FieldRule:
    name: str
    check: _FieldCheck
    required: bool = True


def default_config() -> ParameterValidationConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade paramval.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade the parameter-validation package"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto a copy of ``base``; neither input is modified."""

    merged: dict[str, Any] = {key: _copy_value(value) for key, value in base.items()}
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = _copy_value(value)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate config and return structured issues in section and rule order."""

    issues: _Issues = []
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=tuple(issues))

    _check_keys(root, _SECTION_RULES.keys(), _REQUIRED_SECTIONS, "", issues)
    normalized: dict[str, Any] = {}
    for section, rules in _SECTION_RULES.items():
        raw = root.get(section)
        if raw is None:
            continue
        payload = _as_object(raw, section, issues)
        if payload is not None:
            normalized[section] = _validate_section(section, payload, rules, issues)
    normalized.setdefault("catalog", {})

    if issues:
        return ConfigValidationResult(config=None, issues=tuple(issues))
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _validate_section(
    section: str,
    payload: Mapping[str, object],
    rules: tuple[_FieldRule, ...],
    issues: _Issues,
) -> dict[str, Any]:
    required = {rule.name for rule in rules if rule.required}
    _check_keys(payload, [rule.name for rule in rules], required, section, issues)

    out: dict[str, Any] = {}
    for rule in rules:
        if rule.name not in payload:
            continue
        checked = rule.check(payload[rule.name], f"{section}.{rule.name}", issues)
        if checked is not None:
            out[rule.name] = checked
    return out


def _check_keys(
    payload: Mapping[str, object],
    allowed: Iterable[str],
    required: Iterable[str],
    path: str,
    issues: _Issues,
) -> None:
    known = set(allowed)
    for key in sorted(payload):
        if key not in known:
            issues.append(ConfigValidationIssue(_join(path, key), "unknown field"))
    for key in sorted(required):
        if key not in payload:
            issues.append(ConfigValidationIssue(_join(path, key), "missing required field"))


def _check_schema_version(value: object, path: str, issues: _Issues) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.append(ConfigValidationIssue(path, f"expected integer, got {type(value).__name__}"))
        return None
    if value < 1:
        issues.append(ConfigValidationIssue(path, "must be >= 1"))
        return None
    if value != ConfigSchemaVersion:
        issues.append(ConfigValidationIssue(path, migration_guidance(value)))
    return value


def _check_handler_paths(value: object, path: str, issues: _Issues) -> list[str] | None:
    if not isinstance(value, (list, tuple)):
        issues.append(ConfigValidationIssue(path, f"expected array, got {type(value).__name__}"))
        return None
    handlers: list[str] = []
    for index, item in enumerate(value):
        item_path = f"{path}[{index}]"
        text = _check_text(item, item_path, issues)
        if text is None:
            continue
        module_name, separator, attribute = text.partition(":")
        if not separator or not module_name or not attribute:
            issues.append(
                ConfigValidationIssue(
                    item_path, "must be an import path (example: my_package.handlers:resolve)"
                )
            )
            continue
        handlers.append(text)
    return handlers


def _check_path(value: object, path: str, issues: _Issues) -> str | None:
    text = _check_text(value, path, issues)
    if text is not None and "\x00" in text:
        issues.append(ConfigValidationIssue(path, "must not contain NUL bytes"))
        return None
    return text


def _check_log_level(value: object, path: str, issues: _Issues) -> str | None:
    text = _check_text(value, path, issues)
    if text is not None and text not in LOG_LEVELS:
        expected = ", ".join(sorted(LOG_LEVELS))
        issues.append(
            ConfigValidationIssue(path, f"invalid value {text!r}; expected one of: {expected}")
        )
        return None
    return text


def _check_flag(value: object, path: str, issues: _Issues) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.append(ConfigValidationIssue(path, f"expected boolean, got {type(value).__name__}"))
    return None


def _check_text(value: object, path: str, issues: _Issues) -> str | None:
    if not isinstance(value, str):
        issues.append(ConfigValidationIssue(path, f"expected string, got {type(value).__name__}"))
        return None
    text = value.strip()
    if not text:
        issues.append(ConfigValidationIssue(path, "must not be empty"))
        return None
    return text


def _as_object(value: object, path: str, issues: _Issues) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.append(ConfigValidationIssue(path, f"expected object, got {type(value).__name__}"))
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.append(
                ConfigValidationIssue(
                    path, f"object key must be string, got {type(key).__name__}"
                )
            )
            continue
        out[key] = item
    return out


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _copy_value(value: object) -> Any:
    if isinstance(value, Mapping):
        return merge_config({}, value)
    return copy.deepcopy(value)


_SECTION_RULES: Final[dict[str, tuple[_FieldRule, ...]]] = {
    "meta": (_FieldRule("schema_version", _check_schema_version),),
    "parser": (_FieldRule("unknown_constraint_handlers", _check_handler_paths),),
    "catalog": (_FieldRule("path", _check_path, required=False),),
    "observability": (
        _FieldRule("log_level", _check_log_level),
        _FieldRule("log_to_stdout", _check_flag),
        _FieldRule("redact_secrets", _check_flag),
        _FieldRule("log_file", _check_path, required=False),
    ),
}
_REQUIRED_SECTIONS: Final[frozenset[str]] = frozenset({"meta", "parser", "observability"})


__all__ = [
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "ParameterValidationConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
