"""
parameter-validation — runtime config loader.

File: src/parameter_validation/config/loader.py

Purpose
- Produce the effective config that builds parsers, catalogs, and logging sinks.

What should be included in this file
- Layering of defaults, ``paramval.toml``, ``PARAMVAL_*`` variables, and dotted CLI overrides.
- The explicit table of environment variables and how each one is coerced.
- Anchoring of relative catalog and log file paths at the config file's directory.

Non-functional requirements
- The same inputs always produce the same effective config.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final, TypeAlias

from parameter_validation.config.schema import (
    PATH_FIELDS,
    assert_valid_config,
    default_config,
    merge_config,
)
from parameter_validation.constants import CONFIG_FILE_NAME, ENV_VAR_PREFIX

DEFAULT_CONFIG_FILE: Final[str] = CONFIG_FILE_NAME
ENV_PREFIX: Final[str] = ENV_VAR_PREFIX

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

_EnvCoercer: TypeAlias = Callable[[str, str], object]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config; precedence is CLI > env > file > defaults.

    Without ``config_path`` the loader looks for ``paramval.toml`` in the working
    directory and falls back to defaults when it is absent. An explicit path must exist.
    """

    source = _locate(config_path)
    layers = (
        _read_toml(source, required=config_path is not None),
        _env_layer(os.environ if environ is None else environ),
        _cli_layer(cli_overrides or {}),
    )
    effective: dict[str, Any] = dict(default_config())
    for layer in layers:
        effective = merge_config(effective, layer)
    return assert_valid_config(normalize_paths(effective, base_dir=source.parent))


def normalize_paths(config: Mapping[str, object], *, base_dir: Path) -> dict[str, Any]:
    """Anchor relative catalog and log file paths at ``base_dir``."""

    normalized = merge_config({}, config)
    for section, key in PATH_FIELDS:
        values = normalized.get(section)
        if isinstance(values, dict) and isinstance(values.get(key), str):
            values[key] = _anchor(values[key], base_dir)
    return normalized


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Return a deterministic JSON dump of the effective config."""

    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def env_variable_names() -> tuple[str, ...]:
    """Names of every environment variable the loader reads, in lookup order."""

    return tuple(_env_name(field) for field, _ in _ENV_FIELDS)


def _locate(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for (section, key), coerce in _ENV_FIELDS:
        env_name = _env_name((section, key))
        raw = environ.get(env_name)
        if raw is not None:
            layer.setdefault(section, {})[key] = coerce(raw.strip(), env_name)
    return layer


def _cli_layer(overrides: Mapping[str, object]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for dotted in sorted(overrides):
        parts = [part for part in dotted.split(".") if part]
        if not parts:
            raise ConfigLoadError(f"invalid CLI override key {dotted!r}")
        cursor = layer
        for part in parts[:-1]:
            nested = cursor.get(part)
            if not isinstance(nested, dict):
                nested = cursor[part] = {}
            cursor = nested
        cursor[parts[-1]] = overrides[dotted]
    return layer


def _anchor(raw: str, base_dir: Path) -> str:
    candidate = Path(os.path.expandvars(raw)).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return Path(os.path.normpath(candidate)).as_posix()


def _env_name(field: tuple[str, str]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in field)


def _env_text(raw: str, env_name: str) -> str:
    return raw


def _env_level(raw: str, env_name: str) -> str:
    return raw.upper()


def _env_int(raw: str, env_name: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigLoadError(f"{env_name}: must be an integer, got {raw!r}") from exc


def _env_flag(raw: str, env_name: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ConfigLoadError(
        f"{env_name}: must be a boolean (true/false/1/0/yes/no/on/off), got {raw!r}"
    )


def _env_handler_paths(raw: str, env_name: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


_ENV_FIELDS: Final[tuple[tuple[tuple[str, str], _EnvCoercer], ...]] = (
    (("meta", "schema_version"), _env_int),
    (("parser", "unknown_constraint_handlers"), _env_handler_paths),
    (("catalog", "path"), _env_text),
    (("observability", "log_level"), _env_level),
    (("observability", "log_file"), _env_text),
    (("observability", "log_to_stdout"), _env_flag),
    (("observability", "redact_secrets"), _env_flag),
)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "ConfigLoadError",
    "dump_effective_config",
    "env_variable_names",
    "load_config",
    "normalize_paths",
]
