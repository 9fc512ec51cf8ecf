"""
parameter-validation — unit tests for config loader

File: tests/unit/config/test_loader.py

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Deterministic env var path mapping and type coercion.
- Path normalization relative to the config file.
- Deterministic effective config dumping.

Non-functional requirements
- Deterministic output across repeated loads.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from parameter_validation.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    env_variable_names,
    load_config,
)
from parameter_validation.config.schema import ConfigValidationError


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "paramval.toml"
    default_path = tmp_path / "default.toml"
    _write_config(default_path, "")
    _write_config(
        config_path,
        """
[observability]
log_level = "WARNING"
""".strip(),
    )

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ={"PARAMVAL_OBSERVABILITY_LOG_LEVEL": "ERROR"})
    cli_loaded = load_config(
        config_path,
        environ={"PARAMVAL_OBSERVABILITY_LOG_LEVEL": "ERROR"},
        cli_overrides={"observability.log_level": "DEBUG"},
    )

    assert default_loaded["observability"]["log_level"] == "INFO"
    assert file_loaded["observability"]["log_level"] == "WARNING"
    assert env_loaded["observability"]["log_level"] == "ERROR"
    assert cli_loaded["observability"]["log_level"] == "DEBUG"


def test_env_mapping_coerces_booleans_lists_and_optional_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "paramval.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={
            "PARAMVAL_OBSERVABILITY_LOG_TO_STDOUT": "yes",
            "PARAMVAL_OBSERVABILITY_REDACT_SECRETS": "off",
            "PARAMVAL_PARSER_UNKNOWN_CONSTRAINT_HANDLERS": "pkg.a:one, pkg.b:two,",
            "PARAMVAL_CATALOG_PATH": "settings/catalog.yaml",
            "PARAMVAL_UNRELATED": "ignored",
        },
    )

    assert loaded["observability"]["log_to_stdout"] is True
    assert loaded["observability"]["redact_secrets"] is False
    assert loaded["parser"]["unknown_constraint_handlers"] == ["pkg.a:one", "pkg.b:two"]
    expected = tmp_path.resolve() / "settings" / "catalog.yaml"
    assert loaded["catalog"]["path"] == expected.as_posix()


def test_invalid_env_coercion_raises_actionable_error(tmp_path: Path) -> None:
    config_path = tmp_path / "paramval.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigLoadError, match="PARAMVAL_META_SCHEMA_VERSION"):
        load_config(config_path, environ={"PARAMVAL_META_SCHEMA_VERSION": "one"})
    with pytest.raises(ConfigLoadError, match="must be a boolean"):
        load_config(config_path, environ={"PARAMVAL_OBSERVABILITY_LOG_TO_STDOUT": "maybe"})


def test_env_table_lists_every_variable_and_upper_cases_levels(tmp_path: Path) -> None:
    assert env_variable_names() == (
        "PARAMVAL_META_SCHEMA_VERSION",
        "PARAMVAL_PARSER_UNKNOWN_CONSTRAINT_HANDLERS",
        "PARAMVAL_CATALOG_PATH",
        "PARAMVAL_OBSERVABILITY_LOG_LEVEL",
        "PARAMVAL_OBSERVABILITY_LOG_FILE",
        "PARAMVAL_OBSERVABILITY_LOG_TO_STDOUT",
        "PARAMVAL_OBSERVABILITY_REDACT_SECRETS",
    )

    config_path = tmp_path / "paramval.toml"
    _write_config(config_path, "")
    loaded = load_config(
        config_path,
        environ={
            "PARAMVAL_OBSERVABILITY_LOG_LEVEL": " error ",
            "PARAMVAL_META_SCHEMA_VERSION": "1",
        },
    )
    assert loaded["observability"]["log_level"] == "ERROR"
    assert loaded["meta"]["schema_version"] == 1


def test_invalid_values_surface_as_validation_errors(tmp_path: Path) -> None:
    config_path = tmp_path / "paramval.toml"
    _write_config(
        config_path,
        """
[parser]
unknown_constraint_handlers = ["not-an-import-path"]
""".strip(),
    )
    default_path = tmp_path / "default.toml"
    _write_config(default_path, "")

    with pytest.raises(ConfigValidationError, match=r"parser.unknown_constraint_handlers\[0\]"):
        load_config(config_path, environ={})
    with pytest.raises(ConfigValidationError, match="observability.log_level"):
        load_config(default_path, environ={"PARAMVAL_OBSERVABILITY_LOG_LEVEL": "TRACE"})


def test_missing_or_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})

    broken = tmp_path / "broken.toml"
    _write_config(broken, "[observability\n")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})


def test_loader_is_deterministic_for_same_inputs(tmp_path: Path) -> None:
    config_path = tmp_path / "paramval.toml"
    _write_config(
        config_path,
        """
[parser]
unknown_constraint_handlers = ["pkg.handlers:resolve"]
""".strip(),
    )
    environ = {"PARAMVAL_OBSERVABILITY_LOG_FILE": "logs/paramval.jsonl"}

    first = dump_effective_config(load_config(config_path, environ=environ))
    second = dump_effective_config(load_config(config_path, environ=environ))
    assert first == second
    assert json.loads(first)["parser"]["unknown_constraint_handlers"] == ["pkg.handlers:resolve"]


def test_path_normalization_is_relative_to_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "paramval.toml"
    _write_config(
        config_path,
        """
[catalog]
path = "../catalogs/settings.yaml"

[observability]
log_file = "logs/paramval.jsonl"
""".strip(),
    )

    root = tmp_path.resolve()
    loaded = load_config(config_path, environ={})
    assert loaded["catalog"]["path"] == (root / "catalogs" / "settings.yaml").as_posix()
    assert loaded["observability"]["log_file"] == (
        root / "nested" / "logs" / "paramval.jsonl"
    ).as_posix()


def test_default_path_is_optional(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    loaded = load_config(environ={})
    assert loaded["meta"]["schema_version"] == 1
    assert loaded["catalog"] == {}
    assert loaded["observability"]["redact_secrets"] is True

    _write_config(tmp_path / "paramval.toml", '[catalog]\npath = "catalog.yaml"\n')
    loaded = load_config(environ={})
    assert loaded["catalog"]["path"] == (tmp_path.resolve() / "catalog.yaml").as_posix()


def test_config_package_exports_loader_and_errors() -> None:
    from parameter_validation import config

    assert config.load_config is load_config
    assert config.ConfigLoadError is ConfigLoadError
    assert config.ENV_PREFIX == "PARAMVAL_"
    assert config.DEFAULT_CONFIG_FILE == "paramval.toml"
