"""
parameter-validation config package public API.

File: src/parameter_validation/config/__init__.py

Purpose
- Export config loading/validation entrypoints and public error types.

What should be included in this file
- Public schema constants and validation/report types.
- Loader APIs for the effective runtime config.
- Typed runtime settings that build the parser, catalog, and logging sinks.

Functional requirements
- Support loading from ``paramval.toml`` + ``PARAMVAL_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from parameter_validation.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    env_variable_names,
    load_config,
    normalize_paths,
)
from parameter_validation.config.schema import (
    DEFAULT_CONFIG,
    LOG_LEVELS,
    PATH_FIELDS,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    ParameterValidationConfig,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)
from parameter_validation.config.settings import RuntimeSettings, load_settings

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "ParameterValidationConfig",
    "RuntimeSettings",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "env_variable_names",
    "load_config",
    "load_settings",
    "merge_config",
    "migration_guidance",
    "normalize_paths",
    "validate_config",
]
