"""
parameter-validation — typed runtime settings.

File: src/parameter_validation/config/settings.py

Purpose
- Turn a validated effective config into the objects the library runs with: a parser
  with the configured unknown-constraint handlers, the settings catalog, and logging.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from parameter_validation.config.loader import load_config
from parameter_validation.config.schema import assert_valid_config
from parameter_validation.observability.logging import (
    LoggingConfig,
    StructuredLoggingHandle,
    setup_structured_logging,
)
from parameter_validation.parsing.parser import ConstraintParser
from parameter_validation.validation.catalog import ParameterCatalog


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Validated, typed view of the ``parser``, ``catalog`` and ``observability`` sections."""

    handler_paths: tuple[str, ...]
    catalog_path: Path | None
    logging: LoggingConfig

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> RuntimeSettings:
        effective = assert_valid_config(config)
        observability = effective["observability"]
        catalog_path = effective["catalog"].get("path")
        return cls(
            handler_paths=tuple(effective["parser"]["unknown_constraint_handlers"]),
            catalog_path=Path(catalog_path) if catalog_path is not None else None,
            logging=LoggingConfig(
                level=observability["log_level"],
                log_file=observability.get("log_file"),
                log_to_stdout=observability["log_to_stdout"],
                redact_secrets=observability["redact_secrets"],
            ),
        )

    def build_parser(self, *, logger: Any | None = None) -> ConstraintParser:
        return ConstraintParser.from_config(
            {"parser": {"unknown_constraint_handlers": list(self.handler_paths)}},
            logger=logger,
        )

    def load_catalog(self, parser: ConstraintParser | None = None) -> ParameterCatalog:
        """Load the configured catalog; an unset ``catalog.path`` yields an empty catalog."""

        if self.catalog_path is None:
            return ParameterCatalog()
        active = parser if parser is not None else self.build_parser()
        return ParameterCatalog.load(self.catalog_path, parser=active)

    def start_logging(self) -> StructuredLoggingHandle:
        return setup_structured_logging(self.logging)


def load_settings(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RuntimeSettings:
    """`load_config` followed by `RuntimeSettings.from_config`."""

    return RuntimeSettings.from_config(
        load_config(config_path, cli_overrides=cli_overrides, environ=environ)
    )


__all__ = ["RuntimeSettings", "load_settings"]
