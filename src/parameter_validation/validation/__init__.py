"""Value validation against constraint lists and YAML setting catalogs."""

from parameter_validation.validation.catalog import ParameterCatalog, ParameterSetting
from parameter_validation.validation.validator import (
    ConstraintsInput,
    ParameterValidator,
    ValidationCallback,
    ValidationEvent,
)

__all__ = [
    "ConstraintsInput",
    "ParameterCatalog",
    "ParameterSetting",
    "ParameterValidator",
    "ValidationCallback",
    "ValidationEvent",
]
