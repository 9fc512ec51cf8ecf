"""
parameter-validation — constraint strings and parameter validation.

File: src/parameter_validation/__init__.py

Purpose
- Package root. Exposes the public API for parsing constraint strings such as
  ``[MinLength(3)][Regex('^a''b$',IgnoreCase)]`` into typed constraint objects and
  validating values against them.

What should be included in this file
- Version export and the small public surface most callers need.
- Config, observability, and catalog APIs stay in their subpackages.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

from parameter_validation.constraints import Constraint
from parameter_validation.domain import (
    ConstraintConfigurationError,
    ConstraintNotDefinedForTypeError,
    ConstraintParserError,
    ErrorCode,
    InvalidDataTypeError,
    ParameterConversionError,
    ParameterDataType,
    ParameterValidationError,
    ParameterValidationFailedError,
    ParameterValidationResult,
    UnknownConstraintError,
    UnknownConstraintNameError,
    Version,
)
from parameter_validation.parsing import (
    ConstraintFactory,
    ConstraintParser,
    concat_constraints,
    parse_constraints,
)
from parameter_validation.validation import ParameterValidator, ValidationEvent

__version__ = "0.1.0"

__all__ = [
    "Constraint",
    "ConstraintConfigurationError",
    "ConstraintFactory",
    "ConstraintNotDefinedForTypeError",
    "ConstraintParser",
    "ConstraintParserError",
    "ErrorCode",
    "InvalidDataTypeError",
    "ParameterConversionError",
    "ParameterDataType",
    "ParameterValidationError",
    "ParameterValidationFailedError",
    "ParameterValidationResult",
    "ParameterValidator",
    "UnknownConstraintError",
    "UnknownConstraintNameError",
    "ValidationEvent",
    "Version",
    "__version__",
    "concat_constraints",
    "parse_constraints",
]
