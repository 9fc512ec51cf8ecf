"""Domain value objects: data types, versions, results, and the error hierarchy."""

from parameter_validation.domain.data_types import (
    ParameterDataType,
    coerce_data_type,
    data_type_for,
    integer_range,
    is_integer_type,
    native_type_for,
)
from parameter_validation.domain.errors import (
    ConstraintConfigurationError,
    ConstraintNotDefinedForTypeError,
    ConstraintParserError,
    ErrorCode,
    InvalidDataTypeError,
    ParameterConversionError,
    ParameterValidationError,
    ParameterValidationFailedError,
    UnknownConstraintError,
    UnknownConstraintNameError,
)
from parameter_validation.domain.results import ParameterValidationResult
from parameter_validation.domain.version import Version

__all__ = [
    "ConstraintConfigurationError",
    "ConstraintNotDefinedForTypeError",
    "ConstraintParserError",
    "ErrorCode",
    "InvalidDataTypeError",
    "ParameterConversionError",
    "ParameterDataType",
    "ParameterValidationError",
    "ParameterValidationFailedError",
    "ParameterValidationResult",
    "UnknownConstraintError",
    "UnknownConstraintNameError",
    "Version",
    "coerce_data_type",
    "data_type_for",
    "integer_range",
    "is_integer_type",
    "native_type_for",
]
