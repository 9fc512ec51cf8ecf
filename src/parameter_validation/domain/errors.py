"""Error identifiers and exception hierarchy for parsing, conversion, and validation."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parameter_validation.constraints.base import Constraint
    from parameter_validation.domain.data_types import ParameterDataType
    from parameter_validation.domain.results import ParameterValidationResult


class ErrorCode(StrEnum):
    SUCCESS = "success"

    # Constraint-string syntax.
    SYNTAX_ERROR = "syntax_error"
    DATA_OUTSIDE_CONSTRAINT = "data_outside_constraint"
    INVALID_CHARACTER_IN_NAME = "invalid_character_in_name"
    EMPTY_CONSTRAINT = "empty_constraint"
    INVALID_CHARACTER_IN_PARAMETERS = "invalid_character_in_parameters"
    UNMASKED_DELIMITER = "unmasked_delimiter"
    INVALID_CHARACTER_AFTER_PARAMETER = "invalid_character_after_parameter"
    INVALID_CHARACTER_AFTER_PARAMETERS = "invalid_character_after_parameters"
    CONSTRAINT_INCOMPLETE = "constraint_incomplete"
    UNKNOWN_CONSTRAINT_NAME = "unknown_constraint_name"
    CONSTRAINT_NOT_DEFINED_FOR_TYPE = "constraint_not_defined_for_type"
    PARAMETERS_INVALID = "parameters_invalid"

    # Constraint configuration and typing.
    CONSTRAINT_CONFIGURATION_INVALID = "constraint_configuration_invalid"
    DATA_TYPE_NOT_SUPPORTED = "data_type_not_supported"
    VALUE_TYPE_NOT_SUPPORTED = "value_type_not_supported"
    CONVERSION_FAILED = "conversion_failed"

    # Validation outcomes.
    VALIDATION_FAILED = "validation_failed"
    VALUE_NULL = "value_null"
    LENGTH_MISMATCH = "length_mismatch"
    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    VALUE_TOO_LARGE = "value_too_large"
    VALUE_TOO_SMALL = "value_too_small"
    STEP_MISMATCH = "step_mismatch"
    TOO_MANY_DECIMAL_PLACES = "too_many_decimal_places"
    CHARACTER_NOT_IN_SET = "character_not_in_set"
    NOT_LOWERCASE = "not_lowercase"
    NOT_UPPERCASE = "not_uppercase"
    PATTERN_MISMATCH = "pattern_mismatch"
    SCHEME_NOT_ALLOWED = "scheme_not_allowed"
    VALUE_EMPTY = "value_empty"
    PORT_INVALID = "port_invalid"
    HOST_NAME_INVALID = "host_name_invalid"
    FILE_NAME_INVALID = "file_name_invalid"
    PATH_INVALID = "path_invalid"
    ENUM_VALUE_NOT_DEFINED = "enum_value_not_defined"
    ENUM_FLAG_NOT_DEFINED = "enum_flag_not_defined"
    ENUM_TYPE_MISMATCH = "enum_type_mismatch"


class ParameterValidationError(ValueError):
    """Base class for every error raised by this library."""

    default_code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code


class ConstraintParserError(ParameterValidationError):
    """Raised when a constraint string is malformed.

    ``position`` is the zero-based character offset where the problem was
    detected, or ``-1`` when the error is not tied to a location.
    """

    default_code = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        *,
        position: int = -1,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.position = position

    def locate(self, position: int) -> None:
        """Attach ``position`` unless the error already carries one."""

        if self.position < 0:
            self.position = position

    def __str__(self) -> str:
        if self.position < 0:
            return self.message
        return f"{self.message} (position {self.position})"


class UnknownConstraintError(ConstraintParserError):
    """The factory and every registered handler declined a constraint."""

    def __init__(
        self,
        message: str,
        *,
        constraint_name: str,
        data_type: ParameterDataType,
        position: int = -1,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, position=position, code=code)
        self.constraint_name = constraint_name
        self.data_type = data_type


class UnknownConstraintNameError(UnknownConstraintError):
    default_code = ErrorCode.UNKNOWN_CONSTRAINT_NAME

    def __init__(self, constraint_name: str, data_type: ParameterDataType) -> None:
        super().__init__(
            f"unknown constraint name {constraint_name!r}",
            constraint_name=constraint_name,
            data_type=data_type,
        )


class ConstraintNotDefinedForTypeError(UnknownConstraintError):
    default_code = ErrorCode.CONSTRAINT_NOT_DEFINED_FOR_TYPE

    def __init__(self, constraint_name: str, data_type: ParameterDataType) -> None:
        super().__init__(
            f"constraint {constraint_name!r} is not defined for data type {data_type.value}",
            constraint_name=constraint_name,
            data_type=data_type,
        )


class ConstraintConfigurationError(ParameterValidationError):
    """A constraint rejected its parameters or is not configured."""

    default_code = ErrorCode.CONSTRAINT_CONFIGURATION_INVALID

    def __init__(
        self,
        message: str,
        constraint: Constraint | None = None,
        *,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.constraint = constraint


class InvalidDataTypeError(ParameterValidationError):
    """A constraint was used with a data type or value type it cannot handle."""

    default_code = ErrorCode.DATA_TYPE_NOT_SUPPORTED

    def __init__(
        self,
        constraint: Constraint,
        data_type: ParameterDataType,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
    ) -> None:
        if message is None:
            message = (
                f"constraint {constraint.name!r} does not support data type {data_type.value}"
            )
        super().__init__(message, code=code)
        self.constraint = constraint
        self.data_type = data_type


class ParameterConversionError(ParameterValidationError):
    """A string (or native value) could not be converted for a data type."""

    default_code = ErrorCode.CONVERSION_FAILED

    def __init__(
        self,
        data_type: ParameterDataType,
        actual_value: object,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"cannot convert {actual_value!r} to {data_type.value}"
        super().__init__(message)
        self.data_type = data_type
        self.actual_value = actual_value


class ParameterValidationFailedError(ParameterValidationError):
    """Raised by ``ParameterValidator.validate`` when a value fails validation."""

    default_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, results: Sequence[ParameterValidationResult]) -> None:
        self.results = tuple(results)
        if not self.results:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.message}" for item in self.results)
        super().__init__(f"parameter validation failed:\n{rendered}")


__all__ = [
    "ConstraintConfigurationError",
    "ConstraintNotDefinedForTypeError",
    "ConstraintParserError",
    "ErrorCode",
    "InvalidDataTypeError",
    "ParameterConversionError",
    "ParameterValidationError",
    "ParameterValidationFailedError",
    "UnknownConstraintError",
    "UnknownConstraintNameError",
]
