"""
parameter-validation — unit tests for the error hierarchy and validation results

File: tests/unit/domain/test_errors.py

Purpose
- Validate error codes, parser error positions, and result value objects.
"""

from __future__ import annotations

import pytest

from parameter_validation.constraints.length import MinimumLengthConstraint
from parameter_validation.domain.data_types import ParameterDataType
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


def test_every_error_is_a_value_error_with_a_code() -> None:
    constraint = MinimumLengthConstraint(2)
    errors: list[ParameterValidationError] = [
        ConstraintParserError("bad"),
        UnknownConstraintNameError("Frobnicate", ParameterDataType.STRING),
        ConstraintNotDefinedForTypeError("MinLength", ParameterDataType.BOOL),
        ConstraintConfigurationError("bad parameters", constraint),
        InvalidDataTypeError(constraint, ParameterDataType.INT32),
        ParameterConversionError(ParameterDataType.INT16, "x"),
        ParameterValidationFailedError([]),
    ]
    for error in errors:
        assert isinstance(error, ValueError)
        assert isinstance(error.code, ErrorCode)


def test_parser_error_renders_position() -> None:
    error = ConstraintParserError("constraint incomplete", code=ErrorCode.CONSTRAINT_INCOMPLETE)
    assert str(error) == "constraint incomplete"
    error.locate(12)
    assert error.position == 12
    assert str(error) == "constraint incomplete (position 12)"
    error.locate(3)
    assert error.position == 12


def test_parser_error_defaults_to_a_syntax_code() -> None:
    assert ConstraintParserError("unexpected input").code is ErrorCode.SYNTAX_ERROR
    explicit = ConstraintParserError("bad", code=ErrorCode.PARAMETERS_INVALID)
    assert explicit.code is ErrorCode.PARAMETERS_INVALID
    unknown = UnknownConstraintNameError("Frobnicate", ParameterDataType.STRING)
    assert unknown.code is ErrorCode.UNKNOWN_CONSTRAINT_NAME


def test_unknown_constraint_errors_carry_name_and_type() -> None:
    unknown = UnknownConstraintNameError("Frobnicate", ParameterDataType.STRING)
    assert isinstance(unknown, UnknownConstraintError)
    assert unknown.code is ErrorCode.UNKNOWN_CONSTRAINT_NAME
    assert unknown.constraint_name == "Frobnicate"
    assert "Frobnicate" in str(unknown)

    undefined = ConstraintNotDefinedForTypeError("MinLength", ParameterDataType.BOOL)
    assert undefined.code is ErrorCode.CONSTRAINT_NOT_DEFINED_FOR_TYPE
    assert undefined.data_type is ParameterDataType.BOOL
    assert "not defined for data type Bool" in str(undefined)


def test_invalid_data_type_error_names_constraint() -> None:
    error = InvalidDataTypeError(MinimumLengthConstraint(1), ParameterDataType.GUID)
    assert str(error) == "constraint 'MinLength' does not support data type Guid"
    assert error.code is ErrorCode.DATA_TYPE_NOT_SUPPORTED


def test_conversion_error_keeps_actual_value() -> None:
    error = ParameterConversionError(ParameterDataType.INT16, "abc")
    assert error.actual_value == "abc"
    assert str(error) == "cannot convert 'abc' to Int16"


def test_validation_failed_error_lists_messages() -> None:
    failure = ParameterValidationResult.failure
    first = failure(ErrorCode.TOO_SHORT, "Name is too short", "name", None)
    second = failure(ErrorCode.NOT_UPPERCASE, "Name is lower", "name", None)
    error = ParameterValidationFailedError([first, second])
    assert error.results == (first, second)
    assert "- Name is too short\n- Name is lower" in str(error)


def test_result_success_sentinel_and_member_names() -> None:
    assert ParameterValidationResult.SUCCESS.is_success
    result = ParameterValidationResult(
        code=ErrorCode.VALUE_NULL, message="Port must not be null", member_names=(" port ", "")
    )
    assert not result.is_success
    assert result.member_names == ("port",)
    assert result.member_name == "port"
    assert str(result) == "Port must not be null"


def test_result_rejects_empty_failure_message_and_raw_codes() -> None:
    with pytest.raises(ValueError, match="message: must not be empty"):
        ParameterValidationResult(code=ErrorCode.TOO_LONG, message=" ")
    with pytest.raises(TypeError, match="expected ErrorCode"):
        ParameterValidationResult(code="too_long", message="x")  # type: ignore[arg-type]
