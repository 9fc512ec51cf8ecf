"""Constraint capability contract shared by every concrete constraint kind."""

from __future__ import annotations

from collections.abc import Sequence

from parameter_validation.constants import (
    CONSTRAINT_END,
    CONSTRAINT_START,
    MASKED_CHARACTERS,
    PARAMETER_MASK,
    PARAMETER_SEPARATOR,
    PARAMETERS_END,
    PARAMETERS_START,
    SPACE,
)
from parameter_validation.conversion.parameter_convert import coerce_value
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintConfigurationError,
    ErrorCode,
    InvalidDataTypeError,
    ParameterConversionError,
)
from parameter_validation.domain.results import ParameterValidationResult


class Constraint:
    """One named, parameterized validation rule.

    Subclasses override ``get_parameters``/``set_parameters`` to expose and consume
    their configuration, and ``_on_validation`` to check values. Constraints keep
    only typed fields derived from parameters and are read-only once configured.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            raise TypeError(f"name: expected string, got {type(name).__name__}")
        if not name.strip():
            raise ValueError("name: must not be empty")
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def parameters(self) -> tuple[str, ...]:
        """Return the current configuration as constraint-string parameters."""

        collected: list[str] = []
        self.get_parameters(collected)
        return tuple(collected)

    def validate(
        self,
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str | None = None,
    ) -> tuple[ParameterValidationResult, ...]:
        """Check ``value`` and return one result per failure (empty when valid)."""

        _require_data_type(data_type)
        if not isinstance(member_name, str) or not member_name.strip():
            raise ValueError("member_name: must not be empty")
        if display_name is None or not display_name.strip():
            display_name = member_name

        results: list[ParameterValidationResult] = []
        self._on_validation(results, value, data_type, member_name, display_name)
        return tuple(results)

    def get_parameters(self, parameters: list[str]) -> None:
        """Append this constraint's parameters to ``parameters``."""

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        """Configure this constraint from constraint-string parameters."""

        if parameters is None:
            raise ValueError("parameters: must not be None")
        _require_data_type(data_type)

    def assert_data_type(self, data_type: ParameterDataType, *expected: ParameterDataType) -> None:
        """Raise ``InvalidDataTypeError`` unless ``data_type`` is one of ``expected``."""

        if data_type not in expected:
            raise InvalidDataTypeError(self, data_type)

    def to_string(self) -> str:
        parameters = self.parameters
        if not parameters:
            return f"{CONSTRAINT_START}{self._name}{CONSTRAINT_END}"
        rendered = PARAMETER_SEPARATOR.join(_mask_parameter(item) for item in parameters)
        return (
            f"{CONSTRAINT_START}{self._name}"
            f"{PARAMETERS_START}{rendered}{PARAMETERS_END}{CONSTRAINT_END}"
        )

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        if value is None:
            raise ValueError(f"{member_name}: value must not be None")

    def _failure(
        self, code: ErrorCode, message: str, member_name: str
    ) -> ParameterValidationResult:
        return ParameterValidationResult.failure(code, message, member_name, self)

    def _native_value(self, value: object, data_type: ParameterDataType) -> object:
        try:
            return coerce_value(value, data_type)
        except ParameterConversionError as exc:
            raise InvalidDataTypeError(
                self,
                data_type,
                f"constraint {self._name!r} cannot validate {type(value).__name__} "
                f"values as {data_type.value}",
                code=ErrorCode.VALUE_TYPE_NOT_SUPPORTED,
            ) from exc

    def _require_count(self, parameters: Sequence[str], count: int) -> None:
        if len(parameters) != count:
            raise ConstraintConfigurationError(
                f"constraint {self._name!r} requires exactly {count} parameter(s), "
                f"got {len(parameters)}",
                self,
            )

    def _require_count_between(self, parameters: Sequence[str], minimum: int, maximum: int) -> None:
        if not minimum <= len(parameters) <= maximum:
            raise ConstraintConfigurationError(
                f"constraint {self._name!r} requires {minimum} to {maximum} parameter(s), "
                f"got {len(parameters)}",
                self,
            )

    def _invalid_parameter(self, parameter: str) -> ConstraintConfigurationError:
        return ConstraintConfigurationError(
            f"parameter {parameter!r} is invalid for constraint {self._name!r}", self
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._name == other._name
            and self.parameters == other.parameters
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._name, self.parameters))


def _require_data_type(data_type: object) -> None:
    if not isinstance(data_type, ParameterDataType):
        raise TypeError(f"data_type: expected ParameterDataType, got {type(data_type).__name__}")
    if data_type is ParameterDataType.NONE:
        raise ValueError("data_type: must not be None")


def _mask_parameter(parameter: str) -> str:
    needs_mask = (
        not parameter
        or SPACE in parameter
        or any(character in MASKED_CHARACTERS for character in parameter)
    )
    if not needs_mask:
        return parameter
    escaped = parameter.replace(PARAMETER_MASK, PARAMETER_MASK * 2)
    return f"{PARAMETER_MASK}{escaped}{PARAMETER_MASK}"


__all__ = ["Constraint"]
