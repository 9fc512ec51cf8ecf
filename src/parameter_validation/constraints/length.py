"""Length constraints for strings, byte arrays, and URIs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, cast

from parameter_validation.constants import (
    LENGTH_CONSTRAINT_NAME,
    MAXIMUM_LENGTH_CONSTRAINT_NAME,
    MINIMUM_LENGTH_CONSTRAINT_NAME,
)
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import ConstraintConfigurationError, ErrorCode
from parameter_validation.domain.results import ParameterValidationResult

_UNBOUNDED_LENGTH: Final[int] = 0x7FFF_FFFF


class _LengthConstraintBase(Constraint):
    __slots__ = ("_length",)

    _supported_types: tuple[ParameterDataType, ...] = (
        ParameterDataType.BYTES,
        ParameterDataType.STRING,
        ParameterDataType.URI,
    )

    def __init__(self, name: str, length: int) -> None:
        super().__init__(name)
        self._length = _check_length(length, "length")

    @property
    def length(self) -> int:
        return self._length

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(str(self._length))

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, *self._supported_types)
        self._require_count(parameters, 1)
        try:
            parsed = int(parameters[0].strip())
        except ValueError as exc:
            raise self._invalid_parameter(parameters[0]) from exc
        if parsed < 0:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires a non-negative length, got {parsed}", self
            )
        self._length = parsed

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, *self._supported_types)
        native = cast("str | bytes", self._native_value(value, data_type))
        self._check(results, len(native), member_name, display_name)

    def _check(
        self,
        results: list[ParameterValidationResult],
        actual: int,
        member_name: str,
        display_name: str,
    ) -> None:
        raise NotImplementedError


class LengthConstraint(_LengthConstraintBase):
    """Value must have exactly ``length`` characters or bytes."""

    __slots__ = ()

    _supported_types = (ParameterDataType.BYTES, ParameterDataType.STRING)

    def __init__(self, length: int = _UNBOUNDED_LENGTH) -> None:
        super().__init__(LENGTH_CONSTRAINT_NAME, length)

    def _check(
        self,
        results: list[ParameterValidationResult],
        actual: int,
        member_name: str,
        display_name: str,
    ) -> None:
        if actual != self._length:
            results.append(
                self._failure(
                    ErrorCode.LENGTH_MISMATCH,
                    f"{display_name} must have a length of {self._length}, but has {actual}",
                    member_name,
                )
            )


class MinimumLengthConstraint(_LengthConstraintBase):
    __slots__ = ()

    def __init__(self, length: int = 0) -> None:
        super().__init__(MINIMUM_LENGTH_CONSTRAINT_NAME, length)

    def _check(
        self,
        results: list[ParameterValidationResult],
        actual: int,
        member_name: str,
        display_name: str,
    ) -> None:
        if actual < self._length:
            results.append(
                self._failure(
                    ErrorCode.TOO_SHORT,
                    f"{display_name} must have a length of at least {self._length}",
                    member_name,
                )
            )


class MaximumLengthConstraint(_LengthConstraintBase):
    __slots__ = ()

    def __init__(self, length: int = _UNBOUNDED_LENGTH) -> None:
        super().__init__(MAXIMUM_LENGTH_CONSTRAINT_NAME, length)

    def _check(
        self,
        results: list[ParameterValidationResult],
        actual: int,
        member_name: str,
        display_name: str,
    ) -> None:
        if actual > self._length:
            results.append(
                self._failure(
                    ErrorCode.TOO_LONG,
                    f"{display_name} must have a length of at most {self._length}",
                    member_name,
                )
            )


def _check_length(value: object, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{path}: expected int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{path}: must be >= 0")
    return value


__all__ = ["LengthConstraint", "MaximumLengthConstraint", "MinimumLengthConstraint"]
