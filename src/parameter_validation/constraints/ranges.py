"""Ordered-value constraints: minimum/maximum bounds and numeric hints."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Final

from parameter_validation.constants import (
    DECIMAL_PLACES_CONSTRAINT_NAME,
    MAXIMUM_VALUE_CONSTRAINT_NAME,
    MINIMUM_VALUE_CONSTRAINT_NAME,
    STEP_CONSTRAINT_NAME,
)
from parameter_validation.constraints.base import Constraint
from parameter_validation.conversion.parameter_convert import (
    coerce_value,
    maximum_value,
    minimum_value,
    to_data_type,
    to_string,
)
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintConfigurationError,
    ErrorCode,
    InvalidDataTypeError,
    ParameterConversionError,
)
from parameter_validation.domain.results import ParameterValidationResult

STEP_DATA_TYPES: Final[tuple[ParameterDataType, ...]] = (
    ParameterDataType.BYTE,
    ParameterDataType.DECIMAL,
    ParameterDataType.INT16,
    ParameterDataType.INT32,
    ParameterDataType.INT64,
    ParameterDataType.SIGNED_BYTE,
    ParameterDataType.UINT16,
    ParameterDataType.UINT32,
    ParameterDataType.UINT64,
)
ORDERED_DATA_TYPES: Final[tuple[ParameterDataType, ...]] = (
    *STEP_DATA_TYPES,
    ParameterDataType.DATE_TIME_OFFSET,
    ParameterDataType.TIME_SPAN,
    ParameterDataType.VERSION,
)


class _BoundConstraintBase(Constraint):
    __slots__ = ("_bound", "_data_type")

    def __init__(self, name: str, data_type: ParameterDataType, bound: object) -> None:
        super().__init__(name)
        self._data_type = _check_ordered_type(data_type)
        self._bound = self._convert_bound(bound, data_type)

    @property
    def data_type(self) -> ParameterDataType:
        return self._data_type

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(to_string(self._bound, self._data_type))

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, *ORDERED_DATA_TYPES)
        self._require_count(parameters, 1)
        try:
            bound = to_data_type(parameters[0], data_type)
        except ParameterConversionError as exc:
            raise self._invalid_parameter(parameters[0]) from exc
        self._data_type = data_type
        self._bound = bound

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, *ORDERED_DATA_TYPES)
        native = self._native_value(value, data_type)
        try:
            violated = self._is_violated(native)
        except TypeError as exc:
            raise InvalidDataTypeError(
                self,
                data_type,
                f"constraint {self.name!r} configured for {self._data_type.value} "
                f"cannot compare {data_type.value} values",
                code=ErrorCode.VALUE_TYPE_NOT_SUPPORTED,
            ) from exc
        if violated:
            results.append(self._violation(display_name, member_name))

    def _convert_bound(self, bound: object, data_type: ParameterDataType) -> object:
        try:
            return coerce_value(bound, data_type)
        except ParameterConversionError as exc:
            raise ValueError(f"{self.name}: bound {bound!r} is not a {data_type.value}") from exc

    def _is_violated(self, value: object) -> bool:
        raise NotImplementedError

    def _violation(self, display_name: str, member_name: str) -> ParameterValidationResult:
        raise NotImplementedError


class MinimumValueConstraint(_BoundConstraintBase):
    """Value must be greater than or equal to ``minimum``."""

    __slots__ = ()

    def __init__(self, data_type: ParameterDataType, minimum: object = None) -> None:
        if minimum is None:
            minimum = minimum_value(_check_ordered_type(data_type))
        super().__init__(MINIMUM_VALUE_CONSTRAINT_NAME, data_type, minimum)

    @property
    def minimum(self) -> object:
        return self._bound

    def _is_violated(self, value: object) -> bool:
        return bool(value < self._bound)  # type: ignore[operator]

    def _violation(self, display_name: str, member_name: str) -> ParameterValidationResult:
        rendered = to_string(self._bound, self._data_type)
        return self._failure(
            ErrorCode.VALUE_TOO_SMALL,
            f"{display_name} must be greater than or equal to {rendered}",
            member_name,
        )


class MaximumValueConstraint(_BoundConstraintBase):
    """Value must be less than or equal to ``maximum``."""

    __slots__ = ()

    def __init__(self, data_type: ParameterDataType, maximum: object = None) -> None:
        if maximum is None:
            maximum = maximum_value(_check_ordered_type(data_type))
        super().__init__(MAXIMUM_VALUE_CONSTRAINT_NAME, data_type, maximum)

    @property
    def maximum(self) -> object:
        return self._bound

    def _is_violated(self, value: object) -> bool:
        return bool(value > self._bound)  # type: ignore[operator]

    def _violation(self, display_name: str, member_name: str) -> ParameterValidationResult:
        rendered = to_string(self._bound, self._data_type)
        return self._failure(
            ErrorCode.VALUE_TOO_LARGE,
            f"{display_name} must be less than or equal to {rendered}",
            member_name,
        )


class StepConstraint(Constraint):
    """Increment hint for numeric editors; carries configuration only."""

    __slots__ = ("_data_type", "_step_size")

    def __init__(self, data_type: ParameterDataType, step_size: object = None) -> None:
        super().__init__(STEP_CONSTRAINT_NAME)
        if data_type not in STEP_DATA_TYPES:
            raise ValueError(f"data_type: {data_type} does not support a step size")
        self._data_type = data_type
        if step_size is None:
            step_size = Decimal(1) if data_type is ParameterDataType.DECIMAL else 1
        try:
            self._step_size = coerce_value(step_size, data_type)
        except ParameterConversionError as exc:
            raise ValueError(f"step_size: {step_size!r} is not a {data_type.value}") from exc

    @property
    def data_type(self) -> ParameterDataType:
        return self._data_type

    @property
    def step_size(self) -> object:
        return self._step_size

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(to_string(self._step_size, self._data_type))

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, *STEP_DATA_TYPES)
        self._require_count(parameters, 1)
        try:
            step_size = to_data_type(parameters[0], data_type)
        except ParameterConversionError as exc:
            raise self._invalid_parameter(parameters[0]) from exc
        self._data_type = data_type
        self._step_size = step_size


class DecimalPlacesConstraint(Constraint):
    """Display precision hint for decimal values; carries configuration only."""

    __slots__ = ("_decimal_places",)

    def __init__(self, decimal_places: int = 2) -> None:
        super().__init__(DECIMAL_PLACES_CONSTRAINT_NAME)
        if isinstance(decimal_places, bool) or not isinstance(decimal_places, int):
            raise TypeError("decimal_places: expected int")
        if decimal_places < 0:
            raise ValueError("decimal_places: must be >= 0")
        self._decimal_places = decimal_places

    @property
    def decimal_places(self) -> int:
        return self._decimal_places

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(str(self._decimal_places))

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self._require_count(parameters, 1)
        try:
            parsed = to_data_type(parameters[0], ParameterDataType.INT32)
        except ParameterConversionError as exc:
            raise self._invalid_parameter(parameters[0]) from exc
        if not isinstance(parsed, int) or parsed < 0:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires a non-negative number of places", self
            )
        self._decimal_places = parsed


def _check_ordered_type(data_type: ParameterDataType) -> ParameterDataType:
    if data_type not in ORDERED_DATA_TYPES:
        raise ValueError(f"data_type: {data_type} is not an ordered data type")
    return data_type


__all__ = [
    "ORDERED_DATA_TYPES",
    "STEP_DATA_TYPES",
    "DecimalPlacesConstraint",
    "MaximumValueConstraint",
    "MinimumValueConstraint",
    "StepConstraint",
]
