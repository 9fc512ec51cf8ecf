"""Validates a value against the constraints declared for its parameter."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

import structlog

from parameter_validation.constants import NULL_CONSTRAINT_NAME
from parameter_validation.constraints.base import Constraint
from parameter_validation.constraints.markers import NullConstraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import ErrorCode, ParameterValidationFailedError
from parameter_validation.domain.results import ParameterValidationResult
from parameter_validation.parsing.parser import ConstraintParser

ConstraintsInput: TypeAlias = Sequence[Constraint] | str | None


@dataclass(frozen=True, slots=True)
class ValidationEvent:
    """Arguments of one validation call, passed to observer callbacks."""

    value: object
    data_type: ParameterDataType
    constraints: tuple[Constraint, ...]
    member_name: str
    display_name: str
    results: tuple[ParameterValidationResult, ...] = ()


ValidationCallback: TypeAlias = Callable[[ValidationEvent], None]


class ParameterValidator:
    """Runs every constraint of a parameter and collects the failures.

    ``on_validating`` callbacks run before any constraint is checked;
    ``on_validation_error`` callbacks run only when at least one failure was found.
    """

    __slots__ = ("_logger", "_parser", "on_validating", "on_validation_error")

    def __init__(self, parser: ConstraintParser | None = None, logger: Any | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._parser = parser
        self.on_validating: list[ValidationCallback] = []
        self.on_validation_error: list[ValidationCallback] = []

    @classmethod
    def default(cls) -> ParameterValidator:
        """Return the shared validator, creating it on first use."""

        global _DEFAULT_VALIDATOR
        validator = _DEFAULT_VALIDATOR
        if validator is None:
            with _DEFAULT_VALIDATOR_LOCK:
                validator = _DEFAULT_VALIDATOR
                if validator is None:
                    validator = cls()
                    _DEFAULT_VALIDATOR = validator
        return validator

    @property
    def parser(self) -> ConstraintParser:
        return self._parser if self._parser is not None else ConstraintParser.default()

    def get_validation_results(
        self,
        value: object,
        data_type: ParameterDataType,
        constraints: ConstraintsInput,
        member_name: str,
        display_name: str | None = None,
    ) -> list[ParameterValidationResult]:
        if not isinstance(data_type, ParameterDataType):
            raise TypeError(
                f"data_type: expected ParameterDataType, got {type(data_type).__name__}"
            )
        if data_type is ParameterDataType.NONE:
            raise ValueError("data_type: must not be None")
        if not isinstance(member_name, str) or not member_name.strip():
            raise ValueError("member_name: must not be empty")
        if display_name is None:
            display_name = member_name

        resolved = self._resolve_constraints(constraints, data_type)
        self._notify(
            self.on_validating,
            ValidationEvent(value, data_type, resolved, member_name, display_name),
        )

        results: list[ParameterValidationResult] = []
        if value is None:
            if not any(item.name == NULL_CONSTRAINT_NAME for item in resolved):
                results.append(
                    ParameterValidationResult.failure(
                        ErrorCode.VALUE_NULL,
                        f"{display_name} must not be null",
                        member_name,
                        NullConstraint(),
                    )
                )
        else:
            for constraint in resolved:
                results.extend(constraint.validate(value, data_type, member_name, display_name))

        if results:
            self._logger.info(
                "parameter_validation_failed",
                member_name=member_name,
                data_type=data_type.value,
                codes=[item.code.value for item in results],
            )
            self._notify(
                self.on_validation_error,
                ValidationEvent(
                    value, data_type, resolved, member_name, display_name, tuple(results)
                ),
            )
        return results

    def is_valid(
        self,
        value: object,
        data_type: ParameterDataType,
        constraints: ConstraintsInput,
        member_name: str,
        display_name: str | None = None,
    ) -> bool:
        return not self.get_validation_results(
            value, data_type, constraints, member_name, display_name
        )

    def validate(
        self,
        value: object,
        data_type: ParameterDataType,
        constraints: ConstraintsInput,
        member_name: str,
        display_name: str | None = None,
    ) -> None:
        """Raise `ParameterValidationFailedError` unless ``value`` satisfies every constraint."""

        results = self.get_validation_results(
            value, data_type, constraints, member_name, display_name
        )
        if results:
            raise ParameterValidationFailedError(results)

    def _resolve_constraints(
        self, constraints: ConstraintsInput, data_type: ParameterDataType
    ) -> tuple[Constraint, ...]:
        if constraints is None:
            return ()
        if isinstance(constraints, str):
            return tuple(self.parser.parse(constraints, data_type))
        resolved = tuple(constraints)
        for index, item in enumerate(resolved):
            if not isinstance(item, Constraint):
                raise TypeError(
                    f"constraints[{index}]: expected Constraint, got {type(item).__name__}"
                )
        return resolved

    @staticmethod
    def _notify(callbacks: Sequence[ValidationCallback], event: ValidationEvent) -> None:
        for callback in tuple(callbacks):
            callback(event)


_DEFAULT_VALIDATOR: ParameterValidator | None = None
_DEFAULT_VALIDATOR_LOCK = threading.Lock()


__all__ = ["ConstraintsInput", "ParameterValidator", "ValidationCallback", "ValidationEvent"]
