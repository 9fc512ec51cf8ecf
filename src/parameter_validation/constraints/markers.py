"""Marker and metadata constraints that apply to every data type."""

from __future__ import annotations

from collections.abc import Sequence

from parameter_validation.constants import (
    DATABASE_CONSTRAINT_NAME,
    DISPLAY_HINT_CONSTRAINT_NAME,
    ENCRYPTED_CONSTRAINT_NAME,
    NULL_CONSTRAINT_NAME,
    READ_ONLY_CONSTRAINT_NAME,
)
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import ConstraintConfigurationError
from parameter_validation.domain.results import ParameterValidationResult


class NullConstraint(Constraint):
    """Declares that ``None`` is an acceptable value."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(NULL_CONSTRAINT_NAME)

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        return None


class EncryptedConstraint(Constraint):
    """Declares that the stored value must be encrypted at rest."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(ENCRYPTED_CONSTRAINT_NAME)


class ReadOnlyConstraint(Constraint):
    """Declares that editors must not change the value."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(READ_ONLY_CONSTRAINT_NAME)


class DisplayHintConstraint(Constraint):
    """Free-form hints for editors, e.g. ``[DisplayHint(Multiline,Wide)]``."""

    __slots__ = ("_hints",)

    def __init__(self, hints: Sequence[str] = ()) -> None:
        super().__init__(DISPLAY_HINT_CONSTRAINT_NAME)
        if isinstance(hints, str):
            hints = (hints,)
        self._hints = _check_hints(hints)

    @property
    def hints(self) -> tuple[str, ...]:
        return self._hints

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.extend(self._hints)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        if not parameters:
            raise self._invalid_parameter("")
        try:
            self._hints = _check_hints(parameters)
        except ValueError as exc:
            raise ConstraintConfigurationError(
                f"invalid parameter for constraint {self.name!r}: {exc}", self
            ) from exc


class DatabaseConstraint(Constraint):
    """Links a value to a database entity, its key property and display property."""

    __slots__ = ("_display_property", "_entity", "_key_property")

    def __init__(
        self, entity: str = "", key_property: str = "", display_property: str = ""
    ) -> None:
        super().__init__(DATABASE_CONSTRAINT_NAME)
        self._entity = entity or ""
        self._key_property = key_property or ""
        self._display_property = display_property or ""

    @property
    def entity(self) -> str:
        return self._entity

    @property
    def key_property(self) -> str:
        return self._key_property

    @property
    def display_property(self) -> str:
        return self._display_property

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        values = [self._entity, self._key_property, self._display_property]
        while len(values) > 1 and not values[-1]:
            values.pop()
        parameters.extend(values)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self._require_count_between(parameters, 1, 3)
        padded = [*parameters, "", ""]
        self._entity = padded[0]
        self._key_property = padded[1]
        self._display_property = padded[2]


def _check_hints(hints: Sequence[str]) -> tuple[str, ...]:
    checked: list[str] = []
    for index, hint in enumerate(hints):
        if not isinstance(hint, str) or not hint.strip():
            raise ValueError(f"hints[{index}] {hint!r}: must be a non-empty string")
        checked.append(hint)
    return tuple(checked)


__all__ = [
    "DatabaseConstraint",
    "DisplayHintConstraint",
    "EncryptedConstraint",
    "NullConstraint",
    "ReadOnlyConstraint",
]
