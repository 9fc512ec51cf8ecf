"""
Constraint factory: maps a constraint name and data type to a constraint instance.

Resolution is two-tiered:
- a per-name builder returns a fresh constraint when the name applies to the data type,
  or ``None`` when it does not;
- registered unknown-constraint handlers are then asked in registration order, and the
  first non-``None`` answer wins.

When neither tier produces a constraint, an unrecognized name raises
`UnknownConstraintNameError` and a recognized name raises
`ConstraintNotDefinedForTypeError`.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

import structlog

from parameter_validation import constants
from parameter_validation.constraints.base import Constraint
from parameter_validation.constraints.length import (
    LengthConstraint,
    MaximumLengthConstraint,
    MinimumLengthConstraint,
)
from parameter_validation.constraints.markers import (
    DatabaseConstraint,
    DisplayHintConstraint,
    EncryptedConstraint,
    NullConstraint,
    ReadOnlyConstraint,
)
from parameter_validation.constraints.ranges import (
    ORDERED_DATA_TYPES,
    STEP_DATA_TYPES,
    DecimalPlacesConstraint,
    MaximumValueConstraint,
    MinimumValueConstraint,
    StepConstraint,
)
from parameter_validation.constraints.text import (
    CharacterSetConstraint,
    EndpointConstraint,
    FileNameConstraint,
    HostNameConstraint,
    LowercaseConstraint,
    PasswordConstraint,
    PathConstraint,
    RegexConstraint,
    UppercaseConstraint,
)
from parameter_validation.constraints.types import (
    EnumTypeConstraint,
    EnumValuesConstraint,
    TypeConstraint,
)
from parameter_validation.constraints.uri import AllowedSchemeConstraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintNotDefinedForTypeError,
    UnknownConstraintNameError,
)

ConstraintBuilder: TypeAlias = Callable[[ParameterDataType], Constraint | None]
UnknownConstraintHandler: TypeAlias = Callable[[str, ParameterDataType], Constraint | None]

_DEFAULT_BUILDERS: Mapping[str, ConstraintBuilder] | None = None
_DEFAULT_BUILDERS_LOCK = threading.Lock()


def _for_types(
    factory: Callable[[], Constraint], *data_types: ParameterDataType
) -> ConstraintBuilder:
    def build(data_type: ParameterDataType) -> Constraint | None:
        return factory() if data_type in data_types else None

    return build


def _for_any_type(factory: Callable[[], Constraint]) -> ConstraintBuilder:
    def build(data_type: ParameterDataType) -> Constraint | None:
        return factory()

    return build


def _with_type(
    factory: Callable[[ParameterDataType], Constraint], data_types: tuple[ParameterDataType, ...]
) -> ConstraintBuilder:
    def build(data_type: ParameterDataType) -> Constraint | None:
        return factory(data_type) if data_type in data_types else None

    return build


def _type_constraint(data_type: ParameterDataType) -> Constraint | None:
    if data_type is ParameterDataType.ENUM:
        return EnumTypeConstraint()
    if data_type is ParameterDataType.XML:
        return TypeConstraint()
    return None


def _build_default_builders() -> dict[str, ConstraintBuilder]:
    string = ParameterDataType.STRING
    length_types = (ParameterDataType.BYTES, string, ParameterDataType.URI)
    return {
        constants.ALLOWED_SCHEME_CONSTRAINT_NAME: _for_types(
            AllowedSchemeConstraint, ParameterDataType.URI
        ),
        constants.CHARACTER_SET_CONSTRAINT_NAME: _for_types(CharacterSetConstraint, string),
        constants.DATABASE_CONSTRAINT_NAME: _for_any_type(DatabaseConstraint),
        constants.DECIMAL_PLACES_CONSTRAINT_NAME: _for_types(
            DecimalPlacesConstraint, ParameterDataType.DECIMAL
        ),
        constants.DISPLAY_HINT_CONSTRAINT_NAME: _for_any_type(DisplayHintConstraint),
        constants.ENCRYPTED_CONSTRAINT_NAME: _for_any_type(EncryptedConstraint),
        constants.ENDPOINT_CONSTRAINT_NAME: _for_types(EndpointConstraint, string),
        constants.ENUM_VALUES_CONSTRAINT_NAME: _for_types(
            EnumValuesConstraint, ParameterDataType.ENUM
        ),
        constants.FILE_NAME_CONSTRAINT_NAME: _for_types(FileNameConstraint, string),
        constants.HOST_NAME_CONSTRAINT_NAME: _for_types(HostNameConstraint, string),
        constants.LENGTH_CONSTRAINT_NAME: _for_types(
            LengthConstraint, string, ParameterDataType.BYTES
        ),
        constants.LOWERCASE_CONSTRAINT_NAME: _for_types(LowercaseConstraint, string),
        constants.MAXIMUM_LENGTH_CONSTRAINT_NAME: _for_types(
            MaximumLengthConstraint, *length_types
        ),
        constants.MAXIMUM_VALUE_CONSTRAINT_NAME: _with_type(
            MaximumValueConstraint, ORDERED_DATA_TYPES
        ),
        constants.MINIMUM_LENGTH_CONSTRAINT_NAME: _for_types(
            MinimumLengthConstraint, *length_types
        ),
        constants.MINIMUM_VALUE_CONSTRAINT_NAME: _with_type(
            MinimumValueConstraint, ORDERED_DATA_TYPES
        ),
        constants.NULL_CONSTRAINT_NAME: _for_any_type(NullConstraint),
        constants.PASSWORD_CONSTRAINT_NAME: _for_types(PasswordConstraint, string),
        constants.PATH_CONSTRAINT_NAME: _for_types(PathConstraint, string),
        constants.READ_ONLY_CONSTRAINT_NAME: _for_any_type(ReadOnlyConstraint),
        constants.REGEX_CONSTRAINT_NAME: _for_types(RegexConstraint, string),
        constants.STEP_CONSTRAINT_NAME: _with_type(StepConstraint, STEP_DATA_TYPES),
        constants.TYPE_CONSTRAINT_NAME: _type_constraint,
        constants.UPPERCASE_CONSTRAINT_NAME: _for_types(UppercaseConstraint, string),
    }


def default_builders() -> Mapping[str, ConstraintBuilder]:
    """Return the shared builder table, building it on first use."""

    global _DEFAULT_BUILDERS
    builders = _DEFAULT_BUILDERS
    if builders is None:
        with _DEFAULT_BUILDERS_LOCK:
            builders = _DEFAULT_BUILDERS
            if builders is None:
                builders = _build_default_builders()
                _DEFAULT_BUILDERS = builders
    return builders


class ConstraintFactory:
    """Creates unconfigured constraints by name for a given data type."""

    __slots__ = ("_builders", "_handlers", "_handlers_lock", "_logger")

    def __init__(
        self,
        *,
        handlers: tuple[UnknownConstraintHandler, ...] = (),
        builders: Mapping[str, ConstraintBuilder] | None = None,
        logger: Any | None = None,
    ) -> None:
        self._builders = builders
        self._handlers: tuple[UnknownConstraintHandler, ...] = ()
        self._handlers_lock = threading.Lock()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        for handler in handlers:
            self.add_unknown_constraint_handler(handler)

    @property
    def unknown_constraint_handlers(self) -> tuple[UnknownConstraintHandler, ...]:
        return self._handlers

    def add_unknown_constraint_handler(self, handler: UnknownConstraintHandler) -> None:
        if not callable(handler):
            raise TypeError("handler: expected a callable")
        with self._handlers_lock:
            self._handlers = (*self._handlers, handler)

    def remove_unknown_constraint_handler(self, handler: UnknownConstraintHandler) -> bool:
        """Unregister ``handler``; return ``False`` when it was not registered."""

        with self._handlers_lock:
            if handler not in self._handlers:
                return False
            remaining = list(self._handlers)
            remaining.remove(handler)
            self._handlers = tuple(remaining)
        return True

    def find_constraint(self, name: str, data_type: ParameterDataType) -> Constraint:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("name: must not be empty")
        if not isinstance(data_type, ParameterDataType):
            raise TypeError(
                f"data_type: expected ParameterDataType, got {type(data_type).__name__}"
            )
        if data_type is ParameterDataType.NONE:
            raise ValueError("data_type: must not be None")

        builders = self._builders if self._builders is not None else default_builders()
        builder = builders.get(name)
        if builder is not None:
            constraint = builder(data_type)
            if constraint is not None:
                return constraint

        for handler in self._handlers:
            constraint = handler(name, data_type)
            if constraint is not None:
                self._logger.debug(
                    "constraint_resolved_by_handler",
                    constraint=name,
                    data_type=data_type.value,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )
                return constraint

        if builder is None:
            self._logger.info(
                "constraint_unknown", constraint=name, data_type=data_type.value
            )
            raise UnknownConstraintNameError(name, data_type)
        self._logger.info(
            "constraint_not_defined_for_type", constraint=name, data_type=data_type.value
        )
        raise ConstraintNotDefinedForTypeError(name, data_type)

    def is_known(self, name: str) -> bool:
        builders = self._builders if self._builders is not None else default_builders()
        return name in builders


__all__ = [
    "ConstraintBuilder",
    "ConstraintFactory",
    "UnknownConstraintHandler",
    "default_builders",
]
