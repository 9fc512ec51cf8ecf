"""Type-bound constraints for enumerations and XML payloads."""

from __future__ import annotations

import enum
import importlib
import threading
from collections.abc import Mapping, Sequence
from typing import Final

from parameter_validation.constants import ENUM_VALUES_CONSTRAINT_NAME, TYPE_CONSTRAINT_NAME
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import (
    ParameterDataType,
    integer_range,
    is_integer_type,
)
from parameter_validation.domain.errors import ConstraintConfigurationError, ErrorCode
from parameter_validation.domain.results import ParameterValidationResult

_FLAGS_PARAMETER: Final[str] = "Flags"
_HEX_PREFIX: Final[str] = "0x"
_ENUM_UNDERLYING_CANDIDATES: Final[tuple[ParameterDataType, ...]] = (
    ParameterDataType.INT32,
    ParameterDataType.INT64,
    ParameterDataType.UINT64,
)


class TypeConstraint(Constraint):
    """Names the Python type a value must deserialize into.

    ``type_name`` is an import path, either ``package.module:Qualname`` or
    ``package.module.Qualname``. It is resolved on first use and cached.
    """

    __slots__ = ("_lock", "_resolved", "_resolved_type", "_type_name")

    _supported_type: ParameterDataType = ParameterDataType.XML

    def __init__(self, type_name: str | None = None) -> None:
        super().__init__(TYPE_CONSTRAINT_NAME)
        if type_name is not None and (not isinstance(type_name, str) or not type_name.strip()):
            raise ValueError("type_name: must not be empty")
        self._type_name = type_name or ""
        self._lock = threading.Lock()
        self._resolved_type: type | None = None
        self._resolved = False

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def resolved_type(self) -> type | None:
        """Return the resolved type, or ``None`` when the name cannot be imported."""

        with self._lock:
            if not self._resolved:
                self._resolved_type = _import_type(self._type_name)
                self._resolved = True
                self._on_type_resolved(self._resolved_type)
            return self._resolved_type

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(self._type_name)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, self._supported_type)
        self._require_count(parameters, 1)
        if not parameters[0].strip():
            raise self._invalid_parameter(parameters[0])
        with self._lock:
            self._type_name = parameters[0].strip()
            self._resolved_type = None
            self._resolved = False

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, self._supported_type)

    def _on_type_resolved(self, resolved: type | None) -> None:
        """Called once, under the resolution lock, after the type name is imported."""


class EnumTypeConstraint(TypeConstraint):
    """Value must be a member (or flag combination) of the named ``enum.Enum``."""

    __slots__ = ("_flag_mask", "_has_flags", "_values")

    _supported_type = ParameterDataType.ENUM

    def __init__(self, type_name: str | None = None) -> None:
        self._values: frozenset[int] = frozenset()
        self._has_flags = False
        self._flag_mask = 0
        super().__init__(type_name)

    @property
    def has_flags(self) -> bool:
        if self.resolved_type is None:
            return False
        return self._has_flags

    def _on_type_resolved(self, resolved: type | None) -> None:
        self._values = frozenset()
        self._has_flags = False
        self._flag_mask = 0
        if resolved is None or not issubclass(resolved, enum.Enum):
            return
        values = [member.value for member in resolved.__members__.values()]
        if not all(isinstance(item, int) for item in values):
            return
        self._values = frozenset(values)
        self._has_flags = issubclass(resolved, enum.Flag)
        for item in values:
            self._flag_mask |= item

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        resolved = self.resolved_type
        if resolved is None or not issubclass(resolved, enum.Enum):
            return

        if isinstance(value, enum.Enum):
            if not isinstance(value, resolved):
                results.append(
                    self._failure(
                        ErrorCode.ENUM_TYPE_MISMATCH,
                        f"{display_name} is a {type(value).__qualname__}, "
                        f"expected {resolved.__qualname__}",
                        member_name,
                    )
                )
                return
            raw = value.value
        elif isinstance(value, int) and not isinstance(value, bool):
            raw = value
        else:
            results.append(_unsupported_value(self, value, display_name, member_name))
            return
        _check_enum_value(
            self,
            results,
            raw,
            defined=self._values,
            flag_mask=self._flag_mask if self._has_flags else None,
            display_name=display_name,
            member_name=member_name,
        )


class EnumValuesConstraint(Constraint):
    """Value must be one of an explicit ``name=value`` list.

    Parameters are ``UnderlyingType[,Flags],name=value,...``; values may be written
    in hexadecimal with a ``0x`` prefix.
    """

    __slots__ = ("_flag_mask", "_has_flags", "_underlying_data_type", "_values")

    def __init__(
        self,
        underlying_data_type: ParameterDataType = ParameterDataType.NONE,
        has_flags: bool = False,
        values: Mapping[str, int] | None = None,
    ) -> None:
        super().__init__(ENUM_VALUES_CONSTRAINT_NAME)
        self._underlying_data_type = ParameterDataType.NONE
        self._has_flags = False
        self._values: dict[str, int] = {}
        self._flag_mask = 0
        if underlying_data_type is ParameterDataType.NONE and values is None:
            return
        if not is_integer_type(underlying_data_type):
            raise ValueError(f"underlying_data_type: {underlying_data_type} is not an integer type")
        if not values:
            raise ValueError("values: at least one enumeration value is required")
        minimum, maximum = integer_range(underlying_data_type)
        for name, item in values.items():
            if isinstance(item, bool) or not isinstance(item, int):
                raise TypeError(f"values[{name!r}]: expected int, got {type(item).__name__}")
            if not minimum <= item <= maximum:
                raise ValueError(f"values[{name!r}]: {item} is outside {underlying_data_type}")
        self._configure(underlying_data_type, has_flags, dict(values))

    @classmethod
    def from_enum(cls, enum_type: type[enum.Enum]) -> EnumValuesConstraint:
        """Build the constraint from the members of an integer-valued enumeration."""

        if not isinstance(enum_type, type) or not issubclass(enum_type, enum.Enum):
            raise TypeError("enum_type: expected an Enum subclass")
        values = {name: member.value for name, member in enum_type.__members__.items()}
        if not values or not all(
            isinstance(item, int) and not isinstance(item, bool) for item in values.values()
        ):
            raise ValueError(f"enum_type: {enum_type.__qualname__} must have integer values")
        for candidate in _ENUM_UNDERLYING_CANDIDATES:
            minimum, maximum = integer_range(candidate)
            if all(minimum <= item <= maximum for item in values.values()):
                return cls(candidate, issubclass(enum_type, enum.Flag), values)
        raise ValueError(f"enum_type: {enum_type.__qualname__} values exceed 64 bits")

    @property
    def underlying_data_type(self) -> ParameterDataType:
        return self._underlying_data_type

    @property
    def has_flags(self) -> bool:
        return self._has_flags

    @property
    def values(self) -> Mapping[str, int]:
        return dict(self._values)

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        if self._underlying_data_type is ParameterDataType.NONE:
            return
        parameters.append(self._underlying_data_type.value)
        if self._has_flags:
            parameters.append(_FLAGS_PARAMETER)
        parameters.extend(f"{name}={item}" for name, item in self._values.items())

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, ParameterDataType.ENUM)
        if len(parameters) < 2:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires at least 2 parameter(s), "
                f"got {len(parameters)}",
                self,
            )
        try:
            underlying = ParameterDataType(parameters[0].strip())
        except ValueError as exc:
            raise ConstraintConfigurationError(
                f"{parameters[0]!r} is not a parameter data type", self
            ) from exc
        if not is_integer_type(underlying):
            raise ConstraintConfigurationError(
                f"{underlying.value} is not an integer data type", self
            )

        has_flags = parameters[1].strip() == _FLAGS_PARAMETER
        pairs = parameters[2:] if has_flags else parameters[1:]
        if not pairs:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires at least one name=value pair", self
            )
        minimum, maximum = integer_range(underlying)
        values: dict[str, int] = {}
        for pair in pairs:
            name, item = self._parse_pair(pair)
            if not minimum <= item <= maximum:
                raise ConstraintConfigurationError(
                    f"value {item} of {name!r} is outside the {underlying.value} range", self
                )
            values[name] = item
        self._configure(underlying, has_flags, values)

    def _parse_pair(self, pair: str) -> tuple[str, int]:
        tokens = [token for token in pair.strip().split("=") if token]
        if len(tokens) != 2 or not tokens[0].strip() or not tokens[1].strip():
            raise ConstraintConfigurationError(f"{pair!r} is not a name=value pair", self)
        name, raw = tokens[0].strip(), tokens[1].strip()
        try:
            if raw.lower().startswith(_HEX_PREFIX):
                return name, int(raw[len(_HEX_PREFIX) :], 16)
            return name, int(raw, 10)
        except ValueError as exc:
            raise ConstraintConfigurationError(
                f"{raw!r} is not a valid value for {name!r}", self
            ) from exc

    def _configure(
        self, underlying: ParameterDataType, has_flags: bool, values: dict[str, int]
    ) -> None:
        self._underlying_data_type = underlying
        self._has_flags = has_flags
        self._values = values
        self._flag_mask = 0
        if has_flags:
            for item in values.values():
                self._flag_mask |= item

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, ParameterDataType.ENUM)
        if self._underlying_data_type is ParameterDataType.NONE:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} has no enumeration values configured", self
            )
        raw = value.value if isinstance(value, enum.Enum) else value
        if isinstance(raw, bool) or not isinstance(raw, int):
            results.append(_unsupported_value(self, value, display_name, member_name))
            return
        _check_enum_value(
            self,
            results,
            raw,
            defined=frozenset(self._values.values()),
            flag_mask=self._flag_mask if self._has_flags else None,
            display_name=display_name,
            member_name=member_name,
        )


def _check_enum_value(
    constraint: Constraint,
    results: list[ParameterValidationResult],
    raw: int,
    *,
    defined: frozenset[int],
    flag_mask: int | None,
    display_name: str,
    member_name: str,
) -> None:
    if flag_mask is not None:
        if ((raw ^ flag_mask) & raw) != 0:
            results.append(
                ParameterValidationResult.failure(
                    ErrorCode.ENUM_FLAG_NOT_DEFINED,
                    f"{display_name} contains a flag that is not defined",
                    member_name,
                    constraint,
                )
            )
    elif raw not in defined:
        results.append(
            ParameterValidationResult.failure(
                ErrorCode.ENUM_VALUE_NOT_DEFINED,
                f"{display_name} has the undefined value {raw}",
                member_name,
                constraint,
            )
        )


def _unsupported_value(
    constraint: Constraint, value: object, display_name: str, member_name: str
) -> ParameterValidationResult:
    return ParameterValidationResult.failure(
        ErrorCode.VALUE_TYPE_NOT_SUPPORTED,
        f"{display_name} of type {type(value).__name__} is not an enumeration value",
        member_name,
        constraint,
    )


def _import_type(type_name: str) -> type | None:
    if not type_name:
        return None
    module_name, separator, qualname = type_name.partition(":")
    if not separator:
        module_name, _, qualname = type_name.rpartition(".")
    if not module_name or not qualname:
        return None
    try:
        resolved: object = importlib.import_module(module_name)
    except ImportError:
        return None
    for attribute in qualname.split("."):
        resolved = getattr(resolved, attribute, None)
        if resolved is None:
            return None
    return resolved if isinstance(resolved, type) else None


__all__ = ["EnumTypeConstraint", "EnumValuesConstraint", "TypeConstraint"]
