"""Closed set of parameter data types and their native Python representations."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum
from typing import Final

from parameter_validation.domain.version import Version


class ParameterDataType(StrEnum):
    """Logical data type of a parameter; values are the names used in constraint strings."""

    NONE = "None"
    BOOL = "Bool"
    BYTE = "Byte"
    BYTES = "Bytes"
    DATE_TIME_OFFSET = "DateTimeOffset"
    DECIMAL = "Decimal"
    ENUM = "Enum"
    GUID = "Guid"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    SIGNED_BYTE = "SignedByte"
    STRING = "String"
    TIME_SPAN = "TimeSpan"
    UINT16 = "UInt16"
    UINT32 = "UInt32"
    UINT64 = "UInt64"
    URI = "Uri"
    VERSION = "Version"
    XML = "Xml"


_INTEGER_RANGES: Final[dict[ParameterDataType, tuple[int, int]]] = {
    ParameterDataType.BYTE: (0, 0xFF),
    ParameterDataType.SIGNED_BYTE: (-0x80, 0x7F),
    ParameterDataType.INT16: (-0x8000, 0x7FFF),
    ParameterDataType.UINT16: (0, 0xFFFF),
    ParameterDataType.INT32: (-0x8000_0000, 0x7FFF_FFFF),
    ParameterDataType.UINT32: (0, 0xFFFF_FFFF),
    ParameterDataType.INT64: (-0x8000_0000_0000_0000, 0x7FFF_FFFF_FFFF_FFFF),
    ParameterDataType.UINT64: (0, 0xFFFF_FFFF_FFFF_FFFF),
}

_NATIVE_TYPES: Final[dict[ParameterDataType, type]] = {
    ParameterDataType.BOOL: bool,
    ParameterDataType.BYTES: bytes,
    ParameterDataType.DATE_TIME_OFFSET: datetime,
    ParameterDataType.DECIMAL: Decimal,
    ParameterDataType.ENUM: enum.Enum,
    ParameterDataType.GUID: uuid.UUID,
    ParameterDataType.STRING: str,
    ParameterDataType.TIME_SPAN: timedelta,
    ParameterDataType.URI: str,
    ParameterDataType.VERSION: Version,
    ParameterDataType.XML: str,
    **{data_type: int for data_type in _INTEGER_RANGES},
}

# Checked in order; bool before int and Enum before int because of subclassing.
_DATA_TYPES_BY_NATIVE: Final[tuple[tuple[type, ParameterDataType], ...]] = (
    (bool, ParameterDataType.BOOL),
    (enum.Enum, ParameterDataType.ENUM),
    (int, ParameterDataType.INT64),
    (bytes, ParameterDataType.BYTES),
    (datetime, ParameterDataType.DATE_TIME_OFFSET),
    (Decimal, ParameterDataType.DECIMAL),
    (uuid.UUID, ParameterDataType.GUID),
    (str, ParameterDataType.STRING),
    (timedelta, ParameterDataType.TIME_SPAN),
    (Version, ParameterDataType.VERSION),
)


def coerce_data_type(value: object, path: str = "data_type") -> ParameterDataType:
    """Return ``value`` as a ``ParameterDataType``; accepts members or their names."""

    if isinstance(value, ParameterDataType):
        return value
    if isinstance(value, str):
        try:
            return ParameterDataType(value.strip())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in ParameterDataType)
            raise ValueError(
                f"{path}: unknown data type {value!r}; expected one of {allowed}"
            ) from exc
    raise TypeError(f"{path}: expected ParameterDataType, got {type(value).__name__}")


def is_integer_type(data_type: ParameterDataType) -> bool:
    return data_type in _INTEGER_RANGES


def integer_range(data_type: ParameterDataType) -> tuple[int, int]:
    """Return the inclusive ``(minimum, maximum)`` range of an integer data type."""

    try:
        return _INTEGER_RANGES[data_type]
    except KeyError as exc:
        raise ValueError(f"data_type: {data_type.value} is not an integer type") from exc


def native_type_for(data_type: ParameterDataType) -> type:
    """Return the Python type that represents values of ``data_type``."""

    try:
        return _NATIVE_TYPES[data_type]
    except KeyError as exc:
        raise ValueError(f"data_type: {data_type.value} has no native representation") from exc


def data_type_for(native_type: type) -> ParameterDataType:
    """Return the default data type for a Python type."""

    if not isinstance(native_type, type):
        raise TypeError(f"native_type: expected a type, got {type(native_type).__name__}")
    for candidate, data_type in _DATA_TYPES_BY_NATIVE:
        if issubclass(native_type, candidate):
            return data_type
    raise ValueError(f"native_type: {native_type.__qualname__} is not supported")


__all__ = [
    "ParameterDataType",
    "coerce_data_type",
    "data_type_for",
    "integer_range",
    "is_integer_type",
    "native_type_for",
]
