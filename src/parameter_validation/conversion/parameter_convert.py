"""Invariant string <-> typed value conversion for every ``ParameterDataType``.

Lexical forms follow XML schema conventions so that constraint parameters and
serialized setting values are culture-independent:

- Bool: ``true``/``false``/``1``/``0``
- integer kinds: optional sign and decimal digits, range-checked per type
- Bytes: base64
- DateTimeOffset: ISO 8601 with a mandatory UTC offset
- TimeSpan: ISO 8601 duration (``P1DT2H3M4.5S``)
- Decimal: plain decimal notation without exponent
- Enum: member name(s) or integer value, resolved through a ``Type`` constraint
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
import uuid
import xml.etree.ElementTree as ElementTree
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from parameter_validation.domain.data_types import (
    ParameterDataType,
    integer_range,
    is_integer_type,
)
from parameter_validation.domain.errors import ParameterConversionError
from parameter_validation.domain.version import Version

if TYPE_CHECKING:
    from parameter_validation.constraints.types import TypeConstraint

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"true", "1"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"false", "0"})
_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE: Final[re.Pattern[str]] = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_DURATION_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<sign>-)?P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

_MICROSECONDS_PER_SECOND: Final[int] = 1_000_000
_MICROSECONDS_PER_MINUTE: Final[int] = 60 * _MICROSECONDS_PER_SECOND
_MICROSECONDS_PER_HOUR: Final[int] = 60 * _MICROSECONDS_PER_MINUTE
_MICROSECONDS_PER_DAY: Final[int] = 24 * _MICROSECONDS_PER_HOUR

# Bounds of a 96-bit scaled decimal, used as the MinValue/MaxValue defaults.
_DECIMAL_MAX: Final[Decimal] = Decimal("79228162514264337593543950335")

_MINIMUM_VALUES: Final[dict[ParameterDataType, object]] = {
    ParameterDataType.DATE_TIME_OFFSET: datetime.min.replace(tzinfo=UTC),
    ParameterDataType.DECIMAL: -_DECIMAL_MAX,
    ParameterDataType.TIME_SPAN: timedelta.min,
    ParameterDataType.VERSION: Version.MIN,
}
_MAXIMUM_VALUES: Final[dict[ParameterDataType, object]] = {
    ParameterDataType.DATE_TIME_OFFSET: datetime.max.replace(tzinfo=UTC),
    ParameterDataType.DECIMAL: _DECIMAL_MAX,
    ParameterDataType.TIME_SPAN: timedelta.max,
    ParameterDataType.VERSION: Version.MAX,
}


def to_data_type(
    text: str,
    data_type: ParameterDataType,
    type_constraint: TypeConstraint | None = None,
) -> object:
    """Convert ``text`` into the native value for ``data_type``."""

    if not isinstance(text, str):
        raise ParameterConversionError(data_type, text, "value to convert must be a string")
    if data_type is ParameterDataType.NONE:
        raise ValueError("data_type: must not be None")
    if is_integer_type(data_type):
        return _parse_integer(text, data_type)
    if data_type is ParameterDataType.ENUM:
        return _parse_enum(text, type_constraint)
    parser = _PARSERS.get(data_type)
    if parser is None:
        raise ParameterConversionError(data_type, text, f"no converter for {data_type.value}")
    try:
        return parser(text)
    except ParameterConversionError:
        raise
    except (ValueError, TypeError, InvalidOperation, binascii.Error) as exc:
        raise ParameterConversionError(data_type, text) from exc


def to_string(
    value: object,
    data_type: ParameterDataType,
    type_constraint: TypeConstraint | None = None,
) -> str:
    """Render ``value`` in the invariant lexical form for ``data_type``."""

    if data_type is ParameterDataType.NONE:
        raise ValueError("data_type: must not be None")
    native = coerce_value(value, data_type, type_constraint)
    if data_type is ParameterDataType.BOOL:
        return "true" if native else "false"
    if data_type is ParameterDataType.BYTES:
        return base64.b64encode(native).decode("ascii")  # type: ignore[arg-type]
    if data_type is ParameterDataType.DATE_TIME_OFFSET:
        return native.isoformat()  # type: ignore[attr-defined]
    if data_type is ParameterDataType.DECIMAL:
        return format(native, "f")
    if data_type is ParameterDataType.TIME_SPAN:
        return _format_duration(native)  # type: ignore[arg-type]
    if data_type is ParameterDataType.ENUM:
        return _format_enum(native)
    return str(native)


def coerce_value(
    value: object,
    data_type: ParameterDataType,
    type_constraint: TypeConstraint | None = None,
) -> object:
    """Return ``value`` in the native representation for ``data_type``.

    Compatible values are widened (``int`` to ``Decimal``, integer to enum member);
    anything else raises ``ParameterConversionError``.
    """

    if value is None:
        raise ParameterConversionError(data_type, value, "value must not be None")
    if is_integer_type(data_type):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParameterConversionError(data_type, value)
        minimum, maximum = integer_range(data_type)
        if not minimum <= value <= maximum:
            raise ParameterConversionError(
                data_type, value, f"{value} is outside the {data_type.value} range"
            )
        return int(value)
    if data_type is ParameterDataType.BOOL and isinstance(value, bool):
        return value
    if data_type is ParameterDataType.BYTES and isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if data_type is ParameterDataType.DATE_TIME_OFFSET and isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise ParameterConversionError(data_type, value, "datetime must be timezone-aware")
        return value
    if data_type is ParameterDataType.DECIMAL:
        if isinstance(value, Decimal) and value.is_finite():
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return Decimal(value)
        raise ParameterConversionError(data_type, value)
    if data_type is ParameterDataType.GUID and isinstance(value, uuid.UUID):
        return value
    if data_type is ParameterDataType.TIME_SPAN and isinstance(value, timedelta):
        return value
    if data_type is ParameterDataType.VERSION and isinstance(value, Version):
        return value
    if data_type in (
        ParameterDataType.STRING,
        ParameterDataType.URI,
        ParameterDataType.XML,
    ) and isinstance(value, str):
        return value
    if data_type is ParameterDataType.ENUM:
        return _coerce_enum(value, type_constraint)
    raise ParameterConversionError(data_type, value)


def minimum_value(data_type: ParameterDataType) -> object:
    """Return the smallest representable value of an ordered data type."""

    if is_integer_type(data_type):
        return integer_range(data_type)[0]
    try:
        return _MINIMUM_VALUES[data_type]
    except KeyError as exc:
        raise ValueError(f"data_type: {data_type.value} is not an ordered type") from exc


def maximum_value(data_type: ParameterDataType) -> object:
    """Return the largest representable value of an ordered data type."""

    if is_integer_type(data_type):
        return integer_range(data_type)[1]
    try:
        return _MAXIMUM_VALUES[data_type]
    except KeyError as exc:
        raise ValueError(f"data_type: {data_type.value} is not an ordered type") from exc


def _parse_integer(text: str, data_type: ParameterDataType) -> int:
    normalized = text.strip()
    if _INTEGER_RE.fullmatch(normalized) is None:
        raise ParameterConversionError(data_type, text)
    parsed = int(normalized)
    minimum, maximum = integer_range(data_type)
    if not minimum <= parsed <= maximum:
        raise ParameterConversionError(
            data_type, text, f"{parsed} is outside the {data_type.value} range"
        )
    return parsed


def _parse_bool(text: str) -> bool:
    normalized = text.strip()
    if normalized in _BOOLEAN_TRUE:
        return True
    if normalized in _BOOLEAN_FALSE:
        return False
    raise ParameterConversionError(ParameterDataType.BOOL, text)


def _parse_bytes(text: str) -> bytes:
    return base64.b64decode(text.strip(), validate=True)


def _parse_datetime(text: str) -> datetime:
    parsed = datetime.fromisoformat(text.strip())
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise ParameterConversionError(
            ParameterDataType.DATE_TIME_OFFSET, text, "timestamp must include a UTC offset"
        )
    return parsed


def _parse_decimal(text: str) -> Decimal:
    normalized = text.strip()
    if _DECIMAL_RE.fullmatch(normalized) is None:
        raise ParameterConversionError(ParameterDataType.DECIMAL, text)
    return Decimal(normalized)


def _parse_duration(text: str) -> timedelta:
    normalized = text.strip()
    match = _DURATION_RE.fullmatch(normalized)
    if match is None or normalized.endswith(("P", "T")):
        raise ParameterConversionError(ParameterDataType.TIME_SPAN, text)
    total = 0
    for group, scale in (
        ("days", _MICROSECONDS_PER_DAY),
        ("hours", _MICROSECONDS_PER_HOUR),
        ("minutes", _MICROSECONDS_PER_MINUTE),
    ):
        raw = match.group(group)
        if raw is not None:
            total += int(raw) * scale
    seconds = match.group("seconds")
    if seconds is not None:
        total += int((Decimal(seconds) * _MICROSECONDS_PER_SECOND).to_integral_value())
    if match.group("sign"):
        total = -total
    return timedelta(microseconds=total)


def _format_duration(value: timedelta) -> str:
    total = (value.days * 86_400 + value.seconds) * _MICROSECONDS_PER_SECOND + value.microseconds
    sign = "-" if total < 0 else ""
    days, remainder = divmod(abs(total), _MICROSECONDS_PER_DAY)
    hours, remainder = divmod(remainder, _MICROSECONDS_PER_HOUR)
    minutes, remainder = divmod(remainder, _MICROSECONDS_PER_MINUTE)
    seconds, micros = divmod(remainder, _MICROSECONDS_PER_SECOND)

    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if seconds or micros:
        rendered = str(seconds) if not micros else f"{seconds}.{micros:06d}".rstrip("0")
        time_part += f"{rendered}S"

    if not days and not time_part:
        return "PT0S"
    rendered_days = f"{days}D" if days else ""
    rendered_time = f"T{time_part}" if time_part else ""
    return f"{sign}P{rendered_days}{rendered_time}"


def _parse_guid(text: str) -> uuid.UUID:
    return uuid.UUID(text.strip())


def _parse_uri(text: str) -> str:
    normalized = text.strip()
    urlsplit(normalized)
    return normalized


def _parse_xml(text: str) -> str:
    try:
        ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        message = f"malformed XML: {exc}"
        raise ParameterConversionError(ParameterDataType.XML, text, message) from exc
    return text


def _resolved_enum(type_constraint: TypeConstraint | None, value: object) -> type[enum.Enum]:
    resolved = type_constraint.resolved_type if type_constraint is not None else None
    if resolved is None or not issubclass(resolved, enum.Enum):
        raise ParameterConversionError(
            ParameterDataType.ENUM,
            value,
            "enum conversion requires a Type constraint that resolves to an Enum",
        )
    return resolved


def _parse_enum(text: str, type_constraint: TypeConstraint | None) -> enum.Enum:
    enum_type = _resolved_enum(type_constraint, text)
    normalized = text.strip()
    if _INTEGER_RE.fullmatch(normalized) is not None:
        return _coerce_enum(int(normalized), type_constraint)

    names = [part.strip() for part in normalized.split(",")]
    members: list[enum.Enum] = []
    for name in names:
        try:
            members.append(enum_type[name])
        except KeyError as exc:
            raise ParameterConversionError(
                ParameterDataType.ENUM, text, f"{name!r} is not a member of {enum_type.__name__}"
            ) from exc
    if len(members) == 1:
        return members[0]
    if not issubclass(enum_type, enum.Flag):
        raise ParameterConversionError(
            ParameterDataType.ENUM, text, f"{enum_type.__name__} does not combine flags"
        )
    combined = members[0]
    for member in members[1:]:
        combined = combined | member  # type: ignore[operator]
    return combined


def _coerce_enum(value: object, type_constraint: TypeConstraint | None) -> enum.Enum:
    if isinstance(value, enum.Enum) and type_constraint is None:
        return value
    enum_type = _resolved_enum(type_constraint, value)
    if isinstance(value, enum_type):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_type(value)
        except ValueError as exc:
            raise ParameterConversionError(
                ParameterDataType.ENUM, value, f"{value} is not a value of {enum_type.__name__}"
            ) from exc
    raise ParameterConversionError(ParameterDataType.ENUM, value)


def _format_enum(value: object) -> str:
    if isinstance(value, enum.Flag):
        names = [member.name for member in value if member.name is not None]
        return ", ".join(names) if names else str(value.value)
    if isinstance(value, enum.Enum):
        return value.name
    raise ParameterConversionError(ParameterDataType.ENUM, value)


_PARSERS: Final[dict[ParameterDataType, Callable[[str], object]]] = {
    ParameterDataType.BOOL: _parse_bool,
    ParameterDataType.BYTES: _parse_bytes,
    ParameterDataType.DATE_TIME_OFFSET: _parse_datetime,
    ParameterDataType.DECIMAL: _parse_decimal,
    ParameterDataType.GUID: _parse_guid,
    ParameterDataType.STRING: str,
    ParameterDataType.TIME_SPAN: _parse_duration,
    ParameterDataType.URI: _parse_uri,
    ParameterDataType.VERSION: Version.parse,
    ParameterDataType.XML: _parse_xml,
}

__all__ = [
    "coerce_value",
    "maximum_value",
    "minimum_value",
    "to_data_type",
    "to_string",
]
