"""
parameter-validation — unit tests for enumeration and type constraints

File: tests/unit/constraints/test_enum_constraints.py

Purpose
- Validate explicit Values lists, flag combinations, and Type resolution by import path.
"""

from __future__ import annotations

import enum
import http
import re
import xml.etree.ElementTree as ElementTree

import pytest

from parameter_validation.constraints.base import Constraint
from parameter_validation.constraints.types import (
    EnumTypeConstraint,
    EnumValuesConstraint,
    TypeConstraint,
)
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintConfigurationError,
    ErrorCode,
    InvalidDataTypeError,
)

ENUM = ParameterDataType.ENUM


class Permission(enum.IntFlag):
    READ = 1
    WRITE = 2


def _codes(constraint: Constraint, value: object) -> list[ErrorCode]:
    return [item.code for item in constraint.validate(value, ENUM, "color")]


def test_values_parameters_accept_hex_and_render_decimal() -> None:
    constraint = EnumValuesConstraint()
    constraint.set_parameters(("Int32", "Red=1", "Green=0x2"), ENUM)
    assert constraint.underlying_data_type is ParameterDataType.INT32
    assert not constraint.has_flags
    assert constraint.values == {"Red": 1, "Green": 2}
    assert constraint.to_string() == "[Values(Int32,Red=1,Green=2)]"
    assert _codes(constraint, 2) == []

    results = constraint.validate(5, ENUM, "color", "Color")
    assert [item.code for item in results] == [ErrorCode.ENUM_VALUE_NOT_DEFINED]
    assert results[0].message == "Color has the undefined value 5"


def test_values_with_flags_check_combinations() -> None:
    constraint = EnumValuesConstraint()
    constraint.set_parameters(("Byte", "Flags", "Read=1", "Write=2"), ENUM)
    assert constraint.has_flags
    assert constraint.to_string() == "[Values(Byte,Flags,Read=1,Write=2)]"
    assert _codes(constraint, 3) == []
    assert _codes(constraint, Permission.READ | Permission.WRITE) == []
    assert _codes(constraint, 4) == [ErrorCode.ENUM_FLAG_NOT_DEFINED]


@pytest.mark.parametrize(
    ("parameters", "message"),
    [
        (("String", "A=1"), "not an integer data type"),
        (("Colour", "A=1"), "not a parameter data type"),
        (("Byte", "A=300"), "outside the Byte range"),
        (("Int32",), "at least 2 parameter"),
        (("Int32", "Flags"), "at least one name=value pair"),
        (("Int32", "A"), "is not a name=value pair"),
        (("Int32", "A=blue"), "is not a valid value"),
    ],
)
def test_values_rejects_bad_parameters(parameters: tuple[str, ...], message: str) -> None:
    with pytest.raises(ConstraintConfigurationError, match=message):
        EnumValuesConstraint().set_parameters(parameters, ENUM)


def test_values_from_enum_and_guards() -> None:
    constraint = EnumValuesConstraint.from_enum(http.HTTPStatus)
    assert constraint.underlying_data_type is ParameterDataType.INT32
    assert constraint.values["NOT_FOUND"] == 404
    assert _codes(constraint, http.HTTPStatus.OK) == []
    assert _codes(constraint, "x") == [ErrorCode.VALUE_TYPE_NOT_SUPPORTED]
    assert EnumValuesConstraint.from_enum(Permission).has_flags

    with pytest.raises(ConstraintConfigurationError, match="no enumeration values"):
        EnumValuesConstraint().validate(1, ENUM, "color")
    with pytest.raises(InvalidDataTypeError):
        EnumValuesConstraint().set_parameters(("Int32", "A=1"), ParameterDataType.INT32)
    with pytest.raises(ValueError, match="outside Byte"):
        EnumValuesConstraint(ParameterDataType.BYTE, values={"Big": 256})
    with pytest.raises(TypeError, match="expected an Enum subclass"):
        EnumValuesConstraint.from_enum(int)  # type: ignore[arg-type]


def test_enum_type_constraint_checks_members() -> None:
    constraint = EnumTypeConstraint("http:HTTPStatus")
    assert constraint.resolved_type is http.HTTPStatus
    assert not constraint.has_flags
    assert constraint.to_string() == "[Type(http:HTTPStatus)]"
    assert _codes(constraint, http.HTTPStatus.CREATED) == []
    assert _codes(constraint, 404) == []
    assert _codes(constraint, 299) == [ErrorCode.ENUM_VALUE_NOT_DEFINED]
    assert _codes(constraint, re.IGNORECASE) == [ErrorCode.ENUM_TYPE_MISMATCH]
    assert _codes(constraint, "OK") == [ErrorCode.VALUE_TYPE_NOT_SUPPORTED]


def test_enum_type_constraint_checks_flags() -> None:
    constraint = EnumTypeConstraint("re:RegexFlag")
    assert constraint.has_flags
    assert _codes(constraint, re.IGNORECASE | re.MULTILINE) == []
    assert _codes(constraint, 1024) == [ErrorCode.ENUM_FLAG_NOT_DEFINED]


def test_type_names_resolve_lazily() -> None:
    missing = EnumTypeConstraint("no_such_module:Thing")
    assert missing.resolved_type is None
    assert not missing.has_flags
    assert missing.validate(7, ENUM, "color") == ()

    dotted = EnumTypeConstraint()
    dotted.set_parameters(("http.HTTPStatus",), ENUM)
    assert dotted.type_name == "http.HTTPStatus"
    assert dotted.resolved_type is http.HTTPStatus

    with pytest.raises(ConstraintConfigurationError, match="exactly 1 parameter"):
        dotted.set_parameters(("a", "b"), ENUM)
    with pytest.raises(InvalidDataTypeError):
        dotted.set_parameters(("http:HTTPStatus",), ParameterDataType.XML)


def test_xml_type_constraint() -> None:
    constraint = TypeConstraint()
    constraint.set_parameters(("xml.etree.ElementTree:Element",), ParameterDataType.XML)
    assert constraint.resolved_type is ElementTree.Element
    assert constraint.validate("<a/>", ParameterDataType.XML, "payload") == ()
    with pytest.raises(InvalidDataTypeError):
        constraint.set_parameters(("http:HTTPStatus",), ENUM)
    with pytest.raises(ValueError, match="type_name: must not be empty"):
        TypeConstraint(" ")
