"""Unit tests for marker constraints and URI scheme allow-listing."""

from __future__ import annotations

import pytest

from parameter_validation.constraints.base import Constraint
from parameter_validation.constraints.markers import (
    DatabaseConstraint,
    DisplayHintConstraint,
    EncryptedConstraint,
    NullConstraint,
    ReadOnlyConstraint,
)
from parameter_validation.constraints.uri import AllowedSchemeConstraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintConfigurationError,
    ErrorCode,
    InvalidDataTypeError,
)

URI = ParameterDataType.URI


def test_null_constraint_accepts_none() -> None:
    constraint = NullConstraint()
    assert constraint.to_string() == "[Null]"
    assert constraint.validate(None, ParameterDataType.INT32, "port") == ()
    assert constraint.validate(5, ParameterDataType.INT32, "port") == ()


@pytest.mark.parametrize(
    ("constraint", "text"),
    [(EncryptedConstraint(), "[Encrypted]"), (ReadOnlyConstraint(), "[ReadOnly]")],
)
def test_flag_markers_never_fail(constraint: Constraint, text: str) -> None:
    assert str(constraint) == text
    assert constraint.validate("anything", ParameterDataType.STRING, "field") == ()
    with pytest.raises(ValueError, match="value must not be None"):
        constraint.validate(None, ParameterDataType.STRING, "field")


def test_display_hint_keeps_hints() -> None:
    constraint = DisplayHintConstraint()
    constraint.set_parameters(("Multiline", "Wide"), ParameterDataType.STRING)
    assert constraint.hints == ("Multiline", "Wide")
    assert constraint.to_string() == "[DisplayHint(Multiline,Wide)]"
    assert DisplayHintConstraint("Compact").hints == ("Compact",)
    with pytest.raises(ConstraintConfigurationError):
        constraint.set_parameters((), ParameterDataType.STRING)
    with pytest.raises(ConstraintConfigurationError, match=r"hints\[1\] ' ': must be"):
        constraint.set_parameters(("Wide", " "), ParameterDataType.STRING)


def test_display_hint_error_names_the_blank_hint() -> None:
    constraint = DisplayHintConstraint("Wide")
    with pytest.raises(ConstraintConfigurationError) as exc_info:
        constraint.set_parameters(("a", "b c", ""), ParameterDataType.STRING)
    assert str(exc_info.value) == (
        "invalid parameter for constraint 'DisplayHint': hints[2] '': must be a non-empty string"
    )
    assert exc_info.value.constraint is constraint
    assert constraint.hints == ("Wide",)
    with pytest.raises(ValueError, match=r"hints\[0\] ''"):
        DisplayHintConstraint(("",))


def test_database_constraint_parameters() -> None:
    assert DatabaseConstraint().to_string() == "[Database('')]"

    constraint = DatabaseConstraint()
    constraint.set_parameters(("Users", "Id"), ParameterDataType.INT32)
    assert constraint.entity == "Users"
    assert constraint.key_property == "Id"
    assert constraint.display_property == ""
    assert constraint.to_string() == "[Database(Users,Id)]"
    assert DatabaseConstraint("Users", "Id", "Name").parameters == ("Users", "Id", "Name")
    with pytest.raises(ConstraintConfigurationError, match="1 to 3 parameter"):
        constraint.set_parameters(("a", "b", "c", "d"), ParameterDataType.INT32)


def test_allowed_scheme_defaults_to_http() -> None:
    constraint = AllowedSchemeConstraint()
    assert constraint.schemes == ("http", "https")
    assert constraint.validate("HTTPS://example.org", URI, "endpoint") == ()

    results = constraint.validate("ftp://example.org", URI, "endpoint", "Endpoint")
    assert [item.code for item in results] == [ErrorCode.SCHEME_NOT_ALLOWED]
    assert results[0].message == "Endpoint must use one of the schemes: http, https"


def test_allowed_scheme_parameters() -> None:
    constraint = AllowedSchemeConstraint()
    constraint.set_parameters(("ftp", "sftp"), URI)
    assert constraint.to_string() == "[AllowedScheme(ftp,sftp)]"
    assert constraint.validate("sftp://host/file", URI, "target") == ()
    assert constraint.validate("relative/path", URI, "target") != ()
    with pytest.raises(ConstraintConfigurationError, match="non-empty schemes"):
        constraint.set_parameters((), URI)
    with pytest.raises(InvalidDataTypeError):
        constraint.set_parameters(("ftp",), ParameterDataType.STRING)
    with pytest.raises(InvalidDataTypeError):
        constraint.validate("http://x", ParameterDataType.STRING, "target")
