"""Stable constants shared by the parser, factory, and constraint kinds."""

from __future__ import annotations

from typing import Final

# Well-known constraint names.
ALLOWED_SCHEME_CONSTRAINT_NAME: Final[str] = "AllowedScheme"
CHARACTER_SET_CONSTRAINT_NAME: Final[str] = "CharSet"
DATABASE_CONSTRAINT_NAME: Final[str] = "Database"
DECIMAL_PLACES_CONSTRAINT_NAME: Final[str] = "DecimalPlaces"
DISPLAY_HINT_CONSTRAINT_NAME: Final[str] = "DisplayHint"
ENCRYPTED_CONSTRAINT_NAME: Final[str] = "Encrypted"
ENDPOINT_CONSTRAINT_NAME: Final[str] = "Endpoint"
ENUM_VALUES_CONSTRAINT_NAME: Final[str] = "Values"
FILE_NAME_CONSTRAINT_NAME: Final[str] = "FileName"
HOST_NAME_CONSTRAINT_NAME: Final[str] = "Host"
LENGTH_CONSTRAINT_NAME: Final[str] = "Length"
LOWERCASE_CONSTRAINT_NAME: Final[str] = "Lowercase"
MAXIMUM_LENGTH_CONSTRAINT_NAME: Final[str] = "MaxLength"
MAXIMUM_VALUE_CONSTRAINT_NAME: Final[str] = "MaxValue"
MINIMUM_LENGTH_CONSTRAINT_NAME: Final[str] = "MinLength"
MINIMUM_VALUE_CONSTRAINT_NAME: Final[str] = "MinValue"
NULL_CONSTRAINT_NAME: Final[str] = "Null"
PASSWORD_CONSTRAINT_NAME: Final[str] = "Password"
PATH_CONSTRAINT_NAME: Final[str] = "Path"
READ_ONLY_CONSTRAINT_NAME: Final[str] = "ReadOnly"
REGEX_CONSTRAINT_NAME: Final[str] = "Regex"
STEP_CONSTRAINT_NAME: Final[str] = "Step"
TYPE_CONSTRAINT_NAME: Final[str] = "Type"
UPPERCASE_CONSTRAINT_NAME: Final[str] = "Uppercase"

KNOWN_CONSTRAINT_NAMES: Final[frozenset[str]] = frozenset(
    {
        ALLOWED_SCHEME_CONSTRAINT_NAME,
        CHARACTER_SET_CONSTRAINT_NAME,
        DATABASE_CONSTRAINT_NAME,
        DECIMAL_PLACES_CONSTRAINT_NAME,
        DISPLAY_HINT_CONSTRAINT_NAME,
        ENCRYPTED_CONSTRAINT_NAME,
        ENDPOINT_CONSTRAINT_NAME,
        ENUM_VALUES_CONSTRAINT_NAME,
        FILE_NAME_CONSTRAINT_NAME,
        HOST_NAME_CONSTRAINT_NAME,
        LENGTH_CONSTRAINT_NAME,
        LOWERCASE_CONSTRAINT_NAME,
        MAXIMUM_LENGTH_CONSTRAINT_NAME,
        MAXIMUM_VALUE_CONSTRAINT_NAME,
        MINIMUM_LENGTH_CONSTRAINT_NAME,
        MINIMUM_VALUE_CONSTRAINT_NAME,
        NULL_CONSTRAINT_NAME,
        PASSWORD_CONSTRAINT_NAME,
        PATH_CONSTRAINT_NAME,
        READ_ONLY_CONSTRAINT_NAME,
        REGEX_CONSTRAINT_NAME,
        STEP_CONSTRAINT_NAME,
        TYPE_CONSTRAINT_NAME,
        UPPERCASE_CONSTRAINT_NAME,
    }
)

# Constraint-string delimiters.
CONSTRAINT_START: Final[str] = "["
CONSTRAINT_END: Final[str] = "]"
PARAMETERS_START: Final[str] = "("
PARAMETERS_END: Final[str] = ")"
PARAMETER_SEPARATOR: Final[str] = ","
PARAMETER_MASK: Final[str] = "'"
SPACE: Final[str] = " "

# Characters that force a parameter to be quoted when serialized.
MASKED_CHARACTERS: Final[frozenset[str]] = frozenset(
    {
        CONSTRAINT_START,
        CONSTRAINT_END,
        PARAMETERS_START,
        PARAMETERS_END,
        PARAMETER_SEPARATOR,
        PARAMETER_MASK,
    }
)

# Constraints moved to the front of a stored constraint string, in this order.
LEADING_CONSTRAINT_NAMES: Final[tuple[str, ...]] = (
    NULL_CONSTRAINT_NAME,
    ENCRYPTED_CONSTRAINT_NAME,
)

CONFIG_SCHEMA_VERSION: Final[int] = 1
CONFIG_FILE_NAME: Final[str] = "paramval.toml"
ENV_VAR_PREFIX: Final[str] = "PARAMVAL_"

__all__ = [
    "ALLOWED_SCHEME_CONSTRAINT_NAME",
    "CHARACTER_SET_CONSTRAINT_NAME",
    "CONFIG_FILE_NAME",
    "CONFIG_SCHEMA_VERSION",
    "CONSTRAINT_END",
    "CONSTRAINT_START",
    "DATABASE_CONSTRAINT_NAME",
    "DECIMAL_PLACES_CONSTRAINT_NAME",
    "DISPLAY_HINT_CONSTRAINT_NAME",
    "ENCRYPTED_CONSTRAINT_NAME",
    "ENDPOINT_CONSTRAINT_NAME",
    "ENUM_VALUES_CONSTRAINT_NAME",
    "ENV_VAR_PREFIX",
    "FILE_NAME_CONSTRAINT_NAME",
    "HOST_NAME_CONSTRAINT_NAME",
    "KNOWN_CONSTRAINT_NAMES",
    "LEADING_CONSTRAINT_NAMES",
    "LENGTH_CONSTRAINT_NAME",
    "LOWERCASE_CONSTRAINT_NAME",
    "MASKED_CHARACTERS",
    "MAXIMUM_LENGTH_CONSTRAINT_NAME",
    "MAXIMUM_VALUE_CONSTRAINT_NAME",
    "MINIMUM_LENGTH_CONSTRAINT_NAME",
    "MINIMUM_VALUE_CONSTRAINT_NAME",
    "NULL_CONSTRAINT_NAME",
    "PARAMETERS_END",
    "PARAMETERS_START",
    "PARAMETER_MASK",
    "PARAMETER_SEPARATOR",
    "PASSWORD_CONSTRAINT_NAME",
    "PATH_CONSTRAINT_NAME",
    "READ_ONLY_CONSTRAINT_NAME",
    "REGEX_CONSTRAINT_NAME",
    "SPACE",
    "STEP_CONSTRAINT_NAME",
    "TYPE_CONSTRAINT_NAME",
    "UPPERCASE_CONSTRAINT_NAME",
]
