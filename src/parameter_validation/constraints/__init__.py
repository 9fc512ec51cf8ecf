"""Constraint kinds understood by the constraint-string parser."""

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
    CharacterSet,
    CharacterSetConstraint,
    EndpointConstraint,
    FileNameConstraint,
    HostNameConstraint,
    LowercaseConstraint,
    PasswordConstraint,
    PathConstraint,
    RegexConstraint,
    RegexOption,
    UppercaseConstraint,
    is_host_name,
)
from parameter_validation.constraints.types import (
    EnumTypeConstraint,
    EnumValuesConstraint,
    TypeConstraint,
)
from parameter_validation.constraints.uri import AllowedSchemeConstraint

__all__ = [
    "ORDERED_DATA_TYPES",
    "STEP_DATA_TYPES",
    "AllowedSchemeConstraint",
    "CharacterSet",
    "CharacterSetConstraint",
    "Constraint",
    "DatabaseConstraint",
    "DecimalPlacesConstraint",
    "DisplayHintConstraint",
    "EncryptedConstraint",
    "EndpointConstraint",
    "EnumTypeConstraint",
    "EnumValuesConstraint",
    "FileNameConstraint",
    "HostNameConstraint",
    "LengthConstraint",
    "LowercaseConstraint",
    "MaximumLengthConstraint",
    "MaximumValueConstraint",
    "MinimumLengthConstraint",
    "MinimumValueConstraint",
    "NullConstraint",
    "PasswordConstraint",
    "PathConstraint",
    "ReadOnlyConstraint",
    "RegexConstraint",
    "RegexOption",
    "StepConstraint",
    "TypeConstraint",
    "UppercaseConstraint",
    "is_host_name",
]
