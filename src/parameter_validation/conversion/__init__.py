"""Invariant conversion between parameter strings and native values."""

from parameter_validation.conversion.parameter_convert import (
    coerce_value,
    maximum_value,
    minimum_value,
    to_data_type,
    to_string,
)

__all__ = [
    "coerce_value",
    "maximum_value",
    "minimum_value",
    "to_data_type",
    "to_string",
]
