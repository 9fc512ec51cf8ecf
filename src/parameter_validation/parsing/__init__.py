"""Constraint-string parsing and the name-to-constraint factory."""

from parameter_validation.constants import KNOWN_CONSTRAINT_NAMES
from parameter_validation.parsing.factory import (
    ConstraintBuilder,
    ConstraintFactory,
    UnknownConstraintHandler,
    default_builders,
)
from parameter_validation.parsing.parser import (
    ConstraintParser,
    ConstraintPosition,
    concat_constraints,
    parse_constraints,
    resolve_handler,
)

__all__ = [
    "KNOWN_CONSTRAINT_NAMES",
    "ConstraintBuilder",
    "ConstraintFactory",
    "ConstraintParser",
    "ConstraintPosition",
    "UnknownConstraintHandler",
    "concat_constraints",
    "default_builders",
    "parse_constraints",
    "resolve_handler",
]
