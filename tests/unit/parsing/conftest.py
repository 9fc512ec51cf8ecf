"""Shared fixtures for parser tests: a ``Dummy`` constraint supplied by a handler."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.parsing.factory import ConstraintFactory
from parameter_validation.parsing.parser import ConstraintParser


class DummyConstraint(Constraint):
    """Records raw parameters; ``argex``/``typex`` trigger configuration failures."""

    __slots__ = ("raw_parameters",)

    def __init__(self) -> None:
        super().__init__("Dummy")
        self.raw_parameters: tuple[str, ...] | None = None

    def get_parameters(self, parameters: list[str]) -> None:
        parameters.extend(self.raw_parameters or ())

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        if "argex" in parameters:
            raise ValueError("argex")
        if "typex" in parameters:
            raise TypeError("typex")
        self.raw_parameters = tuple(parameters)


def dummy_handler(name: str, data_type: ParameterDataType) -> Constraint | None:
    return DummyConstraint() if name == "Dummy" else None


@pytest.fixture(scope="session")
def dummy_parser() -> ConstraintParser:
    return ConstraintParser(ConstraintFactory(handlers=(dummy_handler,)))
