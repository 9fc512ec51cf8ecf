"""URI scheme allow-listing."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast
from urllib.parse import urlsplit

from parameter_validation.constants import ALLOWED_SCHEME_CONSTRAINT_NAME
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import ConstraintConfigurationError, ErrorCode
from parameter_validation.domain.results import ParameterValidationResult


class AllowedSchemeConstraint(Constraint):
    """URI scheme must be one of the configured schemes (case-insensitive)."""

    __slots__ = ("_schemes",)

    def __init__(self, schemes: Sequence[str] | str = ("http", "https")) -> None:
        super().__init__(ALLOWED_SCHEME_CONSTRAINT_NAME)
        if isinstance(schemes, str):
            schemes = (schemes,)
        self._schemes = _check_schemes(schemes)

    @property
    def schemes(self) -> tuple[str, ...]:
        return self._schemes

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.extend(self._schemes)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, ParameterDataType.URI)
        try:
            self._schemes = _check_schemes(parameters)
        except ValueError as exc:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires one or more non-empty schemes", self
            ) from exc

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, ParameterDataType.URI)
        uri = cast("str", self._native_value(value, data_type))
        try:
            scheme = urlsplit(uri.strip()).scheme
        except ValueError:
            scheme = ""
        if scheme.lower() not in {item.lower() for item in self._schemes}:
            allowed = ", ".join(self._schemes)
            results.append(
                self._failure(
                    ErrorCode.SCHEME_NOT_ALLOWED,
                    f"{display_name} must use one of the schemes: {allowed}",
                    member_name,
                )
            )


def _check_schemes(schemes: Sequence[str]) -> tuple[str, ...]:
    if not schemes:
        raise ValueError("schemes: at least one scheme is required")
    checked: list[str] = []
    for index, scheme in enumerate(schemes):
        if not isinstance(scheme, str) or not scheme.strip():
            raise ValueError(f"schemes[{index}]: must be a non-empty string")
        checked.append(scheme.strip())
    return tuple(checked)


__all__ = ["AllowedSchemeConstraint"]
