"""Validation outcome value objects."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from parameter_validation.domain.errors import ErrorCode

if TYPE_CHECKING:
    from parameter_validation.constraints.base import Constraint


@dataclass(frozen=True, slots=True)
class ParameterValidationResult:
    """One validation failure, or the distinguished ``SUCCESS`` sentinel."""

    code: ErrorCode
    message: str
    member_names: tuple[str, ...] = ()
    constraint: Constraint | None = None

    SUCCESS: ClassVar[ParameterValidationResult]

    def __post_init__(self) -> None:
        if not isinstance(self.code, ErrorCode):
            actual = type(self.code).__name__
            raise TypeError(f"ParameterValidationResult.code: expected ErrorCode, got {actual}")
        if not isinstance(self.message, str):
            raise TypeError("ParameterValidationResult.message: expected string")
        if self.code is not ErrorCode.SUCCESS and not self.message.strip():
            raise ValueError("ParameterValidationResult.message: must not be empty")
        object.__setattr__(self, "member_names", _normalize_member_names(self.member_names))

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: str,
        member_name: str | None,
        constraint: Constraint | None,
    ) -> ParameterValidationResult:
        member_names = () if member_name is None else (member_name,)
        return cls(code=code, message=message, member_names=member_names, constraint=constraint)

    @property
    def is_success(self) -> bool:
        return self.code is ErrorCode.SUCCESS

    @property
    def member_name(self) -> str | None:
        return self.member_names[0] if self.member_names else None

    def __str__(self) -> str:
        return self.message


def _normalize_member_names(value: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(value, str):
        value = (value,)
    names: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise TypeError("ParameterValidationResult.member_names: expected strings")
        stripped = item.strip()
        if stripped:
            names.append(stripped)
    return tuple(names)


ParameterValidationResult.SUCCESS = ParameterValidationResult(code=ErrorCode.SUCCESS, message="")

__all__ = ["ParameterValidationResult"]
