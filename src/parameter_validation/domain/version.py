"""Dotted numeric version value object (major.minor[.build[.revision]])."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Final

_PART_MAX: Final[int] = 0x7FFF_FFFF
_VERSION_RE: Final[re.Pattern[str]] = re.compile(r"^\d+(?:\.\d+){1,3}$")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """Ordered version with two to four non-negative components.

    Missing ``build``/``revision`` components are stored as ``-1`` so that
    ``1.2`` sorts before ``1.2.0``.
    """

    major: int
    minor: int
    build: int = -1
    revision: int = -1

    MIN: ClassVar[Version]
    MAX: ClassVar[Version]

    def __post_init__(self) -> None:
        for field_name in ("major", "minor"):
            _check_part(getattr(self, field_name), field_name, allow_unset=False)
        _check_part(self.build, "build", allow_unset=True)
        _check_part(self.revision, "revision", allow_unset=True)
        if self.build < 0 and self.revision >= 0:
            raise ValueError("Version.revision: requires build to be set")

    @classmethod
    def parse(cls, text: str) -> Version:
        if not isinstance(text, str):
            raise TypeError(f"Version: expected string, got {type(text).__name__}")
        normalized = text.strip()
        if _VERSION_RE.fullmatch(normalized) is None:
            raise ValueError(f"Version: {text!r} is not a dotted numeric version")
        parts = [int(part) for part in normalized.split(".")]
        return cls(*parts)

    def __str__(self) -> str:
        parts = [self.major, self.minor, self.build, self.revision]
        return ".".join(str(part) for part in parts if part >= 0)


def _check_part(value: object, field_name: str, *, allow_unset: bool) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"Version.{field_name}: expected int, got {type(value).__name__}")
    minimum = -1 if allow_unset else 0
    if value < minimum or value > _PART_MAX:
        raise ValueError(f"Version.{field_name}: {value} is out of range")


Version.MIN = Version(0, 0)
Version.MAX = Version(_PART_MAX, _PART_MAX, _PART_MAX, _PART_MAX)

__all__ = ["Version"]
