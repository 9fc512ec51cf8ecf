"""String constraints: character sets, casing, patterns, and network/file names."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Sequence
from enum import StrEnum
from typing import Final, cast

from parameter_validation.constants import (
    CHARACTER_SET_CONSTRAINT_NAME,
    ENDPOINT_CONSTRAINT_NAME,
    FILE_NAME_CONSTRAINT_NAME,
    HOST_NAME_CONSTRAINT_NAME,
    LOWERCASE_CONSTRAINT_NAME,
    PASSWORD_CONSTRAINT_NAME,
    PATH_CONSTRAINT_NAME,
    REGEX_CONSTRAINT_NAME,
    UPPERCASE_CONSTRAINT_NAME,
)
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import ConstraintConfigurationError, ErrorCode
from parameter_validation.domain.results import ParameterValidationResult

# Code points defined in Windows-1252 but not in ISO-8859-1.
_WINDOWS_1252_EXTRAS: Final[frozenset[int]] = frozenset(
    {
        0x20AC, 0x201A, 0x0192, 0x201E, 0x2026, 0x2020, 0x2021, 0x02C6, 0x2030,
        0x0160, 0x2039, 0x0152, 0x017D, 0x2018, 0x2019, 0x201C, 0x201D, 0x2022,
        0x2013, 0x2014, 0x02DC, 0x2122, 0x0161, 0x203A, 0x0153, 0x017E, 0x0178,
    }
)  # fmt: skip
_LINE_CONTROLS: Final[frozenset[int]] = frozenset({0x09, 0x0A, 0x0D})
_ISO_646_EXTRAS: Final[frozenset[int]] = frozenset({0x20, 0x26, 0x28, 0x29, 0x5F})

_INVALID_PATH_CHARACTERS: Final[frozenset[str]] = frozenset(
    {'"', "<", ">", "|", *(chr(code) for code in range(0x20))}
)
_INVALID_FILE_NAME_CHARACTERS: Final[frozenset[str]] = _INVALID_PATH_CHARACTERS | frozenset(
    {":", "*", "?", "\\", "/"}
)
_HOST_LABEL_RE: Final[re.Pattern[str]] = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")
_MAX_HOST_NAME_LENGTH: Final[int] = 255
_MAX_PORT: Final[int] = 65535


class CharacterSet(StrEnum):
    ASCII = "Ascii"
    ISO8859 = "Iso8859"
    WINDOWS1252 = "Windows1252"
    ISO646_ODETTE = "Iso646Odette"


class RegexOption(StrEnum):
    IGNORE_CASE = "IgnoreCase"
    MULTILINE = "Multiline"
    SINGLELINE = "Singleline"
    IGNORE_PATTERN_WHITESPACE = "IgnorePatternWhitespace"
    ASCII = "Ascii"


_REGEX_FLAGS: Final[dict[RegexOption, re.RegexFlag]] = {
    RegexOption.IGNORE_CASE: re.IGNORECASE,
    RegexOption.MULTILINE: re.MULTILINE,
    RegexOption.SINGLELINE: re.DOTALL,
    RegexOption.IGNORE_PATTERN_WHITESPACE: re.VERBOSE,
    RegexOption.ASCII: re.ASCII,
}


class _StringConstraint(Constraint):
    """Constraint that only applies to ``String`` values."""

    __slots__ = ()

    def _on_validation(
        self,
        results: list[ParameterValidationResult],
        value: object,
        data_type: ParameterDataType,
        member_name: str,
        display_name: str,
    ) -> None:
        super()._on_validation(results, value, data_type, member_name, display_name)
        self.assert_data_type(data_type, ParameterDataType.STRING)
        text = cast("str", self._native_value(value, data_type))
        self._check(results, text, member_name, display_name)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        """Hook for string checks; markers accept every string."""


class CharacterSetConstraint(_StringConstraint):
    """Every character must be defined in the configured character set."""

    __slots__ = ("_character_set",)

    def __init__(self, character_set: CharacterSet = CharacterSet.WINDOWS1252) -> None:
        super().__init__(CHARACTER_SET_CONSTRAINT_NAME)
        self._character_set = CharacterSet(character_set)

    @property
    def character_set(self) -> CharacterSet:
        return self._character_set

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(self._character_set.value)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, ParameterDataType.STRING)
        self._require_count(parameters, 1)
        try:
            self._character_set = CharacterSet(parameters[0].strip())
        except ValueError as exc:
            raise ConstraintConfigurationError(
                f"{parameters[0]!r} is not a supported character set", self
            ) from exc

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if not all(self._is_defined(ord(character)) for character in text):
            results.append(
                self._failure(
                    ErrorCode.CHARACTER_NOT_IN_SET,
                    f"{display_name} contains characters not defined in "
                    f"{self._character_set.value}",
                    member_name,
                )
            )

    def _is_defined(self, code: int) -> bool:
        if self._character_set is CharacterSet.ASCII:
            return 0x1F < code < 0x7F or code in _LINE_CONTROLS
        if self._character_set is CharacterSet.ISO646_ODETTE:
            return 0x40 < code < 0x5B or 0x2C < code < 0x3A or code in _ISO_646_EXTRAS
        if 0x1F < code < 0x7F or 0x9F < code < 0x100 or code in _LINE_CONTROLS:
            return True
        return self._character_set is CharacterSet.WINDOWS1252 and code in _WINDOWS_1252_EXTRAS


class LowercaseConstraint(_StringConstraint):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(LOWERCASE_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if text != text.lower():
            results.append(
                self._failure(
                    ErrorCode.NOT_LOWERCASE,
                    f"{display_name} must not contain upper-case characters",
                    member_name,
                )
            )


class UppercaseConstraint(_StringConstraint):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(UPPERCASE_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if text != text.upper():
            results.append(
                self._failure(
                    ErrorCode.NOT_UPPERCASE,
                    f"{display_name} must not contain lower-case characters",
                    member_name,
                )
            )


class PasswordConstraint(_StringConstraint):
    """Marks a string as a secret so editors can mask it."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(PASSWORD_CONSTRAINT_NAME)


class RegexConstraint(_StringConstraint):
    """String must contain a match for ``pattern``."""

    __slots__ = ("_compiled", "_options", "_pattern")

    def __init__(self, pattern: str = ".*", options: Sequence[RegexOption] = ()) -> None:
        super().__init__(REGEX_CONSTRAINT_NAME)
        if not isinstance(pattern, str) or not pattern.strip():
            raise ValueError("pattern: must not be empty")
        self._pattern = pattern
        self._options = _normalize_options(options)
        try:
            self._compiled = re.compile(pattern, _flags_for(self._options))
        except re.error as exc:
            raise ValueError(f"pattern: {pattern!r} is not a valid regular expression") from exc

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def options(self) -> tuple[RegexOption, ...]:
        return self._options

    def get_parameters(self, parameters: list[str]) -> None:
        super().get_parameters(parameters)
        parameters.append(self._pattern)
        parameters.extend(option.value for option in self._options)

    def set_parameters(self, parameters: Sequence[str], data_type: ParameterDataType) -> None:
        super().set_parameters(parameters, data_type)
        self.assert_data_type(data_type, ParameterDataType.STRING)
        if not parameters:
            raise ConstraintConfigurationError(
                f"constraint {self.name!r} requires at least 1 parameter(s), got 0", self
            )
        pattern = parameters[0]
        if not pattern.strip():
            raise self._invalid_parameter(pattern)
        options: list[RegexOption] = []
        for raw in parameters[1:]:
            try:
                options.append(RegexOption(raw.strip()))
            except ValueError as exc:
                raise ConstraintConfigurationError(
                    f"{raw!r} is not a supported regular expression option", self
                ) from exc
        normalized = _normalize_options(options)
        try:
            compiled = re.compile(pattern, _flags_for(normalized))
        except re.error as exc:
            raise ConstraintConfigurationError(
                f"{pattern!r} is not a valid regular expression", self
            ) from exc
        self._pattern = pattern
        self._options = normalized
        self._compiled = compiled

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if self._compiled.search(text) is None:
            results.append(
                self._failure(
                    ErrorCode.PATTERN_MISMATCH,
                    f"{display_name} does not match the expected pattern",
                    member_name,
                )
            )


class HostNameConstraint(_StringConstraint):
    """String must be a DNS host name or an IPv4/IPv6 address."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(HOST_NAME_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if not is_host_name(text):
            results.append(
                self._failure(
                    ErrorCode.HOST_NAME_INVALID,
                    f"{display_name} is not a valid host name or IP address",
                    member_name,
                )
            )


class EndpointConstraint(_StringConstraint):
    """String must be ``host`` or ``host:port`` with a port in 0-65535."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(ENDPOINT_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if not text.strip():
            results.append(
                self._failure(
                    ErrorCode.VALUE_EMPTY, f"{display_name} must not be empty", member_name
                )
            )
            return

        host = text
        if text.startswith("[") and "]" in text:
            # Bracketed IPv6 literal, optionally followed by :port.
            closing = text.index("]")
            host, remainder = text[1:closing], text[closing + 1 :]
            port = remainder[1:] if remainder.startswith(":") else None
            if remainder and port is None:
                host = text
        else:
            host, separator, port_text = text.partition(":")
            port = port_text if separator else None
            if separator and ":" in port_text:
                # Unbracketed IPv6 address without a port.
                host, port = text, None

        if port is not None and not _is_port(port):
            results.append(
                self._failure(
                    ErrorCode.PORT_INVALID,
                    f"{display_name} has an invalid port for host {host!r}",
                    member_name,
                )
            )
        if not is_host_name(host):
            results.append(
                self._failure(
                    ErrorCode.HOST_NAME_INVALID,
                    f"{display_name} has an invalid host {host!r}",
                    member_name,
                )
            )


class FileNameConstraint(_StringConstraint):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(FILE_NAME_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if not text.strip():
            results.append(
                self._failure(
                    ErrorCode.VALUE_EMPTY, f"{display_name} must not be empty", member_name
                )
            )
        elif any(character in _INVALID_FILE_NAME_CHARACTERS for character in text):
            results.append(
                self._failure(
                    ErrorCode.FILE_NAME_INVALID,
                    f"{display_name} contains characters not allowed in file names",
                    member_name,
                )
            )


class PathConstraint(_StringConstraint):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(PATH_CONSTRAINT_NAME)

    def _check(
        self,
        results: list[ParameterValidationResult],
        text: str,
        member_name: str,
        display_name: str,
    ) -> None:
        if not text.strip():
            results.append(
                self._failure(
                    ErrorCode.VALUE_EMPTY, f"{display_name} must not be empty", member_name
                )
            )
        elif any(character in _INVALID_PATH_CHARACTERS for character in text):
            results.append(
                self._failure(
                    ErrorCode.PATH_INVALID,
                    f"{display_name} contains characters not allowed in paths",
                    member_name,
                )
            )


def is_host_name(text: str) -> bool:
    """Return whether ``text`` is a DNS name or a literal IPv4/IPv6 address."""

    candidate = text.strip()
    if not candidate or candidate != text:
        return False
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        pass
    else:
        return True
    if len(candidate) > _MAX_HOST_NAME_LENGTH:
        return False
    labels = candidate[:-1].split(".") if candidate.endswith(".") else candidate.split(".")
    return all(_HOST_LABEL_RE.fullmatch(label) is not None for label in labels)


def _is_port(text: str) -> bool:
    if not text.isdigit():
        return False
    return 0 <= int(text) <= _MAX_PORT


def _normalize_options(options: Sequence[RegexOption]) -> tuple[RegexOption, ...]:
    selected = {RegexOption(option) for option in options}
    return tuple(option for option in RegexOption if option in selected)


def _flags_for(options: Sequence[RegexOption]) -> int:
    flags = 0
    for option in options:
        flags |= _REGEX_FLAGS[option]
    return flags


__all__ = [
    "CharacterSet",
    "CharacterSetConstraint",
    "EndpointConstraint",
    "FileNameConstraint",
    "HostNameConstraint",
    "LowercaseConstraint",
    "PasswordConstraint",
    "PathConstraint",
    "RegexConstraint",
    "RegexOption",
    "UppercaseConstraint",
    "is_host_name",
]
