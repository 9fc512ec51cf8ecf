"""YAML-backed catalog of typed, constrained parameter settings."""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, TypeAlias, TypeVar, cast

import yaml

from parameter_validation.constraints.base import Constraint
from parameter_validation.constraints.types import EnumValuesConstraint, TypeConstraint
from parameter_validation.conversion.parameter_convert import to_data_type, to_string
from parameter_validation.domain.data_types import ParameterDataType, coerce_data_type
from parameter_validation.domain.errors import ParameterConversionError
from parameter_validation.domain.results import ParameterValidationResult
from parameter_validation.observability.logging import correlation_scope
from parameter_validation.parsing.parser import ConstraintParser, concat_constraints
from parameter_validation.validation.validator import ParameterValidator

PathLike: TypeAlias = str | os.PathLike[str]
_C = TypeVar("_C", bound=Constraint)

_REQUIRED_SETTING_FIELDS: Final[frozenset[str]] = frozenset({"name", "data_type"})
_OPTIONAL_SETTING_FIELDS: Final[frozenset[str]] = frozenset(
    {"display_name", "constraints", "value"}
)
_ALLOWED_SETTING_FIELDS: Final[frozenset[str]] = (
    _REQUIRED_SETTING_FIELDS | _OPTIONAL_SETTING_FIELDS
)


@dataclass(frozen=True, slots=True)
class ParameterSetting:
    """One named setting: its data type, constraint string, and serialized value.

    Constraints and the native value are computed on demand, so a malformed
    constraint string only fails when the setting is used.
    """

    name: str
    data_type: ParameterDataType
    constraints: str = ""
    value: str | None = None
    display_name: str | None = None
    parser: ConstraintParser | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _coerce_non_empty_str(self.name, "name"))
        data_type = coerce_data_type(self.data_type, "data_type")
        if data_type is ParameterDataType.NONE:
            raise ValueError("data_type: must not be None")
        object.__setattr__(self, "data_type", data_type)
        if not isinstance(self.constraints, str):
            raise ValueError("constraints: expected string")
        if self.value is not None and not isinstance(self.value, str):
            raise ValueError("value: expected string or null")
        if self.display_name is not None:
            object.__setattr__(
                self, "display_name", _coerce_non_empty_str(self.display_name, "display_name")
            )

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, object],
        *,
        parser: ConstraintParser | None = None,
    ) -> ParameterSetting:
        parsed = _as_string_key_mapping(payload, "ParameterSetting")
        missing = sorted(_REQUIRED_SETTING_FIELDS - set(parsed))
        if missing:
            raise ValueError(f"ParameterSetting: missing required fields {missing}")
        unknown = sorted(set(parsed) - _ALLOWED_SETTING_FIELDS)
        if unknown:
            raise ValueError(
                f"ParameterSetting: unexpected fields {unknown}; "
                f"allowed fields: {sorted(_ALLOWED_SETTING_FIELDS)}"
            )
        constraints = parsed.get("constraints")
        value = parsed.get("value")
        display_name = parsed.get("display_name")
        return cls(
            name=cast("str", parsed["name"]),
            data_type=cast("ParameterDataType", parsed["data_type"]),
            constraints="" if constraints is None else cast("str", constraints),
            value=None if value is None else _coerce_scalar_text(value, "value"),
            display_name=None if display_name is None else cast("str", display_name),
            parser=parser,
        )

    @property
    def effective_display_name(self) -> str:
        return self.display_name if self.display_name is not None else self.name

    def parsed_constraints(self) -> list[Constraint]:
        parser = self.parser if self.parser is not None else ConstraintParser.default()
        return parser.parse(self.constraints, self.data_type)

    def native_value(self) -> object:
        """Convert the serialized value using the type information in the constraints."""

        if self.value is None:
            return None
        constraints = self.parsed_constraints()
        if self.data_type is ParameterDataType.ENUM:
            values = _first_of(constraints, EnumValuesConstraint)
            if values is not None and _first_of(constraints, TypeConstraint) is None:
                return _enum_values_lookup(values, self.value)
        return to_data_type(self.value, self.data_type, _first_of(constraints, TypeConstraint))

    def validate(
        self, validator: ParameterValidator | None = None
    ) -> list[ParameterValidationResult]:
        active = validator if validator is not None else ParameterValidator.default()
        return active.get_validation_results(
            self.native_value(),
            self.data_type,
            self.parsed_constraints(),
            self.name,
            self.effective_display_name,
        )

    def with_value(self, value: object) -> ParameterSetting:
        """Return a copy holding ``value`` serialized in its invariant form."""

        type_constraint = _first_of(self.parsed_constraints(), TypeConstraint)
        if value is None:
            serialized = None
        elif self.data_type is ParameterDataType.ENUM and type_constraint is None:
            raw = value.value if isinstance(value, enum.Enum) else value
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise ParameterConversionError(ParameterDataType.ENUM, value)
            serialized = str(raw)
        else:
            serialized = to_string(value, self.data_type, type_constraint)
        return ParameterSetting(
            name=self.name,
            data_type=self.data_type,
            constraints=self.constraints,
            value=serialized,
            display_name=self.display_name,
            parser=self.parser,
        )

    def to_record(self) -> dict[str, object]:
        record: dict[str, object] = {"name": self.name}
        if self.display_name is not None:
            record["display_name"] = self.display_name
        record["data_type"] = self.data_type.value
        normalized = concat_constraints(self.parsed_constraints())
        if normalized:
            record["constraints"] = normalized
        record["value"] = self.value
        return record


class ParameterCatalog:
    """Ordered collection of uniquely named settings."""

    __slots__ = ("_settings", "_settings_by_name", "_source_path")

    def __init__(
        self,
        settings: Iterable[ParameterSetting] = (),
        *,
        source_path: Path | None = None,
    ) -> None:
        self._settings = tuple(settings)
        self._source_path = source_path
        by_name: dict[str, ParameterSetting] = {}
        for setting in self._settings:
            if not isinstance(setting, ParameterSetting):
                actual = type(setting).__name__
                raise TypeError(f"settings: expected ParameterSetting, got {actual}")
            if setting.name in by_name:
                raise ValueError(f"duplicate setting name: {setting.name!r}")
            by_name[setting.name] = setting
        self._settings_by_name = by_name

    @classmethod
    def load(
        cls, path: PathLike, *, parser: ConstraintParser | None = None
    ) -> ParameterCatalog:
        """Load settings from a YAML file holding a top-level sequence."""

        source = Path(path).expanduser()
        try:
            with source.open("r", encoding="utf-8") as handle:
                loaded = cast("object", yaml.safe_load(handle))
        except yaml.YAMLError as exc:
            raise ValueError(f"{source}: invalid YAML ({exc})") from exc
        if loaded is None:
            loaded = []
        if not isinstance(loaded, list):
            raise ValueError(
                f"{source}: expected top-level YAML sequence, got {type(loaded).__name__}"
            )

        settings: list[ParameterSetting] = []
        for index, item in enumerate(loaded):
            try:
                settings.append(ParameterSetting.from_mapping(item, parser=parser))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{source.name}[{index}]: {exc}") from exc
        return cls(settings, source_path=source)

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    @property
    def settings(self) -> tuple[ParameterSetting, ...]:
        return self._settings

    def __len__(self) -> int:
        return len(self._settings)

    def __iter__(self) -> Iterator[ParameterSetting]:
        return iter(self._settings)

    def __contains__(self, name: object) -> bool:
        return name in self._settings_by_name

    def get(self, name: str) -> ParameterSetting | None:
        return self._settings_by_name.get(name)

    def require(self, name: str) -> ParameterSetting:
        setting = self._settings_by_name.get(name)
        if setting is None:
            raise KeyError(f"unknown setting: {name!r}")
        return setting

    def replace(self, setting: ParameterSetting) -> ParameterCatalog:
        """Return a catalog where ``setting`` replaces the one with the same name."""

        if setting.name not in self._settings_by_name:
            raise KeyError(f"unknown setting: {setting.name!r}")
        return ParameterCatalog(
            (setting if item.name == setting.name else item for item in self._settings),
            source_path=self._source_path,
        )

    def validate(
        self, validator: ParameterValidator | None = None
    ) -> dict[str, list[ParameterValidationResult]]:
        """Validate every setting; only settings with failures appear in the result.

        Events logged while a setting is validated carry ``catalog`` and ``setting`` fields.
        """

        catalog_name = self._source_path.name if self._source_path is not None else "<memory>"
        failures: dict[str, list[ParameterValidationResult]] = {}
        for setting in self._settings:
            with correlation_scope(catalog=catalog_name, setting=setting.name):
                results = setting.validate(validator)
            if results:
                failures[setting.name] = results
        return failures

    def dump(self, path: PathLike) -> Path:
        """Write the catalog as YAML with normalized constraint strings."""

        destination = Path(path).expanduser()
        destination.parent.mkdir(parents=True, exist_ok=True)
        rendered = yaml.safe_dump(
            [setting.to_record() for setting in self._settings],
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=False,
            width=120,
        )
        if not rendered.endswith("\n"):
            rendered = rendered + "\n"
        destination.write_text(rendered, encoding="utf-8")
        return destination


def _first_of(constraints: Sequence[Constraint], kind: type[_C]) -> _C | None:
    for item in constraints:
        if isinstance(item, kind):
            return item
    return None


def _enum_values_lookup(constraint: EnumValuesConstraint, text: str) -> int:
    normalized = text.strip()
    values = constraint.values
    if normalized in values:
        return values[normalized]
    try:
        return cast("int", to_data_type(normalized, constraint.underlying_data_type))
    except ParameterConversionError as exc:
        raise ParameterConversionError(
            ParameterDataType.ENUM, text, f"{text!r} is neither a value name nor an integer"
        ) from exc


def _coerce_non_empty_str(value: object, path: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{path}: expected string, got {type(value).__name__}")
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{path}: must not be empty")
    return normalized


def _coerce_scalar_text(value: object, path: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int)):
        return str(value)
    raise ValueError(f"{path}: expected string or integer, got {type(value).__name__}")


def _as_string_key_mapping(value: object, path: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{path}: expected object, got {type(value).__name__}")

    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ValueError(f"{path}: object keys must be strings, got {type(key).__name__}")
        parsed[key] = item
    return parsed


__all__ = ["ParameterCatalog", "ParameterSetting"]
