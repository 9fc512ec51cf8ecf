"""
Constraint-string parser.

A constraint string holds zero or more bracketed constraints, for example
``[MinLength(3)][Regex('^a''b$',IgnoreCase)]``. Parsing is a single left-to-right scan
driven by `ConstraintPosition`; each call owns its own `_ParserContext`, so one parser
instance may be shared between threads.

Every syntax error is a `ConstraintParserError` carrying the absolute character offset
where it was detected. No partial results are returned.
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import Enum, auto
from typing import Any

import structlog

from parameter_validation.constants import (
    CONSTRAINT_END,
    CONSTRAINT_START,
    LEADING_CONSTRAINT_NAMES,
    PARAMETER_MASK,
    PARAMETER_SEPARATOR,
    PARAMETERS_END,
    PARAMETERS_START,
    SPACE,
)
from parameter_validation.constraints.base import Constraint
from parameter_validation.domain.data_types import ParameterDataType
from parameter_validation.domain.errors import (
    ConstraintParserError,
    ErrorCode,
    UnknownConstraintError,
)
from parameter_validation.parsing.factory import ConstraintFactory, UnknownConstraintHandler


class ConstraintPosition(Enum):
    """Logical region of the scan cursor inside a constraint string."""

    OUTSIDE_CONSTRAINT = auto()
    IN_CONSTRAINT = auto()
    IN_PARAMETERS = auto()
    IN_PARAMETER = auto()
    AFTER_PARAMETER = auto()
    AFTER_PARAMETERS = auto()


class _ParserContext:
    __slots__ = (
        "constraint_name",
        "constraint_start",
        "constraints",
        "current_character",
        "current_parameter",
        "data_type",
        "is_masked",
        "logical_position",
        "parameters",
        "position",
        "text",
    )

    def __init__(self, text: str, data_type: ParameterDataType) -> None:
        self.text = text
        self.data_type = data_type
        self.constraints: list[Constraint] = []
        self.logical_position = ConstraintPosition.OUTSIDE_CONSTRAINT
        self.position = -1
        self.constraint_start = -1
        self.constraint_name = ""
        self.parameters: list[str] = []
        self.current_parameter: list[str] = []
        self.is_masked = False
        self.current_character = ""

    def move_next(self) -> bool:
        self.position += 1
        if self.position < len(self.text):
            self.current_character = self.text[self.position]
            return True
        return False

    def is_next_character_mask(self) -> bool:
        following = self.position + 1
        return following < len(self.text) and self.text[following] == PARAMETER_MASK

    def skip_one(self) -> None:
        self.position += 1

    def append_character(self) -> None:
        self.current_parameter.append(self.current_character)

    def commit_parameter(self) -> None:
        self.parameters.append("".join(self.current_parameter))
        self.current_parameter.clear()
        self.is_masked = False

    def take_name(self) -> str:
        """Slice the constraint name ending at the current position."""

        name = self.text[self.constraint_start + 1 : self.position]
        if not name:
            raise ConstraintParserError(
                "constraint name is empty",
                position=self.position,
                code=ErrorCode.EMPTY_CONSTRAINT,
            )
        return name

    def reset_constraint(self) -> None:
        self.constraint_start = -1
        self.constraint_name = ""
        self.parameters = []
        self.current_parameter.clear()
        self.is_masked = False
        self.logical_position = ConstraintPosition.OUTSIDE_CONSTRAINT


class ConstraintParser:
    """Turns constraint strings into configured `Constraint` instances."""

    __slots__ = ("_factory", "_logger")

    def __init__(self, factory: ConstraintFactory | None = None, logger: Any | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._factory = factory if factory is not None else ConstraintFactory(logger=self._logger)

    @classmethod
    def default(cls) -> ConstraintParser:
        """Return the shared parser, creating it on first use."""

        global _DEFAULT_PARSER
        parser = _DEFAULT_PARSER
        if parser is None:
            with _DEFAULT_PARSER_LOCK:
                parser = _DEFAULT_PARSER
                if parser is None:
                    parser = cls()
                    _DEFAULT_PARSER = parser
        return parser

    @classmethod
    def from_config(
        cls, config: Mapping[str, object], *, logger: Any | None = None
    ) -> ConstraintParser:
        """Build a parser whose factory has the configured unknown-constraint handlers."""

        parser_section = config.get("parser", {})
        if not isinstance(parser_section, Mapping):
            raise ValueError("parser: expected object")
        handler_paths = parser_section.get("unknown_constraint_handlers", [])
        if not isinstance(handler_paths, Sequence) or isinstance(handler_paths, str):
            raise ValueError("parser.unknown_constraint_handlers: expected array of strings")

        handlers = tuple(
            resolve_handler(path, field=f"parser.unknown_constraint_handlers[{index}]")
            for index, path in enumerate(handler_paths)
        )
        effective_logger = logger if logger is not None else structlog.get_logger(__name__)
        factory = ConstraintFactory(handlers=handlers, logger=effective_logger)
        return cls(factory, logger=effective_logger)

    @property
    def factory(self) -> ConstraintFactory:
        return self._factory

    def add_unknown_constraint_handler(self, handler: UnknownConstraintHandler) -> None:
        self._factory.add_unknown_constraint_handler(handler)

    def remove_unknown_constraint_handler(self, handler: UnknownConstraintHandler) -> bool:
        return self._factory.remove_unknown_constraint_handler(handler)

    def parse(self, text: str | None, data_type: ParameterDataType) -> list[Constraint]:
        """Parse ``text`` into constraints for ``data_type``.

        ``None``, empty, and whitespace-only strings yield an empty list.
        """

        if not isinstance(data_type, ParameterDataType):
            raise TypeError(
                f"data_type: expected ParameterDataType, got {type(data_type).__name__}"
            )
        if data_type is ParameterDataType.NONE:
            raise ValueError("data_type: must not be None")
        if text is None:
            return []
        if not isinstance(text, str):
            raise TypeError(f"text: expected string, got {type(text).__name__}")
        if not text.strip():
            return []

        context = _ParserContext(text, data_type)
        while context.move_next():
            _HANDLERS[context.logical_position](self, context)

        if context.logical_position is not ConstraintPosition.OUTSIDE_CONSTRAINT:
            raise ConstraintParserError(
                "constraint incomplete",
                position=len(context.text) - 1,
                code=ErrorCode.CONSTRAINT_INCOMPLETE,
            )

        self._logger.debug(
            "constraints_parsed",
            data_type=data_type.value,
            count=len(context.constraints),
        )
        return context.constraints

    def _create_constraint(self, context: _ParserContext) -> Constraint:
        try:
            constraint = self._factory.find_constraint(context.constraint_name, context.data_type)
        except UnknownConstraintError as exc:
            exc.locate(context.position)
            raise

        try:
            constraint.set_parameters(tuple(context.parameters), context.data_type)
        except (ValueError, TypeError) as exc:
            self._logger.info(
                "constraint_parameters_invalid",
                constraint=constraint.name,
                data_type=context.data_type.value,
                position=context.position,
                error=str(exc),
            )
            raise ConstraintParserError(
                f"parameters invalid for constraint {constraint.name!r}",
                position=context.position,
                code=ErrorCode.PARAMETERS_INVALID,
            ) from exc
        return constraint

    def _complete_constraint(self, context: _ParserContext) -> None:
        context.constraints.append(self._create_constraint(context))
        context.reset_constraint()

    def _handle_outside_constraint(self, context: _ParserContext) -> None:
        character = context.current_character
        if character == SPACE:
            return
        if character == CONSTRAINT_START:
            context.logical_position = ConstraintPosition.IN_CONSTRAINT
            context.constraint_start = context.position
            return
        raise ConstraintParserError(
            f"invalid data {character!r} outside of a constraint",
            position=context.position,
            code=ErrorCode.DATA_OUTSIDE_CONSTRAINT,
        )

    def _handle_in_constraint(self, context: _ParserContext) -> None:
        character = context.current_character
        if character in (SPACE, PARAMETER_MASK, CONSTRAINT_START, PARAMETERS_END):
            raise ConstraintParserError(
                f"invalid character {character!r} in constraint name",
                position=context.position,
                code=ErrorCode.INVALID_CHARACTER_IN_NAME,
            )
        if character == CONSTRAINT_END:
            context.constraint_name = context.take_name()
            self._complete_constraint(context)
        elif character == PARAMETERS_START:
            context.constraint_name = context.take_name()
            context.logical_position = ConstraintPosition.IN_PARAMETERS

    def _handle_in_parameters(self, context: _ParserContext) -> None:
        character = context.current_character
        if character == SPACE:
            return
        if character in (PARAMETER_SEPARATOR, CONSTRAINT_START, CONSTRAINT_END, PARAMETERS_START):
            raise ConstraintParserError(
                f"invalid character {character!r} in parameters",
                position=context.position,
                code=ErrorCode.INVALID_CHARACTER_IN_PARAMETERS,
            )
        if character == PARAMETERS_END:
            context.logical_position = ConstraintPosition.AFTER_PARAMETERS
        elif character == PARAMETER_MASK:
            context.is_masked = True
            context.logical_position = ConstraintPosition.IN_PARAMETER
        else:
            context.logical_position = ConstraintPosition.IN_PARAMETER
            context.append_character()

    def _handle_in_parameter(self, context: _ParserContext) -> None:
        character = context.current_character
        if context.is_masked:
            if character != PARAMETER_MASK:
                context.append_character()
            elif context.is_next_character_mask():
                context.append_character()
                context.skip_one()
            else:
                context.logical_position = ConstraintPosition.AFTER_PARAMETER
                context.commit_parameter()
            return

        if character in (SPACE, PARAMETER_SEPARATOR, PARAMETERS_END):
            context.logical_position = _AFTER_UNMASKED[character]
            if context.current_parameter:
                context.commit_parameter()
        elif character in (CONSTRAINT_START, CONSTRAINT_END, PARAMETERS_START, PARAMETER_MASK):
            raise ConstraintParserError(
                f"unmasked delimiter {character!r} in parameter",
                position=context.position,
                code=ErrorCode.UNMASKED_DELIMITER,
            )
        else:
            context.append_character()

    def _handle_after_parameter(self, context: _ParserContext) -> None:
        character = context.current_character
        if character == SPACE:
            return
        if character == PARAMETER_SEPARATOR:
            context.logical_position = ConstraintPosition.IN_PARAMETERS
        elif character == PARAMETERS_END:
            context.logical_position = ConstraintPosition.AFTER_PARAMETERS
        else:
            raise ConstraintParserError(
                f"invalid character {character!r} after parameter",
                position=context.position,
                code=ErrorCode.INVALID_CHARACTER_AFTER_PARAMETER,
            )

    def _handle_after_parameters(self, context: _ParserContext) -> None:
        character = context.current_character
        if character != CONSTRAINT_END:
            raise ConstraintParserError(
                f"invalid character {character!r} after parameters",
                position=context.position,
                code=ErrorCode.INVALID_CHARACTER_AFTER_PARAMETERS,
            )
        self._complete_constraint(context)


_AFTER_UNMASKED: dict[str, ConstraintPosition] = {
    SPACE: ConstraintPosition.AFTER_PARAMETER,
    PARAMETER_SEPARATOR: ConstraintPosition.IN_PARAMETERS,
    PARAMETERS_END: ConstraintPosition.AFTER_PARAMETERS,
}

_HANDLERS: dict[ConstraintPosition, Callable[[ConstraintParser, _ParserContext], None]] = {
    ConstraintPosition.OUTSIDE_CONSTRAINT: ConstraintParser._handle_outside_constraint,
    ConstraintPosition.IN_CONSTRAINT: ConstraintParser._handle_in_constraint,
    ConstraintPosition.IN_PARAMETERS: ConstraintParser._handle_in_parameters,
    ConstraintPosition.IN_PARAMETER: ConstraintParser._handle_in_parameter,
    ConstraintPosition.AFTER_PARAMETER: ConstraintParser._handle_after_parameter,
    ConstraintPosition.AFTER_PARAMETERS: ConstraintParser._handle_after_parameters,
}

_DEFAULT_PARSER: ConstraintParser | None = None
_DEFAULT_PARSER_LOCK = threading.Lock()


def resolve_handler(path: object, *, field: str = "handler") -> UnknownConstraintHandler:
    """Import an unknown-constraint handler from ``package.module:attribute``."""

    if not isinstance(path, str) or not path.strip():
        raise ValueError(f"{field}: expected non-empty string")
    module_name, separator, attribute_path = path.strip().partition(":")
    if not separator or not module_name or not attribute_path:
        raise ValueError(f"{field}: expected 'package.module:attribute', got {path!r}")
    try:
        resolved: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"{field}: cannot import module {module_name!r}") from exc
    for attribute in attribute_path.split("."):
        try:
            resolved = getattr(resolved, attribute)
        except AttributeError as exc:
            raise ValueError(f"{field}: {path!r} has no attribute {attribute!r}") from exc
    if not callable(resolved):
        raise ValueError(f"{field}: {path!r} is not callable")
    return resolved  # type: ignore[return-value]


def parse_constraints(text: str | None, data_type: ParameterDataType) -> list[Constraint]:
    """Parse ``text`` with the shared default parser."""

    return ConstraintParser.default().parse(text, data_type)


def concat_constraints(constraints: Iterable[Constraint] | None) -> str | None:
    """Serialize constraints, moving ``Null`` then ``Encrypted`` to the front.

    Returns ``None`` when ``constraints`` is ``None``.
    """

    if constraints is None:
        return None
    leading: dict[str, list[str]] = {name: [] for name in LEADING_CONSTRAINT_NAMES}
    others: list[str] = []
    for constraint in constraints:
        bucket = leading.get(constraint.name, others)
        bucket.append(constraint.to_string())
    ordered = [text for name in LEADING_CONSTRAINT_NAMES for text in leading[name]]
    return "".join((*ordered, *others))


__all__ = [
    "ConstraintParser",
    "ConstraintPosition",
    "concat_constraints",
    "parse_constraints",
    "resolve_handler",
]
