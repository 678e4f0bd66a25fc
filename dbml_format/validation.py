"""Validation gate: syntax checking through an external DBML parser.

The formatter never parses DBML itself. It asks a `Validator` whether the
document is valid and, when it is not, renders the reported diagnostics into
user-facing messages.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Protocol

from pydbml import PyDBML
from pyparsing import ParseBaseException

from .constants import DIALECT, SUPPORTED_DIALECTS
from .exceptions import UnsupportedDialectError
from .models import Diagnostic, Location, Position, ValidationResult

logger = logging.getLogger(__name__)


class Validator(Protocol):
    """Capability that checks DBML text against a grammar dialect."""

    def parse(self, text: str, dialect: str) -> ValidationResult:
        ...


class PyDBMLValidator:
    """Validator backed by the `pydbml` parser.

    Syntax errors raised by `pyparsing` become a single structured diagnostic
    located at the failing line and column. Any other parser error is reported
    without diagnostics, carrying only its message.
    """

    def parse(self, text: str, dialect: str = DIALECT) -> ValidationResult:
        if dialect not in SUPPORTED_DIALECTS:
            raise UnsupportedDialectError(dialect)

        logger.debug("Validating %d characters as %s", len(text), dialect)
        try:
            PyDBML(text)
        except ParseBaseException as error:
            diagnostic = diagnostic_from_parse_exception(error)
            return ValidationResult.failure((diagnostic,), error_message=str(error))
        # pydbml raises plain exceptions for semantic problems such as
        # references to unknown tables
        except Exception as error:
            logger.debug("Parser failed without diagnostics", exc_info=True)
            return ValidationResult.failure(error_message=str(error) or None)

        return ValidationResult.success()


class CallableValidator:
    """Adapt a raising parse function into a `Validator`.

    The wrapped callable is invoked as ``parse(text, dialect)`` and signals
    failure by raising. When the exception carries a ``diags`` attribute shaped
    like a list of diagnostics, each entry becomes a `Diagnostic`; otherwise
    the failure is reported with the exception message only.

    Examples:
        validator = CallableValidator(my_parser.parse)
        validator.parse("Table users {}", "dbmlv2")
    """

    def __init__(self, parse: Callable[[str, str], object]):
        self._parse = parse

    def parse(self, text: str, dialect: str = DIALECT) -> ValidationResult:
        try:
            self._parse(text, dialect)
        except Exception as error:
            diagnostics = diagnostics_from_raw(getattr(error, "diags", None))
            if diagnostics:
                return ValidationResult.failure(diagnostics, error_message=str(error) or None)
            logger.debug("Parse failure carries no usable diagnostics: %r", error)
            return ValidationResult.failure(error_message=str(error) or None)

        return ValidationResult.success()


def diagnostic_from_parse_exception(error: ParseBaseException) -> Diagnostic:
    """Convert a `pyparsing` exception into a point diagnostic.

    Examples:
        diagnostic_from_parse_exception(ParseException("Table {", 6, "Expected name"))
    """
    position = Position(line=error.lineno, column=error.col)
    return Diagnostic(
        code=type(error).__name__,
        message=error.msg,
        location=Location(start=position, end=position),
    )


def diagnostics_from_raw(raw: object) -> tuple[Diagnostic, ...] | None:
    """Build diagnostics from a parser's raw error payload.

    The payload must be a list of mappings shaped like
    ``{"code", "message", "location": {"start": {"line", "column"}, "end": {...}}}``.

    Args:
        raw: Payload attached to a parser failure.

    Returns:
        tuple[Diagnostic, ...] | None: Diagnostics in reported order, or None
            when the payload does not have the expected shape.

    Examples:
        diagnostics_from_raw([{"code": 1001, "message": "Unexpected '}'",
                               "location": {"start": {"line": 3, "column": 1},
                                            "end": {"line": 3, "column": 2}}}])
    """
    if not isinstance(raw, (list, tuple)):
        return None

    diagnostics = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            return None
        try:
            location = entry["location"]
            diagnostics.append(
                Diagnostic(
                    code=str(entry["code"]),
                    message=str(entry["message"]),
                    location=Location(
                        start=_position_from_raw(location["start"]),
                        end=_position_from_raw(location["end"]),
                    ),
                )
            )
        except (KeyError, TypeError, ValueError):
            return None

    return tuple(diagnostics)


def _position_from_raw(raw: Mapping[str, object]) -> Position:
    return Position(line=int(raw["line"]), column=int(raw["column"]))


def format_location(location: Location) -> str:
    """Render a location as ``Ln L, Col C`` with an optional ``to`` suffix.

    Examples:
        format_location(Location(Position(3, 1), Position(3, 1)))  # "Ln 3, Col 1"
    """
    start = f"Ln {location.start.line}, Col {location.start.column}"
    if location.is_point:
        return start
    return f"{start} to Ln {location.end.line}, Col {location.end.column}"


def render_diagnostic(diagnostic: Diagnostic) -> str:
    return f"Error {diagnostic.code}: {diagnostic.message} | {format_location(diagnostic.location)}"


def render_failure(result: ValidationResult) -> list[str]:
    """Render a failed validation into user-facing messages.

    Args:
        result: A failed validation result.

    Returns:
        list[str]: One message per diagnostic, or a single generic message that
            includes the raw error text when there are no diagnostics.
    """
    if result.diagnostics:
        return [render_diagnostic(diagnostic) for diagnostic in result.diagnostics]

    suffix = f": {result.error_message}" if result.error_message else ""
    return [f"Failed to parse DBML{suffix}"]
