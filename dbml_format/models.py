"""Data models for dbml-format."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScannerContext:
    """Quote state carried while walking a single line.

    Attributes:
        quote_char: Quote character that opened the current literal, or None
            when the scanner is outside any literal.
    """

    quote_char: str | None = None

    @property
    def in_quote(self) -> bool:
        return self.quote_char is not None


@dataclass(frozen=True)
class Position:
    """A line/column pair as reported by the parser.

    Attributes:
        line: One-based line number.
        column: One-based column number.
    """

    line: int
    column: int


@dataclass(frozen=True)
class Location:
    """A source range spanning ``start`` to ``end`` (both inclusive).

    Attributes:
        start: First position of the range.
        end: Last position of the range.
    """

    start: Position
    end: Position

    @property
    def is_point(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Diagnostic:
    """Structured syntax-error report produced by a validator.

    Attributes:
        code: Parser-specific error code.
        message: Human-readable description of the problem.
        location: Source range the diagnostic refers to.
    """

    code: str
    message: str
    location: Location


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of running a validator over a document.

    Attributes:
        ok: True when the document parsed successfully.
        diagnostics: Structured diagnostics, in the order the parser reported them.
        error_message: Raw text of the underlying failure when the parser did not
            provide structured diagnostics.
    """

    ok: bool
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    error_message: str | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(ok=True)

    @classmethod
    def failure(
        cls, diagnostics: tuple[Diagnostic, ...] = (), error_message: str | None = None
    ) -> ValidationResult:
        return cls(ok=False, diagnostics=tuple(diagnostics), error_message=error_message)


@dataclass(frozen=True)
class TextRange:
    """Zero-based range in a host document.

    Attributes:
        start_line: Line of the first character.
        start_character: Column of the first character.
        end_line: Line of the position just past the last character.
        end_character: Column of the position just past the last character.
    """

    start_line: int
    start_character: int
    end_line: int
    end_character: int


@dataclass(frozen=True)
class TextEdit:
    """Replacement of a document range with new text.

    Attributes:
        range: Range being replaced.
        new_text: Replacement text.
    """

    range: TextRange
    new_text: str
