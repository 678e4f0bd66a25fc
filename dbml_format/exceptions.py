"""Package-specific exception types."""

from __future__ import annotations

from collections.abc import Sequence

from .models import Diagnostic


class FormatError(ValueError):
    """Base class for formatting-related errors."""


class ValidationFailedError(FormatError):
    """Raised when the source text does not pass the validation gate.

    Args:
        messages: Human-readable error lines, one per reported diagnostic, or a
            single generic message when the parser gave no diagnostics.
        diagnostics: Structured diagnostics reported by the parser, if any.
    """

    def __init__(self, messages: Sequence[str], diagnostics: Sequence[Diagnostic] = ()):
        self.messages = tuple(messages)
        self.diagnostics = tuple(diagnostics)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if len(self.messages) == 1:
            return self.messages[0]
        return f"{len(self.messages)} syntax errors"


class UnsupportedDialectError(FormatError):
    """Raised when a validator is asked for a grammar it does not know.

    Args:
        dialect: The requested dialect identifier.
    """

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"Unsupported DBML dialect: {dialect!r}")
