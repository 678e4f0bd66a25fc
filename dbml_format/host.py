"""Editor integration: whole-document edits and formatter registration.

The formatting core knows nothing about editors. A host adapter implements
`Host` and receives a `DocumentFormatter`; the host calls it with the current
document text and applies the returned edits.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from .config import FormatterConfig
from .constants import LANGUAGE_ID
from .formatter import format_document, split_lines
from .models import TextEdit, TextRange
from .validation import PyDBMLValidator, Validator


class Host(Protocol):
    """Editor capabilities needed to expose the formatter."""

    def register_document_formatter(
        self, language_id: str, formatter: DocumentFormatter
    ) -> Callable[[], None]:
        """Register `formatter` for `language_id` and return a disposer."""
        ...

    def show_error_message(self, message: str) -> None:
        """Surface one syntax-error message to the user."""
        ...


def full_document_range(text: str) -> TextRange:
    """Return the range from the start of the first line to the end of the last.

    Examples:
        full_document_range("a\\nbc")  # TextRange(0, 0, 1, 2)
    """
    lines, _ = split_lines(text)
    return TextRange(
        start_line=0,
        start_character=0,
        end_line=len(lines) - 1,
        end_character=len(lines[-1]),
    )


@dataclass
class DocumentFormatter:
    """Formatting provider handed to a host.

    Attributes:
        validator: Parser capability used as the validation gate.
        config: Formatting options.
        notify: Callback receiving syntax-error messages.
    """

    validator: Validator = field(default_factory=PyDBMLValidator)
    config: FormatterConfig = field(default_factory=FormatterConfig)
    notify: Callable[[str], None] | None = None

    def format(self, text: str) -> str | None:
        return format_document(text, self.validator, self.config, self.notify)

    def provide_document_formatting_edits(self, text: str) -> list[TextEdit]:
        """Return a single whole-document replacement, or no edits on invalid input."""
        formatted = self.format(text)
        if formatted is None:
            return []
        return [TextEdit(range=full_document_range(text), new_text=formatted)]


@dataclass
class Registration:
    """Handle returned by `activate`.

    Attributes:
        language_id: Language the formatter is registered for.
        formatter: The registered formatter.
        dispose: Callback that removes the registration from the host.
        active: False once `deactivate` has disposed the registration.
    """

    language_id: str
    formatter: DocumentFormatter
    dispose: Callable[[], None]
    active: bool = True


def activate(
    host: Host,
    validator: Validator | None = None,
    config: FormatterConfig | None = None,
) -> Registration:
    """Register the DBML formatter with `host`.

    Syntax errors found while formatting are shown through
    `host.show_error_message`.

    Examples:
        registration = activate(editor_host)
        ...
        deactivate(registration)
    """
    formatter = DocumentFormatter(
        validator=validator or PyDBMLValidator(),
        config=config or FormatterConfig(),
        notify=host.show_error_message,
    )
    dispose = host.register_document_formatter(LANGUAGE_ID, formatter)
    return Registration(language_id=LANGUAGE_ID, formatter=formatter, dispose=dispose)


def deactivate(registration: Registration) -> None:
    if not registration.active:
        return
    registration.dispose()
    registration.active = False
