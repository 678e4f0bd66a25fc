"""Whole-document formatting pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import FormatterConfig, normalize_config, validate_config
from .exceptions import ValidationFailedError
from .indentation import IndentTracker
from .normalizer import normalize_line
from .separator import insert_block_separators
from .validation import PyDBMLValidator, Validator, render_failure

logger = logging.getLogger(__name__)


def split_lines(text: str) -> tuple[list[str], str]:
    """Split text on ``\\n`` and detect the line terminator to rejoin with.

    A trailing ``\\r`` is removed from every line. The terminator is ``\\r\\n``
    when the first line break is one, otherwise ``\\n``.

    Examples:
        split_lines("a\\r\\nb")  # (["a", "b"], "\\r\\n")
        split_lines("a\\n")  # (["a", ""], "\\n")
    """
    lines = text.split("\n")
    newline = "\r\n" if len(lines) > 1 and lines[0].endswith("\r") else "\n"
    return [line[:-1] if line.endswith("\r") else line for line in lines], newline


def format_text(text: str, config: FormatterConfig | None = None) -> str:
    """Reformat DBML text that has already passed validation.

    Each line is normalized and re-indented in order, with nesting depth
    carried from one line to the next; blank lines are then inserted after
    block-closing lines. All state is local to the call.

    Args:
        text: Full document text.
        config: Rendering options. Defaults to a new `FormatterConfig`.

    Returns:
        str: The formatted document.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        format_text("table users {\\nid int\\n}")  # "table users {\\n  id int\\n}"
    """
    config = normalize_config(config or FormatterConfig())
    validate_config(config)

    lines, newline = split_lines(text)
    tracker = IndentTracker(indent_unit=config.indent_unit)
    rendered = [tracker.render(normalize_line(line)) for line in lines]

    if tracker.level:
        logger.debug("Document ended with %d unclosed block(s)", tracker.level)

    if config.separate_blocks:
        rendered = insert_block_separators(rendered)

    return newline.join(rendered)


def validate_document(text: str, validator: Validator, dialect: str) -> None:
    """Run the validation gate.

    Args:
        text: Full document text.
        validator: Parser capability to check the text with.
        dialect: Grammar identifier passed to the validator.

    Raises:
        ValidationFailedError: If the validator rejects the text.
        UnsupportedDialectError: If the validator does not know `dialect`.
    """
    result = validator.parse(text, dialect)
    if result.ok:
        return

    raise ValidationFailedError(render_failure(result), result.diagnostics)


def format_document(
    text: str,
    validator: Validator | None = None,
    config: FormatterConfig | None = None,
    notify: Callable[[str], None] | None = None,
) -> str | None:
    """Validate and format a full document.

    Args:
        text: Full document text.
        validator: Parser capability used as the validation gate. Defaults to
            `PyDBMLValidator`.
        config: Formatting options. Defaults to a new `FormatterConfig`.
        notify: Callback receiving one message per reported syntax error.

    Returns:
        str | None: The formatted document, or None when validation fails, in
            which case the caller must leave the original text untouched.

    Raises:
        ConfigError: If the configuration fails validation.
        UnsupportedDialectError: If the validator does not know the configured
            dialect.

    Examples:
        format_document("Table users {\\nid int\\n}", notify=print)
    """
    config = normalize_config(config or FormatterConfig())
    validate_config(config)
    validator = validator or PyDBMLValidator()

    try:
        validate_document(text, validator, config.dialect)
    except ValidationFailedError as error:
        logger.info("Skipping formatting: %s", error)
        if notify is not None:
            for message in error.messages:
                notify(message)
        return None

    return format_text(text, config)
