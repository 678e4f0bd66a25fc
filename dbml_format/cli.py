"""
Formats a DBML file in place.
Syntax errors are reported on stderr and leave the file untouched.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import UnsupportedDialectError, ValidationFailedError
from .filesystem import DocumentFile, get_max_file_size, resolve_document_path
from .formatter import format_text, validate_document
from .validation import PyDBMLValidator

__all__ = ["cli"]

logger = logging.getLogger(__name__)


@click.command()
@click.version_option()
@click.option("--indent-spaces", type=int, help="Spaces per nesting level")
@click.option("--dialect", help="Grammar dialect passed to the validator")
@click.option(
    "--separate-blocks/--no-separate-blocks",
    default=None,
    help="Insert a blank line after each closing brace",
)
@click.option("--check", is_flag=True, help="Exit with status 1 if the file would change")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the result instead of rewriting")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    indent_spaces: int | None = None,
    dialect: str | None = None,
    separate_blocks: bool | None = None,
    check: bool = False,
    to_stdout: bool = False,
    verbose: bool = False,
):
    """
    Entry point for formatting a DBML file.

    Args:
        filepath: Path to the DBML file to format.
        indent_spaces: Override for the number of spaces per nesting level.
        dialect: Override for the validator dialect.
        separate_blocks: Override for blank-line insertion after blocks.
        check: Report whether the file would change without writing it.
        to_stdout: Print the formatted document instead of rewriting the file.
        verbose: Enable debug logging.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If the file is not valid DBML, exceeds size
            limits, or cannot be read or rewritten safely.

    Examples:
        dbml-format schema.dbml --indent-spaces 4
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_document_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            indent_spaces=indent_spaces,
            dialect=dialect,
            separate_blocks=separate_blocks,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        document = DocumentFile.load(filepath, base_dir, max_file_size)
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    except IOError as error:
        raise click.ClickException(str(error)) from error
    content = document.content

    try:
        validate_document(content, PyDBMLValidator(), config.dialect)
    except UnsupportedDialectError as error:
        raise click.BadParameter(str(error)) from error
    except ValidationFailedError as error:
        for message in error.messages:
            click.echo(message, err=True)
        raise click.ClickException(f"{filepath} is not valid DBML; no changes made.") from error

    formatted = format_text(content, config)

    if to_stdout:
        click.echo(formatted, nl=False)
        return

    if formatted == content:
        logger.debug("%s is already formatted", filepath)
        return

    if check:
        click.echo(f"Would reformat {filepath}", err=True)
        sys.exit(1)

    try:
        document.save(formatted, warn=lambda message: click.echo(message, err=True))
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
