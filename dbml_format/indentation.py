"""Block-depth tracking and indentation rendering."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import BLOCK_CLOSE, BLOCK_OPEN, INDENT_UNIT
from .scanner import structural_endswith, structural_startswith


def closes_block(line: str) -> bool:
    """Return True when a normalized line ends a block.

    A line closes a block when it ends with an unquoted ``}`` or starts with
    one (as in ``} {``-style continuations).
    """
    return structural_endswith(line, BLOCK_CLOSE) or structural_startswith(line, BLOCK_CLOSE)


def opens_block(line: str) -> bool:
    """Return True when a normalized line ends with an unquoted ``{``."""
    return structural_endswith(line, BLOCK_OPEN)


def indent_line(line: str, depth: int, indent_unit: str = INDENT_UNIT) -> tuple[str, int]:
    """Render a normalized line at its nesting depth.

    The closing-brace de-indent applies to the line itself; the opening-brace
    indent applies to the lines that follow. Depth never drops below zero, so
    a spurious ``}`` is rendered flush left instead of raising.

    Args:
        line: Normalized line content without leading whitespace.
        depth: Nesting depth before this line.
        indent_unit: String repeated once per nesting level.

    Returns:
        tuple[str, int]: The rendered line and the depth for the next line.

    Examples:
        indent_line("id int", 1)  # ("  id int", 1)
        indent_line("}", 1)  # ("}", 0)
        indent_line("Table users {", 0)  # ("Table users {", 1)
    """
    if not line:
        return "", depth

    if closes_block(line):
        depth = max(depth - 1, 0)

    rendered = f"{indent_unit * depth}{line}"

    if opens_block(line):
        depth += 1

    return rendered, depth


@dataclass
class IndentTracker:
    """Running indentation state for one formatting pass.

    Attributes:
        indent_unit: String repeated once per nesting level.
        level: Current nesting depth; never negative.
    """

    indent_unit: str = INDENT_UNIT
    level: int = 0

    def render(self, line: str) -> str:
        rendered, self.level = indent_line(line, self.level, self.indent_unit)
        return rendered
