"""Blank-line insertion between sibling blocks."""

from __future__ import annotations

from .constants import BLOCK_CLOSE
from .scanner import structural_endswith


def insert_block_separators(lines: list[str]) -> list[str]:
    """Insert one empty line after every line that closes a block.

    Nothing is inserted after the last line or before a line that is already
    blank, so existing separators are never doubled.

    Args:
        lines: Rendered lines, indentation included.

    Returns:
        list[str]: A new list with separators inserted.

    Examples:
        insert_block_separators(["a {", "}", "b {", "}"])
        # ["a {", "}", "", "b {", "}"]
    """
    result: list[str] = []

    for index, line in enumerate(lines):
        result.append(line)

        if not structural_endswith(line.strip(), BLOCK_CLOSE):
            continue
        if index + 1 < len(lines) and lines[index + 1].strip():
            result.append("")

    return result
