"""Whitespace normalization of individual DBML lines.

Every transform here is literal-aware: characters inside quoted strings are
copied verbatim and never treated as braces, brackets, or collapsible
whitespace.
"""

from __future__ import annotations

from .constants import ATTRIBUTES_CLOSE, ATTRIBUTES_OPEN, BLOCK_OPEN
from .scanner import find_unquoted, iter_scanned, scan_quotes


def collapse_whitespace(line: str) -> str:
    """Replace every run of unquoted whitespace with a single space.

    Examples:
        collapse_whitespace("id   int\\t[pk]")  # "id int [pk]"
        collapse_whitespace("note: 'a   b'")  # "note: 'a   b'"
    """
    parts: list[str] = []
    pending_space = False

    for _, char, quoted in iter_scanned(line):
        if not quoted and char.isspace():
            pending_space = True
            continue
        if pending_space:
            parts.append(" ")
            pending_space = False
        parts.append(char)

    if pending_space:
        parts.append(" ")

    return "".join(parts)


def format_brace_spacing(line: str) -> str:
    """Put exactly one space before every unquoted ``{`` not at the line start.

    Examples:
        format_brace_spacing("Table users{")  # "Table users {"
        format_brace_spacing("{")  # "{"
    """
    parts: list[str] = []

    for _, char, quoted in iter_scanned(line):
        if char == BLOCK_OPEN and not quoted:
            # Whitespace directly before an unquoted brace is never quoted
            while parts and parts[-1].isspace():
                parts.pop()
            if parts:
                parts.append(" ")
        parts.append(char)

    return "".join(parts)


def trim_bracket_whitespace(line: str) -> str:
    """Trim whitespace just inside every matched, unquoted ``[...]`` span.

    A span closes at the first unquoted ``]``; nested brackets are kept as
    interior content. An unmatched ``[`` leaves the rest of the line as is.

    Examples:
        trim_bracket_whitespace("id int [ pk ]")  # "id int [pk]"
        trim_bracket_whitespace("x [ note: ' ] ' ]")  # "x [note: ' ] ']"
    """
    quoted = scan_quotes(line)
    parts: list[str] = []
    pos = 0

    while pos < len(line):
        char = line[pos]
        if char == ATTRIBUTES_OPEN and not quoted[pos]:
            close = find_unquoted(line, ATTRIBUTES_CLOSE, pos + 1, quoted)
            if close is None:
                parts.append(line[pos:])
                break
            parts.append(f"{ATTRIBUTES_OPEN}{line[pos + 1 : close].strip()}{ATTRIBUTES_CLOSE}")
            pos = close + 1
            continue
        parts.append(char)
        pos += 1

    return "".join(parts)


def normalize_line(line: str) -> str:
    """Normalize one raw line, without indentation.

    Applies, in order: whitespace collapsing, trimming, brace spacing, and
    bracket trimming. Blank input yields an empty string.

    Args:
        line: Raw source line without its line terminator.

    Returns:
        str: Normalized line content.

    Examples:
        normalize_line("  field   [ note:   'hello   world' ]")
        # "field [note: 'hello   world']"
    """
    line = collapse_whitespace(line).strip()
    if not line:
        return ""
    line = format_brace_spacing(line)
    return trim_bracket_whitespace(line)
