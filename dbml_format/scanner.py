"""Quote-aware scanning of DBML source lines."""

from __future__ import annotations

from collections.abc import Iterator

from .constants import ESCAPE_CHAR, QUOTE_CHARS
from .models import ScannerContext


def is_quote_char(char: str) -> bool:
    """Return True for the characters that open and close string literals."""
    return char in QUOTE_CHARS


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether the character at `pos` is escaped.

    Only the immediately preceding character is inspected, so ``\\\\'`` counts
    as an escaped quote. Callers rely on this exact behavior; a full escape
    grammar would change which quotes close a literal.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when a backslash directly precedes the character.

    Examples:
        is_escaped("\\\\'", 1)  # True
        is_escaped("a'", 1)  # False
    """
    return pos > 0 and text[pos - 1] == ESCAPE_CHAR


def advance(ctx: ScannerContext, text: str, pos: int) -> bool:
    """Feed one character to the scanner and report whether it is literal content.

    Opening and closing quote delimiters are reported as literal content. A
    quote of a different kind than the one that opened the literal is ordinary
    content. Unterminated literals simply stay open.

    Args:
        ctx: Scanner context updated in place.
        text: Text being scanned.
        pos: Zero-based index of the character to feed.

    Returns:
        bool: True when the character belongs to a quoted literal.
    """
    char = text[pos]
    if ctx.quote_char is not None:
        if char == ctx.quote_char and not is_escaped(text, pos):
            ctx.quote_char = None
        return True

    if is_quote_char(char):
        ctx.quote_char = char
        return True

    return False


def iter_scanned(text: str) -> Iterator[tuple[int, str, bool]]:
    """Yield ``(index, char, quoted)`` for every character of `text`.

    Examples:
        [quoted for _, _, quoted in iter_scanned("a 'b'")]
        # [False, False, True, True, True]
    """
    ctx = ScannerContext()
    for pos, char in enumerate(text):
        yield pos, char, advance(ctx, text, pos)


def scan_quotes(text: str) -> list[bool]:
    """Return, for each position of `text`, whether it lies inside a literal."""
    return [quoted for _, _, quoted in iter_scanned(text)]


def find_unquoted(
    text: str, char: str, start: int = 0, quoted: list[bool] | None = None
) -> int | None:
    """Return the index of the first `char` outside literals at or after `start`.

    Quote state always comes from scanning `text` from its beginning; pass
    `quoted` (as returned by `scan_quotes`) to reuse an earlier scan.
    """
    if quoted is None:
        quoted = scan_quotes(text)
    for pos in range(start, len(text)):
        if text[pos] == char and not quoted[pos]:
            return pos
    return None


def structural_endswith(text: str, char: str) -> bool:
    """Return True when `text` ends with `char` and that character is not quoted."""
    if not text or text[-1] != char:
        return False
    return not scan_quotes(text)[-1]


def structural_startswith(text: str, char: str) -> bool:
    """Return True when `text` starts with `char` outside any literal."""
    return bool(text) and text[0] == char and not is_quote_char(char)
