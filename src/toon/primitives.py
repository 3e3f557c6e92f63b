"""Scalar literals: rendering, parsing and quote-aware splitting.

Every scalar in a TOON document is written by ``encode_scalar`` and read back by
``decode_scalar``. Strings are left bare whenever that cannot be confused with
another literal or with the surrounding syntax, and are quoted otherwise.
"""

from __future__ import annotations

import math
import re
from typing import Any

from toon.constants import (
    BACKSLASH,
    COMMA,
    DEFAULT_DELIMITER,
    ESCAPES,
    FALSE_LITERAL,
    KEY_SEPARATOR,
    NULL_LITERAL,
    QUOTE,
    RESERVED_LITERALS,
    TAB,
    TRUE_LITERAL,
    UNESCAPES,
)

Scalar = str | int | float | bool | None

_NUMERIC_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_NEEDS_QUOTES_RE = re.compile(r'[\s:,\[\]{}\-"\x00-\x1f\x7f]')


def is_scalar(value: Any) -> bool:
    """True for values rendered as a single literal."""
    return value is None or isinstance(value, (str, int, float, bool))


def is_numeric(text: str) -> bool:
    """True if ``text`` reads as a number literal."""
    return _NUMERIC_RE.fullmatch(text) is not None


def encode_scalar(value: Scalar, *, delimiter: str = DEFAULT_DELIMITER, pretty: bool = False) -> str:
    """Render a scalar as a TOON literal.

    Args:
        value: Scalar to render.
        delimiter: Active delimiter; strings containing it are quoted.
        pretty: Use the shortest round-trip float repr.

    Returns:
        The literal text.
    """
    if value is None:
        return NULL_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _encode_float(value, pretty)
    return _encode_string(value, delimiter)


def _encode_float(value: float, pretty: bool) -> str:
    if not math.isfinite(value):
        return NULL_LITERAL
    text = repr(value) if pretty else f"{value:.17G}"
    # Keep a float marker so the literal does not read back as an int.
    if not any(c in text for c in ".eE"):
        text += ".0"
    return text


def _encode_string(value: str, delimiter: str) -> str:
    if needs_quotes(value, delimiter):
        return QUOTE + escape(value) + QUOTE
    return value


def needs_quotes(value: str, delimiter: str = DEFAULT_DELIMITER) -> bool:
    """Whether a string must be quoted to survive a round trip."""
    if not value or value in RESERVED_LITERALS or is_numeric(value):
        return True
    if _NEEDS_QUOTES_RE.search(value):
        return True
    return delimiter in value


def escape(value: str) -> str:
    return "".join(BACKSLASH + ESCAPES[c] if c in ESCAPES else c for c in value)


def unescape(value: str) -> str:
    """Reverse ``escape``; unknown escape sequences keep their backslash."""
    out: list[str] = []
    i = 0
    n = len(value)
    while i < n:
        char = value[i]
        if char == BACKSLASH and i + 1 < n and value[i + 1] in UNESCAPES:
            out.append(UNESCAPES[value[i + 1]])
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def decode_scalar(text: str) -> Scalar:
    """Parse a literal span. Never raises; unknown text is returned verbatim."""
    text = text.strip()
    if not text:
        return ""
    if text[0] == QUOTE:
        body = text[1:-1] if len(text) >= 2 and text[-1] == QUOTE else text[1:]
        return unescape(body)
    if text == NULL_LITERAL:
        return None
    if text == TRUE_LITERAL:
        return True
    if text == FALSE_LITERAL:
        return False
    if is_numeric(text):
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)
    return text


def find_unquoted(text: str, needle: str, start: int = 0) -> int:
    """Index of the first ``needle`` outside a quoted span, or -1."""
    in_quotes = False
    i = start
    n = len(text)
    while i < n:
        char = text[i]
        if in_quotes:
            if char == BACKSLASH:
                i += 2
                continue
            if char == QUOTE:
                in_quotes = False
        elif char == QUOTE:
            in_quotes = True
        elif text.startswith(needle, i):
            return i
        i += 1
    return -1


def find_key_separator(text: str) -> int:
    """Index of the ``:`` that ends a map key, or -1.

    Keys are written verbatim and may hold quotes, so the quote-aware search is
    only used for lines opening with a quoted scalar.
    """
    if text.startswith(QUOTE):
        return find_unquoted(text, KEY_SEPARATOR)
    return text.find(KEY_SEPARATOR)


def split_delimited(text: str, delimiter: str) -> list[str]:
    """Split on ``delimiter`` except inside quoted spans."""
    parts: list[str] = []
    start = 0
    while (idx := find_unquoted(text, delimiter, start)) != -1:
        parts.append(text[start:idx])
        start = idx + len(delimiter)
    parts.append(text[start:])
    return parts


def detect_delimiter(text: str) -> str:
    """Guess the delimiter of a joined span.

    Tabs and commas are always quoted inside string literals, so the first one
    found outside quotes is the delimiter.
    """
    tab = find_unquoted(text, TAB)
    comma = find_unquoted(text, COMMA)
    if tab != -1 and (comma == -1 or tab < comma):
        return TAB
    return COMMA
