"""Markers and reserved literals shared by the TOON encoder and decoder."""

from __future__ import annotations

KEY_SEPARATOR = ":"
ARRAY_CLOSE = "]"
FIELDS_OPEN = "{"
FIELDS_CLOSE = "}"
LIST_ITEM_MARKER = "-"
EMPTY_ARRAY = "[]"
PREVIEW_MARKER = "..."

COMMA = ","
TAB = "\t"
DEFAULT_DELIMITER = COMMA

DEFAULT_INDENT = 2
DEFAULT_MIN_ROWS_TO_TABULAR = 2

QUOTE = '"'
BACKSLASH = "\\"

NULL_LITERAL = "null"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"
RESERVED_LITERALS = frozenset({NULL_LITERAL, TRUE_LITERAL, FALSE_LITERAL})

# Characters written as backslash escapes inside quoted strings.
ESCAPES = {
    "\\": "\\",
    '"': '"',
    "\n": "n",
    "\r": "r",
    "\t": "t",
}
UNESCAPES = {code: char for char, code in ESCAPES.items()}
