"""Exception types raised by the TOON codec."""

from __future__ import annotations

from enum import Enum


class ToonError(Exception):
    """Base class for all TOON errors."""


class ToonOptionsError(ToonError, ValueError):
    """Raised when encode or decode options are out of range."""


class ParseErrorKind(str, Enum):
    """Structural problems reported by the strict decoder."""

    UNEXPECTED_INDENT = "unexpected_indent"
    UNTERMINATED_HEADER = "unterminated_header"
    DELIMITER_MISMATCH = "delimiter_mismatch"
    COUNT_MISMATCH = "count_mismatch"
    MIXED_BLOCK = "mixed_block"


class ToonDecodeError(ToonError):
    """Raised by the strict decoder when text is not well-formed TOON.

    Attributes:
        kind: Category of the structural problem.
        line: 1-based line number where it was detected.
    """

    def __init__(self, kind: ParseErrorKind, message: str, line: int) -> None:
        super().__init__(f"{message} (line {line})")
        self.kind = kind
        self.line = line
