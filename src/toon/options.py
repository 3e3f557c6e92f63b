"""Encode and decode options, plus the named presets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from toon.constants import (
    COMMA,
    DEFAULT_DELIMITER,
    DEFAULT_INDENT,
    DEFAULT_MIN_ROWS_TO_TABULAR,
    TAB,
)
from toon.errors import ToonOptionsError

Preset = Literal["default", "compact", "readable", "tabular"]


@dataclass(frozen=True)
class EncodeOptions:
    """Layout configuration for the encoder.

    Attributes:
        indent: Spaces per nesting level.
        delimiter: Separator for inline scalar lists and tabular columns.
        min_rows_to_tabular: Minimum number of uniform records before a list is
            rendered as a table.
        max_preview_items: When set, lists longer than this emit only their
            first items followed by a ``...`` marker. The header keeps the
            true count.
        pretty_print: Render floats with the shortest round-trip repr instead
            of 17 significant digits.
    """

    indent: int = DEFAULT_INDENT
    delimiter: str = DEFAULT_DELIMITER
    min_rows_to_tabular: int = DEFAULT_MIN_ROWS_TO_TABULAR
    max_preview_items: int | None = None
    pretty_print: bool = False

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ToonOptionsError(f"indent must be >= 0, got {self.indent}")
        if not self.delimiter:
            raise ToonOptionsError("delimiter must be a non-empty string")
        if self.min_rows_to_tabular < 1:
            raise ToonOptionsError(
                f"min_rows_to_tabular must be >= 1, got {self.min_rows_to_tabular}"
            )
        if self.max_preview_items is not None and self.max_preview_items < 0:
            raise ToonOptionsError(
                f"max_preview_items must be >= 0, got {self.max_preview_items}"
            )

    @classmethod
    def compact(cls) -> EncodeOptions:
        """No indentation, comma-delimited."""
        return cls(indent=0, delimiter=COMMA, min_rows_to_tabular=2)

    @classmethod
    def readable(cls) -> EncodeOptions:
        """Two-space indentation with short float literals."""
        return cls(indent=2, delimiter=COMMA, min_rows_to_tabular=2, pretty_print=True)

    @classmethod
    def tabular(cls) -> EncodeOptions:
        """Tab-delimited, tables from a single record upward."""
        return cls(indent=0, delimiter=TAB, min_rows_to_tabular=1)

    @classmethod
    def preset(cls, name: Preset) -> EncodeOptions:
        """Resolve a preset by name."""
        if name == "default":
            return cls()
        if name == "compact":
            return cls.compact()
        if name == "readable":
            return cls.readable()
        if name == "tabular":
            return cls.tabular()
        raise ToonOptionsError(f"Unknown preset: {name!r}")


@dataclass(frozen=True)
class DecodeOptions:
    """Configuration for the decoder.

    Attributes:
        indent: Spaces per nesting level. ``0`` reads every line as top level.
        delimiter: Field delimiter. ``None`` picks tab or comma per header.
        strict: Raise ``ToonDecodeError`` on structural problems instead of
            resolving them permissively.
    """

    indent: int = DEFAULT_INDENT
    delimiter: str | None = None
    strict: bool = False

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ToonOptionsError(f"indent must be >= 0, got {self.indent}")
        if self.delimiter is not None and not self.delimiter:
            raise ToonOptionsError("delimiter must be a non-empty string or None")
