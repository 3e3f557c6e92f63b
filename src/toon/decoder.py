"""TOON decoder.

A single forward pass over the document lines. Indentation delimits nested
blocks; each block is either a run of ``key: value`` entries (a map) or a single
item (scalar, ``[]``, ``-`` record, or array header with its rows/elements).

By default structural problems are resolved permissively: lines indented
deeper than expected are skipped, short tabular rows are padded with ``None``
and header counts are not enforced. With ``DecodeOptions(strict=True)`` each of
those raises ``ToonDecodeError`` instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, NamedTuple

from toon.constants import (
    EMPTY_ARRAY,
    FIELDS_CLOSE,
    FIELDS_OPEN,
    KEY_SEPARATOR,
    LIST_ITEM_MARKER,
)
from toon.errors import ParseErrorKind, ToonDecodeError
from toon.options import DecodeOptions
from toon.primitives import decode_scalar, detect_delimiter, find_key_separator, split_delimited

logger = logging.getLogger(__name__)

_COUNT_RE = re.compile(r"(\d+)\]", re.ASCII)


@dataclass(frozen=True)
class ArrayHeader:
    """Parsed ``<n>]...`` header line.

    Attributes:
        count: Declared number of elements.
        fields: Column names for a tabular header, else None.
        inline: Text after the colon for an inline scalar list, else None.
        delimiter: Delimiter used by the fields, inline text and rows.
        complete: False when a ``{`` field list was never closed.
    """

    count: int
    fields: tuple[str, ...] | None = None
    inline: str | None = None
    delimiter: str = ","
    complete: bool = True


def parse_array_header(content: str, delimiter: str | None = None) -> ArrayHeader | None:
    """Parse a stripped line as an array header.

    Args:
        content: Line content without indentation.
        delimiter: Field delimiter, or None to detect it from the line.

    Returns:
        The header, or None if the line is not an array header.
    """
    match = _COUNT_RE.match(content)
    if match is None:
        return None
    count = int(match.group(1))
    rest = content[match.end() :]

    if rest.startswith(FIELDS_OPEN):
        close = rest.find(FIELDS_CLOSE)
        if close == -1 or not rest.startswith(KEY_SEPARATOR, close + 1):
            return ArrayHeader(count, complete=False)
        names = rest[1:close]
        delimiter = delimiter or detect_delimiter(names)
        fields = tuple(name.strip() for name in split_delimited(names, delimiter))
        return ArrayHeader(count, fields=fields, delimiter=delimiter)

    if rest.startswith(KEY_SEPARATOR):
        inline = rest[1:].strip()
        if not inline:
            return ArrayHeader(count, delimiter=delimiter or ",")
        return ArrayHeader(count, inline=inline, delimiter=delimiter or detect_delimiter(inline))

    return None


class _Part(NamedTuple):
    key: str | None
    value: Any
    line: int


class Decoder:
    """Decodes one TOON document. Instances are single-use."""

    def __init__(self, text: str, options: DecodeOptions | None = None) -> None:
        self._options = options or DecodeOptions()
        self._lines = text.split("\n")
        self._cursor = 0

    def decode(self) -> Any:
        line = self._peek()
        if line is None:
            return None
        value = self._decode_value(self._depth(line))

        if self._peek() is not None:
            self._problem(
                ParseErrorKind.UNEXPECTED_INDENT,
                "Line is shallower than the first line of the document",
                self._cursor + 1,
            )
        return value

    # -- line helpers -----------------------------------------------------

    def _peek(self) -> str | None:
        """Skip blank lines and return the next line without consuming it."""
        while self._cursor < len(self._lines):
            line = self._lines[self._cursor]
            if line.strip():
                return line
            self._cursor += 1
        return None

    def _depth(self, line: str) -> int:
        if not self._options.indent:
            return 0
        spaces = len(line) - len(line.lstrip(" "))
        return spaces // self._options.indent

    def _child_level(self, level: int) -> int | None:
        """Level of the next line if it is nested below ``level``."""
        line = self._peek()
        if line is None:
            return None
        depth = self._depth(line)
        return depth if depth > level else None

    def _problem(self, kind: ParseErrorKind, message: str, line: int) -> None:
        if self._options.strict:
            raise ToonDecodeError(kind, message, line)
        logger.debug("Lenient decode, %s at line %d: %s", kind.value, line, message)

    def _header(self, content: str, line: int) -> ArrayHeader | None:
        header = parse_array_header(content, self._options.delimiter)
        if header is not None and not header.complete:
            self._problem(
                ParseErrorKind.UNTERMINATED_HEADER, f"Unterminated field list: {content}", line
            )
            return None
        return header

    # -- blocks -----------------------------------------------------------

    def _scan_block(self, level: int) -> list[_Part]:
        parts: list[_Part] = []
        while (line := self._peek()) is not None:
            depth = self._depth(line)
            if depth < level:
                break
            if depth > level:
                self._problem(
                    ParseErrorKind.UNEXPECTED_INDENT,
                    f"Expected indent level {level}, found {depth}",
                    self._cursor + 1,
                )
                self._cursor += 1
                continue
            parts.append(self._parse_line(level))
        return parts

    def _decode_value(self, level: int) -> Any:
        parts = self._scan_block(level)
        if not parts:
            return None

        items = [part for part in parts if part.key is None]
        if not items:
            return {part.key: part.value for part in parts}
        if len(items) == len(parts):
            if len(parts) == 1:
                return parts[0].value
            self._problem(ParseErrorKind.MIXED_BLOCK, "Several values in one block", parts[1].line)
            return [part.value for part in parts]

        self._problem(
            ParseErrorKind.MIXED_BLOCK, "Map entries mixed with list items", items[0].line
        )
        result: dict[str, Any] = {}
        index = 0
        for part in parts:
            if part.key is None:
                result[str(index)] = part.value
                index += 1
            else:
                result[part.key] = part.value
        return result

    def _parse_line(self, level: int) -> _Part:
        line_no = self._cursor + 1
        content = self._lines[self._cursor].strip()
        self._cursor += 1

        header = self._header(content, line_no)
        if header is not None:
            return _Part(None, self._parse_array(header, level, line_no), line_no)
        if content == EMPTY_ARRAY:
            return _Part(None, [], line_no)
        if content == LIST_ITEM_MARKER:
            child = self._child_level(level)
            return _Part(None, {} if child is None else self._decode_value(child), line_no)

        sep = find_key_separator(content)
        if sep != -1:
            key = content[:sep].strip()
            inline = content[sep + 1 :].strip()
            return _Part(key, self._parse_entry_value(inline, level, line_no), line_no)
        return _Part(None, decode_scalar(content), line_no)

    def _parse_entry_value(self, inline: str, level: int, line_no: int) -> Any:
        child = self._child_level(level)
        if child is not None:
            if inline:
                self._problem(
                    ParseErrorKind.UNEXPECTED_INDENT,
                    "Inline value followed by a nested block",
                    line_no,
                )
            return self._decode_value(child)
        if inline == EMPTY_ARRAY:
            return []
        if inline:
            return decode_scalar(inline)

        # Flat documents put a container on the line after its key.
        line = self._peek()
        if line is not None and self._depth(line) == level:
            header = parse_array_header(line.strip(), self._options.delimiter)
            if header is not None and header.complete:
                return self._parse_line(level).value
        return None

    # -- arrays -----------------------------------------------------------

    def _parse_array(self, header: ArrayHeader, level: int, line_no: int) -> list[Any]:
        if header.fields is not None:
            values: list[Any] = self._parse_rows(header, level)
        elif header.inline is not None:
            values = [decode_scalar(s) for s in split_delimited(header.inline, header.delimiter)]
        else:
            values = self._parse_elements(header, level)

        if len(values) != header.count:
            self._problem(
                ParseErrorKind.COUNT_MISMATCH,
                f"Header declares {header.count} elements, found {len(values)}",
                line_no,
            )
        return values

    def _parse_rows(self, header: ArrayHeader, level: int) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        row_level = self._child_level(level)
        # Unindented rows are bounded by the declared count.
        limit = header.count if row_level is None else None
        if row_level is None:
            row_level = level

        while (line := self._peek()) is not None:
            if limit is not None and len(rows) >= limit:
                break
            depth = self._depth(line)
            if depth < row_level:
                break
            line_no = self._cursor + 1
            self._cursor += 1
            if depth > row_level:
                self._problem(
                    ParseErrorKind.UNEXPECTED_INDENT,
                    f"Expected row at indent level {row_level}, found {depth}",
                    line_no,
                )
                continue
            rows.append(self._parse_row(line.strip(), header, line_no))
        return rows

    def _parse_row(self, content: str, header: ArrayHeader, line_no: int) -> dict[str, Any]:
        fields = header.fields or ()
        values = [decode_scalar(s) for s in split_delimited(content, header.delimiter)]
        if len(values) != len(fields):
            self._problem(
                ParseErrorKind.DELIMITER_MISMATCH,
                f"Row has {len(values)} values for {len(fields)} fields",
                line_no,
            )
            values = (values + [None] * len(fields))[: len(fields)]
        return dict(zip(fields, values, strict=True))

    def _parse_elements(self, header: ArrayHeader, level: int) -> list[Any]:
        child = self._child_level(level)
        if child is not None:
            parts = self._scan_block(child)
        else:
            parts = []
            while len(parts) < header.count and self._peek() is not None:
                parts.append(self._parse_line(level))

        items: list[Any] = []
        group: dict[str, Any] | None = None
        for part in parts:
            if part.key is None:
                items.append(part.value)
                group = None
                continue
            if group is None:
                self._problem(
                    ParseErrorKind.MIXED_BLOCK,
                    f"Map entry inside a list without a '{LIST_ITEM_MARKER}' marker",
                    part.line,
                )
                group = {}
                items.append(group)
            group[part.key] = part.value
        return items


def decode(text: str, options: DecodeOptions | None = None) -> Any:
    """Decode TOON text into a canonical value tree.

    Args:
        text: TOON document.
        options: Decoder options. Defaults to lenient decoding with two-space
            indentation and delimiter detection.

    Returns:
        The decoded value: ``None``, ``bool``, ``int``, ``float``, ``str``,
        ``list`` or ``dict``.

    Raises:
        ToonDecodeError: In strict mode, if the text is not well-formed.
    """
    return Decoder(text, options).decode()


def is_valid(text: str, options: DecodeOptions | None = None) -> bool:
    """Whether ``text`` decodes cleanly under the strict decoder."""
    strict = replace(options or DecodeOptions(), strict=True)
    try:
        Decoder(text, strict).decode()
    except ToonDecodeError:
        return False
    return True
