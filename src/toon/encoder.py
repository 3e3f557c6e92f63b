"""TOON encoder.

Walks a canonical value tree and writes it through a ``LineWriter``. Lists are
rendered in one of three layouts chosen from their shape:

    - inline: ``3]: a,b,c`` for lists holding only scalars
    - tabular: ``2]{id,name}:`` plus one row per record, for lists of records
      that share the same ordered keys and hold only scalars
    - list form: ``2]:`` plus one nested block per element, for everything else

Maps become one ``key: value`` line per entry, with non-empty containers nested
one level deeper under a bare ``key:`` line.
"""

from __future__ import annotations

import re
from typing import Any

from toon.constants import (
    ARRAY_CLOSE,
    COMMA,
    DEFAULT_DELIMITER,
    EMPTY_ARRAY,
    FIELDS_CLOSE,
    FIELDS_OPEN,
    KEY_SEPARATOR,
    LIST_ITEM_MARKER,
    PREVIEW_MARKER,
    QUOTE,
    TAB,
)
from toon.normalize import Adapter, normalize
from toon.options import EncodeOptions
from toon.primitives import encode_scalar, is_scalar
from toon.writer import LineWriter

# Characters a header field cannot hold without breaking the field list.
_FIELD_BREAKERS = (FIELDS_OPEN, FIELDS_CLOSE, QUOTE, KEY_SEPARATOR, COMMA, TAB)
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def encode(
    value: Any,
    options: EncodeOptions | None = None,
    *,
    adapters: dict[type, Adapter] | None = None,
) -> str:
    """Normalize ``value`` and render it as TOON text.

    Args:
        value: Any Python value.
        options: Layout options. Defaults to ``EncodeOptions()``.
        adapters: Per-type hooks passed to the normalizer.

    Returns:
        The TOON document, lines joined by ``\\n`` without a trailing newline.

    Example:
        >>> encode([{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bob"}])
        '2]{id,name}:\\n  1,Ann\\n  2,Bob'
    """
    options = options or EncodeOptions()
    writer = LineWriter(options.indent)
    encode_value(normalize(value, adapters), options, writer)
    return writer.to_string()


def encode_value(value: Any, options: EncodeOptions, writer: LineWriter) -> None:
    """Write a canonical value at the writer's current level."""
    if is_scalar(value):
        writer.line(_literal(value, options))
    elif not value:
        writer.line(EMPTY_ARRAY)
    elif isinstance(value, dict):
        encode_object(value, options, writer)
    else:
        encode_array(value, options, writer)


def encode_object(obj: dict[str, Any], options: EncodeOptions, writer: LineWriter) -> None:
    """Write one line per entry; nested containers go one level deeper.

    Keys are written verbatim.
    """
    for key, value in obj.items():
        if is_scalar(value):
            writer.line(f"{key}{KEY_SEPARATOR} {_literal(value, options)}")
        elif not value:
            writer.line(f"{key}{KEY_SEPARATOR} {EMPTY_ARRAY}")
        else:
            writer.line(f"{key}{KEY_SEPARATOR}")
            writer.indent()
            encode_value(value, options, writer)
            writer.dedent()


def encode_array(arr: list[Any], options: EncodeOptions, writer: LineWriter) -> None:
    """Pick the layout for a non-empty list and write it."""
    if all(is_scalar(item) for item in arr):
        encode_inline_array(arr, options, writer)
        return

    fields = detect_tabular_fields(arr, options.min_rows_to_tabular, options.delimiter)
    if fields is not None:
        encode_tabular_array(arr, fields, options, writer)
    else:
        encode_list_array(arr, options, writer)


def encode_inline_array(arr: list[Any], options: EncodeOptions, writer: LineWriter) -> None:
    shown, truncated = _preview(arr, options)
    literals = [_literal(item, options) for item in shown]
    if truncated:
        literals.append(PREVIEW_MARKER)
    writer.line(f"{_count(arr)}{KEY_SEPARATOR} {options.delimiter.join(literals)}")


def detect_tabular_fields(
    arr: list[Any], min_rows: int, delimiter: str = DEFAULT_DELIMITER
) -> list[str] | None:
    """Return the shared header keys if ``arr`` qualifies for tabular layout.

    Args:
        arr: Candidate list.
        min_rows: Minimum number of records required.
        delimiter: Active delimiter, which joins the header fields.

    Returns:
        The ordered key list, or None when the records differ in keys, hold
        nested values, are too few, or have a key that cannot be written
        inside ``{...}``.
    """
    if len(arr) < min_rows:
        return None
    first = arr[0]
    if not isinstance(first, dict) or not first:
        return None

    fields = list(first.keys())
    if not all(_is_header_field(field, delimiter) for field in fields):
        return None
    for item in arr:
        if not isinstance(item, dict) or list(item.keys()) != fields:
            return None
        if not all(is_scalar(v) for v in item.values()):
            return None
    return fields


def encode_tabular_array(
    arr: list[dict[str, Any]],
    fields: list[str],
    options: EncodeOptions,
    writer: LineWriter,
) -> None:
    """Write a header with the shared keys, then one delimited row per record."""
    delimiter = options.delimiter
    header = f"{FIELDS_OPEN}{delimiter.join(fields)}{FIELDS_CLOSE}"
    writer.line(f"{_count(arr)}{header}{KEY_SEPARATOR}")

    shown, truncated = _preview(arr, options)
    writer.indent()
    for record in shown:
        writer.line(delimiter.join(_literal(record[field], options) for field in fields))
    if truncated:
        writer.line(PREVIEW_MARKER)
    writer.dedent()


def encode_list_array(arr: list[Any], options: EncodeOptions, writer: LineWriter) -> None:
    """Write a count header followed by one block per element.

    Records are introduced by a ``-`` line so that consecutive records stay
    separate when decoded.
    """
    writer.line(f"{_count(arr)}{KEY_SEPARATOR}")

    shown, truncated = _preview(arr, options)
    writer.indent()
    for item in shown:
        if isinstance(item, dict) and item:
            writer.line(LIST_ITEM_MARKER)
            writer.indent()
            encode_object(item, options, writer)
            writer.dedent()
        else:
            encode_value(item, options, writer)
    if truncated:
        writer.line(PREVIEW_MARKER)
    writer.dedent()


def _is_header_field(field: str, delimiter: str) -> bool:
    if field != field.strip() or delimiter in field:
        return False
    if any(breaker in field for breaker in _FIELD_BREAKERS):
        return False
    return _CONTROL_RE.search(field) is None


def _literal(value: Any, options: EncodeOptions) -> str:
    return encode_scalar(value, delimiter=options.delimiter, pretty=options.pretty_print)


def _count(arr: list[Any]) -> str:
    return f"{len(arr)}{ARRAY_CLOSE}"


def _preview(arr: list[Any], options: EncodeOptions) -> tuple[list[Any], bool]:
    limit = options.max_preview_items
    if limit is None or len(arr) <= limit:
        return arr, False
    return arr[:limit], True
