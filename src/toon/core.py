"""TOON facade.

TOON (Token-Oriented Object Notation) is a compact, line-oriented rendering of
JSON-like data, optimized for LLM consumption.

Core features:
    - Tabular records: lists of same-shaped records hoist their keys into a
      single header line.
    - Inline scalar lists: ``3]: 1,2,3`` instead of one element per line.
    - Minimal quoting: strings stay bare unless they would be ambiguous.
    - Presets: compact, readable and tab-delimited layouts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import orjson

from toon.decoder import decode, is_valid
from toon.encoder import encode
from toon.encoding import DEFAULT_ENCODING, count_tokens
from toon.errors import ToonError
from toon.normalize import Adapter, normalize
from toon.options import DecodeOptions, EncodeOptions, Preset

Format = Preset


@dataclass(frozen=True)
class CompressionResult:
    """Size comparison of the same data as compact JSON and as TOON."""

    json_text: str
    toon_text: str
    json_tokens: int
    toon_tokens: int

    @property
    def json_chars(self) -> int:
        """Length of the compact JSON text."""
        return len(self.json_text)

    @property
    def toon_chars(self) -> int:
        """Length of the TOON text."""
        return len(self.toon_text)

    @property
    def chars_saved(self) -> int:
        """Characters saved by TOON (negative if TOON is larger)."""
        return self.json_chars - self.toon_chars

    @property
    def savings(self) -> float:
        """Fraction of JSON tokens saved by TOON (negative if TOON is larger)."""
        if self.json_tokens == 0:
            return 0.0
        return 1.0 - self.toon_tokens / self.json_tokens

    @property
    def compression_ratio(self) -> float:
        """TOON characters per JSON character."""
        if self.json_chars == 0:
            return 0.0
        return self.toon_chars / self.json_chars


class TOON:
    """Encoder/decoder entry points for the TOON format.

    Layouts:
        - Scalars: a single literal line.
        - Maps: ``key: value`` lines, nested containers indented below ``key:``.
        - Scalar lists: ``<n>]: a,b,c`` on one line.
        - Uniform records: ``<n>]{k1,k2}:`` header plus one row per record.
        - Anything else: ``<n>]:`` header plus one block per element.
    """

    @staticmethod
    def encode(
        data: Any,
        options: EncodeOptions | None = None,
        *,
        adapters: dict[type, Adapter] | None = None,
    ) -> str:
        """Encode data as TOON.

        Args:
            data: Any Python value; it is normalized first.
            options: Layout options (default: ``EncodeOptions()``).
            adapters: Per-type conversion hooks for host objects.

        Returns:
            TOON text.

        Example:
            >>> TOON.encode({"name": "Ann", "age": 30})
            'name: Ann\\nage: 30'
        """
        return encode(data, options, adapters=adapters)

    @staticmethod
    def encode_compact(data: Any) -> str:
        return encode(data, EncodeOptions.compact())

    @staticmethod
    def encode_readable(data: Any) -> str:
        return encode(data, EncodeOptions.readable())

    @staticmethod
    def encode_tabular(data: Any) -> str:
        return encode(data, EncodeOptions.tabular())

    @staticmethod
    def convert(data: Any, format: Format = "readable") -> str:
        """Encode data with a named preset.

        Args:
            data: Value to encode.
            format: One of "default", "compact", "readable", "tabular".

        Raises:
            ToonOptionsError: If the preset name is unknown.
        """
        return encode(data, EncodeOptions.preset(format))

    @staticmethod
    def decode(payload: str, options: DecodeOptions | None = None) -> Any:
        """Decode a TOON payload into plain Python values.

        Lenient by default; pass ``DecodeOptions(strict=True)`` to get a
        ``ToonDecodeError`` on malformed input.
        """
        return decode(payload, options)

    @staticmethod
    def is_valid(payload: str, options: DecodeOptions | None = None) -> bool:
        """Check whether a payload is well-formed TOON."""
        return is_valid(payload, options)

    @staticmethod
    def compare(
        data: Any,
        options: EncodeOptions | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
    ) -> CompressionResult:
        """Compare the compact JSON and TOON renderings of ``data``.

        Args:
            data: Value to compare.
            options: TOON layout options (default: readable preset).
            encoding: Tiktoken encoding used for token counts.

        Returns:
            Character and token counts for both renderings.

        Raises:
            ToonError: If the normalized data cannot be serialized as JSON.
        """
        normalized = normalize(data)
        try:
            json_text = orjson.dumps(normalized).decode()
        except orjson.JSONEncodeError as e:
            raise ToonError(f"Cannot serialize as JSON: {e}") from e
        toon_text = encode(normalized, options or EncodeOptions.readable())
        return CompressionResult(
            json_text=json_text,
            toon_text=toon_text,
            json_tokens=count_tokens(json_text, encoding=encoding),
            toon_tokens=count_tokens(toon_text, encoding=encoding),
        )

    @staticmethod
    def count_tokens(text: str, *, encoding: str = DEFAULT_ENCODING) -> int:
        """Count tokens in text using the specified encoding."""
        return count_tokens(text, encoding=encoding)
