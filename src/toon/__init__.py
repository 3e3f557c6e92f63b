"""TOON - Token-Oriented Object Notation.

A compact, line-oriented encoding of JSON-like data that spends fewer LLM
tokens than the equivalent JSON document.
"""

from toon.core import TOON, CompressionResult, Format
from toon.decoder import decode, is_valid
from toon.encoder import encode
from toon.errors import ParseErrorKind, ToonDecodeError, ToonError, ToonOptionsError
from toon.normalize import InputKind, normalize
from toon.options import DecodeOptions, EncodeOptions

__all__ = [
    "TOON",
    "CompressionResult",
    "DecodeOptions",
    "EncodeOptions",
    "Format",
    "InputKind",
    "ParseErrorKind",
    "ToonDecodeError",
    "ToonError",
    "ToonOptionsError",
    "decode",
    "encode",
    "is_valid",
    "normalize",
]
__version__ = "0.1.0"
