"""Token counting with tiktoken."""

from __future__ import annotations

from functools import lru_cache

import tiktoken

DEFAULT_ENCODING = "o200k_base"


@lru_cache(maxsize=8)
def get_encoding(name: str) -> tiktoken.Encoding:
    """Load a tiktoken encoding by name, cached per process."""
    return tiktoken.get_encoding(name)


def count_tokens(text: str, *, encoding: str = DEFAULT_ENCODING) -> int:
    """Count tokens in ``text`` with the named tiktoken encoding."""
    return len(get_encoding(encoding).encode(text, disallowed_special=()))
