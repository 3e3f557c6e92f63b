"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from toon import EncodeOptions


@pytest.fixture
def simple_data() -> list[dict[str, Any]]:
    """Uniform records with scalar fields."""
    return [
        {"id": 1, "name": "Alice", "role": "admin"},
        {"id": 2, "name": "Bob", "role": "user"},
        {"id": 3, "name": "Charlie", "role": "user"},
    ]


@pytest.fixture
def nested_data() -> dict[str, Any]:
    """Maps nested inside maps and lists."""
    return {
        "company": "ACME",
        "address": {"street": "123 Main St", "city": "Seattle"},
        "employees": [
            {"id": 1, "user": {"name": "Alice", "email": "alice@example.com"}},
            {"id": 2, "user": {"name": "Bob", "email": "bob@example.com"}},
        ],
    }


@pytest.fixture
def list_data() -> list[dict[str, Any]]:
    """Records whose values include lists, so they cannot be tabular."""
    return [
        {"id": 1, "tags": [{"name": "python"}, {"name": "ai"}]},
        {"id": 2, "tags": ["rust"]},
        {"id": 3, "tags": []},
    ]


@pytest.fixture
def data_with_nulls() -> list[dict[str, Any]]:
    """Records with explicit nulls and differing key sets."""
    return [
        {"id": 1, "name": "Alice", "role": None},
        {"id": 2, "name": "Bob"},
        {"id": 3},
    ]


@pytest.fixture
def readable() -> EncodeOptions:
    return EncodeOptions.readable()
