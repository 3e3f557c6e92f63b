"""Projection of arbitrary Python values onto the canonical TOON value tree.

The canonical tree holds only ``None``, ``bool``, ``int``, ``float``, ``str``,
``list`` and ``dict[str, ...]``. Each incoming node is classified once into an
``InputKind`` and converted accordingly. Host-specific types can be handled by
passing ``adapters``, a mapping from type to a callable that returns something
normalizable.

Normalization never raises: anything that cannot be converted becomes ``None``.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

import orjson

from toon.primitives import encode_scalar, is_scalar

logger = logging.getLogger(__name__)

Adapter = Callable[[Any], Any]

# Conversion hooks tried in order on otherwise unknown objects.
_SERIALIZE_METHODS = ("model_dump", "to_dict", "_asdict", "__json__")


class InputKind(Enum):
    """Closed set of input shapes recognised by the normalizer."""

    ADAPTED = "adapted"
    SCALAR = "scalar"
    TEMPORAL = "temporal"
    ENUM = "enum"
    BYTES = "bytes"
    MAPPING = "mapping"
    SERIALIZABLE = "serializable"
    DATACLASS = "dataclass"
    ITERABLE = "iterable"
    OBJECT = "object"


def classify(value: Any, adapters: Mapping[type, Adapter] | None = None) -> InputKind:
    """Resolve the input kind of a single value."""
    if adapters and _find_adapter(value, adapters) is not None:
        return InputKind.ADAPTED
    if isinstance(value, Enum):
        return InputKind.ENUM
    if is_scalar(value):
        return InputKind.SCALAR
    if isinstance(value, (datetime, date, time)):
        return InputKind.TEMPORAL
    if isinstance(value, (bytes, bytearray)):
        return InputKind.BYTES
    if isinstance(value, Mapping):
        return InputKind.MAPPING
    if _serialize_method(value) is not None:
        return InputKind.SERIALIZABLE
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return InputKind.DATACLASS
    if isinstance(value, Iterable):
        return InputKind.ITERABLE
    return InputKind.OBJECT


def normalize(value: Any, adapters: Mapping[type, Adapter] | None = None) -> Any:
    """Convert ``value`` into a canonical TOON value tree.

    Args:
        value: Any Python value.
        adapters: Optional per-type conversion hooks. The hook for the closest
            class in the value's MRO wins; its result is normalized again.

    Returns:
        The canonical tree.
    """
    return _Normalizer(adapters or {}).normalize(value)


def _find_adapter(value: Any, adapters: Mapping[type, Adapter]) -> Adapter | None:
    for klass in type(value).__mro__:
        if klass in adapters:
            return adapters[klass]
    return None


def _serialize_method(value: Any) -> Callable[[], Any] | None:
    if isinstance(value, type):
        return None
    for name in _SERIALIZE_METHODS:
        method = getattr(value, name, None)
        if callable(method):
            return method
    return None


class _Normalizer:
    def __init__(self, adapters: Mapping[type, Adapter]) -> None:
        self._adapters = adapters
        # ids of containers on the current path, for cycle detection
        self._active: set[int] = set()

    def normalize(self, value: Any) -> Any:
        try:
            return self._normalize(value)
        except Exception as e:
            logger.debug("Cannot normalize %s, using null: %s", type(value).__name__, e)
            return None

    def _normalize(self, value: Any) -> Any:
        kind = classify(value, self._adapters)
        if kind is InputKind.SCALAR:
            return value
        if kind is InputKind.TEMPORAL:
            return value.isoformat()
        if kind is InputKind.ENUM:
            return value.value if is_scalar(value.value) else value.name
        if kind is InputKind.BYTES:
            return bytes(value).decode("utf-8", errors="replace")

        key = id(value)
        if key in self._active:
            logger.debug("Breaking reference cycle at %s", type(value).__name__)
            return None
        self._active.add(key)
        try:
            return self._convert(kind, value)
        finally:
            self._active.discard(key)

    def _convert(self, kind: InputKind, value: Any) -> Any:
        if kind is InputKind.ADAPTED:
            adapter = _find_adapter(value, self._adapters)
            return self._after_conversion(adapter(value), value)  # type: ignore[misc]
        if kind is InputKind.MAPPING:
            return self._mapping(value)
        if kind is InputKind.SERIALIZABLE:
            method = _serialize_method(value)
            return self._after_conversion(method(), value)  # type: ignore[misc]
        if kind is InputKind.DATACLASS:
            return self._mapping(
                {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            )
        if kind is InputKind.ITERABLE:
            return [self.normalize(item) for item in list(value)]
        return self._object(value)

    def _after_conversion(self, converted: Any, original: Any) -> Any:
        # A hook that hands back the same object would recurse forever.
        if converted is original:
            logger.debug("Conversion of %s returned itself", type(original).__name__)
            return None
        return self.normalize(converted)

    def _mapping(self, mapping: Mapping[Any, Any]) -> Any:
        keys = list(mapping.keys())
        if keys and all(type(k) is int and k == i for i, k in enumerate(keys)):
            return [self.normalize(mapping[k]) for k in keys]
        return {self._key(k): self.normalize(v) for k, v in mapping.items()}

    def _key(self, key: Any) -> str:
        if isinstance(key, str):
            return key
        if is_scalar(key):
            return encode_scalar(key, pretty=True)
        normalized = self.normalize(key)
        if isinstance(normalized, str):
            return normalized
        return str(key)

    def _object(self, value: Any) -> Any:
        try:
            return orjson.loads(orjson.dumps(value))
        except TypeError:
            attrs = _public_attributes(value)
        if attrs is None:
            logger.debug("Cannot normalize %s, using null", type(value).__name__)
            return None
        return self._mapping(attrs)


def _public_attributes(value: Any) -> dict[str, Any] | None:
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    slots = getattr(type(value), "__slots__", None)
    if slots is None:
        return None
    if isinstance(slots, str):
        slots = (slots,)
    return {
        name: getattr(value, name)
        for name in slots
        if not name.startswith("_") and hasattr(value, name)
    }
