"""Tests for projecting host values onto the canonical value tree."""

from __future__ import annotations

import uuid
from collections import OrderedDict, namedtuple
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any

import pytest

from toon import InputKind, normalize
from toon.normalize import classify


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


class Shape(Enum):
    SQUARE = (1, 2)


@dataclass
class Point:
    x: int
    y: int
    labels: list[str] = field(default_factory=list)


class Model:
    """Looks like a pydantic model."""

    def __init__(self, **fields: Any) -> None:
        self._fields = fields

    def model_dump(self) -> dict[str, Any]:
        return dict(self._fields)


class Plain:
    def __init__(self) -> None:
        self.name = "plain"
        self.when = date(2024, 5, 1)
        self._hidden = "secret"


class Slotted:
    __slots__ = ("a", "b", "_c")

    def __init__(self) -> None:
        self.a = 1
        self.b = [1, 2]
        self._c = 3


class Broken:
    def model_dump(self) -> dict[str, Any]:
        raise RuntimeError("boom")


class RaisingHook:
    @property
    def to_dict(self) -> Any:
        raise ValueError("boom")


class KeylessDict(dict):  # type: ignore[type-arg]
    def keys(self) -> Any:  # type: ignore[override]
        raise RuntimeError("no keys")


class Hostile:
    def __getattribute__(self, name: str) -> Any:
        raise RuntimeError(f"no {name}")


Pair = namedtuple("Pair", ["left", "right"])


class TestScalars:
    @pytest.mark.parametrize("value", [None, True, False, 0, -3, 1.5, "", "text"])
    def test_scalars_pass_through(self, value: object) -> None:
        result = normalize(value)
        assert result == value
        assert type(result) is type(value)

    def test_aware_datetime_includes_offset(self) -> None:
        tz = timezone(timedelta(hours=2))
        assert normalize(datetime(2024, 1, 2, 3, 4, 5, tzinfo=tz)) == "2024-01-02T03:04:05+02:00"

    def test_naive_datetime_has_no_offset(self) -> None:
        assert normalize(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"

    def test_date_and_time(self) -> None:
        assert normalize(date(2024, 1, 2)) == "2024-01-02"
        assert normalize(time(13, 30)) == "13:30:00"

    def test_enum_uses_scalar_value(self) -> None:
        assert normalize(Color.RED) == "red"

    def test_int_enum_becomes_plain_int(self) -> None:
        result = normalize(Priority.HIGH)
        assert result == 2
        assert type(result) is int

    def test_enum_with_non_scalar_value_uses_name(self) -> None:
        assert normalize(Shape.SQUARE) == "SQUARE"

    def test_bytes_are_decoded(self) -> None:
        assert normalize(b"abc") == "abc"
        assert normalize(bytearray(b"\xffx")) == "\ufffdx"


class TestCollections:
    def test_sequential_int_keys_become_list(self) -> None:
        assert normalize({0: "a", 1: "b"}) == ["a", "b"]

    def test_other_keys_become_string_keyed_map(self) -> None:
        assert normalize({1: "a", 0: "b"}) == {"1": "a", "0": "b"}
        assert normalize({None: 1, True: 2, 1.5: 3}) == {"null": 1, "true": 2, "1.5": 3}

    def test_non_scalar_keys_use_normalized_form(self) -> None:
        assert normalize({date(2024, 1, 1): 1, Color.GREEN: 2}) == {"2024-01-01": 1, "green": 2}

    def test_empty_mapping_stays_a_map(self) -> None:
        assert normalize({}) == {}

    def test_key_order_is_preserved(self) -> None:
        result = normalize(OrderedDict([("z", 1), ("a", 2)]))
        assert list(result) == ["z", "a"]

    def test_iterables_become_lists(self) -> None:
        assert normalize((1, 2)) == [1, 2]
        assert normalize(x * 2 for x in range(3)) == [0, 2, 4]
        assert normalize(frozenset({"only"})) == ["only"]

    def test_nested_values_are_normalized(self) -> None:
        data = {"when": [date(2024, 1, 1)], "color": {"primary": Color.RED}}
        assert normalize(data) == {"when": ["2024-01-01"], "color": {"primary": "red"}}


class TestObjects:
    def test_dataclass_fields_in_order(self) -> None:
        assert normalize(Point(1, 2, ["a"])) == {"x": 1, "y": 2, "labels": ["a"]}

    def test_model_dump_is_used(self) -> None:
        assert normalize(Model(id=1, tags=("a",))) == {"id": 1, "tags": ["a"]}

    def test_namedtuple_becomes_map(self) -> None:
        assert normalize(Pair(1, "x")) == {"left": 1, "right": "x"}

    def test_public_attributes_of_plain_object(self) -> None:
        assert normalize(Plain()) == {"name": "plain", "when": "2024-05-01"}

    def test_slotted_object(self) -> None:
        assert normalize(Slotted()) == {"a": 1, "b": [1, 2]}

    def test_uuid_uses_string_form(self) -> None:
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert normalize(value) == "12345678-1234-5678-1234-567812345678"

    def test_unsupported_value_degrades_to_null(self) -> None:
        assert normalize(object()) is None
        assert normalize({"x": object()}) == {"x": None}

    def test_failing_serializer_degrades_to_null(self) -> None:
        assert normalize(Broken()) is None


class TestAdapters:
    def test_adapter_converts_host_type(self) -> None:
        assert normalize({"price": Decimal("1.50")}, {Decimal: str}) == {"price": "1.50"}

    def test_adapter_matches_subclasses(self) -> None:
        class Money(Decimal):
            pass

        assert normalize(Money("2"), {Decimal: float}) == 2.0

    def test_adapter_result_is_normalized_again(self) -> None:
        assert normalize(Decimal("1"), {Decimal: lambda d: {"v": date(2024, 1, 1)}}) == {
            "v": "2024-01-01"
        }

    def test_adapter_overrides_builtin_handling(self) -> None:
        assert normalize(date(2024, 1, 1), {date: lambda d: d.year}) == 2024

    def test_failing_adapter_degrades_to_null(self) -> None:
        def fail(_: Any) -> Any:
            raise ValueError("nope")

        assert normalize([Decimal("1")], {Decimal: fail}) == [None]

    def test_adapter_returning_itself_degrades_to_null(self) -> None:
        assert normalize(Decimal("1"), {Decimal: lambda d: d}) is None


class TestCycles:
    def test_self_referencing_list(self) -> None:
        items: list[Any] = [1]
        items.append(items)
        assert normalize(items) == [1, None]

    def test_self_referencing_map(self) -> None:
        data: dict[str, Any] = {"name": "root"}
        data["self"] = data
        assert normalize(data) == {"name": "root", "self": None}

    def test_shared_reference_is_not_a_cycle(self) -> None:
        shared = {"a": 1}
        assert normalize([shared, shared]) == [{"a": 1}, {"a": 1}]


class TestClassify:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (1, InputKind.SCALAR),
            (None, InputKind.SCALAR),
            (Color.RED, InputKind.ENUM),
            (Priority.LOW, InputKind.ENUM),
            (date(2024, 1, 1), InputKind.TEMPORAL),
            (b"x", InputKind.BYTES),
            ({"a": 1}, InputKind.MAPPING),
            (Model(), InputKind.SERIALIZABLE),
            (Pair(1, 2), InputKind.SERIALIZABLE),
            (Point(1, 2), InputKind.DATACLASS),
            ([1], InputKind.ITERABLE),
            (object(), InputKind.OBJECT),
        ],
    )
    def test_kinds(self, value: object, kind: InputKind) -> None:
        assert classify(value) is kind

    def test_adapter_takes_precedence(self) -> None:
        assert classify(Decimal("1"), {Decimal: str}) is InputKind.ADAPTED


class TestFailingHosts:
    def test_raising_property_degrades_to_null(self) -> None:
        assert normalize(RaisingHook()) is None
        assert normalize([1, RaisingHook()]) == [1, None]

    def test_raising_keys_degrades_to_null(self) -> None:
        assert normalize(KeylessDict(a=1)) is None
        assert normalize({"x": KeylessDict(a=1), "y": 2}) == {"x": None, "y": 2}

    def test_raising_attribute_access_degrades_to_null(self) -> None:
        assert normalize({"h": Hostile()}) == {"h": None}

    def test_failure_does_not_leave_cycle_marker(self) -> None:
        shared = [KeylessDict(a=1)]
        assert normalize([shared, shared]) == [[None], [None]]
