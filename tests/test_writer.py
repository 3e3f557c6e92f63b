"""Tests for the indented line accumulator."""

from __future__ import annotations

from toon.writer import LineWriter


def test_lines_are_prefixed_by_indent() -> None:
    writer = LineWriter(2)
    writer.line("a")
    writer.indent()
    writer.line("b")
    writer.indent()
    writer.line("c")
    writer.dedent()
    writer.line("d")
    assert writer.to_string() == "a\n  b\n    c\n  d"


def test_dedent_is_floored_at_zero() -> None:
    writer = LineWriter(4)
    writer.dedent()
    writer.dedent()
    assert writer.level == 0
    writer.line("x")
    assert writer.lines == ["x"]


def test_zero_indent_size_keeps_lines_flat() -> None:
    writer = LineWriter(0)
    writer.indent()
    writer.line("nested")
    assert writer.to_string() == "nested"


def test_empty_line_keeps_indentation() -> None:
    writer = LineWriter(2)
    writer.indent()
    writer.line()
    assert writer.lines == ["  "]


def test_lines_returns_a_copy() -> None:
    writer = LineWriter()
    writer.line("a")
    writer.lines.append("b")
    assert writer.to_string() == "a"
