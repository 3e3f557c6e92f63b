"""Indented line accumulator used by the encoder."""

from __future__ import annotations


class LineWriter:
    """Collects output lines, each prefixed by the current indentation."""

    def __init__(self, indent_size: int = 2) -> None:
        self._indent_size = indent_size
        self._level = 0
        self._lines: list[str] = []

    @property
    def level(self) -> int:
        return self._level

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def line(self, content: str = "") -> None:
        self._lines.append(" " * (self._level * self._indent_size) + content)

    def indent(self) -> None:
        self._level += 1

    def dedent(self) -> None:
        if self._level > 0:
            self._level -= 1

    def to_string(self) -> str:
        return "\n".join(self._lines)
