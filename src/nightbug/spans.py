from __future__ import annotations

import bisect
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    Offsets are 0-based; line/column are 1-based for user-facing messages.
    """

    offset: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) of offsets into a single source string."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    @classmethod
    def empty(cls, at: int) -> Span:
        return cls(at, at)

    def is_empty(self) -> bool:
        return self.start == self.end

    def join(self, other: Span) -> Span:
        return Span(min(self.start, other.start), max(self.end, other.end))

    def slice(self, source: str) -> str:
        return source[self.start : self.end]

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


class SourceMap:
    """Resolves offsets in one source string to lines and columns."""

    __slots__ = ("source", "_line_starts")

    def __init__(self, source: str) -> None:
        self.source = source
        self._line_starts = [0]
        for i, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def locate(self, offset: int) -> Position:
        if not 0 <= offset <= len(self.source):
            raise ValueError(f"offset {offset} outside source of length {len(self.source)}")
        idx = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(offset=offset, line=idx + 1, column=offset - self._line_starts[idx] + 1)

    def line_text(self, line: int) -> str:
        """Text of 1-based `line`, without its line terminator."""
        start = self._line_starts[line - 1]
        if line < len(self._line_starts):
            end = self._line_starts[line] - 1
        else:
            end = len(self.source)
        return self.source[start:end].rstrip("\r")
