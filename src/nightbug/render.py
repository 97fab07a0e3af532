"""Annotated-source rendering of diagnostics.

Output follows the rustc layout:

    error: cannot find value `foo` in this scope
     --> example.nb:1:2
      |
    1 | (foo 1 2)
      |  ^^^ not found in this scope
      |
      = help: ...

Only lines carrying a label are shown; a single skipped line is printed,
longer gaps fold into `...`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from termcolor import colored

from .spans import Position, SourceMap, Span


class Level(Enum):
    ICE = "internal error"
    ERROR = "error"
    WARNING = "warning"
    HELP = "help"
    INFO = "info"
    NOTE = "note"


_COLORS: dict[Level, str | None] = {
    Level.ICE: "red",
    Level.ERROR: "red",
    Level.WARNING: "yellow",
    Level.HELP: "cyan",
    Level.INFO: "blue",
    Level.NOTE: None,
}


@dataclass(frozen=True, slots=True)
class Label:
    level: Level
    span: Span  # zero-width for footers
    message: str | None = None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    title: str
    level: Level
    labels: tuple[Label, ...] = ()
    footers: tuple[Label, ...] = ()


@dataclass(frozen=True, slots=True)
class _Painter:
    enabled: bool

    def __call__(self, text: str, color: str | None = None, *, bold: bool = True) -> str:
        if not self.enabled or not text:
            return text
        return colored(text, color, attrs=["bold"] if bold else None, force_color=True)


@dataclass(frozen=True, slots=True)
class _Placed:
    label: Label
    start: Position
    last: Position  # last covered character; equals start for empty spans


def _place(label: Label, smap: SourceMap) -> _Placed:
    start = smap.locate(label.span.start)
    if label.span.is_empty():
        return _Placed(label, start, start)
    return _Placed(label, start, smap.locate(label.span.end - 1))


def render(diagnostic: Diagnostic, source: str, *, origin: str | None = None, color: bool = False) -> str:
    paint = _Painter(color)
    smap = SourceMap(source)

    out = [
        paint(diagnostic.level.value, _COLORS[diagnostic.level])
        + paint(f": {diagnostic.title}", None)
    ]

    placed = sorted((_place(label, smap) for label in diagnostic.labels), key=lambda p: p.label.span.start)
    lines = sorted({p.start.line for p in placed} | {p.last.line for p in placed})
    width = len(str(lines[-1])) if lines else 1
    gutter = " " * width
    bar = paint("|", "blue")

    def source_row(line: int) -> str:
        text = smap.line_text(line).replace("\t", " ")
        row = f"{paint(str(line).rjust(width), 'blue')} {bar}"
        return f"{row} {text}" if text else row

    if placed:
        if origin is not None:
            first = min(placed, key=lambda p: p.start.offset).start
            out.append(f"{gutter}{paint('-->', 'blue')} {origin}:{first.line}:{first.column}")
        out.append(f"{gutter} {bar}")

        prev: int | None = None
        for line in lines:
            if prev is not None and line - prev == 2:
                out.append(source_row(prev + 1))
            elif prev is not None and line - prev > 2:
                out.append(paint("...", "blue"))
            out.append(source_row(line))
            for p in placed:
                marks, message = _marks_for_line(p, line, smap)
                if marks is None:
                    continue
                color_name = _COLORS[p.label.level]
                row = f"{gutter} {bar} {paint(marks, color_name)}"
                if message:
                    row += " " + paint(message, color_name)
                out.append(row)
            prev = line

        out.append(f"{gutter} {bar}")

    for footer in diagnostic.footers:
        out.append(
            f"{gutter} {paint('=', 'blue')} {paint(footer.level.value, _COLORS[footer.level])}: {footer.message or ''}"
        )

    return "\n".join(out)


def _marks_for_line(p: _Placed, line: int, smap: SourceMap) -> tuple[str | None, str | None]:
    if p.start.line == line and p.last.line == line:
        width = p.last.column - p.start.column + 1
        return " " * (p.start.column - 1) + "^" * width, p.label.message
    if p.start.line == line:
        # First line of a multi-line label: underline to end of line.
        rest = len(smap.line_text(line)) - p.start.column + 1
        return " " * (p.start.column - 1) + "^" * max(1, rest), None
    if p.last.line == line:
        return "^" * p.last.column, p.label.message
    return None, None
