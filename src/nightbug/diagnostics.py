"""Source-anchored diagnostics shared by the lexer, parser and interpreter.

Stages only describe a failure (spans plus text) through a
`DiagnosticBuilder`; rendering lives in `nightbug.render`.

    ctx = DiagnosticsContext("(lambda (x) 1 + x)")
    (
        ctx.build_error("use of infix operator detected")
        .span_label(Span(12, 17), "no")
        .help("don't do that")
        .emit()
    )
"""

from __future__ import annotations

import logging
import os
import sys
import warnings
from typing import TextIO

from .render import Diagnostic, Label, Level, render
from .spans import Position, SourceMap, Span

__all__ = [
    "Diagnostic",
    "DiagnosticBuilder",
    "DiagnosticsContext",
    "Label",
    "Level",
    "UnemittedDiagnosticWarning",
    "as_diagnostics",
]

logger = logging.getLogger(__name__)


class UnemittedDiagnosticWarning(RuntimeWarning):
    """A diagnostic was built and then dropped without being emitted."""


def _stream_wants_color(stream: TextIO) -> bool:
    if "NO_COLOR" in os.environ:
        return False
    if "FORCE_COLOR" in os.environ:
        return True
    isatty = getattr(stream, "isatty", None)
    return bool(isatty is not None and isatty())


class DiagnosticsContext:
    """Owns one source string and hands out builders anchored in it."""

    def __init__(
        self,
        source: str,
        origin: str | None = None,
        *,
        stream: TextIO | None = None,
        color: bool | None = None,
    ) -> None:
        self._source = source
        self._origin = origin
        self._stream = stream
        self._color = color
        self._map = SourceMap(source)
        self.emitted: list[Diagnostic] = []

    @property
    def source(self) -> str:
        return self._source

    @property
    def origin(self) -> str | None:
        return self._origin

    def position(self, offset: int) -> Position:
        return self._map.locate(offset)

    def check_span(self, span: Span) -> Span:
        if span.end > len(self._source):
            raise ValueError(f"span {span} is outside source of length {len(self._source)}")
        return span

    def build_ice(self, message: str) -> DiagnosticBuilder:
        return (
            DiagnosticBuilder(self, message, Level.ICE)
            .note("this is an internal error, not a problem with the program being run")
            .note("please file a bug report against nightbug with the program that caused it")
        )

    def build_ice_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_ice(message).with_span(span)

    def build_error(self, message: str) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, message, Level.ERROR)

    def build_error_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_error(message).with_span(span)

    def build_warning(self, message: str) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, message, Level.WARNING)

    def build_warning_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_warning(message).with_span(span)

    def build_help(self, message: str) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, message, Level.HELP)

    def build_help_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_help(message).with_span(span)

    def build_info(self, message: str) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, message, Level.INFO)

    def build_info_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_info(message).with_span(span)

    def build_note(self, message: str) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, message, Level.NOTE)

    def build_note_span(self, span: Span, message: str) -> DiagnosticBuilder:
        return self.build_note(message).with_span(span)

    def _write(self, diagnostic: Diagnostic) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        color = self._color if self._color is not None else _stream_wants_color(stream)
        stream.write(render(diagnostic, self._source, origin=self._origin, color=color) + "\n")
        stream.flush()
        self.emitted.append(diagnostic)


def as_diagnostics(source: str | DiagnosticsContext, origin: str | None = None) -> DiagnosticsContext:
    if isinstance(source, DiagnosticsContext):
        return source
    return DiagnosticsContext(source, origin)


class DiagnosticBuilder:
    """Accumulates one diagnostic; `emit()` must be called exactly once."""

    __slots__ = ("_context", "_title", "_level", "_labels", "_footers", "_emitted")

    def __init__(self, context: DiagnosticsContext, title: str, level: Level) -> None:
        self._context = context
        self._title = title
        self._level = level
        self._labels: list[Label] = []
        self._footers: list[Label] = []
        self._emitted = False

    def _check_open(self) -> None:
        if self._emitted:
            raise RuntimeError(f"diagnostic {self._title!r} has already been emitted")

    def span_label(self, span: Span, message: str) -> DiagnosticBuilder:
        self._check_open()
        self._labels.append(Label(self._level, self._context.check_span(span), message))
        return self

    def with_span(self, span: Span) -> DiagnosticBuilder:
        self._check_open()
        self._labels.append(Label(self._level, self._context.check_span(span)))
        return self

    def help(self, message: str) -> DiagnosticBuilder:
        self._check_open()
        self._footers.append(Label(Level.HELP, Span.empty(0), message))
        return self

    def note(self, message: str) -> DiagnosticBuilder:
        self._check_open()
        self._footers.append(Label(Level.NOTE, Span.empty(0), message))
        return self

    def emit(self) -> Diagnostic:
        self._check_open()
        self._emitted = True
        diagnostic = Diagnostic(
            title=self._title,
            level=self._level,
            labels=tuple(self._labels),
            footers=tuple(self._footers),
        )
        logger.debug("emitting %s: %s", diagnostic.level.value, diagnostic.title)
        self._context._write(diagnostic)
        return diagnostic

    def __del__(self) -> None:
        if getattr(self, "_emitted", True):
            return
        warnings.warn(
            f"diagnostic {self._title!r} was built but never emitted",
            UnemittedDiagnosticWarning,
            stacklevel=2,
        )
