from __future__ import annotations

import gc
import io

import pytest

from nightbug.diagnostics import DiagnosticsContext, Level, UnemittedDiagnosticWarning, as_diagnostics
from nightbug.render import Diagnostic, Label, render
from nightbug.spans import Position, Span


def _ctx(src: str, origin: str | None = None) -> tuple[DiagnosticsContext, io.StringIO]:
    out = io.StringIO()
    return DiagnosticsContext(src, origin, stream=out, color=False), out


def test_rendered_error_layout() -> None:
    ctx, out = _ctx("(foo 1 2)", origin="example.nb")
    (
        ctx.build_error("cannot find value `foo` in this scope")
        .span_label(Span(1, 4), "not found in this scope")
        .help("check the spelling")
        .emit()
    )
    assert out.getvalue() == (
        "error: cannot find value `foo` in this scope\n"
        " --> example.nb:1:2\n"
        "  |\n"
        "1 | (foo 1 2)\n"
        "  |  ^^^ not found in this scope\n"
        "  |\n"
        "  = help: check the spelling\n"
    )


def test_ice_has_bug_report_notes_and_no_source() -> None:
    ctx, out = _ctx("x")
    diag = ctx.build_ice("boom").emit()
    assert diag.level is Level.ICE
    assert [f.level for f in diag.footers] == [Level.NOTE, Level.NOTE]
    lines = out.getvalue().splitlines()
    assert lines[0] == "internal error: boom"
    assert lines[1].startswith("  = note: this is an internal error")
    assert "bug report" in lines[2]


def test_ice_span_underlines_without_text() -> None:
    ctx, out = _ctx("abc")
    ctx.build_ice_span(Span(0, 3), "bad").emit()
    assert "  | ^^^\n" in out.getvalue()


@pytest.mark.parametrize(
    ("name", "level"),
    [
        ("error", Level.ERROR),
        ("warning", Level.WARNING),
        ("help", Level.HELP),
        ("info", Level.INFO),
        ("note", Level.NOTE),
    ],
)
def test_builder_factories(name: str, level: Level) -> None:
    ctx, out = _ctx("hello")
    diag = getattr(ctx, f"build_{name}_span")(Span(0, 5), "msg").emit()
    assert diag == Diagnostic(title="msg", level=level, labels=(Label(level, Span(0, 5)),))
    assert out.getvalue().startswith(f"{level.value}: msg\n")

    plain = getattr(ctx, f"build_{name}")("other").emit()
    assert plain.labels == ()
    assert ctx.emitted == [diag, plain]


def test_footers_are_unanchored_and_ordered() -> None:
    ctx, _ = _ctx("abc")
    diag = ctx.build_warning("w").note("first").help("second").note("third").emit()
    assert [(f.level, f.message) for f in diag.footers] == [
        (Level.NOTE, "first"),
        (Level.HELP, "second"),
        (Level.NOTE, "third"),
    ]
    assert all(f.span.is_empty() for f in diag.footers)


def test_emit_is_single_shot() -> None:
    ctx, _ = _ctx("abc")
    builder = ctx.build_error("once")
    builder.emit()
    with pytest.raises(RuntimeError):
        builder.emit()
    with pytest.raises(RuntimeError):
        builder.note("too late")
    assert len(ctx.emitted) == 1


def test_dropped_builder_warns() -> None:
    ctx, out = _ctx("abc")
    with pytest.warns(UnemittedDiagnosticWarning):
        builder = ctx.build_error("dropped").span_label(Span(0, 1), "here")
        del builder
        gc.collect()
    assert out.getvalue() == ""


def test_label_outside_source_is_rejected() -> None:
    ctx, _ = _ctx("abc")
    builder = ctx.build_error("bad span")
    with pytest.raises(ValueError):
        builder.span_label(Span(2, 9), "nope")
    builder.emit()


def test_folding_of_distant_lines() -> None:
    ctx, out = _ctx("a\nb\nc\nd\ne")
    ctx.build_error("t").span_label(Span(0, 1), "first").span_label(Span(8, 9), "last").emit()
    assert out.getvalue() == (
        "error: t\n"
        "  |\n"
        "1 | a\n"
        "  | ^ first\n"
        "...\n"
        "5 | e\n"
        "  | ^ last\n"
        "  |\n"
    )


def test_single_gap_line_is_shown() -> None:
    ctx, out = _ctx("a\nb\nc")
    ctx.build_error("t").with_span(Span(0, 1)).with_span(Span(4, 5)).emit()
    assert "2 | b\n" in out.getvalue()
    assert "..." not in out.getvalue()


def test_multiline_label() -> None:
    ctx, out = _ctx("(add\n 1)")
    ctx.build_error("t").span_label(Span(0, 7), "whole call").emit()
    assert out.getvalue() == (
        "error: t\n"
        "  |\n"
        "1 | (add\n"
        "  | ^^^^\n"
        "2 |  1)\n"
        "  | ^^ whole call\n"
        "  |\n"
    )


def test_zero_width_label_at_end_of_source() -> None:
    ctx, out = _ctx("(a")
    ctx.build_error("t").span_label(Span.empty(2), "eof").emit()
    assert "  |   ^ eof\n" in out.getvalue()


def test_wide_gutter() -> None:
    src = "\n" * 11 + "x"
    ctx, out = _ctx(src, origin="f")
    ctx.build_error("t").with_span(Span(11, 12)).emit()
    lines = out.getvalue().splitlines()
    assert lines[1] == "  --> f:12:1"
    assert lines[3] == "12 | x"
    assert lines[4] == "   | ^"


def test_color_forced_and_disabled() -> None:
    diag = Diagnostic(title="t", level=Level.ERROR, labels=(Label(Level.ERROR, Span(0, 1), "x"),))
    assert "\x1b[" in render(diag, "a", color=True)
    assert "\x1b[" not in render(diag, "a", color=False)


def test_color_auto_follows_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("FORCE_COLOR", "1")
    out = io.StringIO()
    DiagnosticsContext("a", stream=out).build_error("t").emit()
    assert "\x1b[" in out.getvalue()

    monkeypatch.setenv("NO_COLOR", "1")
    out = io.StringIO()
    DiagnosticsContext("a", stream=out).build_error("t").emit()
    assert "\x1b[" not in out.getvalue()


def test_default_stream_is_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    DiagnosticsContext("a", color=False).build_note("hello").emit()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "note: hello\n"


def test_position_and_as_diagnostics() -> None:
    ctx, _ = _ctx("ab\ncd", origin="o")
    assert ctx.position(4) == Position(offset=4, line=2, column=2)
    assert as_diagnostics(ctx) is ctx
    fresh = as_diagnostics("xyz", "origin")
    assert (fresh.source, fresh.origin) == ("xyz", "origin")
