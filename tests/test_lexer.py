from __future__ import annotations

import io
import re
import string

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from nightbug.ast import I32_MAX
from nightbug.diagnostics import DiagnosticsContext, Level
from nightbug.errors import CouldntParseInt, UnexpectedChar
from nightbug.lexer import lex
from nightbug.spans import Span
from nightbug.tokens import TokenKind


def _ctx(src: str) -> DiagnosticsContext:
    return DiagnosticsContext(src, stream=io.StringIO(), color=False)


def test_lex_call_form() -> None:
    toks = lex("(add 2 33)")
    assert [t.kind for t in toks] == [
        TokenKind.OPEN_PAREN,
        TokenKind.IDENT_OR_KEYWORD,
        TokenKind.INTEGER,
        TokenKind.INTEGER,
        TokenKind.CLOSE_PAREN,
    ]
    assert [t.value for t in toks] == [None, "add", 2, 33, None]
    assert [t.span for t in toks] == [Span(0, 1), Span(1, 4), Span(5, 6), Span(7, 9), Span(9, 10)]


def test_whitespace_never_leaves_the_lexer() -> None:
    toks = lex(" \t(\r\n  second\n 1 2 )\n")
    assert all(t.kind is not TokenKind.WHITESPACE for t in toks)
    assert len(toks) == 5


def test_identifier_rules() -> None:
    toks = lex("_a1_b2 12ab")
    assert [(t.kind, t.value) for t in toks] == [
        (TokenKind.IDENT_OR_KEYWORD, "_a1_b2"),
        (TokenKind.INTEGER, 12),
        (TokenKind.IDENT_OR_KEYWORD, "ab"),
    ]


def test_digit_runs_and_signs() -> None:
    toks = lex("007 x9")
    assert [(t.kind, t.value, t.span) for t in toks] == [
        (TokenKind.INTEGER, 7, Span(0, 3)),
        (TokenKind.IDENT_OR_KEYWORD, "x9", Span(4, 6)),
    ]
    with pytest.raises(UnexpectedChar) as e:
        lex(_ctx("-1"))
    assert e.value.char == "-"


def test_empty_source() -> None:
    assert lex("") == []
    assert lex("  \n\t") == []


def test_unexpected_char_is_diagnosed_once() -> None:
    ctx = _ctx("(add 2 +)")
    with pytest.raises(UnexpectedChar) as e:
        lex(ctx)
    assert e.value.char == "+"
    assert e.value.offset == 7
    assert len(ctx.emitted) == 1
    diag = ctx.emitted[0]
    assert diag.level is Level.ERROR
    assert diag.labels[0].span == Span(7, 8)


def test_non_ascii_letter_is_rejected() -> None:
    with pytest.raises(UnexpectedChar) as e:
        lex(_ctx("é"))
    assert e.value.char == "é"


def test_i32_bounds() -> None:
    assert lex("2147483647")[0].value == I32_MAX
    out = io.StringIO()
    ctx = DiagnosticsContext("(add 2147483648)", stream=out, color=False)
    with pytest.raises(CouldntParseInt) as e:
        lex(ctx)
    assert e.value.text == "2147483648"
    assert e.value.span == Span(5, 15)
    # Overflow is reported as our fault, not the program's.
    assert ctx.emitted[0].level is Level.ICE
    assert out.getvalue().startswith("internal error: couldn't parse integer literal")
    assert "bug report" in out.getvalue()


_ALPHABET = string.ascii_letters + string.digits + "_() \t\r\n"


@given(st.text(alphabet=_ALPHABET, max_size=120))
def test_token_spans_reproduce_non_whitespace_input(src: str) -> None:
    assume(all(int(run) <= I32_MAX for run in re.findall(r"[0-9]+", src)))
    toks = lex(_ctx(src))
    assert "".join(t.span.slice(src) for t in toks) == re.sub(r"[ \t\r\n]", "", src)
    for a, b in zip(toks, toks[1:]):
        assert a.span.end <= b.span.start
