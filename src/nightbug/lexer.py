from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .ast import I32_MAX, I32_MIN
from .diagnostics import DiagnosticsContext, as_diagnostics
from .errors import CouldntParseInt, UnexpectedChar
from .spans import Span
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INT_RE = re.compile(r"[0-9]+")
_WHITESPACE = frozenset(" \t\n\r")


@dataclass(slots=True)
class _Cursor:
    src: str
    i: int = 0

    def eof(self) -> bool:
        return self.i >= len(self.src)

    def peek(self) -> str:
        if self.eof():
            return ""
        return self.src[self.i]

    def advance(self) -> None:
        if not self.eof():
            self.i += 1

    def take(self, pattern: re.Pattern[str]) -> str:
        m = pattern.match(self.src, self.i)
        if m is None:
            return ""
        self.i = m.end()
        return m.group(0)


def _parse_i32(text: str) -> int:
    value = int(text, 10)
    if not I32_MIN <= value <= I32_MAX:
        raise ValueError("number too large to fit in a 32-bit signed integer")
    return value


def _next_token(cur: _Cursor, diagnostics: DiagnosticsContext) -> Token:
    start = cur.i
    ch = cur.peek()

    ident = cur.take(_IDENT_RE)
    if ident:
        return Token(TokenKind.IDENT_OR_KEYWORD, Span(start, cur.i), ident)

    text = cur.take(_INT_RE)
    if text:
        span = Span(start, cur.i)
        try:
            value = _parse_i32(text)
        except ValueError as exc:
            # Any run of digits should be lexable at this point, so this is on us.
            (
                diagnostics.build_ice("couldn't parse integer literal")
                .span_label(span, "this literal")
                .note(f"cause: {exc}")
                .emit()
            )
            raise CouldntParseInt(text=text, cause=exc, span=span) from exc
        return Token(TokenKind.INTEGER, span, value)

    if ch == "(":
        cur.advance()
        return Token(TokenKind.OPEN_PAREN, Span(start, cur.i))

    if ch == ")":
        cur.advance()
        return Token(TokenKind.CLOSE_PAREN, Span(start, cur.i))

    if ch in _WHITESPACE:
        cur.advance()
        return Token(TokenKind.WHITESPACE, Span(start, cur.i))

    span = Span(start, start + 1)
    (
        diagnostics.build_error(f"unexpected character `{ch}`")
        .span_label(span, "not valid here")
        .help("only identifiers, integers and parentheses are allowed")
        .emit()
    )
    raise UnexpectedChar(char=ch, offset=start)


def lex(source: str | DiagnosticsContext) -> list[Token]:
    """Split source text into tokens, dropping whitespace.

    Lexing stops at the first invalid character; the diagnostic is emitted
    before the error is raised.
    """
    diagnostics = as_diagnostics(source)
    cur = _Cursor(src=diagnostics.source)
    tokens: list[Token] = []

    while not cur.eof():
        tok = _next_token(cur, diagnostics)
        if tok.kind is not TokenKind.WHITESPACE:
            tokens.append(tok)

    logger.debug("lexed %d tokens from %d characters", len(tokens), len(diagnostics.source))
    return tokens
