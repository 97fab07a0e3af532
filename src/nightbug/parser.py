from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import NoReturn

from . import ast as A
from .diagnostics import DiagnosticsContext, as_diagnostics
from .errors import InternalError, NestingTooDeep, UnclosedDelimiter, UnexpectedCloseDelimiter
from .spans import Span
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class _EndOfInput(Exception):
    """Raised at depth when input ends inside a list; reported once unwound."""


def _span_of(v: object) -> Span:
    # Token and AST nodes both carry .span.
    sp = getattr(v, "span", None)
    if sp is None:
        raise TypeError(f"value has no span: {type(v)!r}")
    return sp


def join_span(*vals: object) -> Span:
    """Join spans of tokens/nodes into a single span (from first to last)."""
    real = [v for v in vals if v is not None]
    if not real:
        raise ValueError("join_span() requires at least one value")
    return _span_of(real[0]).join(_span_of(real[-1]))


def classify_identifier(tok: Token) -> A.Expr:
    text = str(tok.value)
    keyword = A.KEYWORDS.get(text)
    if keyword is not None:
        return A.Keyword(span=tok.span, keyword=keyword)
    if text == "true":
        return A.Boolean(span=tok.span, value=True)
    if text == "false":
        return A.Boolean(span=tok.span, value=False)
    return A.Identifier(span=tok.span, name=text)


@dataclass(slots=True)
class Parser:
    tokens: Iterator[Token]
    diagnostics: DiagnosticsContext
    last_end: int = 0  # end offset of the last consumed token
    form_start: int = 0  # start offset of the top-level form being parsed

    def next_token(self) -> Token | None:
        tok = next(self.tokens, None)
        if tok is not None:
            self.last_end = tok.span.end
        return tok

    def parse_next(self) -> A.Expr | None:
        tok = self.next_token()
        if tok is None:
            return None
        self.form_start = tok.span.start
        return self.parse_token(tok)

    def parse_token(self, tok: Token) -> A.Expr:
        if tok.kind is TokenKind.IDENT_OR_KEYWORD:
            return classify_identifier(tok)

        if tok.kind is TokenKind.INTEGER:
            return A.Integer(span=tok.span, value=int(tok.value))  # type: ignore[arg-type]

        if tok.kind is TokenKind.OPEN_PAREN:
            return self.parse_list(tok)

        if tok.kind is TokenKind.CLOSE_PAREN:
            (
                self.diagnostics.build_error("unexpected closing delimiter: `)`")
                .span_label(tok.span, "unexpected closing delimiter")
                .emit()
            )
            raise UnexpectedCloseDelimiter(offset=tok.span.start)

        self.diagnostics.build_ice_span(tok.span, f"{tok.kind.value} token reached the parser").emit()
        raise InternalError(message=f"unexpected {tok.kind.value} token", span=tok.span)

    def parse_list(self, open_tok: Token) -> A.Expr:
        items: list[A.Expr] = []
        while True:
            tok = self.next_token()
            if tok is None:
                raise _EndOfInput(open_tok)
            if tok.kind is TokenKind.CLOSE_PAREN:
                break
            items.append(self.parse_token(tok))

        if not items:
            return A.Unit(span=join_span(open_tok, tok))
        # A list spans from `(` to the end of its last element.
        return A.List(span=join_span(open_tok, items[-1]), items=tuple(items))

    def unclosed(self, open_tok: Token) -> NoReturn:
        (
            self.diagnostics.build_error("this file contains an unclosed delimiter")
            .span_label(open_tok.span, "this delimiter")
            .span_label(Span.empty(self.last_end), "reached end of file before finding a match")
            .emit()
        )
        raise UnclosedDelimiter(location=open_tok.span.start, eof=self.last_end) from None


def parse(tokens: Iterable[Token], source: str | DiagnosticsContext) -> list[A.Expr]:
    """Parse a token sequence into top-level expressions.

    Parsing stops at the first structural error; its diagnostic has been
    emitted by the time the error is raised.
    """
    diagnostics = as_diagnostics(source)
    parser = Parser(tokens=iter(tokens), diagnostics=diagnostics)
    out: list[A.Expr] = []

    while True:
        try:
            expr = parser.parse_next()
        except RecursionError:
            span = Span(parser.form_start, parser.last_end)
            (
                diagnostics.build_error("expression is nested too deeply")
                .span_label(span, "nesting in this expression exceeds the parser's limit")
                .emit()
            )
            raise NestingTooDeep(span=span) from None
        except _EndOfInput as exc:
            parser.unclosed(exc.args[0])
        if expr is None:
            break
        out.append(expr)

    logger.debug("parsed %d top-level expressions", len(out))
    return out
