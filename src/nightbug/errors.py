from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .spans import Span

if TYPE_CHECKING:
    from .bindings import Binding


class NightbugError(Exception):
    """Base class for errors raised by the lexer, parser and interpreter.

    A diagnostic describing the failure has always been emitted by the time
    one of these is raised, so callers should not report it again.
    """


class LexError(NightbugError):
    pass


class ParseError(NightbugError):
    pass


class InterpreterError(NightbugError):
    pass


@dataclass(slots=True)
class InternalError(NightbugError):
    """An invariant of the implementation itself was violated."""

    message: str
    span: Span | None = None

    def __str__(self) -> str:
        return f"internal error: {self.message}"


# Lexer


@dataclass(slots=True)
class UnexpectedChar(LexError):
    char: str
    offset: int

    def __str__(self) -> str:
        return f"unexpected character {self.char!r} at offset {self.offset}"


@dataclass(slots=True)
class CouldntParseInt(LexError):
    text: str
    cause: ValueError
    span: Span

    def __str__(self) -> str:
        return f"couldn't parse integer literal {self.text!r}: {self.cause}"


# Parser


@dataclass(slots=True)
class UnclosedDelimiter(ParseError):
    location: int  # offset of the unmatched `(`
    eof: int  # end of the last token consumed

    def __str__(self) -> str:
        return f"unclosed delimiter at offset {self.location}"


@dataclass(slots=True)
class UnexpectedCloseDelimiter(ParseError):
    offset: int

    def __str__(self) -> str:
        return f"unexpected closing delimiter at offset {self.offset}"


@dataclass(slots=True)
class NestingTooDeep(ParseError):
    span: Span

    def __str__(self) -> str:
        return f"expression at {self.span} is nested too deeply"


# Interpreter


@dataclass(slots=True)
class UnknownIdentifier(InterpreterError):
    name: str
    span: Span

    def __str__(self) -> str:
        return f"unknown identifier {self.name!r}"


@dataclass(slots=True)
class WrongNumArgs(InterpreterError):
    ident: str
    expected: int
    got: int
    span: Span

    def __str__(self) -> str:
        return f"wrong number of arguments for function {self.ident} (expected {self.expected}, got {self.got})"


@dataclass(slots=True)
class InvalidArgument(InterpreterError):
    ident: str
    binding: Binding
    span: Span | None = None

    def __str__(self) -> str:
        return f"invalid argument to {self.ident}: {self.binding!r}"


@dataclass(slots=True)
class IntegerOverflow(InterpreterError):
    ident: str
    span: Span

    def __str__(self) -> str:
        return f"integer overflow in {self.ident}"


@dataclass(slots=True)
class UnsupportedKeyword(InterpreterError):
    keyword: str
    span: Span

    def __str__(self) -> str:
        return f"keyword {self.keyword!r} cannot be evaluated"


@dataclass(slots=True)
class RecursionLimitExceeded(InterpreterError):
    span: Span

    def __str__(self) -> str:
        return f"recursion limit exceeded while evaluating {self.span}"
