from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .ast import Expr
from .spans import Span

if TYPE_CHECKING:
    from .diagnostics import DiagnosticsContext
    from .interpreter import Interpreter


@dataclass(frozen=True, slots=True)
class Expression:
    """A literal value or an expression awaiting further reduction."""

    expr: Expr


@dataclass(frozen=True, slots=True)
class Function:
    """A function written in nightbug: a body with `Argument` placeholders."""

    arity: int
    body: Expr


@dataclass(frozen=True, slots=True)
class NativeFunction:
    """A function implemented in Python. `arity=None` means variadic."""

    arity: int | None
    procedure: NativeProcedure
    name: str = ""


Binding = Expression | Function | NativeFunction


@dataclass(frozen=True, slots=True)
class NativeCall:
    """Everything a native procedure sees about one call site."""

    name: str
    ident_span: Span
    span: Span
    args: tuple[Binding, ...]
    arg_spans: tuple[Span, ...]
    diagnostics: DiagnosticsContext
    interpreter: Interpreter


NativeProcedure = Callable[[NativeCall], Binding]
