"""Strict, eager evaluation of parsed nightbug expressions.

User functions are not closures: a `Function` binding is a fixed arity and
a body in which `Argument(i)` placeholders stand for the call's arguments.
Calling one substitutes the (unevaluated) argument expressions into the
body and evaluates the result. Only placeholders directly inside the body,
or the body itself, are substituted; nested lists are left untouched.

Native functions receive their arguments already reduced, together with
the span of each argument so they can point at offending values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import NoReturn

from . import ast as A
from .bindings import Binding, Expression, Function, NativeCall, NativeFunction
from .diagnostics import DiagnosticsContext, as_diagnostics
from .errors import (
    InternalError,
    RecursionLimitExceeded,
    UnknownIdentifier,
    UnsupportedKeyword,
    WrongNumArgs,
)
from .natives import default_bindings
from .parser import join_span
from .spans import Span

logger = logging.getLogger(__name__)


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


class Interpreter:
    """Evaluates expressions against a binding table owned by this instance.

    The table is fixed at construction. Diagnostics are passed in per call,
    so one interpreter can evaluate several sources and native procedures
    may call back into `interpret` while a call is in progress.
    """

    def __init__(self, bindings: Mapping[str, Binding] | None = None) -> None:
        self._bindings: dict[str, Binding] = dict(default_bindings() if bindings is None else bindings)

    @property
    def bindings(self) -> Mapping[str, Binding]:
        return MappingProxyType(self._bindings)

    def lookup(self, name: str) -> Binding | None:
        # Bindings are frozen, so returning the stored value is as good as a copy.
        return self._bindings.get(name)

    def interpret(self, expressions: Sequence[A.Expr], source: str | DiagnosticsContext) -> Binding:
        """Evaluate the first of `expressions`, applying it to the rest if it is callable."""
        diagnostics = as_diagnostics(source)
        exprs = tuple(expressions)
        try:
            return _Evaluation(self, diagnostics).interpret(exprs)
        except RecursionError:
            span = join_span(exprs[0], exprs[-1])
            (
                diagnostics.build_error("recursion limit reached while evaluating this expression")
                .span_label(span, "evaluation nests too deeply")
                .emit()
            )
            raise RecursionLimitExceeded(span=span) from None


def interpret(expressions: Sequence[A.Expr], source: str | DiagnosticsContext) -> Binding:
    return Interpreter().interpret(expressions, source)


@dataclass(slots=True)
class _Evaluation:
    interpreter: Interpreter
    diagnostics: DiagnosticsContext

    def interpret(self, expressions: Sequence[A.Expr]) -> Binding:
        if not expressions:
            return Expression(A.Unit(span=Span.empty(0)))

        head, rest = expressions[0], expressions[1:]
        if isinstance(head, A.Identifier):
            return self.resolve(head, rest)

        if isinstance(head, A.List):
            result = self.interpret(head.items)
        elif isinstance(head, A.Literal):
            result = Expression(head)
        elif isinstance(head, A.Keyword):
            self.unsupported_keyword(head)
        else:
            self.stray_argument(head)

        self.ignore_trailing(rest)
        return result

    def resolve(self, ident: A.Identifier, args: Sequence[A.Expr]) -> Binding:
        binding = self.interpreter.lookup(ident.name)
        if binding is None:
            (
                self.diagnostics.build_error(f"cannot find value `{ident.name}` in this scope")
                .span_label(ident.span, "not found in this scope")
                .emit()
            )
            raise UnknownIdentifier(name=ident.name, span=ident.span)

        if isinstance(binding, Expression):
            self.ignore_trailing(args)
            return binding

        if not args:
            return binding

        if isinstance(binding, Function):
            return self.call_function(ident, binding, args)
        return self.call_native(ident, binding, args)

    def call_function(self, ident: A.Identifier, fn: Function, args: Sequence[A.Expr]) -> Binding:
        if len(args) != fn.arity:
            self.wrong_num_args(ident, fn.arity, args, native=False)

        logger.debug("calling %s with %s", ident.name, _count(len(args), "argument"))
        body = self.substitute(ident, fn.body, args)

        if isinstance(body, A.List):
            return self.interpret(body.items)
        if isinstance(body, A.Identifier):
            return self.resolve(body, ())
        if isinstance(body, A.Literal):
            return Expression(body)
        if isinstance(body, A.Keyword):
            self.unsupported_keyword(body)
        self.stray_argument(body)

    def substitute(self, ident: A.Identifier, body: A.Expr, args: Sequence[A.Expr]) -> A.Expr:
        if isinstance(body, A.Argument):
            return self.argument(ident, body, args)
        if isinstance(body, A.List):
            # Top level only: placeholders inside nested lists are not rewritten.
            items = tuple(self.argument(ident, e, args) if isinstance(e, A.Argument) else e for e in body.items)
            return A.List(span=body.span, items=items)
        return body

    def argument(self, ident: A.Identifier, placeholder: A.Argument, args: Sequence[A.Expr]) -> A.Expr:
        if 0 <= placeholder.index < len(args):
            return args[placeholder.index]
        message = f"body of `{ident.name}` refers to argument {placeholder.index} of {len(args)}"
        self.diagnostics.build_ice_span(ident.span, message).emit()
        raise InternalError(message=message, span=ident.span)

    def call_native(self, ident: A.Identifier, fn: NativeFunction, args: Sequence[A.Expr]) -> Binding:
        if fn.arity is not None and len(args) != fn.arity:
            self.wrong_num_args(ident, fn.arity, args, native=True)

        values = tuple(self.reduce_argument(arg) for arg in args)
        logger.debug("calling native %s with %s", ident.name, _count(len(values), "argument"))
        call = NativeCall(
            name=ident.name,
            ident_span=ident.span,
            span=join_span(ident, *args),
            args=values,
            arg_spans=tuple(arg.span for arg in args),
            diagnostics=self.diagnostics,
            interpreter=self.interpreter,
        )
        return fn.procedure(call)

    def reduce_argument(self, arg: A.Expr) -> Binding:
        if isinstance(arg, A.List):
            return self.interpret(arg.items)
        if isinstance(arg, A.Identifier):
            return self.resolve(arg, ())
        return Expression(arg)

    def wrong_num_args(
        self, ident: A.Identifier, expected: int, args: Sequence[A.Expr], *, native: bool
    ) -> NoReturn:
        got = len(args)
        builder = self.diagnostics.build_error(
            f"this function takes {_count(expected, 'argument')} "
            f"but {_count(got, 'argument')} {'was' if got == 1 else 'were'} supplied"
        )
        builder.span_label(ident.span, f"expected {_count(expected, 'argument')}")
        if args:
            builder.span_label(join_span(*args), f"supplied {_count(got, 'argument')}")
        if native:
            builder.note(f"`{ident.name}` is implemented natively, so its definition cannot be shown")
        builder.emit()
        raise WrongNumArgs(ident=ident.name, expected=expected, got=got, span=join_span(ident, *args))

    def unsupported_keyword(self, kw: A.Keyword) -> NoReturn:
        (
            self.diagnostics.build_error(f"keyword `{kw.keyword.value}` cannot be evaluated yet")
            .span_label(kw.span, "reserved keyword")
            .note("`define` and `fn` are reserved for future use")
            .emit()
        )
        raise UnsupportedKeyword(keyword=kw.keyword.value, span=kw.span)

    def stray_argument(self, expr: A.Expr) -> NoReturn:
        message = "argument placeholder reached the evaluator outside a function call"
        self.diagnostics.build_ice_span(expr.span, message).emit()
        raise InternalError(message=message, span=expr.span)

    def ignore_trailing(self, rest: Sequence[A.Expr]) -> None:
        if not rest:
            return
        (
            self.diagnostics.build_warning("expressions after the first one are not evaluated")
            .span_label(join_span(*rest), "these expressions are never evaluated")
            .help("only a name bound to a function is applied to the expressions after it")
            .emit()
        )
