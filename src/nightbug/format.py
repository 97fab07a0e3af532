from __future__ import annotations

from collections.abc import Iterable

from . import ast as A
from .bindings import Binding, Expression, Function, NativeFunction


def format_expressions(exprs: Iterable[A.Expr]) -> str:
    """Canonical source for a program: one top-level form per line."""
    out = [format_expr(e) for e in exprs]
    return "\n".join(out) + "\n" if out else ""


def format_expr(expr: A.Expr) -> str:
    if isinstance(expr, A.Keyword):
        return expr.keyword.value
    if isinstance(expr, A.Identifier):
        return expr.name
    if isinstance(expr, A.Integer):
        return str(expr.value)
    if isinstance(expr, A.Boolean):
        return "true" if expr.value else "false"
    if isinstance(expr, A.Unit):
        return "()"
    if isinstance(expr, A.Argument):
        # Not valid source; only shows up when printing function bodies.
        return f"${expr.index}"
    if isinstance(expr, A.List):
        return "(" + " ".join(format_expr(e) for e in expr.items) + ")"
    raise TypeError(f"not an expression: {type(expr).__name__}")


def format_binding(binding: Binding) -> str:
    if isinstance(binding, Expression):
        return format_expr(binding.expr)
    if isinstance(binding, Function):
        return f"<function/{binding.arity} {format_expr(binding.body)}>"
    if isinstance(binding, NativeFunction):
        arity = "*" if binding.arity is None else str(binding.arity)
        name = f" {binding.name}" if binding.name else ""
        return f"<native function/{arity}{name}>"
    raise TypeError(f"not a binding: {type(binding).__name__}")


def describe_binding(binding: Binding) -> str:
    """Short phrase for diagnostics, e.g. "boolean `true`"."""
    if isinstance(binding, Function):
        return f"a function taking {binding.arity} argument{'' if binding.arity == 1 else 's'}"
    if isinstance(binding, NativeFunction):
        return "a native function"
    expr = binding.expr
    if isinstance(expr, A.Integer):
        return f"integer `{expr.value}`"
    if isinstance(expr, A.Boolean):
        return f"boolean `{format_expr(expr)}`"
    if isinstance(expr, A.Unit):
        return "unit `()`"
    if isinstance(expr, A.Keyword):
        return f"keyword `{expr.keyword.value}`"
    if isinstance(expr, A.Identifier):
        return f"identifier `{expr.name}`"
    if isinstance(expr, A.Argument):
        return "an argument placeholder"
    return f"list `{format_expr(expr)}`"
