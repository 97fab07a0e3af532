from __future__ import annotations

from . import ast as A
from .bindings import Binding, Expression, Function, NativeCall, NativeFunction
from .errors import IntegerOverflow, InvalidArgument
from .format import describe_binding
from .spans import Span


def add_native(call: NativeCall) -> Binding:
    """Variadic integer sum."""
    total = 0
    for value, span in zip(call.args, call.arg_spans):
        if not (isinstance(value, Expression) and isinstance(value.expr, A.Integer)):
            (
                call.diagnostics.build_error(f"mismatched types: `{call.name}` only accepts integers")
                .span_label(span, f"expected integer, found {describe_binding(value)}")
                .span_label(call.ident_span, "arguments to this function are incorrect")
                .emit()
            )
            raise InvalidArgument(ident=call.name, binding=value, span=span)

        total += value.expr.value
        if not A.I32_MIN <= total <= A.I32_MAX:
            (
                call.diagnostics.build_error("attempt to add with overflow")
                .span_label(call.span, "this addition overflows")
                .note(f"integers must lie between {A.I32_MIN} and {A.I32_MAX}")
                .emit()
            )
            raise IntegerOverflow(ident=call.name, span=call.span)

    return Expression(A.Integer(span=call.span, value=total))


def default_bindings() -> dict[str, Binding]:
    """The bindings every fresh interpreter starts with."""
    return {
        "add": NativeFunction(arity=None, procedure=add_native, name="add"),
        # (second a b) => b
        "second": Function(arity=2, body=A.Argument(span=Span.empty(0), index=1)),
    }
