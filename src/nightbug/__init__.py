from __future__ import annotations

from .api import Evaluation, evaluate_file, evaluate_source
from .bindings import Binding, Expression, Function, NativeCall, NativeFunction
from .diagnostics import DiagnosticBuilder, DiagnosticsContext, Level
from .errors import (
    InterpreterError,
    LexError,
    NightbugError,
    ParseError,
)
from .format import format_binding, format_expr, format_expressions
from .interpreter import Interpreter, interpret
from .lexer import lex
from .parser import parse

__all__ = [
    "Binding",
    "DiagnosticBuilder",
    "DiagnosticsContext",
    "Evaluation",
    "Expression",
    "Function",
    "Interpreter",
    "InterpreterError",
    "Level",
    "LexError",
    "NativeCall",
    "NativeFunction",
    "NightbugError",
    "ParseError",
    "evaluate_file",
    "evaluate_source",
    "format_binding",
    "format_expr",
    "format_expressions",
    "interpret",
    "lex",
    "parse",
]
