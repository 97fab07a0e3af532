from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from . import ast as A
from .bindings import Binding
from .diagnostics import DiagnosticsContext
from .interpreter import Interpreter
from .lexer import lex
from .parser import parse
from .tokens import Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Evaluation:
    source: str
    tokens: tuple[Token, ...]
    expressions: tuple[A.Expr, ...]
    result: Binding
    diagnostics: DiagnosticsContext


def evaluate_source(
    src: str,
    *,
    origin: str | None = None,
    interpreter: Interpreter | None = None,
    stream: TextIO | None = None,
    color: bool | None = None,
) -> Evaluation:
    """Lex, parse and interpret `src` with one shared diagnostics context.

    Raises the first `NightbugError` encountered; its diagnostic has already
    been written to `stream` (stderr by default).
    """
    diagnostics = DiagnosticsContext(src, origin, stream=stream, color=color)
    tokens = lex(diagnostics)
    expressions = parse(tokens, diagnostics)
    result = (interpreter or Interpreter()).interpret(expressions, diagnostics)
    logger.debug("evaluated %s", origin or "<memory>")
    return Evaluation(
        source=src,
        tokens=tuple(tokens),
        expressions=tuple(expressions),
        result=result,
        diagnostics=diagnostics,
    )


def evaluate_file(path: str | Path, **kwargs) -> Evaluation:
    p = Path(path).expanduser()
    src = p.read_text(encoding="utf-8")
    kwargs.setdefault("origin", str(p))
    return evaluate_source(src, **kwargs)
