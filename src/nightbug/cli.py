from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .diagnostics import DiagnosticsContext
from .errors import NightbugError
from .format import format_binding, format_expressions
from .interpreter import Interpreter
from .lexer import lex
from .parser import parse

SAMPLE_PROGRAM = "(add 2 (second 3 4))"

_COLOR_CHOICES = {"auto": None, "always": True, "never": False}


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="nightbug", description="Evaluate a nightbug program")
    ap.add_argument("file", nargs="?", help="Source file (defaults to a built-in sample program)")
    ap.add_argument("-c", "--code", help="Evaluate CODE instead of a file")
    ap.add_argument("--stages", action="store_true", help="Print tokens and expressions before the result")
    ap.add_argument("--color", choices=sorted(_COLOR_CHOICES), default="auto", help="Color diagnostics")
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.code is not None and args.file is not None:
        ap.error("give either FILE or --code, not both")

    origin: str | None = None
    if args.code is not None:
        src = args.code
    elif args.file is not None:
        origin = args.file
        try:
            src = Path(args.file).read_text(encoding="utf-8")
        except OSError as exc:
            ap.error(f"can't read {args.file}: {exc.strerror}")
    else:
        src = SAMPLE_PROGRAM

    diagnostics = DiagnosticsContext(src, origin, color=_COLOR_CHOICES[args.color])
    try:
        if args.stages:
            print(f"Code: {src!r}")
        tokens = lex(diagnostics)
        if args.stages:
            print(f"Tokens: {tokens!r}")
        expressions = parse(tokens, diagnostics)
        if args.stages:
            print(f"Expressions: {format_expressions(expressions).strip()}")
        result = Interpreter().interpret(expressions, diagnostics)
    except NightbugError:
        # Already reported on stderr.
        return 1

    print(f"Result: {format_binding(result)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
