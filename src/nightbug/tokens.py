from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    IDENT_OR_KEYWORD = "identifier"
    INTEGER = "integer"

    # Punctuation
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"

    # Produced while scanning, never returned from lex()
    WHITESPACE = "whitespace"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    span: Span
    value: str | int | None = None  # identifier text or integer value

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind.value!r}, {self.span})"
        return f"Token({self.kind.value}, {self.value!r}, {self.span})"
