from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


class KeywordKind(str, Enum):
    DEFINE = "define"
    FN = "fn"


KEYWORDS: dict[str, KeywordKind] = {k.value: k for k in KeywordKind}


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


@dataclass(frozen=True, slots=True)
class Keyword(Node):
    """A reserved word. Keywords parse but have no evaluation rule yet."""

    keyword: KeywordKind


@dataclass(frozen=True, slots=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True, slots=True)
class Integer(Node):
    value: int  # always within [I32_MIN, I32_MAX]


@dataclass(frozen=True, slots=True)
class Boolean(Node):
    value: bool


@dataclass(frozen=True, slots=True)
class Unit(Node):
    """The empty list `()`."""


@dataclass(frozen=True, slots=True)
class Argument(Node):
    """Placeholder for the index-th call argument inside a function body.

    Never produced by the parser; only built-in function bodies contain it.
    """

    index: int


@dataclass(frozen=True, slots=True)
class List(Node):
    items: tuple[Expr, ...]


Expr = Keyword | Identifier | Integer | Boolean | Unit | Argument | List
Literal = (Integer, Boolean, Unit)
