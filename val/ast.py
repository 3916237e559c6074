"""Abstract Syntax Tree (AST) definitions for the Val language.

Every node carries a `Span`, the half-open range `[start, end)` of the
source text it was parsed from. Offsets count characters of the Python
source string, so they can be used directly to slice it.

Statements and expressions are plain dataclasses. Blocks, function
bodies and loop bodies hold their statements as lists in source order.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

# Python frames available to the recursive walks over a tree.
RECURSION_LIMIT = 20000


@contextmanager
def recursion_headroom():
    """Raise the interpreter recursion limit while a deep tree is walked."""
    limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
    try:
        yield
    finally:
        sys.setrecursionlimit(limit)


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    def merge(self, other: 'Span') -> 'Span':
        """Return the smallest span covering both spans."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass
class Node:
    """Base class for all AST nodes."""
    span: Span


@dataclass
class Program(Node):
    statements: List[Node]


# Statements

@dataclass
class Assign(Node):
    target: Node  # validated by the analyzer: Ident or Index
    value: Node


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class FuncDecl(Node):
    name: str
    params: List[str]
    body: List[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    then_branch: List[Node]
    else_branch: Optional[List[Node]]


@dataclass
class LoopStmt(Node):
    body: List[Node]


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: List[Node]


# Expressions

@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class BooleanLit(Node):
    value: bool


@dataclass
class NumberLit(Node):
    text: str  # literal kept verbatim, converted under the runtime precision


@dataclass
class StringLit(Node):
    value: str


@dataclass
class NullLit(Node):
    pass


@dataclass
class Ident(Node):
    name: str


@dataclass
class Call(Node):
    name: str
    args: List[Node]


@dataclass
class ListLit(Node):
    items: List[Node]


@dataclass
class Index(Node):
    target: Node
    index: Node
