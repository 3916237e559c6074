"""Generic tree export for the Val AST.

Every node becomes a plain dict `{"kind", "range", "children"}` suitable
for JSON encoding. `kind` is a stable tag for the node variant, `range`
holds the node's span offsets, and `children` lists the child nodes in
source order. Branches and bodies contribute their statements directly:
an `if` has its condition followed by the then-statements and then the
else-statements.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .ast import (
    Node, Program, Assign, Block, BreakStmt, ContinueStmt, ExprStmt,
    FuncDecl, IfStmt, LoopStmt, ReturnStmt, WhileStmt, BinaryOp, UnaryOp,
    BooleanLit, NumberLit, StringLit, NullLit, Ident, Call, ListLit, Index,
    recursion_headroom,
)


KINDS = {
    Program: 'statements',
    Assign: 'assignment',
    Block: 'block',
    BreakStmt: 'break',
    ContinueStmt: 'continue',
    ExprStmt: 'expression',
    FuncDecl: 'function',
    IfStmt: 'if',
    LoopStmt: 'loop',
    ReturnStmt: 'return',
    WhileStmt: 'while',
    BinaryOp: 'binary_op',
    UnaryOp: 'unary_op',
    BooleanLit: 'boolean',
    NumberLit: 'number',
    StringLit: 'string',
    NullLit: 'null',
    Ident: 'identifier',
    Call: 'function_call',
    ListLit: 'list',
    Index: 'list_access',
}


def children_of(node: Node) -> List[Node]:
    if isinstance(node, (Program, Block)):
        return list(node.statements)
    if isinstance(node, Assign):
        return [node.target, node.value]
    if isinstance(node, ExprStmt):
        return [node.expr]
    if isinstance(node, FuncDecl):
        return list(node.body)
    if isinstance(node, IfStmt):
        return [node.condition] + list(node.then_branch) + list(node.else_branch or [])
    if isinstance(node, LoopStmt):
        return list(node.body)
    if isinstance(node, WhileStmt):
        return [node.condition] + list(node.body)
    if isinstance(node, ReturnStmt):
        return [node.value] if node.value is not None else []
    if isinstance(node, BinaryOp):
        return [node.left, node.right]
    if isinstance(node, UnaryOp):
        return [node.operand]
    if isinstance(node, Call):
        return list(node.args)
    if isinstance(node, ListLit):
        return list(node.items)
    if isinstance(node, Index):
        return [node.target, node.index]
    return []


def ast_to_tree(node: Node) -> Dict[str, Any]:
    kind = KINDS.get(type(node))
    if kind is None:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    return {
        "kind": kind,
        "range": {"start": node.span.start, "end": node.span.end},
        "children": [ast_to_tree(child) for child in children_of(node)],
    }


def dumps(node: Node, indent: int = 2) -> str:
    with recursion_headroom():
        return json.dumps(ast_to_tree(node), ensure_ascii=False, indent=indent)
