"""Semantic checks run between parsing and evaluation.

`analyze` walks the whole program once, in source order, and returns
every problem it finds:

* an assignment target that is neither a variable nor a list element,
* a parameter name repeated in one function declaration,
* a call to a name that is not a builtin, not a function declared earlier
  in the walk, and not a parameter of an enclosing function.

A function becomes callable at the point its declaration is visited, so a
call that textually precedes the declaration is reported even if it would
run later. Calls through parameters are allowed because parameters may be
bound to function values at run time.

The analyzer keeps its own registry of declared names and never touches
an `Environment`.
"""

from typing import FrozenSet, List, Optional, Set

from val.ast import (
    Node, Program, Assign, Block, ExprStmt, FuncDecl, IfStmt, LoopStmt,
    ReturnStmt, WhileStmt, BinaryOp, UnaryOp, Ident, Call, ListLit, Index,
    recursion_headroom,
)
from val.errors import AnalysisError
from val.std import builtin_names


class Analyzer:
    def __init__(self, builtins: Optional[FrozenSet[str]] = None):
        self.errors: List[AnalysisError] = []
        self.functions: Set[str] = set(builtins if builtins is not None else builtin_names())
        self.parameters: List[Set[str]] = []

    def error(self, node: Node, message: str):
        self.errors.append(AnalysisError(node.span, message))

    def is_known(self, name: str) -> bool:
        return name in self.functions or any(name in params for params in self.parameters)

    def visit_all(self, nodes: List[Node]):
        for node in nodes:
            self.visit(node)

    def visit(self, node: Node):
        if isinstance(node, Program):
            self.visit_all(node.statements)
        elif isinstance(node, Assign):
            if not isinstance(node.target, (Ident, Index)):
                self.error(node.target, 'left-hand side must be a variable or list element')
            self.visit(node.target)
            self.visit(node.value)
        elif isinstance(node, Block):
            self.visit_all(node.statements)
        elif isinstance(node, ExprStmt):
            self.visit(node.expr)
        elif isinstance(node, FuncDecl):
            seen: Set[str] = set()
            reported: Set[str] = set()
            for param in node.params:
                if param in seen and param not in reported:
                    self.error(node, f"Duplicate parameter `{param}` in function `{node.name}`")
                    reported.add(param)
                seen.add(param)
            self.functions.add(node.name)
            self.parameters.append(seen)
            self.visit_all(node.body)
            self.parameters.pop()
        elif isinstance(node, IfStmt):
            self.visit(node.condition)
            self.visit_all(node.then_branch)
            if node.else_branch is not None:
                self.visit_all(node.else_branch)
        elif isinstance(node, (LoopStmt, WhileStmt)):
            if isinstance(node, WhileStmt):
                self.visit(node.condition)
            self.visit_all(node.body)
        elif isinstance(node, ReturnStmt):
            if node.value is not None:
                self.visit(node.value)
        elif isinstance(node, BinaryOp):
            self.visit(node.left)
            self.visit(node.right)
        elif isinstance(node, UnaryOp):
            self.visit(node.operand)
        elif isinstance(node, Call):
            if not self.is_known(node.name):
                self.error(node, f"Call to undefined function `{node.name}`")
            self.visit_all(node.args)
        elif isinstance(node, ListLit):
            self.visit_all(node.items)
        elif isinstance(node, Index):
            self.visit(node.target)
            self.visit(node.index)
        # literals, identifiers, break and continue carry nothing to check


def analyze(program: Program) -> List[AnalysisError]:
    analyzer = Analyzer()
    try:
        with recursion_headroom():
            analyzer.visit(program)
    except RecursionError:
        analyzer.error(program, 'program nested too deeply')
    return analyzer.errors
