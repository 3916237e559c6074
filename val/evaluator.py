"""Tree-walking evaluator for Val.

`Evaluator.execute` runs one statement and returns either a value or one
of the control signals from `val.errors` (`ReturnSignal`, `BREAK`,
`CONTINUE`). Every statement sequence (program, block, branch, loop body,
function body) stops at the first signal and hands it to its caller
unchanged. Loops consume `BREAK` and `CONTINUE` and pass `ReturnSignal`
on; a function call unwraps `ReturnSignal` into the call's value.

Whether `break`/`continue` and `return` are allowed is tracked with two
flags. `in_loop` is saved and restored around every loop. Each function
call gets a fresh `Evaluator` whose `in_loop` is false and whose
`in_function` is true, so loop control never crosses a call boundary.

Runtime errors are raised as `EvaluationError` and abort the evaluation.
"""

import decimal
from decimal import Decimal
from typing import Any, List, Optional

from val.ast import (
    Node, Program, Assign, Block, BreakStmt, ContinueStmt, ExprStmt,
    FuncDecl, IfStmt, LoopStmt, ReturnStmt, WhileStmt, BinaryOp, UnaryOp,
    BooleanLit, NumberLit, StringLit, NullLit, Ident, Call, ListLit, Index,
    recursion_headroom,
)
from val.analyzer import analyze
from val.config import Config
from val.debug import DebugLog
from val.environment import Environment
from val.errors import (
    BREAK, CONTINUE, SIGNALS, AnalysisErrors, BreakSignal, ContinueSignal,
    EvaluationError, ReturnSignal,
)
from val.numeric import describe, is_integer
from val.parser import parse
from val.values import (
    NULL, FunctionVal, ListVal, expect_boolean, expect_list, expect_number,
    to_repr, type_name, values_equal,
)

RELATIONAL = {
    '<': lambda c: c < 0,
    '<=': lambda c: c <= 0,
    '>': lambda c: c > 0,
    '>=': lambda c: c >= 0,
}


class Evaluator:
    def __init__(self, env: Environment):
        self.env = env
        self.numeric = env.numeric
        self.debug = env.debug
        self.in_loop = False
        self.in_function = False

    # Entry points

    def evaluate_program(self, program: Program) -> Any:
        """Run a whole program and return the value of its last statement."""
        try:
            with recursion_headroom():
                return self.execute_sequence(program.statements)
        except RecursionError:
            raise EvaluationError(program.span, 'Recursion limit exceeded') from None

    def call_body(self, body: List[Node]) -> Any:
        """Run a function body; the call's value is the returned value or null."""
        self.in_function = True
        result = self.execute_sequence(body)
        if isinstance(result, ReturnSignal):
            return result.value
        return NULL

    # Statements

    def execute_sequence(self, statements: List[Node]) -> Any:
        result = NULL
        for stmt in statements:
            result = self.execute(stmt)
            if isinstance(result, SIGNALS):
                return result
        return result

    def execute(self, node: Node) -> Any:
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.assign(node.target, value)
            return NULL
        if isinstance(node, Block):
            return self.execute_sequence(node.statements)
        if isinstance(node, IfStmt):
            condition = self.condition(node.condition)
            if self.debug.enabled(3):
                self.debug.write(f"if condition at {node.condition.span!r} -> {condition}")
            if condition:
                return self.execute_sequence(node.then_branch)
            if node.else_branch is not None:
                return self.execute_sequence(node.else_branch)
            return NULL
        if isinstance(node, WhileStmt):
            return self.run_loop(node.body, node.condition)
        if isinstance(node, LoopStmt):
            return self.run_loop(node.body, None)
        if isinstance(node, BreakStmt):
            if not self.in_loop:
                raise EvaluationError(node.span, "Cannot use 'break' outside of a loop")
            return BREAK
        if isinstance(node, ContinueStmt):
            if not self.in_loop:
                raise EvaluationError(node.span, "Cannot use 'continue' outside of a loop")
            return CONTINUE
        if isinstance(node, ReturnStmt):
            if not self.in_function:
                raise EvaluationError(node.span, 'Cannot return outside of a function')
            value = self.evaluate(node.value) if node.value is not None else NULL
            return ReturnSignal(value)
        if isinstance(node, FuncDecl):
            function = FunctionVal(node.name, list(node.params), node.body, self.env.snapshot())
            self.env.add_function(node.name, function)
            if self.debug.enabled(2):
                self.debug.write(f"define function {node.name}({', '.join(node.params)})")
            return NULL
        raise EvaluationError(node.span, f"Cannot execute {type(node).__name__}")

    def condition(self, node: Node) -> bool:
        return expect_boolean(self.evaluate(node), node.span)

    def run_loop(self, body: List[Node], condition: Optional[Node]) -> Any:
        saved = self.in_loop
        self.in_loop = True
        last = NULL
        iteration = 0
        try:
            while condition is None or self.condition(condition):
                iteration += 1
                if self.debug.enabled(3):
                    self.debug.write(f"loop iteration {iteration}")
                result = self.execute_sequence(body)
                if isinstance(result, ReturnSignal):
                    return result
                if isinstance(result, BreakSignal):
                    break
                if isinstance(result, ContinueSignal):
                    continue
                last = result
        finally:
            self.in_loop = saved
        return last

    # Assignment

    def assign(self, target: Node, value: Any):
        if isinstance(target, Ident):
            self.env.add_variable(target.name, value)
            return
        if isinstance(target, Index):
            base = target
            while isinstance(base, Index):
                base = base.target
            if not isinstance(base, Ident):
                raise EvaluationError(base.span, 'Cannot assign to an element of a temporary value')
            self.env.add_variable(base.name, self.replaced(target, value))
            return
        raise EvaluationError(target.span, 'left-hand side must be a variable or list element')

    def replaced(self, target: Index, value: Any) -> ListVal:
        """The base variable's new list after storing `value` at `target`."""
        items = expect_list(self.evaluate(target.target), target.target.span)
        index = self.list_index(target.index, len(items), target.span)
        updated = items.replace(index, value)
        if isinstance(target.target, Index):
            return self.replaced(target.target, updated)
        return updated

    def list_index(self, node: Node, length: int, span) -> int:
        value = self.evaluate(node)
        if not isinstance(value, Decimal) or not value.is_finite() or value < 0:
            raise EvaluationError(node.span, f"List index must be a non-negative finite number, got {to_repr(value)}")
        if not is_integer(value):
            raise EvaluationError(node.span, f"List index must be an integer, got {to_repr(value)}")
        index = int(value)
        if index >= length:
            raise EvaluationError(span, f"Index {index} out of bounds for list of length {length}")
        return index

    # Expressions

    def evaluate(self, node: Node) -> Any:
        try:
            return self._evaluate(node)
        except decimal.DecimalException as exc:
            raise EvaluationError(node.span, describe(exc)) from None

    def _evaluate(self, node: Node) -> Any:
        if isinstance(node, NumberLit):
            return self.numeric.number(node.text)
        if isinstance(node, StringLit):
            return node.value
        if isinstance(node, BooleanLit):
            return node.value
        if isinstance(node, NullLit):
            return NULL
        if isinstance(node, Ident):
            value = self.env.lookup(node.name)
            if value is None:
                raise EvaluationError(node.span, f"Undefined variable `{node.name}`")
            return value
        if isinstance(node, ListLit):
            return ListVal(tuple(self.evaluate(item) for item in node.items))
        if isinstance(node, Index):
            items = expect_list(self.evaluate(node.target), node.target.span)
            return items[self.list_index(node.index, len(items), node.span)]
        if isinstance(node, Call):
            args = [self.evaluate(arg) for arg in node.args]
            return self.env.call_function(node.name, args, node.span)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            if node.op == '-':
                return self.numeric.neg(expect_number(operand, node.operand.span))
            if node.op == '!':
                return not expect_boolean(operand, node.operand.span)
            raise EvaluationError(node.span, f"Unknown unary operator '{node.op}'")
        if isinstance(node, BinaryOp):
            if node.op in ('&&', '||'):
                return self.logical(node)
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.binary(node, left, right)
        raise EvaluationError(node.span, f"Cannot evaluate {type(node).__name__}")

    def logical(self, node: BinaryOp) -> bool:
        left = expect_boolean(self.evaluate(node.left), node.left.span)
        if node.op == '&&' and not left:
            return False
        if node.op == '||' and left:
            return True
        return expect_boolean(self.evaluate(node.right), node.right.span)

    def binary(self, node: BinaryOp, a: Any, b: Any) -> Any:
        op = node.op
        n = self.numeric
        if op == '+':
            if isinstance(a, Decimal) and isinstance(b, Decimal):
                return n.add(a, b)
            if isinstance(a, str) or isinstance(b, str):
                return self.env.display(a) + self.env.display(b)
            if isinstance(a, ListVal) and isinstance(b, ListVal):
                return a.concat(b)
            raise EvaluationError(node.span, f"Cannot add {type_name(a)} and {type_name(b)} with '+'")
        if op in ('==', '!='):
            equal = values_equal(a, b)
            return equal if op == '==' else not equal
        if op in RELATIONAL:
            if isinstance(a, Decimal) and isinstance(b, Decimal):
                return RELATIONAL[op](n.compare(a, b))
            if isinstance(a, str) and isinstance(b, str):
                return RELATIONAL[op]((a > b) - (a < b))
            raise EvaluationError(node.span, f"Cannot compare {type_name(a)} and {type_name(b)} with '{op}'")
        x = expect_number(a, node.left.span)
        y = expect_number(b, node.right.span)
        if op == '-':
            return n.sub(x, y)
        if op == '*':
            return n.mul(x, y)
        if op == '/':
            if y == 0:
                raise EvaluationError(node.right.span, 'Division by zero')
            return n.div(x, y)
        if op == '%':
            if y == 0:
                raise EvaluationError(node.right.span, 'Modulo by zero')
            return n.mod(x, y)
        if op == '^':
            return n.pow(x, y)
        raise EvaluationError(node.span, f"Unknown binary operator '{op}'")


def run_program(source: str, config: Optional[Config] = None, debug: Optional[DebugLog] = None) -> Any:
    """Parse, analyze and evaluate `source` in a fresh environment.

    Raises `ParseErrors` for syntax errors, `AnalysisErrors` when the
    analyzer rejects the program, and `EvaluationError` at run time.
    """
    debug = debug if debug is not None else DebugLog()
    program = parse(source)
    if debug.enabled(1):
        debug.write(f"parsed {len(program.statements)} statement(s)")
    errors = analyze(program)
    if errors:
        raise AnalysisErrors(errors)
    if debug.enabled(1):
        debug.write('analysis passed')
    env = Environment(config, debug)
    result = Evaluator(env).evaluate_program(program)
    if debug.enabled(1):
        debug.write(f"result {env.display(result)}")
    return result

