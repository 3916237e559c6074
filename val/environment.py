import decimal
from typing import Any, Dict, List, Optional

from val.ast import Span
from val.builtin_function import BuiltinFunction
from val.config import Config
from val.debug import DebugLog
from val.errors import EvaluationError
from val.numeric import describe
from val.std import populate_builtins
from val.values import FunctionVal, is_callable, to_string

# Nested user function calls allowed before evaluation is aborted.
MAX_CALL_DEPTH = 1500


def _arity_message(name: str, expected: int, got: int) -> str:
    noun = 'argument' if expected == 1 else 'arguments'
    return f"Function `{name}` expects {expected} {noun}, got {got}"


class Environment:
    """Scope mapping names to variables and functions.

    A root environment owns the numeric configuration and is populated with
    the builtin library. Child scopes (see `extend`) share the root's
    configuration, numeric engine and debug log.
    """
    def __init__(self, config: Optional[Config] = None, debug: Optional[DebugLog] = None,
                 parent: Optional['Environment'] = None):
        self.parent = parent
        self.variables: Dict[str, Any] = {}
        self.functions: Dict[str, Any] = {}
        if parent is not None:
            self.config = parent.config
            self.numeric = parent.numeric
            self.debug = parent.debug
            self.depth = parent.depth
        else:
            self.config = config if config is not None else Config()
            self.numeric = self.config.numeric()
            self.debug = debug if debug is not None else DebugLog()
            self.depth = 0
            populate_builtins(self)

    # Bindings

    def add_variable(self, name: str, value: Any):
        self.variables[name] = value

    def get_variable(self, name: str) -> Optional[Any]:
        if name in self.variables:
            return self.variables[name]
        if self.parent:
            return self.parent.get_variable(name)
        return None

    def add_function(self, name: str, function: Any):
        self.functions[name] = function

    def get_function(self, name: str) -> Optional[Any]:
        if name in self.functions:
            return self.functions[name]
        if self.parent:
            return self.parent.get_function(name)
        return None

    def lookup(self, name: str) -> Optional[Any]:
        """Resolve an identifier: variables first, then functions as values."""
        value = self.get_variable(name)
        if value is None:
            value = self.get_function(name)
        return value

    # Scopes

    def extend(self) -> 'Environment':
        return Environment(parent=self)

    def snapshot(self) -> 'Environment':
        """Flattened copy of every binding visible from this scope.

        The copy has no parent, so later assignments in this scope or any
        enclosing one are invisible through it.
        """
        frozen = Environment(parent=self)
        frozen.parent = None
        chain: List['Environment'] = []
        scope: Optional['Environment'] = self
        while scope is not None:
            chain.append(scope)
            scope = scope.parent
        for scope in reversed(chain):
            frozen.variables.update(scope.variables)
            frozen.functions.update(scope.functions)
        return frozen

    # Calls

    def resolve_callable(self, name: str) -> Optional[Any]:
        value = self.get_variable(name)
        if is_callable(value):
            return value
        return self.get_function(name)

    def call_function(self, name: str, args: List[Any], span: Span) -> Any:
        function = self.resolve_callable(name)
        if function is None:
            raise EvaluationError(span, f"Undefined function `{name}`")
        return self.invoke(function, args, span)

    def invoke(self, function: Any, args: List[Any], span: Span) -> Any:
        if isinstance(function, BuiltinFunction):
            if function.arity is not None and len(args) != function.arity:
                raise EvaluationError(span, _arity_message(function.name, function.arity, len(args)))
            try:
                return function.fn(args, span, self)
            except decimal.DecimalException as exc:
                raise EvaluationError(span, describe(exc)) from exc
        if not isinstance(function, FunctionVal):
            raise EvaluationError(span, f"{function!r} is not callable")
        if len(args) != len(function.params):
            raise EvaluationError(span, _arity_message(function.name, len(function.params), len(args)))
        if self.depth >= MAX_CALL_DEPTH:
            raise EvaluationError(span, 'Recursion limit exceeded')
        call_env = function.env.extend()
        call_env.depth = self.depth + 1
        call_env.add_function(function.name, function)
        for param, arg in zip(function.params, args):
            call_env.add_variable(param, arg)
        if self.debug.enabled(2):
            self.debug.write(f"call {function.name}({', '.join(self.display(a) for a in args)}) depth {call_env.depth}")
        from val.evaluator import Evaluator
        return Evaluator(call_env).call_body(function.body)

    # Display

    def format_number(self, value: decimal.Decimal) -> str:
        return self.numeric.display(value, self.config.digits)

    def display(self, value: Any) -> str:
        return to_string(value, self.format_number)
