"""Runtime values for Val.

Val has five data kinds plus callables:

* null: the `NULL` singleton (`NullVal`)
* boolean: Python `bool`
* number: `decimal.Decimal`
* string: Python `str`
* list: `ListVal`, an immutable tuple of values
* function: `FunctionVal`, a user-defined closure
* builtin function: `BuiltinFunction` from `val.builtin_function`

Lists are never mutated in place. Every "modification" builds a new
`ListVal`, which gives the language value semantics for free: no two
variables can ever observe each other's changes.

The `expect_*` accessors are the single place where a value is checked
against the kind an operation needs; they raise `EvaluationError` at the
span of the offending expression.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from val.ast import Node, Span
from val.builtin_function import BuiltinFunction
from val.errors import EvaluationError
from val.numeric import format_number


class NullVal:
    """Marker object for the Val `null` value."""
    _instance: Optional['NullVal'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()


@dataclass(frozen=True)
class ListVal:
    items: Tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]

    def replace(self, index: int, value: Any) -> 'ListVal':
        """Return a new list with position `index` set to `value`."""
        return ListVal(self.items[:index] + (value,) + self.items[index + 1:])

    def concat(self, other: 'ListVal') -> 'ListVal':
        return ListVal(self.items + other.items)


@dataclass
class FunctionVal:
    """A user-defined function closed over a snapshot of its declaring scope."""
    name: str
    params: List[str]
    body: List[Node]
    env: Any  # val.environment.Environment, frozen at declaration time

    def __repr__(self) -> str:
        return f"<function: {self.name}>"


# A formatter turns a number into its display text.
Formatter = Callable[[Decimal], str]


def type_name(value: Any) -> str:
    if value is NULL:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, Decimal):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ListVal):
        return 'list'
    if isinstance(value, FunctionVal):
        return 'function'
    if isinstance(value, BuiltinFunction):
        return 'builtin function'
    return type(value).__name__


def to_string(value: Any, fmt: Formatter = format_number) -> str:
    """Display form of a value; strings are shown without quotes."""
    if isinstance(value, str):
        return value
    return to_repr(value, fmt)


def to_repr(value: Any, fmt: Formatter = format_number) -> str:
    """Display form used inside lists, where strings keep their quotes."""
    if value is NULL:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Decimal):
        return fmt(value)
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, ListVal):
        return '[' + ', '.join(to_repr(item, fmt) for item in value.items) + ']'
    if isinstance(value, FunctionVal):
        return f"<function: {value.name}>"
    if isinstance(value, BuiltinFunction):
        return f"<builtin function: {value.name}>"
    return repr(value)


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality; values of different kinds are never equal."""
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, ListVal):
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, (FunctionVal, BuiltinFunction)):
        return a.name == b.name
    return a == b


def _mismatch(value: Any, kind: str, span: Span) -> EvaluationError:
    return EvaluationError(span, f"{type_name(value)} value {to_repr(value)} is not a {kind}")


def expect_number(value: Any, span: Span) -> Decimal:
    if isinstance(value, Decimal):
        return value
    raise _mismatch(value, 'number', span)


def expect_boolean(value: Any, span: Span) -> bool:
    if isinstance(value, bool):
        return value
    raise _mismatch(value, 'boolean', span)


def expect_string(value: Any, span: Span) -> str:
    if isinstance(value, str):
        return value
    raise _mismatch(value, 'string', span)


def expect_list(value: Any, span: Span) -> ListVal:
    if isinstance(value, ListVal):
        return value
    raise _mismatch(value, 'list', span)


def is_callable(value: Any) -> bool:
    return isinstance(value, (FunctionVal, BuiltinFunction))
