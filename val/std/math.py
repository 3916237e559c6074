from decimal import Decimal
from math import gcd
from typing import Any, Callable, List, Optional

from val.ast import Span
from val.builtin_function import BuiltinFunction
from val.errors import EvaluationError
from val.numeric import is_integer
from val.values import expect_number


def _unary(name: str, operation: str, check: Optional[Callable[[Any, Decimal, Span], None]] = None) -> BuiltinFunction:
    """Builtin taking one number and applying `Numeric.<operation>` to it."""
    def fn(args: List[Any], span: Span, env: Any) -> Any:
        x = expect_number(args[0], span)
        if check is not None:
            check(env.numeric, x, span)
        return getattr(env.numeric, operation)(x)
    return BuiltinFunction(name, 1, fn)


def _positive(numeric, x: Decimal, span: Span):
    if x <= 0:
        raise EvaluationError(span, 'Cannot take logarithm of zero or negative number')


def _non_negative(numeric, x: Decimal, span: Span):
    if x < 0:
        raise EvaluationError(span, 'Cannot take square root of negative number')


def _unit_interval(name: str):
    def check(numeric, x: Decimal, span: Span):
        if not -1 <= x <= 1:
            raise EvaluationError(span, f'{name} argument must be between -1 and 1')
    return check


def _outside_unit_interval(name: str):
    def check(numeric, x: Decimal, span: Span):
        if abs(x) < 1:
            raise EvaluationError(span, f'{name} argument must have absolute value at least 1')
    return check


def _not_multiple_of_pi(name: str):
    def check(numeric, x: Decimal, span: Span):
        if numeric.is_multiple_of_pi(x):
            raise EvaluationError(span, f'Cannot compute {name} of multiple of π')
    return check


def _not_odd_multiple_of_half_pi(numeric, x: Decimal, span: Span):
    if numeric.is_odd_multiple_of_half_pi(x):
        raise EvaluationError(span, 'Cannot compute sec of π/2 + nπ')


def _integers(name: str, args: List[Any], span: Span) -> List[int]:
    numbers = [expect_number(arg, span) for arg in args]
    if not all(is_integer(n) for n in numbers):
        raise EvaluationError(span, f'{name} arguments must be integers')
    return [int(n) for n in numbers]


def populate_math_environment(env) -> None:
    """Register the numeric builtins on `env`."""
    functions = [
        _unary('sin', 'sin'),
        _unary('cos', 'cos'),
        _unary('tan', 'tan'),
        _unary('csc', 'csc', _not_multiple_of_pi('csc')),
        _unary('sec', 'sec', _not_odd_multiple_of_half_pi),
        _unary('cot', 'cot', _not_multiple_of_pi('cot')),
        _unary('sinh', 'sinh'),
        _unary('cosh', 'cosh'),
        _unary('tanh', 'tanh'),
        _unary('asin', 'asin', _unit_interval('asin')),
        _unary('acos', 'acos', _unit_interval('acos')),
        _unary('arc', 'atan'),
        _unary('acsc', 'acsc', _outside_unit_interval('acsc')),
        _unary('asec', 'asec', _outside_unit_interval('asec')),
        _unary('acot', 'acot'),
        _unary('ln', 'ln', _positive),
        _unary('log2', 'log2', _positive),
        _unary('log10', 'log10', _positive),
        _unary('e', 'exp'),
        _unary('sqrt', 'sqrt', _non_negative),
        _unary('ceil', 'ceil'),
        _unary('floor', 'floor'),
        _unary('abs', 'abs'),
    ]

    def std_gcd(args: List[Any], span: Span, env: Any) -> Any:
        a, b = _integers('gcd', args, span)
        return env.numeric.from_int(gcd(a, b))

    def std_lcm(args: List[Any], span: Span, env: Any) -> Any:
        a, b = _integers('lcm', args, span)
        if a == 0 or b == 0:
            return env.numeric.from_int(0)
        return env.numeric.from_int(abs(a * b) // gcd(a, b))

    functions.append(BuiltinFunction('gcd', 2, std_gcd))
    functions.append(BuiltinFunction('lcm', 2, std_lcm))

    for function in functions:
        env.add_function(function.name, function)
