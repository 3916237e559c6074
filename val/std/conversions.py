import decimal
from typing import Any, List

from val.ast import Span
from val.builtin_function import BuiltinFunction
from val.errors import EvaluationError
from val.values import NULL, ListVal, type_name


def _parse_number(text: str, target: str, span: Span, env: Any):
    try:
        number = env.numeric.number(text.strip())
    except decimal.InvalidOperation:
        raise EvaluationError(span, f"Cannot convert '{text}' to {target}") from None
    if not number.is_finite():
        raise EvaluationError(span, f"Cannot convert '{text}' to {target}")
    return number


def populate_conversion_environment(env) -> None:
    """Register `int`, `float` and `bool` on `env`."""

    def std_int(args: List[Any], span: Span, env: Any) -> Any:
        value = args[0]
        if isinstance(value, bool):
            return env.numeric.from_int(1 if value else 0)
        if isinstance(value, decimal.Decimal):
            return env.numeric.floor(value)
        if isinstance(value, str):
            return env.numeric.floor(_parse_number(value, 'int', span, env))
        raise EvaluationError(span, f"Cannot convert {type_name(value)} to int")

    def std_float(args: List[Any], span: Span, env: Any) -> Any:
        value = args[0]
        if isinstance(value, bool):
            return env.numeric.from_int(1 if value else 0)
        if isinstance(value, decimal.Decimal):
            return value
        if isinstance(value, str):
            return _parse_number(value, 'float', span, env)
        raise EvaluationError(span, f"Cannot convert {type_name(value)} to float")

    def std_bool(args: List[Any], span: Span, env: Any) -> Any:
        value = args[0]
        if isinstance(value, bool):
            return value
        if isinstance(value, decimal.Decimal):
            return value != 0
        if isinstance(value, (str, ListVal)):
            return len(value) > 0
        if value is NULL:
            return False
        raise EvaluationError(span, f"Cannot convert {type_name(value)} to bool")

    env.add_function('int', BuiltinFunction('int', 1, std_int))
    env.add_function('float', BuiltinFunction('float', 1, std_float))
    env.add_function('bool', BuiltinFunction('bool', 1, std_bool))
