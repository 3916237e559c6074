from typing import Any, List

from val.ast import Span
from val.builtin_function import BuiltinFunction
from val.errors import EvaluationError
from val.values import ListVal, expect_list, expect_number, expect_string, type_name


def populate_list_environment(env) -> None:
    """Register the list and string builtins on `env`."""

    def std_len(args: List[Any], span: Span, env: Any) -> Any:
        value = args[0]
        if isinstance(value, (str, ListVal)):
            return env.numeric.from_int(len(value))
        raise EvaluationError(span, f"Cannot take the length of a {type_name(value)}")

    def std_sum(args: List[Any], span: Span, env: Any) -> Any:
        total = env.numeric.from_int(0)
        for item in expect_list(args[0], span):
            total = env.numeric.add(total, expect_number(item, span))
        return total

    def std_list(args: List[Any], span: Span, env: Any) -> Any:
        value = args[0]
        if isinstance(value, ListVal):
            return value
        if isinstance(value, str):
            return ListVal(tuple(value))
        return ListVal((value,))

    def std_split(args: List[Any], span: Span, env: Any) -> Any:
        text = expect_string(args[0], span)
        delimiter = expect_string(args[1], span)
        parts = list(text) if delimiter == '' else text.split(delimiter)
        return ListVal(tuple(part for part in parts if part))

    def std_join(args: List[Any], span: Span, env: Any) -> Any:
        items = expect_list(args[0], span)
        separator = expect_string(args[1], span)
        return separator.join(env.display(item) for item in items)

    env.add_function('len', BuiltinFunction('len', 1, std_len))
    env.add_function('sum', BuiltinFunction('sum', 1, std_sum))
    env.add_function('list', BuiltinFunction('list', 1, std_list))
    env.add_function('split', BuiltinFunction('split', 2, std_split))
    env.add_function('join', BuiltinFunction('join', 2, std_join))
