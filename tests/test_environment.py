from decimal import Decimal

import pytest

from val import Config, Environment, EvaluationError
from val.ast import Span
from val.builtin_function import BuiltinFunction
from val.environment import MAX_CALL_DEPTH
from val.values import FunctionVal

SPAN = Span(0, 1)


def test_root_environment_has_builtins_and_constants():
    env = Environment()
    assert isinstance(env.get_function('sqrt'), BuiltinFunction)
    assert env.get_variable('pi') == env.numeric.pi
    assert env.get_variable('missing') is None


def test_child_scope_sees_parent_and_shadows_locally():
    root = Environment()
    root.add_variable('x', Decimal(1))
    child = root.extend()
    assert child.get_variable('x') == 1
    child.add_variable('x', Decimal(2))
    assert child.get_variable('x') == 2
    assert root.get_variable('x') == 1
    assert child.numeric is root.numeric


def test_lookup_prefers_variables_over_functions():
    env = Environment()
    env.add_variable('e', Decimal(3))
    assert env.lookup('e') == 3
    assert isinstance(env.lookup('sin'), BuiltinFunction)


def test_snapshot_is_detached_from_later_changes():
    root = Environment()
    root.add_variable('x', Decimal(1))
    child = root.extend()
    child.add_variable('y', Decimal(2))
    frozen = child.snapshot()
    root.add_variable('x', Decimal(10))
    child.add_variable('z', Decimal(3))
    assert frozen.parent is None
    assert frozen.get_variable('x') == 1
    assert frozen.get_variable('y') == 2
    assert frozen.get_variable('z') is None
    assert frozen.get_function('sqrt') is root.get_function('sqrt')


def test_call_builtin_by_name():
    env = Environment()
    assert env.call_function('abs', [Decimal(-2)], SPAN) == 2


def test_call_undefined_function():
    with pytest.raises(EvaluationError) as exc:
        Environment().call_function('nope', [], SPAN)
    assert exc.value.message == 'Undefined function `nope`'
    assert exc.value.span == SPAN


def test_callable_variable_wins_over_function():
    env = Environment()
    env.add_variable('sin', env.get_function('cos'))
    assert env.call_function('sin', [Decimal(0)], SPAN) == 1


def test_invoke_user_function_binds_parameters():
    from val.parser import parse
    program = parse('fn add(a, b) { return a + b }')
    env = Environment()
    decl = program.statements[0]
    function = FunctionVal(decl.name, decl.params, decl.body, env.snapshot())
    assert env.invoke(function, [Decimal(2), Decimal(3)], SPAN) == 5


def test_recursion_depth_is_bounded():
    env = Environment()
    env.depth = MAX_CALL_DEPTH
    function = FunctionVal('f', [], [], env.snapshot())
    with pytest.raises(EvaluationError) as exc:
        env.invoke(function, [], SPAN)
    assert exc.value.message == 'Recursion limit exceeded'


def test_display_uses_configured_digits():
    env = Environment(Config(digits=2))
    assert env.display(Decimal('3.14159')) == '3.14'
    assert env.display('text') == 'text'
