from decimal import Decimal

import pytest

from val import Config, Environment, Evaluator, EvaluationError, parse, run_program
from val.ast import Span
from val.values import NULL, ListVal


LITERALS = ['0', '7', '42', '3.25', '0.001', '123456789012345678901234567890']


@pytest.mark.parametrize('literal', LITERALS)
def test_number_literal_evaluates_to_itself(literal):
    assert run_program(literal) == Decimal(literal)


@pytest.mark.parametrize('literal', LITERALS)
def test_double_negation_is_identity(literal):
    assert run_program('--' + literal) == run_program(literal)
    assert run_program('---' + literal) == run_program('-' + literal)


@pytest.mark.parametrize('op, message', [('/', 'Division by zero'), ('%', 'Modulo by zero')])
def test_zero_divisor_error_points_at_divisor(op, message):
    source = f'12 {op} 0'
    with pytest.raises(EvaluationError) as exc:
        run_program(source)
    assert exc.value.message == message
    assert exc.value.span == Span(5, 6)
    assert source[exc.value.span.start:exc.value.span.end] == '0'


def test_evaluate_with_explicit_environment():
    env = Environment()
    evaluator = Evaluator(env)
    assert evaluator.evaluate_program(parse('x = 2\ny = x * 21')) is NULL
    assert env.get_variable('y') == 42


def test_arithmetic():
    assert run_program('1 + 2 * 3 - 4 / 2') == 5
    assert run_program('7 % 3') == 1
    assert run_program('-7 % 3') == -1
    assert run_program('2 ^ 10') == 1024
    assert run_program('2 ^ -1') == Decimal('0.5')
    assert run_program('-2 ^ 2') == -4
    assert run_program('0.1 + 0.2 == 0.3') is True


def test_precision_and_rounding_come_from_config():
    assert run_program('1 / 3', Config(precision=5)) == Decimal('0.33333')
    assert run_program('2 / 3', Config(precision=3)) == Decimal('0.667')


def test_string_concatenation_uses_display_forms():
    assert run_program('"a" + "b"') == 'ab'
    assert run_program('"n = " + 4.50') == 'n = 4.5'
    assert run_program('[1, "x"] + "!"') == "[1, 'x']!"
    assert run_program('true + "?"') == 'true?'
    assert run_program('"v: " + null') == 'v: null'


def test_list_concatenation():
    assert run_program('[1] + [2, 3]') == ListVal((Decimal(1), Decimal(2), Decimal(3)))


def test_add_other_pairings_name_both_operand_types():
    with pytest.raises(EvaluationError) as exc:
        run_program('true + 1')
    assert exc.value.message == "Cannot add boolean and number with '+'"
    assert exc.value.span == Span(0, 8)
    with pytest.raises(EvaluationError) as exc:
        run_program('1 + [2]')
    assert exc.value.message == "Cannot add number and list with '+'"
    with pytest.raises(EvaluationError) as exc:
        run_program('null + true')
    assert exc.value.message == "Cannot add null and boolean with '+'"


def test_arithmetic_requires_numbers():
    with pytest.raises(EvaluationError) as exc:
        run_program('"a" * 2')
    assert exc.value.message == "string value 'a' is not a number"
    with pytest.raises(EvaluationError) as exc:
        run_program('-"a"')
    assert 'is not a number' in exc.value.message


def test_relational_operators():
    assert run_program('1 < 2') is True
    assert run_program('2 <= 2') is True
    assert run_program('3 > 4') is False
    assert run_program('"apple" < "banana"') is True
    assert run_program('"b" >= "a"') is True


def test_relational_type_error_names_both_types():
    with pytest.raises(EvaluationError) as exc:
        run_program('1 < "2"')
    assert exc.value.message == "Cannot compare number and string with '<'"


def test_equality_is_structural():
    assert run_program('[1, [2, "x"]] == [1, [2, "x"]]') is True
    assert run_program('[1, 2] == [1, 2, 3]') is False
    assert run_program('1 == "1"') is False
    assert run_program('true == 1') is False
    assert run_program('null == null') is True
    assert run_program('1.50 == 1.5') is True
    assert run_program('1 != 2') is True


def test_logical_operators_short_circuit():
    assert run_program('false && undefined_thing') is False
    assert run_program('true || undefined_thing') is True
    assert run_program('true && !false') is True


def test_logical_operators_require_booleans():
    with pytest.raises(EvaluationError) as exc:
        run_program('true && 1')
    assert exc.value.message == 'number value 1 is not a boolean'
    with pytest.raises(EvaluationError):
        run_program('!0')


def test_undefined_variable():
    with pytest.raises(EvaluationError) as exc:
        run_program('x = 1\ny + x')
    assert exc.value.message == 'Undefined variable `y`'
    assert exc.value.span == Span(6, 7)


def test_program_value_is_last_statement():
    assert run_program('1\n2\n3') == 3
    assert run_program('x = 5') is NULL
    assert run_program('') is NULL
    assert run_program('fn f() { }') is NULL


def test_constants_are_bound():
    assert run_program('pi > 3.14159 && pi < 3.1416') is True
    assert run_program('e > 2.718 && e < 2.719') is True


def test_decimal_overflow_becomes_runtime_error():
    with pytest.raises(EvaluationError) as exc:
        run_program('10 ^ 10000000')
    assert exc.value.message == 'Numeric overflow'


def test_nested_parentheses_evaluate():
    assert run_program('(' * 200 + '1' + ')' * 200) == 1
    assert run_program('-' * 201 + '1') == -1


def test_modulo_of_large_exact_operands():
    assert run_program('10 ^ 70 % 3') == 1
    assert run_program('(2 ^ 200 + 5) % 2 ^ 200') == 5
