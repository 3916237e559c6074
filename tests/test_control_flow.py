from decimal import Decimal

import pytest

from val import EvaluationError, run_program
from val.values import NULL


def test_break_outside_loop_is_an_error():
    with pytest.raises(EvaluationError) as exc:
        run_program('break')
    assert exc.value.message == "Cannot use 'break' outside of a loop"


def test_continue_outside_loop_is_an_error():
    with pytest.raises(EvaluationError) as exc:
        run_program('if (true) { continue }')
    assert exc.value.message == "Cannot use 'continue' outside of a loop"


def test_break_in_function_called_from_loop_is_an_error():
    source = 'fn stop() { break }\nwhile (true) { stop() }'
    with pytest.raises(EvaluationError) as exc:
        run_program(source)
    assert "outside of a loop" in exc.value.message
    assert source[exc.value.span.start:exc.value.span.end] == 'break'


def test_return_outside_function_is_an_error():
    with pytest.raises(EvaluationError) as exc:
        run_program('while (true) { return 1 }')
    assert exc.value.message == 'Cannot return outside of a function'


def test_loop_inside_function_can_use_break():
    source = '''
        fn first_over(limit) {
            i = 0
            loop {
                i = i + 1
                if (i * i > limit) { break }
            }
            return i
        }
        first_over(50)
    '''
    assert run_program(source) == 8


def test_return_unwinds_nested_loops():
    source = '''
        fn find(target) {
            i = 0
            while (true) {
                j = 0
                while (j < 10) {
                    if (i * 10 + j == target) { return [i, j] }
                    j = j + 1
                }
                i = i + 1
            }
        }
        find(42)
    '''
    result = run_program(source)
    assert list(result) == [4, 2]


def test_break_only_leaves_innermost_loop():
    source = '''
        count = 0
        i = 0
        while (i < 3) {
            loop { count = count + 1; break }
            i = i + 1
        }
        count
    '''
    assert run_program(source) == 3


def test_continue_skips_rest_of_iteration():
    source = '''
        i = 0
        evens = 0
        while (i < 10) {
            i = i + 1
            if (i % 2 == 1) { continue }
            evens = evens + 1
        }
        evens
    '''
    assert run_program(source) == 5


def test_loop_flag_is_restored_after_nested_loop():
    source = '''
        total = 0
        while (total < 1) {
            while (false) { }
            total = total + 1
            break
        }
        total
    '''
    assert run_program(source) == 1


def test_function_without_return_yields_null():
    assert run_program('fn f() { 1 + 1 }\nf()') is NULL


def test_bare_return_yields_null():
    assert run_program('fn f() { return }\nf()') is NULL


def test_if_and_loop_values():
    assert run_program('if (1 < 2) { "yes" } else { "no" }') == 'yes'
    assert run_program('if (false) { 1 }') is NULL
    assert run_program('i = 0\nwhile (i < 3) { i = i + 1 }') is NULL
    assert run_program('i = 0\nwhile (i < 3) { i = i + 1; i }') == Decimal(3)


def test_conditions_must_be_boolean():
    with pytest.raises(EvaluationError) as exc:
        run_program('if (1) { 2 }')
    assert exc.value.message == 'number value 1 is not a boolean'


def test_recursion_limit():
    with pytest.raises(EvaluationError) as exc:
        run_program('fn down(n) { return down(n + 1) }\ndown(0)')
    assert exc.value.message == 'Recursion limit exceeded'


def test_recursion_to_a_thousand_levels():
    source = 'fn c(n) { if (n == 0) { return 0 } return 1 + c(n - 1) }\nc(1000)'
    assert run_program(source) == 1000


def test_factorial():
    source = 'fn f(x) { if (x <= 1) { return 1 } else { return x * f(x - 1) } } f(5)'
    assert run_program(source) == 120
