from decimal import Decimal

import pytest

from val import EvaluationError, run_program
from val.ast import Span
from val.values import ListVal


def nums(*values):
    return ListVal(tuple(Decimal(v) for v in values))


def test_list_literal_and_index():
    assert run_program('[10, 20, 30][1]') == 20
    assert run_program('l = [[1, 2], [3, 4]]\nl[1][0]') == 3
    assert run_program('[]') == ListVal()


def test_lists_may_mix_kinds():
    assert run_program('["a", true, null, [1]]')[3] == nums(1)


def test_index_out_of_bounds():
    source = 'l = [1, 2]\nl[2]'
    with pytest.raises(EvaluationError) as exc:
        run_program(source)
    assert exc.value.message == 'Index 2 out of bounds for list of length 2'
    assert source[exc.value.span.start:exc.value.span.end] == 'l[2]'


def test_negative_index_is_rejected():
    with pytest.raises(EvaluationError) as exc:
        run_program('[1, 2][-1]')
    assert exc.value.message == 'List index must be a non-negative finite number, got -1'


def test_fractional_index_is_rejected():
    with pytest.raises(EvaluationError) as exc:
        run_program('[1, 2][0.5]')
    assert exc.value.message == 'List index must be an integer, got 0.5'


def test_non_numeric_index_is_rejected():
    with pytest.raises(EvaluationError) as exc:
        run_program('[1, 2]["0"]')
    assert exc.value.message == "List index must be a non-negative finite number, got '0'"


def test_integral_decimal_index_is_accepted():
    assert run_program('[1, 2, 3][4 / 2]') == 3


def test_indexing_a_non_list():
    with pytest.raises(EvaluationError) as exc:
        run_program('x = 5\nx[0]')
    assert exc.value.message == 'number value 5 is not a list'
    assert exc.value.span == Span(6, 7)


def test_element_assignment_rebinds_variable():
    assert run_program('l = [1, 2, 3]\nl[1] = 20\nl') == nums(1, 20, 3)


def test_nested_element_assignment():
    source = 'g = [[1, 2], [3, 4]]\ng[1][0] = 30\ng'
    assert run_program(source) == ListVal((nums(1, 2), nums(30, 4)))


def test_assignment_does_not_affect_copies():
    source = 'a = [1, 2]\nb = a\nb[0] = 9\n[a, b]'
    assert run_program(source) == ListVal((nums(1, 2), nums(9, 2)))


def test_inner_list_is_copied_on_read():
    source = 'g = [[1, 2]]\nrow = g[0]\nrow[0] = 5\n[g, row]'
    assert run_program(source) == ListVal((ListVal((nums(1, 2),)), nums(5, 2)))


def test_element_assignment_out_of_bounds():
    with pytest.raises(EvaluationError) as exc:
        run_program('l = [1]\nl[1] = 2')
    assert exc.value.message == 'Index 1 out of bounds for list of length 1'


def test_element_assignment_to_undefined_variable():
    with pytest.raises(EvaluationError) as exc:
        run_program('a[0] = 1')
    assert exc.value.message == 'Undefined variable `a`'


def test_list_on_new_line_is_not_an_index():
    assert run_program('x = 1\n[x, 2]') == nums(1, 2)
