import json

import pytest

from val.ast import Span, NumberLit
from val.ast_json import ast_to_tree, dumps
from val.parser import parse


def kinds(tree):
    return [tree['kind']] + [k for child in tree['children'] for k in kinds(child)]


def test_tree_shape_of_assignment():
    tree = ast_to_tree(parse('x = 1 + 2'))
    assert tree == {
        'kind': 'statements',
        'range': {'start': 0, 'end': 9},
        'children': [{
            'kind': 'assignment',
            'range': {'start': 0, 'end': 9},
            'children': [
                {'kind': 'identifier', 'range': {'start': 0, 'end': 1}, 'children': []},
                {'kind': 'binary_op', 'range': {'start': 4, 'end': 9}, 'children': [
                    {'kind': 'number', 'range': {'start': 4, 'end': 5}, 'children': []},
                    {'kind': 'number', 'range': {'start': 8, 'end': 9}, 'children': []},
                ]},
            ],
        }],
    }


def test_every_statement_kind_is_exported():
    source = '''
        fn f(a) { return a[0] }
        loop { break }
        while (true) { continue }
        if (!false) { f([1]) } else { "s" }
        null
        { }
    '''
    found = set(kinds(ast_to_tree(parse(source))))
    assert found == {
        'statements', 'function', 'return', 'list_access', 'identifier', 'number',
        'loop', 'break', 'while', 'boolean', 'continue', 'if', 'unary_op',
        'expression', 'function_call', 'list', 'string', 'null', 'block',
    }


def test_if_children_are_condition_then_branches():
    tree = ast_to_tree(parse('if (true) { 1 } else { 2; 3 }'))
    if_node = tree['children'][0]
    assert [child['kind'] for child in if_node['children']] == ['boolean', 'expression', 'expression', 'expression']


def test_dumps_is_json():
    text = dumps(parse('"héllo"'))
    assert json.loads(text)['children'][0]['kind'] == 'expression'
    assert 'héllo' not in text  # string values are not exported
    assert text.startswith('{\n  "kind": "statements"')


def test_unknown_node_type_is_rejected():
    class Strange(NumberLit):
        pass
    with pytest.raises(TypeError):
        ast_to_tree(Strange(Span(0, 1), '1'))
