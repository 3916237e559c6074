"""Tokenizer for Val source text.

The token grammar is declared for `lark` and run through its basic lexer
only; the statement and expression grammar is parsed by hand in
`val.parser` so that syntax errors can be collected instead of aborting
at the first one. Any character the grammar does not recognise becomes an
`UNKNOWN` token, which the parser reports.
"""

from dataclasses import dataclass
from typing import List

from lark import Lark

from val.ast import Span


GRAMMAR = r"""
start: (NUMBER | STRING | NAME | OP | UNKNOWN)*

NUMBER: /\d+(\.\d+)?/
STRING: /"[^"]*"/ | /'[^']*'/
NAME: /[A-Za-z_][A-Za-z0-9_]*/
OP: /==|!=|<=|>=|&&|\|\||[-+*\/%^<>=!(){}\[\],;]/
UNKNOWN: /./s

COMMENT: /#[^\n]*/ | /\/\/[^\n]*/

%import common.WS
%ignore WS
%ignore COMMENT
"""

KEYWORDS = {
    'fn', 'if', 'else', 'while', 'loop', 'return', 'break', 'continue',
    'true', 'false', 'null',
}

_lark = Lark(GRAMMAR, parser='lalr', lexer='basic')


@dataclass
class Token:
    type: str
    value: str
    start: int
    end: int
    line_break_before: bool = False

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)


def tokenize(source: str) -> List[Token]:
    """Split `source` into tokens, ending with an `EOF` token."""
    tokens: List[Token] = []
    previous_end = 0
    for tok in _lark.lex(source):
        line_break = '\n' in source[previous_end:tok.start_pos]
        tokens.append(Token(tok.type, str(tok), tok.start_pos, tok.end_pos, line_break))
        previous_end = tok.end_pos
    tokens.append(Token('EOF', '', len(source), len(source), '\n' in source[previous_end:]))
    return tokens
