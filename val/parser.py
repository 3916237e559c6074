"""Parser for the Val language.

Source text is tokenized by `val.lexer` and parsed by a recursive-descent
`Parser`. Expression precedence, lowest first:

    ||   &&   == !=   < <= > >=   + -   * / %   unary - !   ^   postfix [ ]

`^` is right-associative and binds tighter than unary minus, so `-2 ^ 2`
is `-(2 ^ 2)`; its right operand may itself carry a sign (`2 ^ -1`).

The parser never stops at the first problem. Each syntax error is
recorded, the parser skips to the next statement boundary and carries on,
and `parse` raises `ParseErrors` with the full list once the input is
consumed. Newlines are ordinary whitespace, except that a `[` at the start
of a line opens a list literal rather than indexing the line before it;
`;` may separate statements. Expressions or blocks nested more than
`MAX_NESTING` levels deep are reported instead of parsed.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Span, Node, Program, Assign, Block, BreakStmt, ContinueStmt, ExprStmt,
    FuncDecl, IfStmt, LoopStmt, ReturnStmt, WhileStmt, BinaryOp, UnaryOp,
    BooleanLit, NumberLit, StringLit, NullLit, Ident, Call, ListLit, Index,
    recursion_headroom,
)
from .errors import ParseError, ParseErrors
from .lexer import KEYWORDS, Token, tokenize


class _Abort(Exception):
    """Unwinds the current statement after an error has been recorded."""


STATEMENT_KEYWORDS = {'fn', 'if', 'while', 'loop', 'return', 'break', 'continue'}

# Nested expressions and blocks accepted before parsing gives up on a statement.
MAX_NESTING = 256


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.errors: List[ParseError] = []

    # Token helpers

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def at_end(self) -> bool:
        return self.peek().type == 'EOF'

    def match(self, expected: Union[str, List[str]]) -> bool:
        token = self.peek()
        if token.type not in ('OP', 'NAME'):
            return False
        if isinstance(expected, list):
            return token.value in expected
        return token.value == expected

    def advance(self) -> Token:
        token = self.peek()
        if token.type != 'EOF':
            self.pos += 1
        return token

    def consume(self, expected: str, context: str) -> Token:
        if self.match(expected):
            return self.advance()
        self.fail(f"expected '{expected}' {context}, found {self.describe(self.peek())}")

    @staticmethod
    def describe(token: Token) -> str:
        if token.type == 'EOF':
            return 'end of input'
        return f"'{token.value}'"

    def fail(self, message: str, span: Optional[Span] = None):
        token = self.peek()
        if span is None:
            span = token.span
        if token.type == 'UNKNOWN' and span == token.span:
            if token.value in ('"', "'"):
                message = 'unterminated string literal'
            else:
                message = f"unexpected character '{token.value}'"
        self.errors.append(ParseError(span, message))
        raise _Abort()

    def enter(self, what: str):
        if self.depth >= MAX_NESTING:
            self.fail(f"{what} nested too deeply")
        self.depth += 1

    def synchronize(self, in_block: bool):
        """Skip tokens up to the next plausible statement start."""
        start = self.pos
        while not self.at_end():
            if self.match(';'):
                self.advance()
                return
            if self.match('}'):
                if in_block:
                    return
                self.advance()
                return
            if self.pos > start and self.peek().type == 'NAME' and self.peek().value in STATEMENT_KEYWORDS:
                return
            self.advance()

    # Statements

    def parse_program(self) -> Program:
        statements = self.parse_statements(in_block=False)
        end = self.peek().end
        return Program(Span(0, end), statements)

    def parse_statements(self, in_block: bool) -> List[Node]:
        statements: List[Node] = []
        while not self.at_end():
            if in_block and self.match('}'):
                break
            if self.match(';'):
                self.advance()
                continue
            start = self.pos
            try:
                statements.append(self.parse_statement())
            except _Abort:
                self.synchronize(in_block)
                if self.pos == start:
                    self.advance()
        return statements

    def parse_block(self, context: str) -> Block:
        open_token = self.consume('{', context)
        self.enter('blocks')
        try:
            statements = self.parse_statements(in_block=True)
        finally:
            self.depth -= 1
        if not self.match('}'):
            self.errors.append(ParseError(
                self.peek().span, f"expected '}}' to close block, found {self.describe(self.peek())}"))
            raise _Abort()
        close_token = self.advance()
        return Block(Span(open_token.start, close_token.end), statements)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'NAME':
            if token.value == 'fn':
                return self.parse_func_decl()
            if token.value == 'if':
                return self.parse_if_stmt()
            if token.value == 'while':
                return self.parse_while_stmt()
            if token.value == 'loop':
                keyword = self.advance()
                body = self.parse_block("after 'loop'")
                return LoopStmt(Span(keyword.start, body.span.end), body.statements)
            if token.value == 'return':
                return self.parse_return_stmt()
            if token.value == 'break':
                return BreakStmt(self.advance().span)
            if token.value == 'continue':
                return ContinueStmt(self.advance().span)
        if self.match('{'):
            return self.parse_block('to open block')
        expr = self.parse_expression()
        if self.match('='):
            self.advance()
            value = self.parse_expression()
            return Assign(expr.span.merge(value.span), expr, value)
        return ExprStmt(expr.span, expr)

    def parse_func_decl(self) -> FuncDecl:
        keyword = self.advance()
        name = self.peek()
        if name.type != 'NAME' or name.value in KEYWORDS:
            self.fail(f"expected function name after 'fn', found {self.describe(name)}")
        self.advance()
        self.consume('(', f"after function name '{name.value}'")
        params: List[str] = []
        while not self.match(')'):
            param = self.peek()
            if param.type != 'NAME' or param.value in KEYWORDS:
                self.fail(f"expected parameter name, found {self.describe(param)}")
            params.append(self.advance().value)
            if not self.match(','):
                break
            self.advance()
        self.consume(')', 'to close parameter list')
        body = self.parse_block(f"to open body of function '{name.value}'")
        return FuncDecl(Span(keyword.start, body.span.end), name.value, params, body.statements)

    def parse_condition(self, keyword: str) -> Node:
        self.consume('(', f"after '{keyword}'")
        condition = self.parse_expression()
        self.consume(')', f"to close '{keyword}' condition")
        return condition

    def parse_if_stmt(self) -> IfStmt:
        keyword = self.advance()
        condition = self.parse_condition('if')
        then_block = self.parse_block("after 'if' condition")
        end = then_block.span.end
        else_branch: Optional[List[Node]] = None
        if self.match('else'):
            self.advance()
            if self.match('if'):
                nested = self.parse_if_stmt()
                else_branch = [nested]
                end = nested.span.end
            else:
                else_block = self.parse_block("after 'else'")
                else_branch = else_block.statements
                end = else_block.span.end
        return IfStmt(Span(keyword.start, end), condition, then_block.statements, else_branch)

    def parse_while_stmt(self) -> WhileStmt:
        keyword = self.advance()
        condition = self.parse_condition('while')
        body = self.parse_block("after 'while' condition")
        return WhileStmt(Span(keyword.start, body.span.end), condition, body.statements)

    def parse_return_stmt(self) -> ReturnStmt:
        keyword = self.advance()
        if self.at_end() or self.match(['}', ';']):
            return ReturnStmt(keyword.span, None)
        value = self.parse_expression()
        return ReturnStmt(Span(keyword.start, value.span.end), value)

    # Expressions

    def parse_expression(self) -> Node:
        self.enter('expression')
        try:
            return self.parse_logic_or()
        finally:
            self.depth -= 1

    def _binary(self, operators: List[str], operand) -> Node:
        node = operand()
        while self.match(operators):
            op_token = self.advance()
            right = operand()
            node = BinaryOp(node.span.merge(right.span), op_token.value, node, right)
        return node

    def parse_logic_or(self) -> Node:
        return self._binary(['||'], self.parse_logic_and)

    def parse_logic_and(self) -> Node:
        return self._binary(['&&'], self.parse_equality)

    def parse_equality(self) -> Node:
        return self._binary(['==', '!='], self.parse_comparison)

    def parse_comparison(self) -> Node:
        return self._binary(['<', '<=', '>', '>='], self.parse_term)

    def parse_term(self) -> Node:
        return self._binary(['+', '-'], self.parse_factor)

    def parse_factor(self) -> Node:
        return self._binary(['*', '/', '%'], self.parse_unary)

    def parse_unary(self) -> Node:
        if self.match(['!', '-']):
            op_token = self.advance()
            self.enter('expression')
            try:
                operand = self.parse_unary()
            finally:
                self.depth -= 1
            return UnaryOp(Span(op_token.start, operand.span.end), op_token.value, operand)
        return self.parse_power()

    def parse_power(self) -> Node:
        base = self.parse_postfix()
        if self.match('^'):
            op_token = self.advance()
            exponent = self.parse_unary()
            return BinaryOp(base.span.merge(exponent.span), op_token.value, base, exponent)
        return base

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        # a `[` starting a new line begins a list literal, not an index
        while self.match('[') and not self.peek().line_break_before:
            self.advance()
            index_expr = self.parse_expression()
            close = self.consume(']', 'to close list index')
            node = Index(Span(node.span.start, close.end), node, index_expr)
        return node

    def parse_arguments(self, closing: str) -> List[Node]:
        items: List[Node] = []
        while not self.match(closing):
            items.append(self.parse_expression())
            if not self.match(','):
                break
            self.advance()
        return items

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == 'NUMBER':
            self.advance()
            return NumberLit(token.span, token.value)
        if token.type == 'STRING':
            self.advance()
            return StringLit(token.span, token.value[1:-1])
        if token.type == 'NAME':
            if token.value in ('true', 'false'):
                self.advance()
                return BooleanLit(token.span, token.value == 'true')
            if token.value == 'null':
                self.advance()
                return NullLit(token.span)
            if token.value in KEYWORDS:
                self.fail(f"unexpected keyword '{token.value}' in expression")
            self.advance()
            if self.match('('):
                self.advance()
                args = self.parse_arguments(')')
                close = self.consume(')', f"to close call to '{token.value}'")
                return Call(Span(token.start, close.end), token.value, args)
            return Ident(token.span, token.value)
        if self.match('('):
            self.advance()
            inner = self.parse_expression()
            self.consume(')', 'to close parenthesized expression')
            return inner
        if self.match('['):
            open_token = self.advance()
            items = self.parse_arguments(']')
            close = self.consume(']', 'to close list literal')
            return ListLit(Span(open_token.start, close.end), items)
        self.fail(f"expected expression, found {self.describe(token)}")


def parse(source: str) -> Program:
    """Parse Val source text into a `Program`.

    Raises `ParseErrors` carrying every syntax error found.
    """
    parser = Parser(tokenize(source))
    try:
        with recursion_headroom():
            program = parser.parse_program()
    except RecursionError:
        parser.errors.append(ParseError(parser.peek().span, 'expression nested too deeply'))
        raise ParseErrors(parser.errors) from None
    if parser.errors:
        raise ParseErrors(parser.errors)
    return program
