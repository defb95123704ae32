"""Recursive-descent parser for the Vernacular language.

The parser consumes the token list produced by the tokenizer and returns
the top-level statements of a fragment as a list of AST nodes. There is
one method per grammar rule; operator precedence is encoded by the call
chain (comparison < concatenation < additive < multiplicative < unary <
cast < member access).

Statements end at a NEWLINE or `;` token, at a closing `}` or at the end
of input. Anything else following a complete statement is an error, so
`let x = 5 6` is rejected instead of being read as two statements.

String literals containing `{...}` segments become `Interpolation` nodes.
Every embedded segment is tokenized with the same tokenizer and parsed as
a standalone expression.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from lark import Token

from .ast import (
    Node, Block, LetStmt, Assign, IfStmt, WhileStmt, PrintStmt, ReturnStmt,
    ExprStmt, Literal, Ident, BinaryOp, UnaryOp, Cast, Interpolation, Call,
    NewObject, Member,
)
from .errors import fail, VernacularError
from .tokenizer import Tokenizer, describe
from .types import TypeSpec, NOTHING, PARAMETRIC_KINDS, SIMPLE_KINDS


ESCAPES = {'n': '\n', 't': '\t', '"': '"', '\\': '\\', '{': '{', '}': '}'}

COMPARISON_OPS = ('EQ', 'NE', 'LT', 'GT', 'LE', 'GE')
STATEMENT_END = ('NEWLINE', 'SEMI')


def closing_brace(body: str, start: int) -> int:
    """Index of the '}' ending the segment opened before `start`, or -1.

    String literals inside the segment are skipped, so their braces and
    quotes do not end it.
    """
    quoted = False
    i = start
    while i < len(body):
        c = body[i]
        if quoted:
            if c == '\\':
                i += 1
            elif c == '"':
                quoted = False
        elif c == '"':
            quoted = True
        elif c == '}':
            return i
        i += 1
    return -1


def split_interpolation(body: str, where: str) -> List[Tuple[str, str]]:
    """Split the body of a string literal into text and expression segments.

    Returns a list of ('text', value) and ('expr', source) pairs in source
    order. Escapes are resolved in text segments.
    """
    segments: List[Tuple[str, str]] = []
    buf: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == '\\' and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt not in ESCAPES:
                raise fail('ParseError', f"unknown escape '\\{nxt}' in string at {where}")
            buf.append(ESCAPES[nxt])
            i += 2
            continue
        if c == '{':
            end = closing_brace(body, i + 1)
            if end == -1:
                raise fail('ParseError', f"unterminated interpolation in string at {where}")
            source = body[i + 1:end]
            if not source.strip():
                raise fail('ParseError', f"empty interpolation in string at {where}")
            if buf:
                segments.append(('text', ''.join(buf)))
                buf = []
            segments.append(('expr', source))
            i = end + 1
            continue
        if c == '}':
            raise fail('ParseError', f"unmatched '}}' in string at {where}")
        buf.append(c)
        i += 1
    if buf:
        segments.append(('text', ''.join(buf)))
    return segments


class Parser:
    def __init__(self, tokens: List[Token], tokenizer: Optional[Tokenizer] = None):
        self.tokens = tokens
        self.pos = 0
        self.tokenizer = tokenizer

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def match(self, *types: str) -> bool:
        token = self.peek()
        return token is not None and token.type in types

    def error(self, expected: str) -> VernacularError:
        token = self.peek()
        found = 'end of input' if token is None else describe(token)
        return fail('ParseError', f"expected {expected}, found {found}")

    def consume(self, type_: str, expected: Optional[str] = None) -> Token:
        if not self.match(type_):
            raise self.error(expected or type_)
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse(self) -> List[Node]:
        return self.parse_statements(None)

    def skip_separators(self):
        while self.match(*STATEMENT_END):
            self.pos += 1

    def parse_statements(self, closing: Optional[str]) -> List[Node]:
        statements: List[Node] = []
        self.skip_separators()
        while self.peek() is not None and not (closing and self.match(closing)):
            statements.append(self.parse_statement())
            if self.peek() is None or (closing and self.match(closing)):
                break
            if not self.match(*STATEMENT_END):
                raise self.error('end of statement')
            self.skip_separators()
        return statements

    def parse_block(self) -> Block:
        self.consume('LBRACE', "'{'")
        statements = self.parse_statements('RBRACE')
        self.consume('RBRACE', "'}'")
        return Block(statements)

    def parse_statement(self) -> Node:
        if self.match('LET'):
            return self.parse_let()
        if self.match('IF'):
            return self.parse_if()
        if self.match('WHILE'):
            return self.parse_while()
        if self.match('PRINT'):
            self.consume('PRINT')
            return PrintStmt(self.parse_expression())
        if self.match('RETURN'):
            return self.parse_return()
        expr = self.parse_expression()
        if self.match('ASSIGN'):
            self.consume('ASSIGN')
            return Assign(expr, self.parse_expression())
        return ExprStmt(expr)

    def parse_let(self) -> LetStmt:
        self.consume('LET')
        name = self.consume('NAME', 'variable name').value
        type_spec: Optional[TypeSpec] = None
        if self.match('COLON'):
            self.consume('COLON')
            type_spec = self.parse_type()
        expr: Optional[Node] = None
        if self.match('ASSIGN'):
            self.consume('ASSIGN')
            expr = self.parse_expression()
        return LetStmt(name, type_spec, expr)

    def parse_if(self) -> IfStmt:
        self.consume('IF')
        condition = self.parse_expression()
        then_block = self.parse_block()
        else_block: Optional[Block] = None
        # allow `else` on the line after the closing brace
        ahead = self.pos
        while ahead < len(self.tokens) and self.tokens[ahead].type == 'NEWLINE':
            ahead += 1
        if ahead < len(self.tokens) and self.tokens[ahead].type == 'ELSE':
            self.pos = ahead + 1
            if self.match('IF'):
                else_block = Block([self.parse_if()])
            else:
                else_block = self.parse_block()
        return IfStmt(condition, then_block, else_block)

    def parse_while(self) -> WhileStmt:
        self.consume('WHILE')
        condition = self.parse_expression()
        body = self.parse_block()
        return WhileStmt(condition, body)

    def parse_return(self) -> ReturnStmt:
        self.consume('RETURN')
        if self.peek() is None or self.match('NEWLINE', 'SEMI', 'RBRACE'):
            return ReturnStmt(None)
        return ReturnStmt(self.parse_expression())

    def parse_type(self) -> TypeSpec:
        token = self.consume('NAME', 'type name')
        kind = token.value
        if kind in SIMPLE_KINDS:
            if self.match('LT'):
                raise fail('ParseError', f"type {kind} takes no type arguments at {token.line}:{token.column}")
            return TypeSpec(kind)
        if kind not in PARAMETRIC_KINDS:
            raise fail('ParseError', f"unknown type {kind} at {token.line}:{token.column}")
        self.consume('LT', f"'<' after {kind}")
        args = [self.parse_type()]
        while self.match('COMMA'):
            self.consume('COMMA')
            args.append(self.parse_type())
        self.consume('GT', "'>'")
        if len(args) != PARAMETRIC_KINDS[kind]:
            raise fail('ParseError', f"type {kind} takes {PARAMETRIC_KINDS[kind]} type argument(s), "
                                     f"got {len(args)} at {token.line}:{token.column}")
        return TypeSpec(kind, tuple(args))

    # Expressions
    def parse_expression(self) -> Node:
        left = self.parse_concat()
        if self.match(*COMPARISON_OPS):
            op = self.tokens[self.pos].value
            self.pos += 1
            right = self.parse_concat()
            return BinaryOp(op, left, right)
        return left

    def parse_concat(self) -> Node:
        node = self.parse_additive()
        while self.match('CONCAT'):
            self.consume('CONCAT')
            node = BinaryOp('++', node, self.parse_additive())
        return node

    def parse_additive(self) -> Node:
        node = self.parse_term()
        while self.match('PLUS', 'MINUS'):
            op = self.tokens[self.pos].value
            self.pos += 1
            node = BinaryOp(op, node, self.parse_term())
        return node

    def parse_term(self) -> Node:
        node = self.parse_unary()
        while self.match('STAR', 'SLASH'):
            op = self.tokens[self.pos].value
            self.pos += 1
            node = BinaryOp(op, node, self.parse_unary())
        return node

    def parse_unary(self) -> Node:
        if self.match('MINUS'):
            self.consume('MINUS')
            return UnaryOp('-', self.parse_unary())
        return self.parse_cast()

    def parse_cast(self) -> Node:
        node = self.parse_postfix()
        while self.match('AS'):
            self.consume('AS')
            node = Cast(node, self.parse_type())
        return node

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while self.match('DOT'):
            self.consume('DOT')
            name = self.consume('NAME', 'property name').value
            node = Member(node, name)
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error('expression')
        if token.type == 'NUMBER':
            self.pos += 1
            return Literal(float(token.value))
        if token.type == 'STRING':
            self.pos += 1
            return self.parse_string(token)
        if token.type in ('TRUE', 'FALSE'):
            self.pos += 1
            return Literal(token.type == 'TRUE')
        if token.type == 'NOTHING':
            self.pos += 1
            return Literal(NOTHING)
        if token.type == 'NEW':
            self.pos += 1
            class_name = self.consume('NAME', 'class name').value
            self.consume('LPAR', "'('")
            self.consume('RPAR', "')'")
            return NewObject(class_name)
        if token.type == 'NAME':
            self.pos += 1
            if self.match('LPAR'):
                return Call(token.value, self.parse_arguments())
            return Ident(token.value)
        if token.type == 'LPAR':
            self.consume('LPAR')
            expr = self.parse_expression()
            self.consume('RPAR', "')'")
            return expr
        raise self.error('expression')

    def parse_arguments(self) -> List[Node]:
        self.consume('LPAR')
        args: List[Node] = []
        if not self.match('RPAR'):
            args.append(self.parse_expression())
            while self.match('COMMA'):
                self.consume('COMMA')
                args.append(self.parse_expression())
        self.consume('RPAR', "')' or ','")
        return args

    def parse_string(self, token: Token) -> Node:
        where = f"{token.line}:{token.column}"
        segments = split_interpolation(token.value[1:-1], where)
        if all(kind == 'text' for kind, _ in segments):
            return Literal(''.join(value for _, value in segments))
        if self.tokenizer is None:
            self.tokenizer = Tokenizer()
        parts: List[Node] = []
        for kind, value in segments:
            if kind == 'text':
                parts.append(Literal(value))
                continue
            sub = Parser(self.tokenizer.tokenize(value), self.tokenizer)
            parts.append(sub.parse_expression())
            if sub.peek() is not None:
                raise sub.error(f"end of interpolated expression in string at {where}")
        return Interpolation(parts)
