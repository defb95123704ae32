"""Tokenizer for the Vernacular language.

Lexing is delegated to a Lark lexer built from the terminal definitions in
`VERNACULAR_TERMINALS`. Keywords are declared as string terminals; Lark
resolves a name that spells a keyword to the keyword's terminal, so `let`
becomes a LET token while `letter` stays a NAME. Newlines are significant
(they terminate statements) and are emitted as NEWLINE tokens; inline
whitespace and comments are dropped.

Line continuations are not the tokenizer's business: `preprocess` joins
physical lines ending in a backslash before the text gets here.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from .errors import fail


VERNACULAR_TERMINALS = r"""
    start: (NAME | NUMBER | STRING | NEWLINE | keyword | operator | punct)*

    keyword: LET | IF | ELSE | WHILE | PRINT | RETURN | NEW | AS
           | TRUE | FALSE | NOTHING
    operator: PLUS | MINUS | STAR | SLASH | CONCAT
            | EQ | NE | LE | GE | LT | GT | ASSIGN
    punct: LPAR | RPAR | LBRACE | RBRACE | COLON | COMMA | DOT | SEMI

    LET: "let"
    IF: "if"
    ELSE: "else"
    WHILE: "while"
    PRINT: "print"
    RETURN: "return"
    NEW: "new"
    AS: "as"
    TRUE: "true"
    FALSE: "false"
    NOTHING: "nothing"

    CONCAT: "++"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    EQ: "=="
    NE: "!="
    LE: "<="
    GE: ">="
    LT: "<"
    GT: ">"
    ASSIGN: "="

    LPAR: "("
    RPAR: ")"
    LBRACE: "{"
    RBRACE: "}"
    COLON: ":"
    COMMA: ","
    DOT: "."
    SEMI: ";"

    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /\d+(\.\d+)?/
    // a {...} segment may hold string literals of its own
    STRING: /"(\\.|\{([^{}"\n]|"(\\.|[^"\\\n])*")*\}|[^"\\\n])*"/
    NEWLINE: /\r?\n/

    WS: /[ \t\f\r]+/
    COMMENT: /(#|\/\/)[^\n]*/
    %ignore WS
    %ignore COMMENT
"""


def preprocess(source: str) -> str:
    """Join continuation lines into one logical text blob.

    A physical line whose right-trimmed form ends in a backslash loses the
    backslash and is joined to the next line with a single space. Every
    other line keeps a trailing newline, except the last one.
    """
    lines = source.splitlines()
    result: List[str] = []
    for i, line in enumerate(lines):
        trimmed = line.rstrip()
        if trimmed.endswith('\\'):
            result.append(trimmed[:-1])
            result.append(' ')
        else:
            result.append(trimmed)
            if i + 1 < len(lines):
                result.append('\n')
    return ''.join(result)


class Tokenizer:
    """Turns source text into a list of Lark tokens.

    One instance is built per session and reused for every fragment (and for
    the expressions embedded in interpolated strings), since compiling the
    lexer is the expensive part.
    """
    def __init__(self):
        self.lark = Lark(VERNACULAR_TERMINALS, parser='lalr', lexer='basic')

    def tokenize(self, source: str) -> List[Token]:
        try:
            return list(self.lark.lex(source))
        except UnexpectedCharacters as e:
            raise fail('LexError', f"unexpected character {e.char!r} at {e.line}:{e.column}")


def describe(token: Token) -> str:
    """Short human-readable description of a token for error messages."""
    if token.type == 'NEWLINE':
        return f"NEWLINE at {token.line}:{token.column}"
    return f"{token.type} {token.value!r} at {token.line}:{token.column}"
