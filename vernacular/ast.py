"""Abstract Syntax Tree (AST) definitions for the Vernacular language.

The parser produces a list of statement nodes; the analyzer and the bytecode
generator walk them read-only. Each node corresponds to one construct of the
surface syntax.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Any

from .types import TypeSpec


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class LetStmt(Node):
    name: str
    type_spec: Optional[TypeSpec]  # None for an untyped declaration
    expr: Optional[Node]  # initial value


@dataclass
class Assign(Node):
    target: Node  # Ident or Member; anything else is rejected by the generator
    value: Node


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass
class PrintStmt(Node):
    expr: Node


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class Literal(Node):
    value: Any  # float, str, bool or NOTHING


@dataclass
class Ident(Node):
    name: str


@dataclass
class BinaryOp(Node):
    op: str  # + - * / ++ == != < > <= >=
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class Cast(Node):
    expr: Node
    type_spec: TypeSpec


@dataclass
class Interpolation(Node):
    parts: List[Node]  # in source order


@dataclass
class Call(Node):
    name: str
    args: List[Node]


@dataclass
class NewObject(Node):
    class_name: str


@dataclass
class Member(Node):
    target: Node
    name: str
