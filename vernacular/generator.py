"""Lowers a checked Vernacular AST into a flat bytecode list.

Expressions are emitted in post-order, so operands are on the stack before
their operator runs. Conditionals and loops emit a `JumpIfFalse` with a
placeholder target, then the body, and finally patch the placeholder with
the absolute index that follows the body:

    if c { A } else { B }        while c { A }

    c                            start: c
    JumpIfFalse else             JumpIfFalse end
    A                            A
    Jump end                     Jump start
    else: B                      end:
    end:
"""

from __future__ import annotations

from typing import List

from . import bytecode as bc
from .ast import (
    Node, Block, LetStmt, Assign, IfStmt, WhileStmt, PrintStmt, ReturnStmt,
    ExprStmt, Literal, Ident, BinaryOp, UnaryOp, Cast, Interpolation, Call,
    NewObject, Member,
)
from .errors import fail
from .types import NOTHING


ARITHMETIC = {
    '+': bc.Add,
    '-': bc.Subtract,
    '*': bc.Multiply,
    '/': bc.Divide,
}
COMPARISONS = ('==', '!=', '<', '>', '<=', '>=')


class BytecodeGenerator:
    def __init__(self):
        self.code: List[bc.OpCode] = []

    def emit(self, op: bc.OpCode) -> int:
        self.code.append(op)
        return len(self.code) - 1

    def patch(self, index: int, target: int):
        placeholder = self.code[index]
        self.code[index] = type(placeholder)(target)

    def generate(self, statements: List[Node]) -> List[bc.OpCode]:
        for statement in statements:
            self.statement(statement)
        return self.code

    def statement(self, node: Node):
        if isinstance(node, LetStmt):
            if node.expr is not None:
                self.expression(node.expr)
            else:
                self.emit(bc.Push(NOTHING))
            if node.type_spec is not None:
                self.emit(bc.DeclareType(node.name, node.type_spec))
            self.emit(bc.StoreVar(node.name))
            return
        if isinstance(node, Assign):
            if isinstance(node.target, Ident):
                self.expression(node.value)
                self.emit(bc.StoreVar(node.target.name))
                return
            if isinstance(node.target, Member):
                self.expression(node.target.target)
                self.expression(node.value)
                self.emit(bc.SetProperty(node.target.name))
                return
            raise fail('GenError', f"cannot assign to {type(node.target).__name__}")
        if isinstance(node, IfStmt):
            self.expression(node.condition)
            jump_false = self.emit(bc.JumpIfFalse(-1))
            self.statement(node.then_block)
            if node.else_block is None:
                self.patch(jump_false, len(self.code))
                return
            jump_end = self.emit(bc.Jump(-1))
            self.patch(jump_false, len(self.code))
            self.statement(node.else_block)
            self.patch(jump_end, len(self.code))
            return
        if isinstance(node, WhileStmt):
            start = len(self.code)
            self.expression(node.condition)
            jump_false = self.emit(bc.JumpIfFalse(-1))
            self.statement(node.body)
            self.emit(bc.Jump(start))
            self.patch(jump_false, len(self.code))
            return
        if isinstance(node, Block):
            for statement in node.statements:
                self.statement(statement)
            return
        if isinstance(node, PrintStmt):
            self.expression(node.expr)
            self.emit(bc.Show())
            return
        if isinstance(node, ReturnStmt):
            if node.value is not None:
                self.expression(node.value)
            self.emit(bc.Return(node.value is not None))
            return
        if isinstance(node, ExprStmt):
            self.expression(node.expr)
            self.emit(bc.Pop())
            return
        raise fail('GenError', f"cannot generate code for statement {type(node).__name__}")

    def expression(self, node: Node):
        if isinstance(node, Literal):
            self.emit(bc.Push(node.value))
        elif isinstance(node, Ident):
            self.emit(bc.LoadVar(node.name))
        elif isinstance(node, BinaryOp):
            self.expression(node.left)
            self.expression(node.right)
            if node.op in ARITHMETIC:
                self.emit(ARITHMETIC[node.op]())
            elif node.op == '++':
                self.emit(bc.Concat())
            elif node.op in COMPARISONS:
                self.emit(bc.Compare(node.op))
            else:
                raise fail('GenError', f"unknown operator {node.op!r}")
        elif isinstance(node, UnaryOp):
            self.expression(node.operand)
            self.emit(bc.Negate())
        elif isinstance(node, Cast):
            self.expression(node.expr)
            self.emit(bc.Cast(node.type_spec))
        elif isinstance(node, Interpolation):
            for part in node.parts:
                self.expression(part)
            self.emit(bc.Interpolate(len(node.parts)))
        elif isinstance(node, Call):
            for arg in node.args:
                self.expression(arg)
            self.emit(bc.Call(node.name, len(node.args)))
        elif isinstance(node, NewObject):
            self.emit(bc.NewObject(node.class_name))
        elif isinstance(node, Member):
            self.expression(node.target)
            self.emit(bc.GetProperty(node.name))
        else:
            raise fail('GenError', f"cannot generate code for expression {type(node).__name__}")
