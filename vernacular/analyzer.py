"""Static declared-type checking for Vernacular.

The analyzer makes one pass over a fragment's statements with a flat table
of variable types, seeded from the declarations persisted by earlier
fragments. It only rejects what it can prove wrong: anything typed `Any`
passes, and whether a number is `Whole` or `Decimal` is left to the store
check at run time, so both numeric types are compatible here.

The table is thrown away after the pass; the environment's type mapping
stays the authoritative record.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ast import (
    Node, Block, LetStmt, Assign, IfStmt, WhileStmt, PrintStmt, ReturnStmt,
    ExprStmt, Literal, Ident, BinaryOp, UnaryOp, Cast, Interpolation, Call,
    NewObject, Member,
)
from .builtin_function import BUILTINS
from .errors import fail
from .types import TypeSpec, type_of


ARITHMETIC_OPS = ('+', '-', '*', '/')
ORDERING_OPS = ('<', '>', '<=', '>=')
EQUALITY_OPS = ('==', '!=')


def compatible(declared: TypeSpec, inferred: TypeSpec) -> bool:
    if declared.is_any or inferred.is_any:
        return True
    # storing nothing is exempt from the run-time check
    if inferred.kind == 'Nothing':
        return True
    if declared.is_numeric and inferred.is_numeric:
        return True
    return declared == inferred


class Analyzer:
    def __init__(self, known_types: Optional[Dict[str, TypeSpec]] = None):
        self.variables: Dict[str, TypeSpec] = dict(known_types or {})

    def analyze(self, statements: List[Node]) -> None:
        for statement in statements:
            self.check(statement)

    def check_assignable(self, name: str, declared: TypeSpec, inferred: TypeSpec):
        if not compatible(declared, inferred):
            raise fail('TypeError', f"cannot assign {inferred} to variable '{name}' of type {declared}")

    def check_operand(self, op: str, inferred: TypeSpec, expected: str):
        if inferred.is_any:
            return
        if expected == 'number' and inferred.is_numeric:
            return
        if expected == 'Text' and inferred.kind == 'Text':
            return
        raise fail('TypeError', f"operator '{op}' expects {expected} operands, got {inferred}")

    def check_condition(self, node: Node):
        inferred = self.infer(node)
        if not (inferred.is_any or inferred.kind == 'Truth'):
            raise fail('TypeError', f"condition must be Truth, got {inferred}")

    def check(self, node: Node):
        if isinstance(node, LetStmt):
            inferred = self.infer(node.expr) if node.expr is not None else TypeSpec.nothing()
            if node.type_spec is not None:
                self.check_assignable(node.name, node.type_spec, inferred)
                self.variables[node.name] = node.type_spec
                return
            declared = self.variables.get(node.name)
            if declared is not None:
                self.check_assignable(node.name, declared, inferred)
            else:
                self.variables[node.name] = TypeSpec.any()
            return
        if isinstance(node, Assign):
            inferred = self.infer(node.value)
            if isinstance(node.target, Ident):
                declared = self.variables.get(node.target.name)
                if declared is not None:
                    self.check_assignable(node.target.name, declared, inferred)
                else:
                    self.variables[node.target.name] = TypeSpec.any()
            else:
                self.infer(node.target)
            return
        if isinstance(node, IfStmt):
            self.check_condition(node.condition)
            self.check(node.then_block)
            if node.else_block is not None:
                self.check(node.else_block)
            return
        if isinstance(node, WhileStmt):
            self.check_condition(node.condition)
            self.check(node.body)
            return
        if isinstance(node, Block):
            for statement in node.statements:
                self.check(statement)
            return
        if isinstance(node, (PrintStmt, ExprStmt)):
            self.infer(node.expr)
            return
        if isinstance(node, ReturnStmt):
            if node.value is not None:
                self.infer(node.value)
            return
        raise fail('TypeError', f"cannot check node {type(node).__name__}")

    def infer(self, node: Node) -> TypeSpec:
        if isinstance(node, Literal):
            return type_of(node.value)
        if isinstance(node, Ident):
            return self.variables.get(node.name, TypeSpec.any())
        if isinstance(node, BinaryOp):
            left = self.infer(node.left)
            right = self.infer(node.right)
            if node.op in ARITHMETIC_OPS:
                self.check_operand(node.op, left, 'number')
                self.check_operand(node.op, right, 'number')
                if node.op != '/' and left.kind == 'Whole' and right.kind == 'Whole':
                    return TypeSpec.whole()
                return TypeSpec.decimal()
            if node.op == '++':
                self.check_operand(node.op, left, 'Text')
                self.check_operand(node.op, right, 'Text')
                return TypeSpec.text()
            if node.op in ORDERING_OPS:
                self.check_operand(node.op, left, 'number')
                self.check_operand(node.op, right, 'number')
            return TypeSpec.truth()
        if isinstance(node, UnaryOp):
            operand = self.infer(node.operand)
            self.check_operand(node.op, operand, 'number')
            return operand if operand.is_numeric else TypeSpec.decimal()
        if isinstance(node, Cast):
            self.infer(node.expr)
            return node.type_spec
        if isinstance(node, Interpolation):
            for part in node.parts:
                self.infer(part)
            return TypeSpec.text()
        if isinstance(node, Call):
            for arg in node.args:
                self.infer(arg)
            builtin = BUILTINS.get(node.name)
            if builtin is None:
                return TypeSpec.any()
            if len(node.args) != builtin.arity:
                raise fail('TypeError', f"{node.name} expects {builtin.arity} argument(s), got {len(node.args)}")
            return builtin.return_type
        if isinstance(node, NewObject):
            return TypeSpec.object()
        if isinstance(node, Member):
            self.infer(node.target)
            return TypeSpec.any()
        raise fail('TypeError', f"cannot infer a type for node {type(node).__name__}")
