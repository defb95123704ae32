"""Stack-based virtual machine for Vernacular bytecode.

The machine runs one compiled fragment at a time against the session's
`Environment`. The operand stack starts empty for every fragment; the
environment is never reset, so variables and their declared types survive
from one fragment to the next.

Execution is not transactional. When an instruction fails, everything
executed before it has already taken effect.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from . import bytecode as bc
from .builtin_function import BUILTINS
from .environment import Environment
from .errors import fail
from .types import (
    cast_value, divide, is_number, to_text, type_of, values_equal,
)


ARITHMETIC = {
    bc.Add: lambda a, b: a + b,
    bc.Subtract: lambda a, b: a - b,
    bc.Multiply: lambda a, b: a * b,
    bc.Divide: divide,
}

ORDERING = {
    '<': lambda a, b: a < b,
    '>': lambda a, b: a > b,
    '<=': lambda a, b: a <= b,
    '>=': lambda a, b: a >= b,
}


def _no_debug(msg: str, level: int = 1):
    pass


class VirtualMachine:
    def __init__(self, env: Environment, debug: Optional[Callable[..., None]] = None):
        self.env = env
        self.stack: List[Any] = []
        self.debug = debug or _no_debug

    def push(self, value: Any):
        self.stack.append(value)

    def pop(self) -> Any:
        if not self.stack:
            raise fail('StackUnderflow', 'stack underflow')
        return self.stack.pop()

    def pop_operands(self, name: str, check: Callable[[Any], bool], expected: str):
        # the right operand was pushed last
        right = self.pop()
        left = self.pop()
        if not (check(left) and check(right)):
            raise fail('TypeMismatch', f"{name} expects {expected} operands, "
                                       f"got {type_of(left)} and {type_of(right)}")
        return left, right

    def execute(self, code: List[bc.OpCode]) -> None:
        self.stack = []
        ip = 0
        while ip < len(code):
            op = code[ip]
            self.debug(f"{ip:04d} {op!r} stack={self.stack!r}", 2)
            if isinstance(op, bc.Return):
                if op.with_value:
                    raise fail('Unimplemented', 'return values are not implemented')
                break
            target = self.step(op)
            ip = ip + 1 if target is None else target

    def step(self, op: bc.OpCode) -> Optional[int]:
        """Execute one instruction; returns the new instruction pointer for jumps."""
        if isinstance(op, bc.Push):
            self.push(op.value)
        elif isinstance(op, bc.Pop):
            self.pop()
        elif isinstance(op, bc.Duplicate):
            value = self.pop()
            self.push(value)
            self.push(value)
        elif isinstance(op, bc.LoadVar):
            self.push(self.env.get(op.name))
        elif isinstance(op, bc.StoreVar):
            self.env.set(op.name, self.pop())
        elif isinstance(op, bc.DeclareType):
            self.env.declare_type(op.name, op.type_spec)
        elif type(op) in ARITHMETIC:
            left, right = self.pop_operands(type(op).__name__, is_number, 'number')
            self.push(float(ARITHMETIC[type(op)](left, right)))
        elif isinstance(op, bc.Negate):
            value = self.pop()
            if not is_number(value):
                raise fail('TypeMismatch', f"Negate expects a number, got {type_of(value)}")
            self.push(-value)
        elif isinstance(op, bc.Compare):
            if op.op in ORDERING:
                left, right = self.pop_operands(op.op, is_number, 'number')
                self.push(ORDERING[op.op](left, right))
            else:
                right = self.pop()
                left = self.pop()
                equal = values_equal(left, right)
                self.push(equal if op.op == '==' else not equal)
        elif isinstance(op, bc.Jump):
            return op.target
        elif isinstance(op, bc.JumpIfFalse):
            condition = self.pop()
            if not isinstance(condition, bool):
                raise fail('TypeMismatch', f"condition must be Truth, got {type_of(condition)}")
            if not condition:
                return op.target
        elif isinstance(op, bc.Cast):
            self.push(cast_value(self.pop(), op.type_spec))
        elif isinstance(op, bc.Concat):
            left, right = self.pop_operands('Concat', lambda v: isinstance(v, str), 'Text')
            self.push(left + right)
        elif isinstance(op, bc.Interpolate):
            parts = [self.pop() for _ in range(op.count)]
            parts.reverse()
            self.push(''.join(to_text(part) for part in parts))
        elif isinstance(op, bc.Call):
            args = [self.pop() for _ in range(op.arg_count)]
            args.reverse()
            self.push(self.call_function(op.name, args))
        elif isinstance(op, bc.Show):
            print(to_text(self.pop()))
        elif isinstance(op, bc.NewObject):
            raise fail('Unimplemented', f"object creation is not implemented (new {op.class_name})")
        elif isinstance(op, bc.GetProperty):
            raise fail('Unimplemented', f"property access is not implemented (.{op.name})")
        elif isinstance(op, bc.SetProperty):
            raise fail('Unimplemented', f"property setting is not implemented (.{op.name})")
        else:
            raise fail('Unimplemented', f"unknown instruction {op!r}")
        return None

    def call_function(self, name: str, args: List[Any]) -> Any:
        builtin = BUILTINS.get(name)
        if builtin is None:
            raise fail('UnknownFunction', f'unknown function {name}')
        if len(args) != builtin.arity:
            raise fail('TypeMismatch', f'{name} expects {builtin.arity} argument(s), got {len(args)}')
        return builtin.fn(args)
