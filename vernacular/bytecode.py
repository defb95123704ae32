"""Bytecode instruction set for the Vernacular virtual machine.

A compiled fragment is a flat list of these instructions. Jump targets are
absolute indices into that list, fixed once by the generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .types import TypeSpec


@dataclass(frozen=True)
class OpCode:
    """Base class for all instructions."""
    pass


# Stack
@dataclass(frozen=True)
class Push(OpCode):
    value: Any


@dataclass(frozen=True)
class Pop(OpCode):
    pass


@dataclass(frozen=True)
class Duplicate(OpCode):
    pass


# Variables
@dataclass(frozen=True)
class LoadVar(OpCode):
    name: str


@dataclass(frozen=True)
class StoreVar(OpCode):
    name: str


@dataclass(frozen=True)
class DeclareType(OpCode):
    """Records the declared type of `name`; emitted right before its StoreVar."""
    name: str
    type_spec: TypeSpec


# Arithmetic
@dataclass(frozen=True)
class Add(OpCode):
    pass


@dataclass(frozen=True)
class Subtract(OpCode):
    pass


@dataclass(frozen=True)
class Multiply(OpCode):
    pass


@dataclass(frozen=True)
class Divide(OpCode):
    pass


@dataclass(frozen=True)
class Negate(OpCode):
    pass


@dataclass(frozen=True)
class Compare(OpCode):
    op: str  # == != < > <= >=


# Control flow
@dataclass(frozen=True)
class Jump(OpCode):
    target: int


@dataclass(frozen=True)
class JumpIfFalse(OpCode):
    """Pops the condition; jumps to `target` when it is false."""
    target: int


@dataclass(frozen=True)
class Return(OpCode):
    with_value: bool = False


# Values
@dataclass(frozen=True)
class Cast(OpCode):
    type_spec: TypeSpec


@dataclass(frozen=True)
class Concat(OpCode):
    pass


@dataclass(frozen=True)
class Interpolate(OpCode):
    count: int


@dataclass(frozen=True)
class Call(OpCode):
    name: str
    arg_count: int


@dataclass(frozen=True)
class Show(OpCode):
    pass


# Objects (recognized, not implemented)
@dataclass(frozen=True)
class NewObject(OpCode):
    class_name: str


@dataclass(frozen=True)
class GetProperty(OpCode):
    name: str


@dataclass(frozen=True)
class SetProperty(OpCode):
    name: str
