"""Type definitions and runtime values for Vernacular.

Two closed models live here. `TypeSpec` is the static type attached to
declarations and casts; it is what the analyzer reasons about and what the
environment enforces on every store. Runtime values are plain Python
objects: numbers are floats, text is `str`, truth values are `bool`, and
the remaining variants get small marker classes.

`type_of` is the single place that decides the runtime type of a value.
Numbers carry no separate integral representation: a number belongs to
`Whole` exactly when its fractional part is zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple
import decimal
import math

from .errors import fail


# Parametric kinds and the number of type arguments they take.
PARAMETRIC_KINDS = {'List': 1, 'Map': 2, 'Promise': 1}
SIMPLE_KINDS = ('Whole', 'Decimal', 'Text', 'Truth', 'Nothing', 'Any', 'Object')
NUMERIC_KINDS = ('Whole', 'Decimal')


@dataclass(frozen=True)
class TypeSpec:
    """Represents a Vernacular type.

    `kind` is one of the simple kinds (`Whole`, `Decimal`, `Text`, `Truth`,
    `Nothing`, `Any`, `Object`) or a parametric kind (`List`, `Map`,
    `Promise`) with its type arguments in `args`. For example
    `Map<Text, Whole>` becomes
    `TypeSpec('Map', (TypeSpec('Text'), TypeSpec('Whole')))`.
    """
    kind: str
    args: Tuple['TypeSpec', ...] = ()

    def __repr__(self) -> str:
        if not self.args:
            return self.kind
        inner = ", ".join(repr(a) for a in self.args)
        return f"{self.kind}<{inner}>"

    __str__ = __repr__

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @property
    def is_any(self) -> bool:
        return self.kind == 'Any'

    # Convenience constructors
    @staticmethod
    def whole() -> 'TypeSpec':
        return TypeSpec('Whole')

    @staticmethod
    def decimal() -> 'TypeSpec':
        return TypeSpec('Decimal')

    @staticmethod
    def text() -> 'TypeSpec':
        return TypeSpec('Text')

    @staticmethod
    def truth() -> 'TypeSpec':
        return TypeSpec('Truth')

    @staticmethod
    def nothing() -> 'TypeSpec':
        return TypeSpec('Nothing')

    @staticmethod
    def any() -> 'TypeSpec':
        return TypeSpec('Any')

    @staticmethod
    def object() -> 'TypeSpec':
        return TypeSpec('Object')

    @staticmethod
    def list(elem: 'TypeSpec') -> 'TypeSpec':
        return TypeSpec('List', (elem,))

    @staticmethod
    def map(key: 'TypeSpec', value: 'TypeSpec') -> 'TypeSpec':
        return TypeSpec('Map', (key, value))

    @staticmethod
    def promise(inner: 'TypeSpec') -> 'TypeSpec':
        return TypeSpec('Promise', (inner,))


@dataclass(frozen=True)
class NothingVal:
    """Marker object for the Vernacular `nothing` value."""
    def __repr__(self) -> str:
        return 'nothing'


NOTHING = NothingVal()


@dataclass(frozen=True)
class ObjectVal:
    """An object value. Only its class name is tracked; objects have no fields."""
    class_name: str

    def __repr__(self) -> str:
        return f"<{self.class_name}>"


@dataclass(frozen=True)
class ListVal:
    """Placeholder list value carrying a nominal label."""
    label: str

    def __repr__(self) -> str:
        return f"List<{self.label}>"


@dataclass(frozen=True)
class MapVal:
    """Placeholder mapping value carrying a nominal label."""
    label: str

    def __repr__(self) -> str:
        return f"Map<{self.label}>"


@dataclass(frozen=True)
class PromiseVal:
    """Placeholder promise value carrying a nominal label."""
    label: str

    def __repr__(self) -> str:
        return f"Promise<{self.label}>"


def is_number(value: Any) -> bool:
    # bool is a subclass of int; truth values are never numbers here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_of(value: Any) -> TypeSpec:
    """Return the runtime type of a value."""
    if isinstance(value, bool):
        return TypeSpec.truth()
    if is_number(value):
        if math.isfinite(value) and float(value).is_integer():
            return TypeSpec.whole()
        return TypeSpec.decimal()
    if isinstance(value, str):
        return TypeSpec.text()
    if isinstance(value, NothingVal):
        return TypeSpec.nothing()
    if isinstance(value, ObjectVal):
        return TypeSpec.object()
    if isinstance(value, ListVal):
        return TypeSpec.list(TypeSpec.any())
    if isinstance(value, MapVal):
        return TypeSpec.map(TypeSpec.text(), TypeSpec.any())
    if isinstance(value, PromiseVal):
        return TypeSpec.promise(TypeSpec.any())
    raise ValueError(f"not a Vernacular value: {value!r}")


def format_number(n: float) -> str:
    """Positional decimal text for a number; never uses an exponent."""
    n = float(n)
    if not math.isfinite(n):
        return repr(n)
    if n.is_integer():
        if n == 0 and math.copysign(1.0, n) < 0:
            return '-0'
        return str(int(n))
    text = repr(n)
    if 'e' in text:
        # shortest round-trip digits, laid out without the exponent
        text = format(decimal.Decimal(text), 'f')
    return text


def to_text(value: Any) -> str:
    """Convert a value to its canonical textual form.

    This is the form used by `print`, `show` and string interpolation.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NothingVal):
        return 'nothing'
    return repr(value)


def values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def divide(a: float, b: float) -> float:
    """IEEE-754 division; a zero divisor yields an infinity or nan."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def cast_value(value: Any, target: TypeSpec) -> Any:
    """Cast a value to `target`.

    Only identity-shaped casts are allowed: numbers to `Whole` (floored) or
    `Decimal`, text to `Text` and truth values to `Truth`. Anything else is
    a CastError.
    """
    if is_number(value):
        if target.kind == 'Whole':
            if not math.isfinite(value):
                return float(value)
            return float(math.floor(value))
        if target.kind == 'Decimal':
            return float(value)
    elif isinstance(value, str) and target.kind == 'Text':
        return value
    elif isinstance(value, bool) and target.kind == 'Truth':
        return value
    raise fail('CastError', f"cannot cast {type_of(value)} {to_text(value)!r} to {target}")
