from typing import Any, Dict

from vernacular.errors import fail
from vernacular.types import TypeSpec, NothingVal, type_of


class Environment:
    """The session's variables and their declared types.

    Variables without an entry in `types` are untyped and accept any value.
    Entries are added or overwritten by stores and never removed.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}
        self.types: Dict[str, TypeSpec] = {}

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise fail('UndefinedVariable', f'undefined variable {name}')

    def set(self, name: str, value: Any):
        declared = self.types.get(name)
        # storing nothing skips the check so declarations without a value work
        if declared is not None and not declared.is_any and not isinstance(value, NothingVal):
            actual = type_of(value)
            if actual != declared:
                raise fail('TypeMismatch', f'cannot assign {actual} to variable {name} of type {declared}')
        self.values[name] = value

    def declare_type(self, name: str, type_spec: TypeSpec):
        self.types[name] = type_spec
