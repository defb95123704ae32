from dataclasses import dataclass
from typing import Any, Dict, List

from vernacular.types import TypeSpec, NOTHING, to_text


@dataclass
class BuiltinFunction:
    name: str
    arity: int
    return_type: TypeSpec
    fn: Any

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def std_show(args: List[Any]) -> Any:
    print(to_text(args[0]))
    return NOTHING


BUILTINS: Dict[str, BuiltinFunction] = {
    'show': BuiltinFunction('show', 1, TypeSpec.nothing(), std_show),
}
