"""
Variable context for template preprocessing.

The context is built once per generation run by the caller and passed
read-only to every file. Values are either scalars (``str``) or lists
(``tuple`` of ``str``, caller order preserved).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence, Tuple, Union

Scalar = str
ListValue = Tuple[str, ...]
Value = Union[Scalar, ListValue]

# Separator used both to render list values and to split list options on the CLI
LIST_SEPARATOR = ","

# Namespace of variables injected by the scaffolder
ENV_NAMESPACE = "ENV"


def env_key(name: str) -> str:
    """``language`` -> ``ENV:LANGUAGE``."""
    return f"{ENV_NAMESPACE}:{name.upper()}"


def is_list(value: Value) -> bool:
    return isinstance(value, tuple)


def render_value(value: Value) -> str:
    """Text form of a value as substituted into templates."""
    if isinstance(value, tuple):
        return LIST_SEPARATOR.join(value)
    return value


def split_list(text: Optional[str]) -> ListValue:
    """Inverse of list rendering for user input: ``"a, b,,c"`` -> ``("a", "b", "c")``."""
    if not text:
        return ()
    return tuple(item.strip() for item in text.split(LIST_SEPARATOR) if item.strip())


def _freeze(name: str, value: Union[str, Sequence[str]]) -> Value:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        items = tuple(value)
        for item in items:
            if not isinstance(item, str):
                raise TypeError(
                    f"List variable '{name}' must hold strings, got {type(item).__name__}"
                )
        return items
    raise TypeError(
        f"Variable '{name}' must be a string or a list of strings, got {type(value).__name__}"
    )


class InterpreterContext(Mapping[str, Value]):
    """
    Immutable mapping of variable names to values.

    Usage:
        ctx = InterpreterContext({"ENV:LANGUAGE": "c++", "ENV:FEATURES": ["imgui"]})
        ctx.lookup("ENV:FEATURES")  # ("imgui",)
        ctx.lookup("ENV:MISSING")   # None
    """

    def __init__(self, values: Optional[Mapping[str, Union[str, Sequence[str]]]] = None):
        frozen = {name: _freeze(name, value) for name, value in (values or {}).items()}
        self._values: Mapping[str, Value] = MappingProxyType(frozen)

    def lookup(self, name: str) -> Optional[Value]:
        """Value of ``name`` or None when the context does not define it."""
        return self._values.get(name)

    def __getitem__(self, name: str) -> Value:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"InterpreterContext({dict(self._values)!r})"


__all__ = [
    "Scalar",
    "ListValue",
    "Value",
    "LIST_SEPARATOR",
    "ENV_NAMESPACE",
    "env_key",
    "is_list",
    "render_value",
    "split_list",
    "InterpreterContext",
]
