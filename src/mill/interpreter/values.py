"""Runtime values produced by the interpreter.

Scalars are frozen dataclasses; Bool, Null, Integer and String double as
map keys. Arrays and maps are mutable containers with value semantics:
reading a variable hands out a `clone()`, never the stored object.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from ..tokens import INT_MIN


def wrap_i32(n: int) -> int:
    """Wrap an arbitrary Python int into 32-bit two's complement."""
    return (n - INT_MIN) % (2 ** 32) + INT_MIN


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def clone(self):
        return self

    def display(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class NullValue:
    def clone(self):
        return self

    def display(self) -> str:
        return "null"


@dataclass(frozen=True)
class IntegerValue:
    value: int

    def clone(self):
        return self

    def display(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue:
    value: float

    def clone(self):
        return self

    def display(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class StringValue:
    value: str

    def clone(self):
        return self

    def display(self) -> str:
        return self.value


@dataclass
class ArrayValue:
    elements: list[Value] = field(default_factory=list)

    def clone(self) -> ArrayValue:
        return ArrayValue([e.clone() for e in self.elements])

    def display(self) -> str:
        return "[" + ", ".join(_nested(e) for e in self.elements) + "]"


@dataclass
class MapValue:
    entries: dict[HashableValue, Value] = field(default_factory=dict)

    def clone(self) -> MapValue:
        return MapValue({k: v.clone() for k, v in self.entries.items()})

    def display(self) -> str:
        pairs = (f"{_nested(k)}: {_nested(v)}" for k, v in self.entries.items())
        return "{" + ", ".join(pairs) + "}"


@dataclass(frozen=True, eq=False)
class FunctionValue:
    """A closure template: parameters plus body, resolved against the
    scope stack at call time rather than a captured environment."""
    params: tuple[str, ...]
    body: tuple

    def clone(self):
        return self

    def display(self) -> str:
        return f"fn({', '.join(self.params)})"


def _nested(value: Value) -> str:
    if isinstance(value, StringValue):
        return f'"{value.value}"'
    return value.display()


Value = Union[BoolValue, NullValue, IntegerValue, FloatValue, StringValue, ArrayValue, MapValue, FunctionValue]
HashableValue = Union[BoolValue, NullValue, IntegerValue, StringValue]

HASHABLE_TYPES = (BoolValue, NullValue, IntegerValue, StringValue)

NULL = NullValue()
TRUE = BoolValue(True)


def as_hashable(value: Value) -> HashableValue | None:
    """Return value if it may be used as a map key, else None."""
    if isinstance(value, HASHABLE_TYPES):
        return value
    return None


def type_name(value: Value) -> str:
    return {
        BoolValue: "bool",
        NullValue: "null",
        IntegerValue: "integer",
        FloatValue: "float",
        StringValue: "string",
        ArrayValue: "array",
        MapValue: "map",
        FunctionValue: "function",
    }[type(value)]
