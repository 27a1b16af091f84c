# ==============================================
# DynamicValue (Tagged Union)
# ==============================================
#
# PURPOSE:
#   Runtime representation of an arbitrary JSON value whose shape
#   is not known statically.
#
# ENUMS:
# ------
# - ValueKind(Enum): INTEGER, FLOAT, BOOL, TEXT, SEQUENCE, MAPPING
#     Tag of each variant. Values reuse the short type names used
#     elsewhere for JSON type detection ("int", "float", ...).
#
# VARIANTS (frozen dataclasses, all subclasses of DynamicValue):
# --------------------------------------------------------------
# - Integer(value: int)
# - FloatingPoint(value: float)
# - Boolean(value: bool)
# - Text(value: str)
# - Sequence(value: tuple[DynamicValue, ...])
# - Mapping(value: read-only dict[str, DynamicValue])
#
# COMMON METHODS:
# ---------------
# - kind -> ValueKind
# - to_python() -> Any
#     Unwrap the whole tree into dict / list / scalars.
# - iter_nodes(path=()) -> Iterator[(path, DynamicValue)]
#     Depth-first walk, containers before their children.
#
# USAGE:
# ------
#   if isinstance(node, Mapping):
#       for key, child in node.items(): ...
#   elif isinstance(node, Integer):
#       total += node.value
#
# ==============================================

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Tuple, Union

PathComponent = Union[str, int]


class ValueKind(Enum):
    """Tag of a DynamicValue variant."""
    INTEGER = "int"
    FLOAT = "float"
    BOOL = "bool"
    TEXT = "str"
    SEQUENCE = "array"
    MAPPING = "object"


class DynamicValue:
    """Base class of all DynamicValue variants. Never instantiated directly."""

    kind: ValueKind

    def to_python(self) -> Any:
        return self.value  # type: ignore[attr-defined]

    def iter_nodes(
        self, path: Tuple[PathComponent, ...] = ()
    ) -> Iterator[Tuple[Tuple[PathComponent, ...], "DynamicValue"]]:
        yield path, self

    @property
    def is_container(self) -> bool:
        return self.kind in (ValueKind.SEQUENCE, ValueKind.MAPPING)


@dataclass(frozen=True)
class Integer(DynamicValue):
    value: int
    kind = ValueKind.INTEGER


@dataclass(frozen=True)
class FloatingPoint(DynamicValue):
    value: float
    kind = ValueKind.FLOAT


@dataclass(frozen=True)
class Boolean(DynamicValue):
    value: bool
    kind = ValueKind.BOOL


@dataclass(frozen=True)
class Text(DynamicValue):
    value: str
    kind = ValueKind.TEXT


@dataclass(frozen=True)
class Sequence(DynamicValue):
    value: Tuple[DynamicValue, ...] = ()
    kind = ValueKind.SEQUENCE

    def __post_init__(self):
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))

    def __len__(self) -> int:
        return len(self.value)

    def __getitem__(self, index: int) -> DynamicValue:
        return self.value[index]

    def __iter__(self) -> Iterator[DynamicValue]:
        return iter(self.value)

    def to_python(self) -> list:
        return [item.to_python() for item in self.value]

    def iter_nodes(self, path=()):
        yield path, self
        for index, item in enumerate(self.value):
            yield from item.iter_nodes(path + (index,))


@dataclass(frozen=True)
class Mapping(DynamicValue):
    value: Dict[str, DynamicValue] = field(default_factory=dict)
    kind = ValueKind.MAPPING

    def __post_init__(self):
        # Read-only copy, so a Mapping cannot change after it was hashed
        object.__setattr__(self, "value", MappingProxyType(dict(self.value)))

    def __hash__(self) -> int:
        return hash(frozenset(self.value.items()))

    def __len__(self) -> int:
        return len(self.value)

    def __getitem__(self, key: str) -> DynamicValue:
        return self.value[key]

    def __contains__(self, key: object) -> bool:
        return key in self.value

    def get(self, key: str, default=None):
        return self.value.get(key, default)

    def keys(self):
        return self.value.keys()

    def items(self):
        return self.value.items()

    def to_python(self) -> dict:
        return {key: item.to_python() for key, item in self.value.items()}

    def iter_nodes(self, path=()):
        yield path, self
        for key, item in self.value.items():
            yield from item.iter_nodes(path + (key,))
