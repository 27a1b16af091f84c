# ==============================================
# JSONCursor
# ==============================================
#
# PURPOSE:
#   Decoding cursor over one node of a parsed JSON document.
#   A node can be viewed in exactly one of three ways:
#
#     keyed_container()         → JSON object
#     unkeyed_container()       → JSON array
#     single_value_container()  → JSON scalar (null, bool, number, string)
#
#   Asking for the wrong view raises TypeMismatchError. Every cursor
#   remembers the path (keys / indices) that led to it so errors can
#   name the failing node.
#
# ==============================================

from typing import Any, Iterator, List, Tuple, Union

from ..exceptions import DataCorruptedError, TypeMismatchError

PathComponent = Union[str, int]

SCALAR_TYPES = (type(None), bool, int, float, str)


def describe_node(node: Any) -> str:
    """Short JSON-ish name of a node's shape, used in error messages."""
    if node is None:
        return "null"
    if isinstance(node, bool):
        return "bool"
    if isinstance(node, int):
        return "int"
    if isinstance(node, float):
        return "float"
    if isinstance(node, str):
        return "str"
    if isinstance(node, dict):
        return "object"
    if isinstance(node, (list, tuple)):
        return "array"
    return type(node).__name__


class JSONCursor:
    def __init__(self, node: Any, path: Tuple[PathComponent, ...] = ()):
        self.node = node
        self.path = tuple(path)

    def keyed_container(self) -> "KeyedContainer":
        if not isinstance(self.node, dict):
            raise TypeMismatchError(self.path, "object", describe_node(self.node))
        return KeyedContainer(self.node, self.path)

    def unkeyed_container(self) -> "UnkeyedContainer":
        if not isinstance(self.node, (list, tuple)):
            raise TypeMismatchError(self.path, "array", describe_node(self.node))
        return UnkeyedContainer(self.node, self.path)

    def single_value_container(self) -> "SingleValueContainer":
        if not isinstance(self.node, SCALAR_TYPES):
            raise TypeMismatchError(self.path, "single value", describe_node(self.node))
        return SingleValueContainer(self.node, self.path)


class KeyedContainer:
    def __init__(self, node: dict, path: Tuple[PathComponent, ...]):
        self._node = node
        self.path = path

    @property
    def all_keys(self) -> List[Any]:
        return list(self._node.keys())

    def cursor_for(self, key: Any) -> JSONCursor:
        return JSONCursor(self._node[key], self.path + (str(key),))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all_keys)


class UnkeyedContainer:
    def __init__(self, node, path: Tuple[PathComponent, ...]):
        self._node = node
        self.path = path
        self.current_index = 0

    @property
    def count(self) -> int:
        return len(self._node)

    @property
    def is_at_end(self) -> bool:
        return self.current_index >= len(self._node)

    def next_cursor(self) -> JSONCursor:
        if self.is_at_end:
            raise DataCorruptedError(
                self.path + (self.current_index,),
                "Unkeyed container is at end",
                reason=DataCorruptedError.MALFORMED,
            )
        cursor = JSONCursor(self._node[self.current_index], self.path + (self.current_index,))
        self.current_index += 1
        return cursor


class SingleValueContainer:
    def __init__(self, node: Any, path: Tuple[PathComponent, ...]):
        self._node = node
        self.path = path

    def decode_nil(self) -> bool:
        return self._node is None

    def decode(self, kind: type) -> Any:
        """
        Decode the scalar as the given Python type.

        int never accepts bools or floats (5.0 is not an int here),
        float accepts ints, bool and str only accept themselves.

        Raises:
            TypeMismatchError: scalar cannot be read as `kind`
        """
        value = self._node

        if kind is bool:
            if isinstance(value, bool):
                return value
        elif kind is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        elif kind is float:
            if isinstance(value, float):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return float(value)
        elif kind is str:
            if isinstance(value, str):
                return value
        else:
            raise TypeError(f"Unsupported scalar type: {kind!r}")

        raise TypeMismatchError(self.path, kind.__name__, describe_node(value))
