# ==============================================
# DynamicValueDecoder
# ==============================================
#
# PURPOSE:
#   Decode a JSON document of unknown shape into a DynamicValue tree.
#
# ALGORITHM (recursive, one level per document level):
# ----------------------------------------------------
#   1. Keyed container opens    → Mapping, each key decoded recursively
#   2. Unkeyed container opens  → Sequence, elements in order
#   3. Single value opens       → first scalar candidate that parses:
#                                   int → float → bool → str
#   4. Otherwise                → DataCorruptedError with the node path
#
#   The candidate order makes `5` an Integer rather than a
#   FloatingPoint, and str goes last so nothing gets captured as text
#   by accident. `null` matches no candidate and is an error.
#
# USAGE:
# ------
#   decoder = DynamicValueDecoder()
#   tree = decoder.decode('{"a": [1, 2.5, true, "x"]}')
#   tree["a"][0]        # Integer(value=1)
#   tree.to_python()    # {"a": [1, 2.5, True, "x"]}
#
# ==============================================

import json
from typing import Any, Union

from ..exceptions import DataCorruptedError, TypeMismatchError
from .cursor import JSONCursor
from .dynamic_value import (
    Boolean,
    DynamicValue,
    FloatingPoint,
    Integer,
    Mapping,
    Sequence,
    Text,
)


def reject_constant(name: str) -> Any:
    """parse_constant hook: NaN, Infinity and -Infinity are not JSON."""
    raise ValueError(f"{name} is not a valid JSON value")


class DynamicValueDecoder:
    # Priority order matters, see module header
    SCALAR_CANDIDATES = (
        (int, Integer),
        (float, FloatingPoint),
        (bool, Boolean),
        (str, Text),
    )

    def decode(self, data: Union[str, bytes, bytearray]) -> DynamicValue:
        """
        Parse JSON text and decode it into a DynamicValue.

        Args:
            data: JSON document as text or UTF-8 bytes

        Returns:
            DynamicValue tree isomorphic to the document

        Raises:
            DataCorruptedError: invalid JSON, a null, or an undecodable node
        """
        try:
            parsed = json.loads(data, parse_constant=reject_constant)
        except (ValueError, TypeError) as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise DataCorruptedError((), f"Invalid JSON: {e}", reason=DataCorruptedError.MALFORMED) from e

        return self.decode_value(parsed)

    def decode_value(self, obj: Any) -> DynamicValue:
        """Decode an already-parsed native tree (dict / list / scalars)."""
        return self.decode_cursor(JSONCursor(obj))

    def decode_cursor(self, cursor: JSONCursor) -> DynamicValue:
        try:
            keyed = cursor.keyed_container()
        except TypeMismatchError:
            keyed = None
        if keyed is not None:
            result = {}
            for key in keyed.all_keys:
                result[str(key)] = self.decode_cursor(keyed.cursor_for(key))
            return Mapping(result)

        try:
            unkeyed = cursor.unkeyed_container()
        except TypeMismatchError:
            unkeyed = None
        if unkeyed is not None:
            items = []
            while not unkeyed.is_at_end:
                items.append(self.decode_cursor(unkeyed.next_cursor()))
            return Sequence(tuple(items))

        try:
            single = cursor.single_value_container()
        except TypeMismatchError:
            raise DataCorruptedError(
                cursor.path,
                "Could not decode value: no container form matched",
                reason=DataCorruptedError.NO_CONTAINER,
            ) from None

        for kind, variant in self.SCALAR_CANDIDATES:
            try:
                return variant(single.decode(kind))
            except TypeMismatchError:
                continue

        raise DataCorruptedError(
            cursor.path,
            "Single value container contains nothing decodable",
            reason=DataCorruptedError.NO_SCALAR,
        )


def decode_json(data: Union[str, bytes, bytearray]) -> DynamicValue:
    """Decode JSON text with a default DynamicValueDecoder."""
    return DynamicValueDecoder().decode(data)
