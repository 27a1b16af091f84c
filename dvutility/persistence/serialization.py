# ==============================================
# Serialization (encode / decode contract)
# ==============================================
#
# PURPOSE:
#   Turn caller objects into JSON bytes for a stored file, and
#   stored bytes back into an instance of a caller-chosen type.
#
# ENCODABLE:
# ----------
#   - JSON native values (dict, list, str, int, float, bool, None)
#   - DynamicValue trees           → to_python()
#   - objects with to_dict()       → that dict
#   - dataclass instances          → dict of their fields
#   Nested models are converted wherever they appear in the tree.
#
# DECODABLE TYPES:
# ----------------
#   - DynamicValue (or a variant)  → DynamicValueDecoder
#   - classes with from_dict()     → cls.from_dict(data)
#   - dataclasses                  → cls(**data), nested dataclass /
#                                    from_dict fields rebuilt from hints
#   - int, float, bool, str, list, dict
#   - object / typing.Any          → parsed JSON as-is
#
#   The stored file does not record which type was written; decoding
#   only works when the caller asks for a matching type.
#
# ==============================================

import dataclasses
import json
import typing
from typing import Any, Dict, Optional, Type, TypeVar

from ..decoding import DynamicValue, DynamicValueDecoder, reject_constant
from ..exceptions import DecodingError, SerializationError

T = TypeVar("T")

_NATIVE_TYPES = (dict, list, str, bool)


def to_json_compatible(obj: Any) -> Any:
    """
    json.dumps `default` hook: reduce one non-native object to JSON values.

    json calls it again for anything non-native inside the result, so
    nested models are handled at any depth.
    """
    if isinstance(obj, DynamicValue):
        return obj.to_python()
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict) and not isinstance(obj, type):
        return to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_object(obj: Any, indent: Optional[int] = None) -> bytes:
    """
    Serialize an object into UTF-8 JSON bytes.

    Args:
        obj: Object following the encodable contract above
        indent: Pretty-print indent, compact when None

    Returns:
        Complete JSON document as bytes

    Raises:
        SerializationError: object (or something inside it) is not encodable
    """
    try:
        text = json.dumps(
            obj,
            default=to_json_compatible,
            ensure_ascii=False,
            allow_nan=False,
            indent=indent,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot encode {type(obj).__name__}: {e}") from e
    return text.encode("utf-8")


def decode_object(data: bytes, type_: Type[T]) -> T:
    """
    Deserialize UTF-8 JSON bytes as an instance of `type_`.

    Raises:
        SerializationError: bytes are not JSON or do not match `type_`
    """
    try:
        parsed = json.loads(data, parse_constant=reject_constant)
    except ValueError as e:
        raise SerializationError(f"Stored data is not valid JSON: {e}") from e

    if type_ is Any or type_ is object:
        return parsed

    if isinstance(type_, type) and issubclass(type_, DynamicValue):
        try:
            value = DynamicValueDecoder().decode_value(parsed)
        except DecodingError as e:
            raise SerializationError(str(e)) from e
        if not isinstance(value, type_):
            raise SerializationError(f"Expected {type_.__name__} but found {type(value).__name__}")
        return value

    from_dict = getattr(type_, "from_dict", None)
    if callable(from_dict):
        try:
            return from_dict(parsed)
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise SerializationError(f"Cannot decode {type_.__name__}: {e}") from e

    if dataclasses.is_dataclass(type_):
        if not isinstance(parsed, dict):
            raise SerializationError(f"Expected object for {type_.__name__}")
        try:
            return _build_dataclass(parsed, type_)
        except (TypeError, ValueError, KeyError, AttributeError, DecodingError) as e:
            raise SerializationError(f"Cannot decode {type_.__name__}: {e}") from e

    return _decode_native(parsed, type_)


def _decode_native(parsed: Any, type_: type) -> Any:
    if type_ is int:
        if isinstance(parsed, int) and not isinstance(parsed, bool):
            return parsed
    elif type_ is float:
        if isinstance(parsed, float):
            return parsed
        if isinstance(parsed, int) and not isinstance(parsed, bool):
            return float(parsed)
    elif type_ in _NATIVE_TYPES:
        if isinstance(parsed, type_):
            return parsed
    else:
        raise SerializationError(f"Unsupported type for decoding: {type_!r}")

    raise SerializationError(f"Expected {type_.__name__} but found {type(parsed).__name__}")


def _field_types(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references, fall back to the raw annotations
        return {f.name: f.type for f in dataclasses.fields(cls)}


def _build_dataclass(data: dict, cls: type) -> Any:
    """Instantiate `cls` from a dict, rebuilding nested models field by field."""
    hints = _field_types(cls)
    kwargs = {}
    for key, value in data.items():
        hint = hints.get(key)
        kwargs[key] = value if hint is None else _build_value(value, hint)
    return cls(**kwargs)


def _build_value(value: Any, hint: Any) -> Any:
    """Rebuild a field value according to its annotation; plain JSON stays as is."""
    if value is None:
        return None

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is typing.Union:
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _build_value(value, candidates[0])
        return value

    if origin in (list, tuple, set, frozenset) and isinstance(value, list):
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return tuple(_build_value(item, args[0]) for item in value)
        if origin is tuple:
            return tuple(value)
        if len(args) == 1:
            value = [_build_value(item, args[0]) for item in value]
        return value if origin is list else origin(value)

    if origin is dict and isinstance(value, dict):
        if len(args) == 2:
            return {key: _build_value(item, args[1]) for key, item in value.items()}
        return value

    if isinstance(hint, type):
        if issubclass(hint, DynamicValue):
            return DynamicValueDecoder().decode_value(value)
        from_dict = getattr(hint, "from_dict", None)
        if callable(from_dict) and isinstance(value, dict):
            return from_dict(value)
        if dataclasses.is_dataclass(hint) and isinstance(value, dict):
            return _build_dataclass(value, hint)

    return value
