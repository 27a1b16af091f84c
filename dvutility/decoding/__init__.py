# ==============================================
# DECODING
# ==============================================
#
# This package turns JSON documents of unknown shape into
# DynamicValue trees.
#
# Modules:
# --------
# - dynamic_value.py → Tagged union of JSON value variants
# - cursor.py        → Keyed / unkeyed / single-value views over a node
# - decoder.py       → Recursive decoding with scalar candidate priority
#
# ==============================================

from .cursor import JSONCursor
from .decoder import DynamicValueDecoder, decode_json, reject_constant
from .dynamic_value import (
    Boolean,
    DynamicValue,
    FloatingPoint,
    Integer,
    Mapping,
    Sequence,
    Text,
    ValueKind,
)

__all__ = [
    "JSONCursor",
    "DynamicValueDecoder",
    "decode_json",
    "reject_constant",
    "DynamicValue",
    "ValueKind",
    "Integer",
    "FloatingPoint",
    "Boolean",
    "Text",
    "Sequence",
    "Mapping",
]
