"""Field and value mapping tables."""

from .mapping import EMPTY_VALUE_MAP, FieldMap, NodeKind, UnmappedField, ValueMap, classify_node, enum
from .tables import ATTRIBUTES_MAP, RESPONSE_MAP, SEND_ATTRIBUTES_MAP, SEND_DEFAULTS, VALUE_MAP

__all__ = [
    "FieldMap",
    "ValueMap",
    "EMPTY_VALUE_MAP",
    "NodeKind",
    "UnmappedField",
    "classify_node",
    "enum",
    "ATTRIBUTES_MAP",
    "VALUE_MAP",
    "SEND_ATTRIBUTES_MAP",
    "SEND_DEFAULTS",
    "RESPONSE_MAP",
]
