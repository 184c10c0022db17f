"""Mapping tree models: symbolic attribute names -> ifirma wire names."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ifirma_client.transformer.registry import EnumRule, ValueRule


class NodeKind(Enum):
    """Shape of an attribute tree node."""

    SCALAR = "scalar"
    OBJECT = "object"
    LIST = "list"


def classify_node(value: Any) -> NodeKind:
    """Return the node kind of an attribute tree value."""
    if isinstance(value, Mapping):
        return NodeKind.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return NodeKind.LIST
    return NodeKind.SCALAR


@dataclass(frozen=True)
class UnmappedField:
    """Output key standing in for a scalar attribute without a wire name."""

    symbolic_key: str

    def __str__(self):
        return f"<unmapped:{self.symbolic_key}>"


@dataclass(frozen=True)
class FieldMap:
    """
    Composite node of the field mapping tree

    Attributes:
        wire_name: Wire name of the composite itself (None for the root)
        children: Symbolic key -> wire field name or nested FieldMap
    """

    wire_name: Optional[str]
    children: Mapping[str, Union[str, "FieldMap"]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def get(self, key: str) -> Union[str, "FieldMap", None]:
        return self.children.get(key)

    def composite(self, key: str) -> Optional["FieldMap"]:
        """Return the nested FieldMap for a key, or None if it is a leaf or absent."""
        node = self.children.get(key)
        return node if isinstance(node, FieldMap) else None

    def symbolic_key_for(self, wire_name: str) -> Optional[str]:
        """Reverse lookup of a wire name among this node's children."""
        for key, node in self.children.items():
            if isinstance(node, FieldMap):
                if node.wire_name == wire_name:
                    return key
            elif node == wire_name:
                return key
        return None

    def __hash__(self):
        return hash((self.wire_name, tuple(self.children.items())))

    @classmethod
    def from_legacy(cls, table: Mapping[str, Any], wire_name: Optional[str] = None) -> "FieldMap":
        """
        Build a FieldMap from the self-referential nested dict layout

        In that layout a composite is a dict whose own wire name is stored
        under its own symbolic key:

            {"items": {"items": "Pozycje", "name": "NazwaPelna"}}
        """
        children: Dict[str, Union[str, FieldMap]] = {}
        for key, node in table.items():
            if isinstance(node, Mapping):
                nested = dict(node)
                nested_wire_name = nested.pop(key, None)
                if not isinstance(nested_wire_name, str):
                    raise ValueError(f"Composite mapping '{key}' has no wire name entry '{key}'")
                children[key] = cls.from_legacy(nested, nested_wire_name)
            elif isinstance(node, str):
                children[key] = node
            else:
                raise ValueError(f"Invalid field mapping for '{key}': {node!r}")
        return cls(wire_name, children)

    def to_legacy(self) -> Dict[str, Any]:
        """Inverse of from_legacy."""
        result: Dict[str, Any] = {}
        for key, node in self.children.items():
            if isinstance(node, FieldMap):
                nested = {key: node.wire_name}
                nested.update(node.to_legacy())
                result[key] = nested
            else:
                result[key] = node
        return result


@dataclass(frozen=True)
class ValueMap:
    """Composite node of the value transformation tree."""

    children: Mapping[str, Union[ValueRule, "ValueMap"]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def rule(self, key: str) -> Optional[ValueRule]:
        """Return the leaf rule for a key (None when absent or nested)."""
        node = self.children.get(key)
        return None if isinstance(node, ValueMap) else node

    def nested(self, key: str) -> "ValueMap":
        """Return the nested ValueMap for a key, or an empty one."""
        node = self.children.get(key)
        return node if isinstance(node, ValueMap) else EMPTY_VALUE_MAP

    def __hash__(self):
        return hash(tuple(self.children.keys()))


EMPTY_VALUE_MAP = ValueMap()


def enum(**table: Any) -> EnumRule:
    """Shorthand for declaring enumerated tables."""
    return EnumRule(table)
