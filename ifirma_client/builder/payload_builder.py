"""
Attribute Mapper - Translates symbolic attribute trees into ifirma payloads

Walks the attribute tree depth-first, in the input's key order:
- Scalars: field map gives the wire name, value map gives the rule
- Objects: nested FieldMap/ValueMap, written under the composite's wire name
- Lists: every element mapped with the nested tables, collected in a list
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ifirma_client.exceptions import MissingMappingError, ValueRuleError
from ifirma_client.mapper.mapping import (
    FieldMap,
    NodeKind,
    UnmappedField,
    ValueMap,
    classify_node,
)
from ifirma_client.mapper.tables import ATTRIBUTES_MAP, VALUE_MAP
from ifirma_client.transformer.registry import UNMAPPED_VALUE, EnumRule, transform

logger = logging.getLogger(__name__)

WireKey = Union[str, UnmappedField]


class AttributeMapper:
    """
    Maps attribute trees to wire trees and back

    Usage:
    ```python
    mapper = AttributeMapper()
    payload = mapper.map_tree({"type": "net", "items": [{"name": "Widget"}]})
    # Returns: {"LiczOd": "NET", "Pozycje": [{"NazwaPelna": "Widget"}]}
    ```
    """

    def __init__(
        self,
        field_map: Optional[FieldMap] = None,
        value_map: Optional[ValueMap] = None,
    ):
        """
        Initialize AttributeMapper

        Args:
            field_map: Field mapping tree (defaults to the invoice table)
            value_map: Value transformation tree (defaults to the invoice table)
        """
        self.field_map = field_map if field_map is not None else ATTRIBUTES_MAP
        self.value_map = value_map if value_map is not None else VALUE_MAP

    def map_tree(
        self,
        attrs: Mapping[str, Any],
        field_map: Optional[FieldMap] = None,
        value_map: Optional[ValueMap] = None,
    ) -> Dict[WireKey, Any]:
        """
        Translate an attribute tree into a wire tree

        Args:
            attrs: Symbolic attribute tree
            field_map: Field mapping tree for this level (defaults to the mapper's)
            value_map: Value transformation tree for this level (defaults to the mapper's)

        Returns:
            New dict keyed by wire names, in the key order of attrs

        Raises:
            MissingMappingError: If a composite value has no nested field mapping
            ValueRuleError: If a value rule fails on a scalar value
        """
        if field_map is None:
            field_map = self.field_map
        if value_map is None:
            value_map = self.value_map
        return self._map_node(attrs, field_map, value_map, ())

    def _map_node(
        self,
        attrs: Mapping[str, Any],
        field_map: FieldMap,
        value_map: ValueMap,
        path: Tuple[str, ...],
    ) -> Dict[WireKey, Any]:
        result: Dict[WireKey, Any] = {}

        for key, value in attrs.items():
            kind = classify_node(value)

            if kind is NodeKind.LIST:
                nested_fields = self._composite_mapping(field_map, key, path)
                nested_values = value_map.nested(key)
                result[nested_fields.wire_name] = [
                    self._map_node(item, nested_fields, nested_values, path + (key,))
                    for item in value
                ]

            elif kind is NodeKind.OBJECT:
                nested_fields = self._composite_mapping(field_map, key, path)
                result[nested_fields.wire_name] = self._map_node(
                    value, nested_fields, value_map.nested(key), path + (key,)
                )

            elif kind is NodeKind.SCALAR:
                wire_name = self._scalar_wire_name(field_map, key, path)
                try:
                    wire_value = transform(value, value_map.rule(key))
                except (TypeError, ValueError, AttributeError) as e:
                    raise ValueRuleError(path + (key,), value, e) from e
                if wire_value is UNMAPPED_VALUE:
                    logger.warning(f"No wire value for {'.'.join(path + (key,))}={value!r}")
                result[wire_name] = wire_value

            else:
                raise TypeError(f"Unhandled node kind: {kind}")

        return result

    @staticmethod
    def _composite_mapping(field_map: FieldMap, key: str, path: Tuple[str, ...]) -> FieldMap:
        nested = field_map.composite(key)
        if nested is None:
            raise MissingMappingError(key, path)
        return nested

    @staticmethod
    def _scalar_wire_name(field_map: FieldMap, key: str, path: Tuple[str, ...]) -> WireKey:
        node = field_map.get(key)
        if isinstance(node, FieldMap):
            return node.wire_name
        if node is None:
            logger.warning(f"No field mapping for {'.'.join(path + (key,))}")
            return UnmappedField(key)
        return node

    def unmap_tree(
        self,
        wire_tree: Mapping[str, Any],
        field_map: Optional[FieldMap] = None,
        value_map: Optional[ValueMap] = None,
    ) -> Dict[str, Any]:
        """
        Translate a wire tree back into symbolic attributes

        Enumerated values are inverted; values produced by functions are kept
        as sent. Wire keys without a mapping are kept verbatim.
        """
        if field_map is None:
            field_map = self.field_map
        if value_map is None:
            value_map = self.value_map

        result: Dict[str, Any] = {}

        for wire_name, value in wire_tree.items():
            key = field_map.symbolic_key_for(wire_name)
            if key is None:
                result[wire_name] = value
                continue

            kind = classify_node(value)
            nested_fields = field_map.composite(key)

            if kind is NodeKind.LIST and nested_fields is not None:
                nested_values = value_map.nested(key)
                result[key] = [
                    self.unmap_tree(item, nested_fields, nested_values)
                    if classify_node(item) is NodeKind.OBJECT
                    else item
                    for item in value
                ]
            elif kind is NodeKind.OBJECT and nested_fields is not None:
                result[key] = self.unmap_tree(value, nested_fields, value_map.nested(key))
            else:
                rule = value_map.rule(key)
                result[key] = rule.reverse_lookup(value) if isinstance(rule, EnumRule) else value

        return result

    def build_batch(self, attrs_list: List[Mapping[str, Any]]) -> List[Dict[WireKey, Any]]:
        """Map several attribute trees with the mapper's tables."""
        payloads = [self.map_tree(attrs) for attrs in attrs_list]
        logger.info(f"Built {len(payloads)} payloads")
        return payloads


def iter_unmapped_fields(wire_tree: Any) -> Iterator[UnmappedField]:
    """Yield every UnmappedField key in a wire tree, depth-first."""
    kind = classify_node(wire_tree)
    if kind is NodeKind.OBJECT:
        for key, value in wire_tree.items():
            if isinstance(key, UnmappedField):
                yield key
            yield from iter_unmapped_fields(value)
    elif kind is NodeKind.LIST:
        for item in wire_tree:
            yield from iter_unmapped_fields(item)


def strip_unmapped_fields(wire_tree: Any) -> Any:
    """Return a copy of the wire tree without UnmappedField entries."""
    kind = classify_node(wire_tree)
    if kind is NodeKind.OBJECT:
        return {
            key: strip_unmapped_fields(value)
            for key, value in wire_tree.items()
            if not isinstance(key, UnmappedField)
        }
    if kind is NodeKind.LIST:
        return [strip_unmapped_fields(item) for item in wire_tree]
    return wire_tree


# ============================================================================
# Builder convenience functions
# ============================================================================


def build_invoice_payload(attrs: Mapping[str, Any]) -> Dict[WireKey, Any]:
    """Map an invoice attribute tree with the built-in invoice tables"""
    return AttributeMapper().map_tree(attrs)
