"""Uniform wrapper around ifirma API responses."""
from typing import Any, Dict, Mapping, Optional

from ifirma_client.builder.payload_builder import AttributeMapper
from ifirma_client.mapper.mapping import FieldMap, NodeKind, classify_node
from ifirma_client.mapper.tables import RESPONSE_MAP

_MISSING = object()


class Response:
    """
    Wraps the decoded "response" object of an ifirma reply

    Fields are looked up by symbolic name and translated through the
    mapping tables, e.g. ``response.full_number`` reads ``PelnyNumer`` and
    ``response.get("customer.name")`` reads ``Kontrahent.Nazwa``.
    """

    SUCCESS_CODE = 0

    def __init__(self, body: Optional[Mapping[str, Any]], mapper: Optional[AttributeMapper] = None):
        self.body: Dict[str, Any] = dict(body or {})
        self.mapper = mapper or AttributeMapper()

    def success(self) -> bool:
        """True when ifirma reports status code 0."""
        return self.code == self.SUCCESS_CODE

    @property
    def code(self) -> Optional[int]:
        return self.body.get(RESPONSE_MAP.get("code"))

    @property
    def info(self) -> Optional[str]:
        return self.body.get(RESPONSE_MAP.get("info"))

    @property
    def invoice_id(self) -> Any:
        return self.body.get(RESPONSE_MAP.get("invoice_id"))

    def get(self, path: str, default: Any = None) -> Any:
        """
        Resolve a dotted symbolic path against the response body

        Each segment is translated to its wire name first; segments without
        a mapping are looked up verbatim. A numeric segment indexes a list.
        """
        node: Any = self.body
        field_map: Optional[FieldMap] = self.mapper.field_map

        for segment in path.split("."):
            kind = classify_node(node)

            if kind is NodeKind.LIST:
                try:
                    node = node[int(segment)]
                except (ValueError, IndexError):
                    return default
                continue

            if kind is not NodeKind.OBJECT:
                return default

            wire_name = segment
            if field_map is not None:
                mapped = field_map.get(segment)
                if isinstance(mapped, FieldMap):
                    wire_name = mapped.wire_name
                    field_map = mapped
                elif mapped is not None:
                    wire_name = mapped
                    field_map = None
                else:
                    wire_name = RESPONSE_MAP.get(segment) or segment
                    field_map = None

            node = node.get(wire_name, _MISSING)
            if node is _MISSING:
                return default

        return node

    def to_attributes(self) -> Dict[str, Any]:
        """Translate the whole body back to symbolic attributes."""
        attributes = self.mapper.unmap_tree(self.body)
        return self.mapper.unmap_tree(attributes, RESPONSE_MAP)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name in ("body", "mapper"):
            raise AttributeError(name)
        value = self.get(name, _MISSING)
        if value is _MISSING:
            raise AttributeError(f"Response has no field '{name}'")
        return value

    def __repr__(self):
        return f"Response(code={self.code!r}, info={self.info!r})"


class DocumentResponse(Response):
    """Response carrying a rendered invoice document (pdf, xml...)."""

    def __init__(self, content: bytes, content_type: str = "", mapper: Optional[AttributeMapper] = None):
        super().__init__({}, mapper)
        self.content = content
        self.content_type = content_type

    def success(self) -> bool:
        return bool(self.content)

    def __repr__(self):
        return f"DocumentResponse(content_type={self.content_type!r}, size={len(self.content)})"
