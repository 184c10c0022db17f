"""
Payload Builder Module

Builds ifirma API payloads from symbolic attribute trees:
- Field name translation (nested objects and item lists)
- Value transformations (dates, enums, percentages)
- Reverse translation of response bodies
"""

from .payload_builder import (
    AttributeMapper,
    build_invoice_payload,
    iter_unmapped_fields,
    strip_unmapped_fields,
)

__all__ = [
    "AttributeMapper",
    "build_invoice_payload",
    "iter_unmapped_fields",
    "strip_unmapped_fields",
]
