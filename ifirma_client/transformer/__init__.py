"""Value transformers."""

from .registry import (
    UNMAPPED_VALUE,
    EnumRule,
    TransformerRegistry,
    format_date,
    percent_to_decimal,
    strip_spaces,
    transform,
)

__all__ = [
    "UNMAPPED_VALUE",
    "EnumRule",
    "TransformerRegistry",
    "format_date",
    "percent_to_decimal",
    "strip_spaces",
    "transform",
]
