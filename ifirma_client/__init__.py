"""Client library for the ifirma.pl invoicing API."""

from .api.ifirma_client import IfirmaClient
from .api.response import DocumentResponse, Response
from .builder.payload_builder import AttributeMapper, build_invoice_payload
from .config import IfirmaApiConfig
from .exceptions import ApiRequestError, ConfigurationError, IfirmaError, MissingMappingError, ValueRuleError
from .transformer.registry import UNMAPPED_VALUE

__version__ = "0.1.0"

__all__ = [
    "IfirmaClient",
    "Response",
    "DocumentResponse",
    "AttributeMapper",
    "build_invoice_payload",
    "IfirmaApiConfig",
    "IfirmaError",
    "ConfigurationError",
    "MissingMappingError",
    "ApiRequestError",
    "ValueRuleError",
    "UNMAPPED_VALUE",
]
