"""ifirma API client."""
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import requests

from ifirma_client.config import IfirmaApiConfig
from ifirma_client.exceptions import ApiRequestError, ConfigurationError
from ifirma_client.builder.payload_builder import (
    AttributeMapper,
    iter_unmapped_fields,
    strip_unmapped_fields,
)
from ifirma_client.mapper.tables import SEND_ATTRIBUTES_MAP, SEND_DEFAULTS
from ifirma_client.mapper.mapping import ValueMap
from ifirma_client.transformer.registry import UNMAPPED_VALUE

from .auth import IfirmaAuth
from .response import DocumentResponse, Response

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    """Serialize values json does not know natively."""
    if value is UNMAPPED_VALUE:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _error_detail(response: requests.Response) -> str:
    """Error message of a failed reply: ifirma's "Informacja" or the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, Mapping):
        status = body.get("response", body)
        if isinstance(status, Mapping) and "Informacja" in status:
            return f"[{status.get('Kod')}] {status['Informacja']}"
    return response.text


def encode_body(payload: Any) -> str:
    """Encode a wire tree as the JSON request body."""
    unmapped = list(iter_unmapped_fields(payload))
    if unmapped:
        logger.warning(f"Dropping attributes without field mapping: {[f.symbolic_key for f in unmapped]}")
        payload = strip_unmapped_fields(payload)
    return json.dumps(payload, default=_json_default, ensure_ascii=False)


class IfirmaClient:
    """Client for the ifirma.pl invoicing API."""

    INVOICES_PATH = "/iapi/fakturakraj"

    def __init__(self, config: IfirmaApiConfig, mapper: Optional[AttributeMapper] = None):
        """
        Initialize client

        Args:
            config: API configuration (credentials, base URL, timeout)
            mapper: Attribute mapper (defaults to the built-in invoice tables)

        Raises:
            ConfigurationError: If no configuration is given
        """
        if config is None:
            raise ConfigurationError("Please provide config data")

        self.config = config
        self.mapper = mapper or AttributeMapper()
        self.session = requests.Session()
        self.session.auth = IfirmaAuth(config.username, config.invoices_key, config.key_name)
        self.session.headers.update({
            "Content-Type": "application/json; charset=utf-8",
            "Accept": "application/json",
        })

    def request(self, method: str, path: str, body: Any = None) -> requests.Response:
        """
        Send a signed request

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: Wire tree to send as JSON (optional)

        Returns:
            requests.Response

        Raises:
            ApiRequestError: On connection errors and HTTP error statuses
        """
        url = f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
        data = encode_body(body).encode("utf-8") if body is not None else None

        logger.debug(f"{method.upper()} {url}")
        try:
            response = self.session.request(method.upper(), url, data=data, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            message = f"{e}: {_error_detail(e.response)}" if e.response is not None else str(e)
            logger.error(f"{method.upper()} {url} failed: {message}")
            raise ApiRequestError(message, status_code=e.response.status_code if e.response is not None else None) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{method.upper()} {url} failed: {e}")
            raise ApiRequestError(str(e)) from e

        return response

    def get(self, path: str) -> requests.Response:
        return self.request("GET", path)

    def post(self, path: str, body: Any = None) -> requests.Response:
        return self.request("POST", path, body)

    def put(self, path: str, body: Any = None) -> requests.Response:
        return self.request("PUT", path, body)

    def delete(self, path: str) -> requests.Response:
        return self.request("DELETE", path)

    def head(self, path: str) -> requests.Response:
        return self.request("HEAD", path)

    def send(self, method: str, path: str, body: Any = None) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        response = self.request(method, path, body)
        try:
            return response.json()
        except ValueError as e:
            raise ApiRequestError(f"Invalid JSON from {path}: {e}", status_code=response.status_code) from e

    def _wrap(self, body: Mapping[str, Any]) -> Response:
        if isinstance(body, Mapping) and "response" in body:
            body = body["response"]
        return Response(body, self.mapper)

    def create_invoice(self, attrs: Mapping[str, Any]) -> Response:
        """
        Create a domestic invoice

        Args:
            attrs: Symbolic invoice attributes

        Returns:
            Response with the new invoice id on success
        """
        payload = self.mapper.map_tree(attrs)
        body = self.send("POST", f"{self.INVOICES_PATH}.json", payload)
        response = self._wrap(body)
        logger.info(f"Create invoice: code={response.code} info={response.info}")
        return response

    def fetch_invoice(self, invoice_id: Any) -> Response:
        """Fetch invoice data as JSON."""
        body = self.send("GET", f"{self.INVOICES_PATH}/{invoice_id}.json")
        return self._wrap(body)

    def get_invoice(self, invoice_id: Any, type: str = "pdf") -> Response:
        """
        Fetch a rendered invoice document

        The invoice is looked up as JSON first; the document is only
        requested when that lookup succeeds.
        """
        response = self.fetch_invoice(invoice_id)
        if not response.success():
            return response

        if type == "json":
            return response

        document = self.get(f"{self.INVOICES_PATH}/{invoice_id}.{type}")
        return DocumentResponse(document.content, document.headers.get("Content-Type", ""), self.mapper)

    def send_invoice(self, invoice_id: Any, **options: Any) -> Response:
        """
        E-mail an invoice to the customer

        Args:
            invoice_id: ifirma invoice id
            **options: text, wire_transfer, on_delivery, mtransfer

        Returns:
            Response of the send request, or the failed lookup response
        """
        response = self.fetch_invoice(invoice_id)
        if not response.success():
            return response

        full_number = str(response.full_number).replace("/", "_")
        send_attrs = dict(SEND_DEFAULTS)
        send_attrs.update(options)
        payload = self.mapper.map_tree(send_attrs, SEND_ATTRIBUTES_MAP, ValueMap())

        body = self.send("POST", f"{self.INVOICES_PATH}/send/{full_number}.json", payload)
        return self._wrap(body)
