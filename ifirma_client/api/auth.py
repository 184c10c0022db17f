"""ifirma request signing (IAPIS HMAC-SHA1 authentication header)."""
import binascii
import hashlib
import hmac
import logging
from typing import Union

from requests.auth import AuthBase

from ifirma_client.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class IfirmaAuth(AuthBase):
    """
    Attaches the ifirma "Authentication" header to outgoing requests

    The digest is HMAC-SHA1 keyed with the hex-decoded API key over
    url + username + key name + request body.
    """

    HEADER = "Authentication"

    def __init__(self, username: str, invoices_key: str, key_name: str = "faktura"):
        """
        Initialize auth

        Args:
            username: ifirma account login
            invoices_key: Hex encoded "faktura" API key
            key_name: Name of the API key as configured in ifirma
        """
        if not username or not invoices_key:
            raise ConfigurationError("ifirma username and invoices key are required")

        try:
            self.key = binascii.unhexlify(invoices_key)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"Invoices key is not a valid hex string: {e}") from e

        self.username = username
        self.key_name = key_name

    def sign(self, url: str, body: Union[str, bytes, None]) -> str:
        """Compute the hex digest for a request."""
        if body is None:
            body = b""
        elif isinstance(body, str):
            body = body.encode("utf-8")

        message = url.encode("utf-8") + self.username.encode("utf-8") + self.key_name.encode("utf-8") + body
        return hmac.new(self.key, message, hashlib.sha1).hexdigest()

    def __call__(self, request):
        digest = self.sign(request.url, request.body)
        request.headers[self.HEADER] = f"IAPIS user={self.username}, hmac-sha1={digest}"
        logger.debug(f"Signed {request.method} {request.url}")
        return request
