"""
SHA256-with-RSA request signing.

The signed message is::

    METHOD\\n/request-uri\\ntimestamp\\nnonce\\nbody\\n

and the result travels in the Authorization header together with the
merchant ID and certificate serial number.
"""

import base64
import json
import logging
import time
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..constants import AUTH_SCHEMA, AUTHORIZATION_HEADER, SERIAL_HEADER, SignVersion
from ..exceptions import SigningError
from ..types import RequestSignChain, SignedRequest
from ..utils.canonical import (
    encoded_query_string, filter_empty, merge_maps, random_nonce, sort_by_key
)
from .base import Signer, is_read_only

logger = logging.getLogger(__name__)


def load_private_key(data) -> RSAPrivateKey:
    """
    Load an RSA private key from PEM text or bytes.

    Raises:
        SigningError: If the key is missing, malformed or not RSA
    """
    if not data:
        raise SigningError("Merchant private key is not configured")

    if isinstance(data, str):
        data = data.encode('utf-8')

    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError) as e:
        raise SigningError(f"Invalid merchant private key: {str(e)}") from e

    if not isinstance(key, RSAPrivateKey):
        raise SigningError("Merchant private key must be an RSA key")
    return key


def request_uri(canonical_url: str) -> str:
    """Reduce a path or absolute URL to ``/path?query`` form."""
    parts = urlsplit(canonical_url)
    path = parts.path if parts.path.startswith('/') else '/' + parts.path
    if parts.query:
        return f"{path}?{parts.query}"
    return path


class SHA256WithRSASigner:
    """
    Signs request chains with the merchant's RSA private key.
    """

    def __init__(self, mch_id: str, serial_no: str, private_key: Optional[RSAPrivateKey]):
        self.mch_id = mch_id
        self.serial_no = serial_no
        self.private_key = private_key

    def sign(self, message: str) -> str:
        """Sign a message with PKCS#1 v1.5 / SHA-256 and base64 encode it."""
        if self.private_key is None:
            raise SigningError("Merchant private key is not configured")
        signature = self.private_key.sign(
            message.encode('utf-8'),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return base64.b64encode(signature).decode('utf-8')

    def build_message(self, chain: RequestSignChain, timestamp: str, nonce: str) -> str:
        return (
            f"{chain.method.upper()}\n"
            f"{request_uri(chain.canonical_url)}\n"
            f"{timestamp}\n"
            f"{nonce}\n"
            f"{chain.sign_body}\n"
        )

    def generate_request_sign(
        self,
        chain: RequestSignChain,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
    ) -> str:
        """
        Produce the Authorization header value for a sign chain.

        Raises:
            SigningError: If merchant ID, serial number or key is missing
        """
        if not self.mch_id:
            raise SigningError("Merchant ID is required to sign requests")
        if not self.serial_no:
            raise SigningError("Certificate serial number is required to sign requests")

        timestamp = timestamp or str(int(time.time()))
        nonce = nonce or random_nonce()
        signature = self.sign(self.build_message(chain, timestamp, nonce))

        return (
            f'{AUTH_SCHEMA} '
            f'mchid="{self.mch_id}",'
            f'nonce_str="{nonce}",'
            f'timestamp="{timestamp}",'
            f'serial_no="{self.serial_no}",'
            f'signature="{signature}"'
        )


class RSARequestSigner(Signer):
    """
    V1 scheme: JSON body signed with the merchant private key.
    """

    version = SignVersion.V1

    def __init__(self, credentials):
        self.credentials = credentials

    def sign(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> SignedRequest:
        method = method.upper()
        options = dict(options or {})
        caller_headers = options.pop('headers', None) or {}
        # Extra query parameters are part of the signed URL; params win on collision.
        query = sort_by_key(filter_empty(merge_maps(options.pop('query', None), params)))

        # The transport sends encoded_query_string(query) verbatim, so the
        # signed URL must use the same encoding.
        canonical_url = endpoint
        if query:
            separator = '&' if '?' in endpoint else '?'
            canonical_url = f"{endpoint}{separator}{encoded_query_string(query)}"

        payload = filter_empty(merge_maps(defaults, options))

        sign_body = ""
        if not is_read_only(method):
            sign_body = json.dumps(payload, ensure_ascii=False, separators=(',', ':'))

        signer = self.credentials.get_private_key_signer()
        authorization = signer.generate_request_sign(RequestSignChain(
            method=method,
            canonical_url=canonical_url,
            sign_body=sign_body,
        ))
        logger.debug(f"Signed {method} {canonical_url} with serial {signer.serial_no}")

        base_headers = {'Accept': 'application/json'}
        if sign_body:
            base_headers['Content-Type'] = 'application/json'

        headers = merge_maps(base_headers, caller_headers, {
            AUTHORIZATION_HEADER: authorization,
            SERIAL_HEADER: signer.serial_no,
        })

        return SignedRequest(
            method=method,
            url=endpoint,
            canonical_url=canonical_url,
            headers=headers,
            query=query or None,
            body=sign_body or None,
            version=self.version,
        )
