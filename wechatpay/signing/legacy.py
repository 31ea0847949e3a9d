"""
Shared-secret signing for the legacy XML API.

Parameters are sorted by name, joined as ``k=v&...`` with the merchant
secret appended as ``&key=<secret>``, then digested with MD5 (or
HMAC-SHA256 when the request carries ``sign_type=HMAC-SHA256``). The
upper-case hex digest is added as ``sign`` and the whole map is sent as
XML.
"""

import hashlib
import hmac
import logging
from typing import Any, Mapping, Optional

from ..constants import SignType, SignVersion
from ..exceptions import SigningError
from ..types import SignedRequest
from ..utils.canonical import (
    filter_empty, merge_maps, random_nonce, sort_by_key, sorted_query_string
)
from ..utils.xml_codec import dict_to_xml
from .base import Signer, is_read_only

logger = logging.getLogger(__name__)

SIGN_FIELD = 'sign'


def build_sign_string(params: Mapping[str, Any], secret_key: str) -> str:
    """Build ``k=v&...&key=secret`` over non-empty params, excluding ``sign``."""
    signable = filter_empty({k: v for k, v in params.items() if k != SIGN_FIELD})
    joined = sorted_query_string(signable)
    if not joined:
        return f"key={secret_key}"
    return f"{joined}&key={secret_key}"


def generate_sign(
    params: Mapping[str, Any],
    secret_key: str,
    sign_type: str = SignType.MD5.value
) -> str:
    """
    Generate the legacy signature for a parameter map.

    Args:
        params: Parameters to sign
        secret_key: Merchant secret resolved for the endpoint
        sign_type: "MD5" or "HMAC-SHA256"

    Returns:
        Upper-case hex digest

    Raises:
        SigningError: If the sign type is not supported
    """
    payload = build_sign_string(params, secret_key).encode('utf-8')
    sign_type = getattr(sign_type, 'value', sign_type)

    if sign_type == SignType.MD5.value:
        return hashlib.md5(payload).hexdigest().upper()

    if sign_type == SignType.HMAC_SHA256.value:
        return hmac.new(
            secret_key.encode('utf-8'),
            payload,
            hashlib.sha256
        ).hexdigest().upper()

    raise SigningError(f"Unsupported sign type: {sign_type}")


def verify_sign(params: Mapping[str, Any], secret_key: str) -> bool:
    """
    Verify the ``sign`` field of a legacy response or notification.
    """
    signature = params.get(SIGN_FIELD)
    if not signature:
        return False
    sign_type = params.get('sign_type') or SignType.MD5.value
    expected = generate_sign(params, secret_key, sign_type)
    return hmac.compare_digest(expected, str(signature).upper())


class LegacyRequestSigner(Signer):
    """
    V2 scheme: shared-secret digest, XML body.
    """

    version = SignVersion.V2

    def __init__(self, credentials, debug: bool = False):
        self.credentials = credentials
        self.debug = debug

    def sign(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> SignedRequest:
        method = method.upper()
        options = options or {}

        # A fresh nonce always wins over any caller-supplied one.
        signed_params = filter_empty(
            merge_maps(defaults, params, {'nonce_str': random_nonce()})
        )

        secret_key = self.credentials.get_secret_key_for(endpoint)
        sign_type = signed_params.get('sign_type') or SignType.MD5.value
        signed_params[SIGN_FIELD] = generate_sign(signed_params, secret_key, sign_type)
        signed_params = sort_by_key(signed_params)
        logger.debug(f"Signed {method} {endpoint} with {sign_type}")

        query = filter_empty(options.get('query'))
        body = None
        if is_read_only(method):
            # Signed fields win so the query always matches its sign.
            query = merge_maps(query, signed_params)
        else:
            body = dict_to_xml(signed_params)

        if self.debug:
            query['debug'] = '1'

        base_headers = {}
        if body is not None:
            base_headers['Content-Type'] = 'text/xml; charset=utf-8'
        headers = merge_maps(base_headers, options.get('headers'))

        return SignedRequest(
            method=method,
            url=endpoint,
            canonical_url=endpoint,
            headers=headers,
            query=query or None,
            body=body,
            version=self.version,
        )
