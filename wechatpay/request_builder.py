"""
Builds signed request descriptions for the WeChat Pay gateway.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .constants import SANDBOX_PREFIX, V1_ENDPOINT_PREFIX, SignVersion
from .signing.legacy import LegacyRequestSigner
from .signing.rsa import RSARequestSigner
from .types import SignedRequest

logger = logging.getLogger(__name__)


def is_absolute_url(endpoint: str) -> bool:
    return endpoint.startswith('http://') or endpoint.startswith('https://')


class RequestBuilder:
    """
    Turns endpoint, method and parameters into a SignedRequest.

    Order of operations:
        1. sandbox rewrite of the endpoint path
        2. pick the signer by explicit version or endpoint
        3. merge defaults < caller values, drop empty values
        4. sign and attach headers/body
    """

    def __init__(self, config, credentials, signers: Optional[Dict[SignVersion, Any]] = None):
        """
        Initialize request builder.

        Args:
            config: WeChatPayConfig (or anything with the same lookups)
            credentials: CredentialProvider used by the signers
            signers: Optional replacement signers keyed by SignVersion
        """
        self.config = config
        self.credentials = credentials
        self.signers = signers or {
            SignVersion.V1: RSARequestSigner(credentials),
            SignVersion.V2: LegacyRequestSigner(credentials, debug=config.debug),
        }

    def wrap(self, endpoint: str) -> str:
        """Prefix an endpoint path for the sandbox when sandbox mode is on."""
        if not self.config.sandbox or is_absolute_url(endpoint):
            return endpoint
        endpoint = endpoint.lstrip('/')
        if endpoint.startswith(SANDBOX_PREFIX):
            return endpoint
        return SANDBOX_PREFIX + endpoint

    def resolve_version(self, endpoint: str) -> SignVersion:
        """
        Pick the signing scheme from the endpoint.

        ``v3/`` paths and absolute URLs (download links) use RSA signing,
        everything else the legacy scheme.
        """
        path = endpoint.lstrip('/')
        if path.startswith(SANDBOX_PREFIX):
            path = path[len(SANDBOX_PREFIX):]
        if is_absolute_url(endpoint) or path.startswith(V1_ENDPOINT_PREFIX):
            return SignVersion.V1
        return SignVersion.V2

    def default_params(self, version: SignVersion) -> Dict[str, str]:
        """Fields merged under every request body of the given version."""
        if version == SignVersion.V1:
            return {
                'appid': self.config.app_id,
                'mchid': self.config.get_string('mch_id'),
            }
        return {}

    def build_signed(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        version: Optional[SignVersion] = None,
        with_defaults: bool = True,
    ) -> SignedRequest:
        """
        Build a signed request.

        Args:
            endpoint: Endpoint path (e.g. "v3/pay/transactions/native") or absolute URL
            method: HTTP method
            params: Query parameters (V1) or signed fields (V2)
            options: Body fields (V1) and transport options "headers"/"query"
            version: Force a signing scheme instead of resolving it from the endpoint
            with_defaults: Merge appid/mchid under V1 bodies

        Returns:
            SignedRequest

        Raises:
            SigningError: If the V1 key material is missing or invalid
            KeyResolutionError: If no V2 secret exists for the endpoint
        """
        # Rewrite first: the sandbox prefix is part of what gets signed.
        wrapped = self.wrap(endpoint)
        version = SignVersion(version) if version else self.resolve_version(wrapped)
        signer = self.signers[version]

        defaults = self.default_params(version) if with_defaults else None

        logger.debug(f"Building {version.value} request: {method.upper()} {wrapped}")
        return signer.sign(wrapped, method, params=params, options=options, defaults=defaults)
