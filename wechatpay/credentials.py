"""
Credential providers for request signing.

A provider hands out the RSA signer, resolves the shared secret for an
endpoint and optionally supplies an access token. Signers borrow this
material per call and never keep it.
"""

import logging
import threading
from typing import Optional, Protocol

from .constants import SECRET_KEY_LENGTH, APIEndpoints
from .exceptions import KeyResolutionError, SigningError
from .signing.rsa import SHA256WithRSASigner, load_private_key

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    """Contract the request builder expects from a credential source."""

    def get_private_key_signer(self) -> SHA256WithRSASigner:
        ...

    def get_secret_key_for(self, endpoint: str) -> str:
        ...

    def get_access_token(self) -> Optional[str]:
        ...


class SettingsCredentialProvider:
    """
    Credential provider backed by WeChatPayConfig.

    The private key is loaded once, on first use, from WECHATPAY_PRIVATE_KEY
    or the file at WECHATPAY_KEY_PATH.
    """

    def __init__(self, config):
        self.config = config
        self._private_key = None
        self._sandbox_key = None
        self._lock = threading.Lock()

    def _load_private_key(self):
        with self._lock:
            if self._private_key is not None:
                return self._private_key

            pem = self.config.private_key
            if not pem and self.config.key_path:
                try:
                    with open(self.config.key_path, 'rb') as fh:
                        pem = fh.read()
                except OSError as e:
                    raise SigningError(
                        f"Cannot read merchant private key {self.config.key_path}: {str(e)}"
                    ) from e

            self._private_key = load_private_key(pem)
            logger.info("Loaded merchant private key")
            return self._private_key

    def get_private_key_signer(self) -> SHA256WithRSASigner:
        """
        Get an RSA signer for the configured merchant.

        Raises:
            SigningError: If the key cannot be loaded
        """
        return SHA256WithRSASigner(
            mch_id=self.config.get_string('mch_id'),
            serial_no=self.config.serial_no,
            private_key=self._load_private_key(),
        )

    def set_sandbox_key(self, key: str):
        """Cache a sandbox signing key fetched from the gateway."""
        self._sandbox_key = key

    @property
    def sandbox_key(self):
        return self._sandbox_key or self.config.sandbox_key

    def get_secret_key_for(self, endpoint: str) -> str:
        """
        Resolve the shared secret used to sign a legacy request.

        Explicit per-endpoint keys win. In sandbox mode every endpoint except
        the sign-key endpoint itself uses the sandbox key.

        Raises:
            KeyResolutionError: If no valid key is available
        """
        endpoint_keys = self.config.endpoint_keys
        if endpoint in endpoint_keys:
            key = endpoint_keys[endpoint]
            source = f"endpoint key for {endpoint}"
        elif self.config.sandbox and endpoint != APIEndpoints.SANDBOX_SIGN_KEY:
            key = self.sandbox_key
            source = "WECHATPAY_SANDBOX_KEY"
        else:
            key = self.config.api_v2_key
            source = "WECHATPAY_API_V2_KEY"

        if not key:
            raise KeyResolutionError(f"No secret key configured ({source}) for endpoint {endpoint}")

        if len(key) != SECRET_KEY_LENGTH:
            raise KeyResolutionError(
                f"{source} should be {SECRET_KEY_LENGTH} chars length. Got: {len(key)}"
            )

        return key

    def get_access_token(self) -> Optional[str]:
        """Get a pre-issued access token, if one is configured."""
        return self.config.get_string('access_token') or None
