"""
Configuration management for the WeChat Pay client.
"""

from typing import Any, Dict, Optional

from django.conf import settings

from .constants import DEFAULT_BASE_URI, DEFAULT_TIMEOUT
from .exceptions import ConfigurationError

SETTINGS_PREFIX = 'WECHATPAY_'


class WeChatPayConfig:
    """
    Configuration manager for WeChat Pay API settings.
    Loads settings from Django settings, with optional per-instance overrides.

    Overrides use the lower-case key without prefix, e.g. ``{'mch_id': '1900000109'}``
    for ``WECHATPAY_MCH_ID``. An instance is handed to the client at
    construction time instead of being read from a module global.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        self._overrides = dict(overrides or {})
        self._validate_settings()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a raw setting value by its short key."""
        if key in self._overrides:
            return self._overrides[key]
        return getattr(settings, SETTINGS_PREFIX + key.upper(), default)

    def get_string(self, key: str, default: str = '') -> str:
        """Look up a setting as a string."""
        value = self.get(key, default)
        if value is None:
            return default
        return str(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Look up a setting as a boolean. Accepts "1", "true", "yes", "on"."""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(value)

    @property
    def base_uri(self):
        """Get WeChat Pay API base URI."""
        return self.get_string('base_uri', DEFAULT_BASE_URI)

    @property
    def app_id(self):
        """Get the application ID bound to the merchant."""
        return self.get_string('app_id')

    @property
    def mch_id(self):
        """Get merchant ID."""
        mch_id = self.get_string('mch_id')
        if not mch_id:
            raise ConfigurationError(
                "WECHATPAY_MCH_ID is not configured in Django settings. "
                "Please add it to your settings.py or .env file."
            )
        return mch_id

    @property
    def serial_no(self):
        """Get the merchant certificate serial number."""
        return self.get_string('serial_no')

    @property
    def key_path(self):
        """Get path to the merchant private key (PEM)."""
        return self.get_string('key_path')

    @property
    def private_key(self):
        """Get inline merchant private key (PEM), used instead of key_path."""
        return self.get_string('private_key')

    @property
    def cert_path(self):
        """Get path to the merchant client certificate."""
        return self.get_string('cert_path')

    @property
    def api_v2_key(self):
        """Get the shared secret used by the legacy API."""
        return self.get_string('api_v2_key')

    @property
    def sandbox_key(self):
        """Get the sandbox signing key (optional, can be fetched at runtime)."""
        return self.get_string('sandbox_key')

    @property
    def endpoint_keys(self):
        """Get per-endpoint secret key overrides."""
        return dict(self.get('endpoint_keys', {}) or {})

    @property
    def sandbox(self):
        """Check if requests go to the sandbox environment."""
        return self.get_bool('sandbox')

    @property
    def debug(self):
        """Check if gateway debug mode is enabled."""
        return self.get_bool('debug')

    @property
    def timeout(self):
        """Get request timeout in seconds."""
        return float(self.get('timeout', DEFAULT_TIMEOUT))

    def _validate_settings(self):
        """
        Validate that required settings are present.
        Raises ConfigurationError if validation fails.
        """
        if not self.base_uri:
            raise ConfigurationError("WECHATPAY_BASE_URI is not configured.")

        # Merchant credentials are checked lazily by their property getters
        # and by the credential provider, so the config object can be built
        # before every key is in place.
