"""
HTTP client for WeChat Pay API communication.
"""

import requests
import logging
from typing import Dict, Any, Mapping, Optional, Tuple
from wechatpay.constants import AUTHORIZATION_HEADER, DEFAULT_TIMEOUT
from wechatpay.exceptions import TransportError
from wechatpay.types import SignedRequest
from wechatpay.utils.canonical import encoded_query_string, merge_maps

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    HTTP client wrapper for WeChat Pay API requests.
    Sends signed requests and logs them. Failures are never retried: a
    signed request is sent at most once.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_full_url(self, endpoint: str) -> str:
        """Get full URL for endpoint. Absolute URLs are used as given."""
        if endpoint.startswith('http://') or endpoint.startswith('https://'):
            return endpoint
        endpoint = endpoint.lstrip('/')
        return f"{self.base_url}/{endpoint}"

    def _log_request(self, method: str, url: str, headers: Mapping, params: Optional[Dict] = None, body: Optional[str] = None):
        """Log API request details."""
        logger.info(f"WeChat Pay API Request: {method} {url}")
        logger.debug(f"Headers: {self._sanitize_headers(headers)}")
        if params:
            logger.debug(f"Query: {self._sanitize_params(params)}")
        if body:
            logger.debug(f"Payload: {body}")

    def _log_response(self, response: requests.Response, stream: bool = False):
        """Log API response details."""
        logger.info(f"WeChat Pay API Response: {response.status_code}")
        if not stream:
            logger.debug(f"Response: {response.text}")

    def _sanitize_headers(self, headers: Mapping) -> Dict:
        """Remove sensitive data from headers for logging."""
        sanitized = dict(headers)
        if AUTHORIZATION_HEADER in sanitized:
            sanitized[AUTHORIZATION_HEADER] = '***'
        return sanitized

    def _sanitize_params(self, params: Mapping) -> Dict:
        """Remove signatures and tokens from query parameters for logging."""
        sanitized = dict(params)
        for key in ('sign', 'access_token'):
            if key in sanitized:
                sanitized[key] = '***'
        return sanitized

    def _encode_query(self, query: Optional[Mapping[str, Any]], extra_query: Optional[Mapping[str, Any]]) -> str:
        """Encode the signed query, then append unsigned transport parameters."""
        parts = [encoded_query_string(query), encoded_query_string(extra_query)]
        return '&'.join(part for part in parts if part)

    def send(
        self,
        signed: SignedRequest,
        stream: bool = False,
        cert: Optional[Tuple[str, str]] = None,
        extra_query: Optional[Mapping[str, Any]] = None
    ) -> requests.Response:
        """
        Send a signed request.

        Args:
            signed: Request produced by the RequestBuilder
            stream: Leave the body unread for streaming downloads
            cert: Client certificate and key paths for mutual TLS
            extra_query: Transport-only query parameters (not signed)

        Returns:
            The requests Response, status not checked

        Raises:
            TransportError: On connection, TLS or timeout failures
        """
        url = self._get_full_url(signed.url)
        headers = dict(signed.headers)
        data = signed.body.encode('utf-8') if signed.body is not None else None

        self._log_request(signed.method, url, headers, merge_maps(signed.query, extra_query), signed.body)

        # A pre-encoded string is appended by requests as is, keeping the
        # query on the wire identical to the one that was signed.
        params = self._encode_query(signed.query, extra_query) or None

        try:
            response = self.session.request(
                signed.method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=self.timeout,
                stream=stream,
                cert=cert
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {signed.method} {url}: {str(e)}")
            raise TransportError(f"Request to {url} failed: {str(e)}") from e

        self._log_response(response, stream=stream)
        return response

    def close(self):
        """Close the session."""
        self.session.close()
