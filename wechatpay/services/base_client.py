"""
Base client for the WeChat Pay API.
Signs requests with the RSA or legacy scheme, sends them and decodes the
responses.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from ..config import WeChatPayConfig
from ..constants import APIEndpoints, ResponseType, SignVersion
from ..credentials import SettingsCredentialProvider
from ..exceptions import APIError, ConfigurationError, DecodeError
from ..request_builder import RequestBuilder
from ..types import RequestDownload, SignedRequest
from ..utils.http_client import HTTPClient
from ..utils.response import ResponseDecoder
from .download_service import DownloadService

logger = logging.getLogger(__name__)


class BaseClient:
    """
    Entry point for signed calls to the gateway.

    Config and credentials are injected; when omitted they are built from
    Django settings.
    """

    def __init__(
        self,
        config: Optional[WeChatPayConfig] = None,
        credentials=None,
        http_client: Optional[HTTPClient] = None,
        decoder: Optional[ResponseDecoder] = None
    ):
        self.config = config or WeChatPayConfig()
        self.credentials = credentials or SettingsCredentialProvider(self.config)
        self.http_client = http_client or HTTPClient(self.config.base_uri, timeout=self.config.timeout)
        self.decoder = decoder or ResponseDecoder()
        self.request_builder = RequestBuilder(self.config, self.credentials)
        self.download_service = DownloadService(self.request_builder, self.http_client, self.decoder)

    def _access_token_query(self) -> Optional[Dict[str, str]]:
        token = self.credentials.get_access_token()
        if token:
            return {'access_token': token}
        return None

    def _send(self, signed: SignedRequest, **kwargs) -> requests.Response:
        return self.http_client.send(signed, extra_query=self._access_token_query(), **kwargs)

    def request(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = 'GET',
        options: Optional[Mapping[str, Any]] = None,
        response_type: ResponseType = ResponseType.JSON,
        target: Optional[Callable[..., Any]] = None
    ) -> Any:
        """
        Send an RSA-signed request and decode the JSON response.

        Args:
            endpoint: Endpoint path, e.g. "v3/pay/transactions/native"
            params: Query parameters, included in the signed URL
            method: HTTP method
            options: Body fields; "headers" adds request headers, "query"
                adds signed query parameters
            response_type: How to decode the body
            target: Optional dataclass/callable for a typed result
        """
        signed = self.request_builder.build_signed(
            endpoint, method, params, options, version=SignVersion.V1
        )
        return self.decoder.decode(self._send(signed), response_type, target)

    def request_raw(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = 'GET',
        options: Optional[Mapping[str, Any]] = None
    ) -> requests.Response:
        """Send an RSA-signed request and return the undecoded response."""
        signed = self.request_builder.build_signed(
            endpoint, method, params, options, version=SignVersion.V1
        )
        response = self._send(signed)
        self.decoder.check_status(response)
        return response

    def request_map(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = 'GET',
        options: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Send an RSA-signed request and return the JSON body as a dict.

        Raises:
            DecodeError: If the body is not a JSON object
        """
        data = self.request(endpoint, params, method, options)
        if not isinstance(data, dict):
            raise DecodeError(
                f"Expected a JSON object from {endpoint}, got {type(data).__name__}",
                response_data=data
            )
        return data

    def plain_request(
        self,
        endpoint: str,
        method: str = 'POST',
        options: Optional[Mapping[str, Any]] = None,
        response_type: ResponseType = ResponseType.JSON,
        target: Optional[Callable[..., Any]] = None
    ) -> Any:
        """
        Send an RSA-signed request without the appid/mchid defaults.

        Used by endpoints that reject fields outside their schema.
        """
        signed = self.request_builder.build_signed(
            endpoint, method, None, options, version=SignVersion.V1, with_defaults=False
        )
        return self.decoder.decode(self._send(signed), response_type, target)

    def request_v2(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = 'POST',
        options: Optional[Mapping[str, Any]] = None,
        response_type: ResponseType = ResponseType.XML,
        target: Optional[Callable[..., Any]] = None,
        cert=None
    ) -> Any:
        """
        Send a legacy shared-secret request and decode the XML response.

        Args:
            endpoint: Endpoint path, e.g. "pay/unifiedorder"
            params: Fields to sign and send
            method: HTTP method
            options: Transport options: "query", "headers"
            response_type: How to decode the body
            target: Optional dataclass/callable for a typed result
            cert: Client certificate (cert_path, key_path) for mutual TLS
        """
        signed = self.request_builder.build_signed(
            endpoint, method, params, options, version=SignVersion.V2
        )
        response = self._send(signed, cert=cert)
        return self.decoder.decode(response, response_type, target)

    def safe_request(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = 'POST',
        options: Optional[Mapping[str, Any]] = None,
        target: Optional[Callable[..., Any]] = None
    ) -> Any:
        """
        Send a legacy request over mutual TLS (refunds, transfers, ...).

        Raises:
            ConfigurationError: If the client certificate or key path is missing
        """
        cert_path = self.config.cert_path
        key_path = self.config.key_path
        if not cert_path or not key_path:
            raise ConfigurationError(
                "WECHATPAY_CERT_PATH and WECHATPAY_KEY_PATH are required for certificate requests."
            )
        return self.request_v2(
            endpoint, params, method, options,
            response_type=ResponseType.XML,
            target=target,
            cert=(cert_path, key_path)
        )

    def stream_download(self, request_download: RequestDownload, file_path: str) -> int:
        """Download a file to file_path and verify its checksum."""
        return self.download_service.stream_download(request_download, file_path)

    def get_sandbox_sign_key(self) -> str:
        """
        Fetch the sandbox signing key and cache it on the credential provider.

        Raises:
            APIError: If the gateway does not return a key
        """
        logger.info("Fetching sandbox sign key")
        result = self.request_v2(
            APIEndpoints.SANDBOX_SIGN_KEY,
            {'mch_id': self.config.mch_id},
            'POST'
        )

        if result.get('return_code') != 'SUCCESS' or not result.get('sandbox_signkey'):
            logger.error(f"Failed to fetch sandbox sign key: {result.get('return_msg')}")
            raise APIError(
                f"Failed to fetch sandbox sign key: {result.get('return_msg', 'unknown error')}",
                error_code=result.get('return_code'),
                response_data=result
            )

        key = result['sandbox_signkey']
        if hasattr(self.credentials, 'set_sandbox_key'):
            self.credentials.set_sandbox_key(key)
        return key

    def close(self):
        """Close the underlying HTTP session."""
        self.http_client.close()
