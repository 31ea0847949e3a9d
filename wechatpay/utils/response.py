"""
Response decoding for JSON (V1) and XML (V2) gateway responses.
"""

import dataclasses
import json
import logging
from typing import Any, Callable, Optional, Union

import requests

from ..constants import ResponseType
from ..exceptions import APIError, DecodeError
from .xml_codec import xml_to_dict

logger = logging.getLogger(__name__)


class ResponseDecoder:
    """
    Parses response bodies into mappings or typed structures.
    """

    def check_status(self, response: requests.Response):
        """
        Raise on HTTP error statuses.

        Raises:
            APIError: If the status code is 400 or above
        """
        if response.status_code < 400:
            return

        if response.status_code in (401, 403):
            message = "Authentication failed. Please check the merchant key and certificate serial."
        else:
            message = f"API request failed with status {response.status_code}"

        try:
            error_data = response.json()
            if isinstance(error_data, dict):
                message = error_data.get('message', message)
        except ValueError:
            pass

        raise APIError(
            message,
            error_code=response.status_code,
            response_data=response.text
        )

    def decode(
        self,
        response: requests.Response,
        response_type: Union[ResponseType, str] = ResponseType.JSON,
        target: Optional[Callable[..., Any]] = None
    ) -> Any:
        """
        Decode a response body.

        Args:
            response: Response returned by the transport
            response_type: JSON, XML or RAW
            target: Optional dataclass or callable built from the decoded mapping

        Returns:
            dict, str (RAW) or an instance of target

        Raises:
            APIError: If the response has an error status
            DecodeError: If the body cannot be parsed into the requested shape
        """
        self.check_status(response)
        response_type = ResponseType(response_type)

        if response_type == ResponseType.RAW:
            data = response.text
            return target(data) if target else data

        if response_type == ResponseType.XML:
            data = self.decode_xml(response.content)
        else:
            data = self.decode_json(response.content)

        if target is None:
            return data
        return self.cast(data, target)

    def decode_json(self, content: bytes) -> Any:
        if not content or not content.strip():
            return {}
        try:
            return json.loads(content)
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {str(e)}")
            raise DecodeError(
                f"Failed to parse JSON response: {str(e)}",
                response_data=content
            ) from e

    def decode_xml(self, content: bytes) -> dict:
        if not content or not content.strip():
            raise DecodeError("Empty XML response", response_data=content)
        return xml_to_dict(content)

    def cast(self, data: Any, target: Callable[..., Any]) -> Any:
        """
        Build a typed structure from decoded data.

        Dataclass targets only receive the fields they declare.
        """
        if not isinstance(data, dict):
            raise DecodeError(
                f"Cannot build {getattr(target, '__name__', target)} from {type(data).__name__}",
                response_data=data
            )

        if dataclasses.is_dataclass(target):
            names = {f.name for f in dataclasses.fields(target)}
            data = {k: v for k, v in data.items() if k in names}

        try:
            return target(**data)
        except TypeError as e:
            raise DecodeError(
                f"Response does not match {getattr(target, '__name__', target)}: {str(e)}",
                response_data=data
            ) from e
