"""
Common interface for the request signing schemes.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ..constants import SignVersion
from ..types import SignedRequest


class Signer(ABC):
    """
    Turns an endpoint, method and parameters into a SignedRequest.

    Implementations own the canonicalization rules of their scheme. The
    endpoint passed in has already been rewritten for the sandbox.
    """

    version: SignVersion

    @abstractmethod
    def sign(
        self,
        endpoint: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> SignedRequest:
        """
        Build a signed request.

        Args:
            endpoint: Endpoint path or absolute URL
            method: HTTP method
            params: Scheme-specific parameters (query for V1, signed fields for V2)
            options: Body fields and transport options ("headers", "query")
            defaults: Lowest-precedence fields merged under the caller's values

        Raises:
            SigningError: If key material is missing or invalid
            KeyResolutionError: If no secret key exists for the endpoint
        """


def is_read_only(method: str) -> bool:
    """Check whether a method carries no signed body."""
    return method.upper() == 'GET'
