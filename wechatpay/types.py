"""
Value types passed between the request builder, signers and transport.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .constants import HashType, SignVersion


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if mapping is None:
        return None
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RequestSignChain:
    """The exact method, URL and body fed to the RSA signer."""
    method: str
    canonical_url: str
    sign_body: str = ""


@dataclass(frozen=True)
class SignedRequest:
    """
    A fully signed request, ready for the transport.

    ``url`` is the endpoint without query string; ``canonical_url`` is the
    URL that was signed. For V1 requests the query string embedded in
    ``canonical_url`` is built from the same sorted ``query`` mapping,
    percent-encoded exactly as the transport sends it.
    """
    method: str
    url: str
    canonical_url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Optional[Mapping[str, Any]] = None
    body: Optional[str] = None
    version: SignVersion = SignVersion.V1

    def __post_init__(self):
        object.__setattr__(self, 'headers', _freeze(self.headers))
        object.__setattr__(self, 'query', _freeze(self.query))


@dataclass(frozen=True)
class RequestDownload:
    """Download descriptor returned by bill and statement APIs."""
    download_url: str
    hash_type: str = HashType.SHA1.value
    hash_value: str = ""
