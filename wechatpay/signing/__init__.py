"""
Request signing schemes for the WeChat Pay gateway.
"""

from .base import Signer
from .rsa import SHA256WithRSASigner, RSARequestSigner, load_private_key
from .legacy import LegacyRequestSigner, generate_sign, verify_sign

__all__ = [
    'Signer',
    'SHA256WithRSASigner',
    'RSARequestSigner',
    'load_private_key',
    'LegacyRequestSigner',
    'generate_sign',
    'verify_sign',
]
