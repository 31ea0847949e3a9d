"""
Constants and enums for WeChat Pay gateway operations.
"""

from enum import Enum


class SignVersion(str, Enum):
    """Request signing schemes."""
    V1 = "V1"  # SHA256-with-RSA, JSON body
    V2 = "V2"  # shared secret, XML body


class SignType(str, Enum):
    """Digest algorithms accepted by the legacy scheme."""
    MD5 = "MD5"
    HMAC_SHA256 = "HMAC-SHA256"


class ResponseType(str, Enum):
    """Shapes a response body can be decoded into."""
    JSON = "json"
    XML = "xml"
    RAW = "raw"


class HashType(str, Enum):
    """Checksum algorithms for downloaded files."""
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    MD5 = "MD5"


# API Endpoints
class APIEndpoints:
    """WeChat Pay API endpoints used by the client core."""
    SANDBOX_SIGN_KEY = "sandboxnew/pay/getsignkey"


# Headers
AUTHORIZATION_HEADER = "Authorization"
SERIAL_HEADER = "Wechatpay-Serial"
AUTH_SCHEMA = "WECHATPAY2-SHA256-RSA2048"

# Signing settings
NONCE_LENGTH = 32
SECRET_KEY_LENGTH = 32
SANDBOX_PREFIX = "sandboxnew/"
V1_ENDPOINT_PREFIX = "v3/"

# Default settings
DEFAULT_BASE_URI = "https://api.mch.weixin.qq.com/"
DEFAULT_TIMEOUT = 30  # seconds
DOWNLOAD_CHUNK_SIZE = 64 * 1024
