"""
Custom exceptions for WeChat Pay gateway operations.
"""


class WeChatPayException(Exception):
    """Base exception for all WeChat Pay-related errors."""
    
    def __init__(self, message, error_code=None, response_data=None):
        self.message = message
        self.error_code = error_code
        self.response_data = response_data
        super().__init__(self.message)


class ConfigurationError(WeChatPayException):
    """Raised when there's a configuration issue."""
    pass


class SigningError(WeChatPayException):
    """Raised when private key material is missing or cannot sign a request."""
    pass


class KeyResolutionError(WeChatPayException):
    """Raised when no secret key can be resolved for an endpoint."""
    pass


class TransportError(WeChatPayException):
    """Raised when the HTTP transport fails (connection, TLS, timeout)."""
    pass


class APIError(WeChatPayException):
    """Raised when the gateway answers with an error status."""
    pass


class DecodeError(WeChatPayException):
    """Raised when a response body cannot be parsed."""
    pass


class CorruptedFileError(WeChatPayException):
    """Raised when a downloaded file does not match its expected checksum."""
    pass


class ValidationError(WeChatPayException):
    """Raised when input validation fails."""
    pass
