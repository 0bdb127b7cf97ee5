"""
Custom exceptions for the APIG signing client.
"""


class APIGClientError(Exception):
    """Base exception for APIG client errors."""
    pass


class SigningError(APIGClientError):
    """Raised when a request cannot be signed."""
    pass


class BodyReadError(SigningError):
    """Raised when the request body cannot be read for hashing."""
    pass


class ConfigurationError(APIGClientError):
    """Raised when client configuration is invalid."""
    pass


class HTTPError(APIGClientError):
    """Raised when HTTP request fails."""
    pass


class ResponseError(APIGClientError):
    """Raised when the response body is not the expected JSON envelope."""
    pass


class ExchangeRateError(APIGClientError):
    """Raised when the gateway answers with success=false."""

    def __init__(self, msg: str, code: int = 0):
        super().__init__(msg)
        self.msg = msg
        self.code = code
