"""
API Gateway signing client

A Python client library that signs requests with the gateway's
SDK-HMAC-SHA256 scheme and queries its exchange-rate endpoint.

Example usage:
    from apig_client import Signer

    signer = Signer("your-access-key", "your-secret-key")
    prepared = requests.Request("GET", "https://gateway.example.com/v1/rates").prepare()
    signer.sign(prepared)
"""

from .canonical import canonical_request, escape
from .client import ExchangeRateClient
from .config import config_from_env, load_config
from .exceptions import (
    APIGClientError,
    SigningError,
    BodyReadError,
    ConfigurationError,
    HTTPError,
    ResponseError,
    ExchangeRateError
)
from .constants import (
    SIGN_ALGORITHM,
    DATE_FORMAT,
    HEADER_X_DATE,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_SHA256,
    DEFAULT_CONFIG
)
from .models import ExchangeRateItem, ExchangeRateQueryResult
from .signer import Signer, SignerAuth, SigningKey

__version__ = "1.0.0"
__all__ = [
    "Signer",
    "SignerAuth",
    "SigningKey",
    "ExchangeRateClient",
    "ExchangeRateItem",
    "ExchangeRateQueryResult",
    "canonical_request",
    "escape",
    "load_config",
    "config_from_env",
    "APIGClientError",
    "SigningError",
    "BodyReadError",
    "ConfigurationError",
    "HTTPError",
    "ResponseError",
    "ExchangeRateError",
    "SIGN_ALGORITHM",
    "DATE_FORMAT",
    "HEADER_X_DATE",
    "HEADER_AUTHORIZATION",
    "HEADER_CONTENT_SHA256",
    "DEFAULT_CONFIG"
]
