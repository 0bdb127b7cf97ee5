"""
Constants for the APIG signing client.
Compatible with the API gateway SDK-HMAC-SHA256 signing scheme.
"""

# Signing scheme
SIGN_ALGORITHM = "SDK-HMAC-SHA256"
DATE_FORMAT = "%Y%m%dT%H%M%SZ"  # YYYYMMDDThhmmssZ, always UTC

# HTTP Headers
HEADER_X_DATE = "X-Sdk-Date"
HEADER_HOST = "host"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_SHA256 = "X-Sdk-Content-Sha256"
HEADER_CONTENT_TYPE = "Content-Type"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Default exchange-rate client configuration
DEFAULT_CONFIG = {
    'timeout': 10,  # HTTP timeout in seconds
}
