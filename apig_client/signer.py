"""
SDK-HMAC-SHA256 request signer.

Signs ``requests.PreparedRequest`` objects for the API gateway: stamps the
``X-Sdk-Date`` header, builds the canonical request over every header
present, and sets the ``Authorization`` header.
"""

import datetime
import hashlib
import hmac
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests
from requests.auth import AuthBase

from .canonical import canonical_request, header_value, signed_headers
from .constants import (
    DATE_FORMAT,
    HEADER_AUTHORIZATION,
    HEADER_X_DATE,
    SIGN_ALGORITHM,
)
from .exceptions import SigningError

_DATE_RE = re.compile(r"\d{8}T\d{6}Z")


@dataclass(frozen=True)
class SigningKey:
    """Access key / secret key pair used to sign requests."""

    access_key_id: str
    secret_key: str

    def __repr__(self) -> str:
        return f"SigningKey(access_key_id={self.access_key_id!r}, secret_key='***')"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def format_date(timestamp: datetime.datetime) -> str:
    """Format ``timestamp`` as ``YYYYMMDDThhmmssZ`` in UTC (naive means UTC)."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(datetime.timezone.utc)
    return timestamp.strftime(DATE_FORMAT)


def parse_date(value: Optional[str]) -> Optional[datetime.datetime]:
    """
    Parse an ``X-Sdk-Date`` value.

    Returns:
        Aware UTC datetime, or None if the value is missing or not in the
        exact ``YYYYMMDDThhmmssZ`` form
    """
    if not value or not _DATE_RE.fullmatch(value):
        return None
    try:
        parsed = datetime.datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=datetime.timezone.utc)


def string_to_sign(canonical: str, timestamp: datetime.datetime) -> str:
    """Build the string to sign from a canonical request and its timestamp."""
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{SIGN_ALGORITHM}\n{format_date(timestamp)}\n{digest}"


def sign_string_to_sign(string: str, signing_key: bytes) -> str:
    """Hex-encoded HMAC-SHA256 of ``string`` keyed with ``signing_key``."""
    mac = hmac.new(signing_key, string.encode("utf-8"), hashlib.sha256)
    return mac.hexdigest()


def auth_header_value(signature: str, access_key: str, signed_headers: List[str]) -> str:
    """Format the ``Authorization`` header value."""
    return (
        f"{SIGN_ALGORITHM} Access={access_key}, "
        f"SignedHeaders={';'.join(signed_headers)}, "
        f"Signature={signature}"
    )


class Signer:
    """
    Signs HTTP requests with an access key / secret key pair.

    The signer keeps no per-request state and may be shared between
    threads, but a single request must not be signed concurrently: signing
    rewrites its query string, headers and possibly its body.

    Every header present when ``sign`` is called is signed. Headers must
    be final before signing; any header added afterwards makes the
    gateway reject the signature.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ):
        """
        Initialize signer.

        Args:
            access_key: Public access key id, sent in the Authorization header
            secret_key: Secret key used as the raw HMAC key
            logger: Logger for debug output (defaults to the module logger)
            clock: Returns the current time when a request has no valid date
        """
        self._key = SigningKey(access_key, secret_key)
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock or _utcnow

    @property
    def key(self) -> SigningKey:
        return self._key

    def sign(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        """
        Sign ``request`` in place.

        A valid ``X-Sdk-Date`` header is reused as the signing time; a
        missing or malformed one is overwritten with the current time.

        Args:
            request: Prepared request with all headers final

        Returns:
            The same request, now carrying the Authorization header

        Raises:
            BodyReadError: If the body cannot be read for hashing
            SigningError: If hashing or HMAC computation fails
        """
        timestamp = parse_date(header_value(request, HEADER_X_DATE))
        if timestamp is None:
            timestamp = self._clock()
            request.headers[HEADER_X_DATE] = format_date(timestamp)

        names = signed_headers(request)
        try:
            canonical = canonical_request(request, names)
            signature = sign_string_to_sign(
                string_to_sign(canonical, timestamp),
                self._key.secret_key.encode("utf-8"),
            )
        except (ValueError, TypeError) as e:
            raise SigningError(f"Failed to sign request: {e}") from e

        request.headers[HEADER_AUTHORIZATION] = auth_header_value(
            signature, self._key.access_key_id, names
        )
        self.logger.debug(
            "Signed %s %s at %s with headers %s",
            request.method, request.url, format_date(timestamp), ";".join(names),
        )
        return request


class SignerAuth(AuthBase):
    """
    ``requests`` auth hook that signs each prepared request.

    Example:
        session.post(url, data=form, auth=SignerAuth(signer))
    """

    def __init__(self, signer: Signer):
        self.signer = signer

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        return self.signer.sign(request)
