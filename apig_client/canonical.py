"""
Canonical request construction for the SDK-HMAC-SHA256 signing scheme.

Every function here must reproduce, byte for byte, what the gateway's
verifier rebuilds from the request it receives. Requests are
``requests.PreparedRequest`` objects; the query string and the body of
the request may be rewritten in place so that the bytes sent on the wire
are the bytes that were signed.
"""

import hashlib
import io
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple, Union
from urllib.parse import unquote_to_bytes, urlsplit, urlunsplit

import requests

from .constants import HEADER_CONTENT_SHA256, HEADER_HOST
from .exceptions import BodyReadError

_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)


def should_escape(c: int) -> bool:
    """Return True if byte ``c`` must be percent-encoded."""
    return c not in _UNRESERVED


def escape(value: Union[str, bytes]) -> str:
    """
    Percent-encode every byte of ``value`` outside ``[A-Za-z0-9-_.~]``.

    Strings are UTF-8 encoded first, so non-ASCII characters become one
    ``%XX`` triplet per byte. Hex digits are uppercase.

    Args:
        value: Path segment, query key or query value

    Returns:
        Escaped ASCII string ("" for empty input)
    """
    if not value:
        return ""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return "".join(
        "%%%02X" % c if should_escape(c) else chr(c)
        for c in value
    )


def _header_values(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_header_text(v) for v in value]
    return [_header_text(value)]


def _header_text(value) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


def header_value(request: requests.PreparedRequest, name: str) -> Optional[str]:
    """Return the first value of header ``name`` (case-insensitive), or None."""
    values = _header_values(request.headers.get(name))
    return values[0] if values else None


def target_host(request: requests.PreparedRequest) -> str:
    """
    Host the request is sent to.

    A stored ``Host`` header is sent as-is by the transport, so it wins;
    otherwise the URL netloc (with port, without userinfo) is used.
    """
    host = header_value(request, HEADER_HOST)
    if host:
        return host
    return urlsplit(request.url).netloc.rpartition("@")[2]


def canonical_uri(request: requests.PreparedRequest) -> str:
    """
    Build the canonical URI of a request.

    Each ``/``-separated segment of the URL path is decoded and escaped on
    its own, so an encoded ``%2F`` inside a segment stays escaped instead
    of becoming a separator. The result always ends with ``/``.
    """
    path = urlsplit(request.url).path
    uri = "/".join(escape(unquote_to_bytes(segment)) for segment in path.split("/"))
    if not uri.endswith("/"):
        uri += "/"
    return uri


def _query_pairs(query: str) -> Iterator[Tuple[bytes, bytes]]:
    # form decoding: "+" is a space, "k" alone is "k="
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        yield (
            unquote_to_bytes(key.replace("+", " ")),
            unquote_to_bytes(value.replace("+", " ")),
        )


def canonical_query_string(request: requests.PreparedRequest) -> str:
    """
    Build the canonical query string and rewrite the request URL to use it.

    Keys are sorted, and the values of a repeated key are sorted as raw
    decoded bytes before escaping. Bytes that are not valid UTF-8 are kept
    as they are.

    Args:
        request: Prepared request; its ``url`` is updated in place

    Returns:
        ``k=v`` pairs joined with ``&`` ("" when there is no query)
    """
    parts = urlsplit(request.url)
    params = {}
    for key, value in _query_pairs(parts.query):
        params.setdefault(key, []).append(value)

    query = []
    for key in sorted(params):
        escaped_key = escape(key)
        for value in sorted(params[key]):
            query.append(f"{escaped_key}={escape(value)}")
    query_string = "&".join(query)

    request.url = urlunsplit(parts._replace(query=query_string))
    return query_string


def canonical_headers(request: requests.PreparedRequest, signed_headers: List[str]) -> str:
    """
    Build the newline-terminated canonical headers block.

    Lines follow the order of ``signed_headers``; several values of the
    same header are sorted. ``host`` comes from ``target_host`` since the
    transport adds it from the URL when no header is stored.

    Args:
        request: Prepared request
        signed_headers: Lowercase header names, already sorted

    Returns:
        ``name:value`` lines, each value stripped of surrounding whitespace
    """
    headers = {}
    for name, value in request.headers.items():
        headers[name.lower()] = _header_values(value)

    lines = []
    for name in signed_headers:
        values = headers.get(name, [])
        if name == HEADER_HOST:
            values = [target_host(request)]
        for value in sorted(values):
            lines.append(f"{name}:{value.strip()}")
    return "\n".join(lines) + "\n"


def signed_headers(request: requests.PreparedRequest) -> List[str]:
    """Lowercased, sorted names of every header currently on the request."""
    return sorted(name.lower() for name in request.headers)


def _drain(body) -> bytes:
    try:
        if isinstance(body, str):
            data = body
        elif hasattr(body, "read"):
            data = body.read()
        else:
            data = b"".join(
                chunk.encode("utf-8") if isinstance(chunk, str) else chunk
                for chunk in body
            )
    except (OSError, ValueError) as e:
        raise BodyReadError(f"Failed to read request body: {e}") from e
    if isinstance(data, str):
        data = data.encode("utf-8")
    return bytes(data)


@contextmanager
def buffered_body(request: requests.PreparedRequest) -> Iterator[bytes]:
    """
    Read the whole request body and hand it out as bytes.

    Once the body has been read, the request gets an equivalent body back
    on exit, whether or not the ``with`` block raised: file-like bodies are
    replaced with a fresh ``io.BytesIO``, text with the encoded bytes, and
    chunk iterables with a single-chunk list so a chunked transfer still
    iterates byte strings. A missing body reads as ``b""``.

    Raises:
        BodyReadError: If reading the body fails
    """
    body = request.body
    if body is None:
        yield b""
        return
    if isinstance(body, (bytes, bytearray)):
        yield bytes(body)
        return

    payload = _drain(body)
    try:
        yield payload
    finally:
        if hasattr(body, "read"):
            request.body = io.BytesIO(payload)
        elif isinstance(body, str):
            request.body = payload
        else:
            request.body = [payload]


def request_payload(request: requests.PreparedRequest) -> bytes:
    """Return the full request body, leaving it readable for the transport."""
    with buffered_body(request) as payload:
        return payload


def hex_encode_sha256(data: bytes) -> str:
    """Lowercase hex SHA-256 of ``data``."""
    return hashlib.sha256(data).hexdigest()


def canonical_request(request: requests.PreparedRequest, signed_headers: List[str]) -> str:
    """
    Build the canonical request string for ``request``.

    A caller-supplied ``X-Sdk-Content-Sha256`` header is used verbatim as
    the payload hash; otherwise the body is hashed.

    Args:
        request: Prepared request (query and body may be rewritten)
        signed_headers: Sorted lowercase header names to include

    Returns:
        Method, URI, query, headers block, signed header list and payload
        hash, separated by newlines

    Raises:
        BodyReadError: If the body cannot be read
    """
    content_hash = header_value(request, HEADER_CONTENT_SHA256)
    if not content_hash:
        with buffered_body(request) as payload:
            content_hash = hex_encode_sha256(payload)

    return "\n".join([
        request.method,
        canonical_uri(request),
        canonical_query_string(request),
        canonical_headers(request, signed_headers),
        ";".join(signed_headers),
        content_hash,
    ])
