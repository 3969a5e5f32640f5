"""Target URL extraction from the request path."""

import re
from urllib.parse import quote, unquote_to_bytes

import httpx

from core.exceptions import DecodeError, InvalidTargetError

INVALID_ENCODING_MESSAGE = "Invalid URL encoding."

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_COMPONENT_SAFE = "!*'()"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_component(value: str) -> str:
    """Strictly percent-decode a path component into UTF-8 text."""
    if _BAD_ESCAPE.search(value):
        raise DecodeError(INVALID_ENCODING_MESSAGE)
    try:
        return unquote_to_bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(INVALID_ENCODING_MESSAGE) from e


def encode_component(value: str) -> str:
    """Percent-encode a value for embedding in a single path segment."""
    return quote(value, safe=_COMPONENT_SAFE)


def ensure_scheme(url: str, scheme: str) -> str:
    """Prefix the incoming request's scheme when the URL carries none."""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"{scheme}://{url}"


def extract_target_url(raw_path: str, query: str, scheme: str) -> httpx.URL:
    """Build the absolute target URL embedded in the request path.

    Args:
        raw_path: Request path exactly as received, still percent-encoded.
        query: Raw query string without the leading "?".
        scheme: Scheme of the incoming request ("http" or "https").

    Returns:
        Absolute target URL with an explicit scheme and host.

    Raises:
        DecodeError: The path is not valid percent-encoded UTF-8.
        InvalidTargetError: The decoded value is not an absolute URL.
    """
    decoded = decode_component(raw_path.removeprefix("/"))
    target = ensure_scheme(decoded, scheme)
    if query:
        target += f"?{query}"

    try:
        url = httpx.URL(target)
    except httpx.InvalidURL as e:
        raise InvalidTargetError(f"Invalid URL: {e}", target=target) from e
    if not url.host:
        raise InvalidTargetError(f"Invalid URL: {target}", target=target)
    return url


def origin_of(url: httpx.URL) -> str:
    """Return scheme://host[:port] of a URL."""
    netloc = url.netloc.decode("ascii")
    return f"{url.scheme}://{netloc}"


def proxy_path(url: httpx.URL | str) -> str:
    """Express an absolute URL as a path routed through the gateway."""
    return "/" + encode_component(str(url))
