"""
URL helpers for values that end up inside generated pages.

User-supplied path segments are percent-encoded before they are placed in
URLs, incoming segments are split before they are decoded, and configured
origins are reduced to scheme + host + port.
"""
from typing import List, Optional
from urllib.parse import quote, unquote, urlparse

# Characters encodeURIComponent leaves untouched, besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def split_path_segments(raw_path: bytes, prefix: str) -> Optional[List[str]]:
    """
    Split a still-encoded request path below ``prefix`` into decoded segments.

    Splitting happens before percent-decoding, so an encoded "/" (%2F) stays
    inside its segment. Empty segments are dropped.

    Args:
        raw_path: Request path as sent by the client, without the query string
        prefix: Leading path the route is mounted at, e.g. "/html"

    Returns:
        The decoded segments after ``prefix``, or None when the path does not
        start with ``prefix`` as a whole segment
    """
    path = raw_path.split(b"?", 1)[0].decode("utf-8", "replace")
    if path != prefix and not path.startswith(prefix + "/"):
        return None
    rest = path[len(prefix):]
    return [unquote(segment) for segment in rest.split("/") if segment]


def encode_path_segment(value: str) -> str:
    """
    Percent-encode ``value`` for use as a single URL path segment.

    Args:
        value: Decoded segment text

    Returns:
        The encoded segment; "/" and other reserved characters are escaped
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def normalize_origin(url: str) -> str:
    """
    Reduce ``url`` to its origin.

    Args:
        url: Absolute http(s) URL, with or without a path

    Returns:
        Origin string (scheme + host + non-default port, no trailing slash)

    Raises:
        ValueError: If the URL is not an absolute http or https URL
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Invalid scheme: {parsed.scheme!r}. Only http and https are allowed.")
    if not parsed.hostname:
        raise ValueError(f"Invalid origin {url!r}: missing hostname")

    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    origin = f"{parsed.scheme}://{host}"
    port = parsed.port
    if port is not None and not (
        (parsed.scheme == "http" and port == 80) or (parsed.scheme == "https" and port == 443)
    ):
        origin = f"{origin}:{port}"
    return origin
