from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit


def is_absolute(uri: str) -> bool:
    parts = urlsplit(uri)
    return bool(parts.scheme and parts.netloc)


def resolve_uri(base: str, endpoint: str, query: Optional[Mapping[str, Any]] = None) -> str:
    """Join a base URL, an endpoint path and optional query parameters.

    Exactly one "/" separates the base path from the endpoint, whatever
    separators either side already carries. An empty endpoint keeps the base
    path as it is. The base's own query and fragment are replaced by
    ``query``; an empty mapping produces no query string.

    Args:
        base: Absolute base URL (e.g., "https://api.example.com/v1").
        endpoint: Path relative to the base (e.g., "users").
        query: Optional query parameters. Sequence values become repeated keys.

    Returns:
        The resolved absolute URL.
    """
    parts = urlsplit(base)
    path = parts.path
    if endpoint:
        path = path.rstrip("/") + "/" + endpoint.lstrip("/")
    query_string = urlencode(query, doseq=True) if query else ""
    return urlunsplit((parts.scheme, parts.netloc, path, query_string, ""))
