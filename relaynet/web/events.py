"""Request messages accepted by the request console.

A ``RequestEvent`` packages the parameters of one request; a
``RelayProxyRequestEvent`` additionally names the relay it should go through.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from ..core.models import ContentType, HttpVerb
from ..core.resolver import is_absolute

CONTENT_TYPE_NAMES = {
    "json": ContentType.JSON,
    "plain_text": ContentType.PLAIN_TEXT,
    "jpeg": ContentType.JPEG,
    "png": ContentType.PNG,
    "binary": ContentType.BINARY,
}


class InvalidRequestEvent(ValueError):
    """Raised when a console payload cannot be turned into a request."""


@dataclass(frozen=True)
class RequestEvent:
    # Absolute, or an endpoint relative to the configured base URL.
    url: str
    verb: HttpVerb
    headers: Dict[str, str] = field(default_factory=dict)
    payload: Optional[str] = None
    content_type: Optional[ContentType] = None


@dataclass(frozen=True)
class RelayProxyRequestEvent(RequestEvent):
    relay_proxy_url: str = ""


def _content_type(value: Any) -> Optional[ContentType]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in CONTENT_TYPE_NAMES:
        return CONTENT_TYPE_NAMES[text.lower()]
    if "/" in text:
        return ContentType.of(text)
    raise InvalidRequestEvent(f"Unknown content_type: {value!r}")


def parse_event(payload: Mapping[str, Any]) -> Union[RequestEvent, RelayProxyRequestEvent]:
    """Build a request event from a JSON payload.

    Raises:
        InvalidRequestEvent: If a field is missing or malformed.
    """
    url = payload.get("url")
    if not isinstance(url, str) or not url.strip():
        raise InvalidRequestEvent("url is required")

    try:
        verb = HttpVerb(str(payload.get("verb", "GET")).upper())
    except ValueError as e:
        raise InvalidRequestEvent(f"Unsupported verb: {payload.get('verb')!r}") from e

    headers = payload.get("headers") or {}
    if not isinstance(headers, dict):
        raise InvalidRequestEvent("headers must be an object")

    body = payload.get("payload")
    if body is not None and not isinstance(body, str):
        raise InvalidRequestEvent("payload must be a string")

    fields = dict(
        url=url,
        verb=verb,
        headers={str(k): str(v) for k, v in headers.items()},
        payload=body,
        content_type=_content_type(payload.get("content_type")),
    )

    relay_proxy_url = payload.get("relay_proxy_url")
    if relay_proxy_url is None:
        return RequestEvent(**fields)
    if not isinstance(relay_proxy_url, str) or not is_absolute(relay_proxy_url):
        raise InvalidRequestEvent("relay_proxy_url must be an absolute URL")
    return RelayProxyRequestEvent(relay_proxy_url=relay_proxy_url, **fields)
