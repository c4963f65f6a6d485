"""Value types shared by the networking clients.

Requests, responses, transport errors and the result wrapper are all frozen
dataclasses. A rewrite of a request produces a new value through
``Request.copy_with`` instead of mutating the original.
"""

import dataclasses
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterator, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict


class HttpVerb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ContentType(Enum):
    """Media types understood by the clients, keyed to their MIME strings."""

    JSON = "application/json"
    PLAIN_TEXT = "text/plain"
    JPEG = "image/jpeg"
    PNG = "image/png"
    BINARY = "application/octet-stream"

    @property
    def mime(self) -> str:
        return self.value

    @classmethod
    def of(cls, header_value: Optional[str]) -> "ContentType":
        """Detect a content type from a ``Content-Type`` header value.

        Parameters such as ``charset`` are ignored. Missing or unknown media
        types fall back to ``BINARY``.
        """
        if not header_value:
            return cls.BINARY
        media_type = header_value.split(";", 1)[0].strip().lower()
        for member in cls:
            if member.value == media_type:
                return member
        return cls.BINARY


class Headers(Mapping):
    """Read-only, case-insensitive header mapping.

    When two keys differ only in case, the later one wins.
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self._store = CaseInsensitiveDict(data or {})

    def __getitem__(self, key: str) -> str:
        return self._store[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self._store == CaseInsensitiveDict(other)

    def __hash__(self) -> int:
        return hash(frozenset(self._store.lower_items()))

    def __repr__(self) -> str:
        return f"Headers({dict(self._store)!r})"


@dataclass(frozen=True)
class Request:
    """An outgoing HTTP request with a fully resolved URI."""

    verb: HttpVerb
    uri: str
    headers: Mapping[str, str] = dataclasses.field(default_factory=Headers)
    content_type: Optional[ContentType] = None
    body: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "verb", HttpVerb(self.verb))
        object.__setattr__(self, "headers", Headers(self.headers))
        if isinstance(self.body, str):
            object.__setattr__(self, "body", self.body.encode("utf-8"))

    def copy_with(self, **changes: Any) -> "Request":
        return dataclasses.replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> "Request":
        """Return a copy with ``headers`` merged over the current ones."""
        merged = CaseInsensitiveDict(self.headers)
        merged.update(headers)
        return self.copy_with(headers=merged)


@dataclass(frozen=True)
class Response:
    body: bytes
    status_code: int
    headers: Mapping[str, str] = dataclasses.field(default_factory=Headers)

    def __post_init__(self):
        object.__setattr__(self, "headers", Headers(self.headers))

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass(frozen=True)
class JsonResponse(Response):
    content_type: ClassVar[ContentType] = ContentType.JSON


@dataclass(frozen=True)
class PlainTextResponse(Response):
    content_type: ClassVar[ContentType] = ContentType.PLAIN_TEXT


@dataclass(frozen=True)
class JpegImageResponse(Response):
    content_type: ClassVar[ContentType] = ContentType.JPEG


@dataclass(frozen=True)
class PngImageResponse(Response):
    content_type: ClassVar[ContentType] = ContentType.PNG


@dataclass(frozen=True)
class BinaryResponse(Response):
    content_type: ClassVar[ContentType] = ContentType.BINARY


@dataclass(frozen=True)
class ErrorResponse(Response):
    """A completed exchange whose status code signals failure.

    The detected content type is kept so the caller can still decode the
    error payload.
    """

    content_type: ContentType = ContentType.BINARY


@dataclass(frozen=True)
class RequestError:
    """A request that never produced an HTTP response."""

    cause: str
    stack_trace: str = ""


@dataclass(frozen=True)
class RequestTimeoutError(RequestError):
    pass


@dataclass(frozen=True)
class NoInternetConnectionError(RequestError):
    pass


@dataclass(frozen=True)
class UnknownError(RequestError):
    pass


@dataclass(frozen=True)
class Success:
    response: Response

    is_success: ClassVar[bool] = True
    is_failure: ClassVar[bool] = False


@dataclass(frozen=True)
class Failure:
    error: RequestError

    is_success: ClassVar[bool] = False
    is_failure: ClassVar[bool] = True


Result = Union[Success, Failure]
