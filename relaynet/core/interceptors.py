"""Request interceptors applied before a request reaches the transport."""

import logging
from typing import Iterable, Mapping, Protocol, runtime_checkable

from .models import Request

logger = logging.getLogger(__name__)


@runtime_checkable
class Interceptor(Protocol):
    def intercept(self, request: Request) -> Request:
        ...


def apply_interceptors(interceptors: Iterable[Interceptor], request: Request) -> Request:
    """Run every interceptor once, in registration order.

    Each interceptor receives the previous one's output, so later
    interceptors see and may override what earlier ones set.
    """
    for interceptor in interceptors:
        request = interceptor.intercept(request)
        logger.debug("Interceptor %s produced %s %s", type(interceptor).__name__, request.verb.value, request.uri)
    return request


class HeadersInterceptor:
    """Adds a fixed set of headers to every request."""

    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    def intercept(self, request: Request) -> Request:
        return request.with_headers(self.headers)


class BearerTokenInterceptor:
    def __init__(self, token: str):
        self.token = token

    def intercept(self, request: Request) -> Request:
        return request.with_headers({"Authorization": f"Bearer {self.token}"})
