import logging
import socket
import traceback
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import requests
from requests.structures import CaseInsensitiveDict

from ..core.classification import classify_response
from ..core.interceptors import Interceptor, apply_interceptors
from ..core.models import (
    ContentType,
    Failure,
    HttpVerb,
    NoInternetConnectionError,
    Request,
    RequestTimeoutError,
    Result,
    Success,
    UnknownError,
)
from ..core.resolver import is_absolute, resolve_uri

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5 * 60

Body = Union[bytes, str, None]

# Failures below the HTTP layer that mean the host could not be reached.
CONNECTIVITY_ERRORS = (requests.ConnectionError, ConnectionError, socket.gaierror)


class NetworkingClient:
    """Client for an HTTP API rooted at a single base URL.

    ``send`` never raises: every outcome is returned as a ``Success`` holding
    one of the response variants, or a ``Failure`` holding a request error.
    Responses with a failing status code are still a ``Success`` carrying an
    ``ErrorResponse``.

    The transport is a ``requests.Session`` (or anything with the same
    ``send`` method), injected so tests can replace it. Each call is dispatched
    on its own worker thread and given ``timeout`` seconds from that moment; a
    call that misses the deadline is abandoned and reported as
    ``RequestTimeoutError``.

    Attributes:
        base_url: Absolute URL every endpoint is resolved against.
        session: The transport used to dispatch requests.
        timeout: Per-call deadline in seconds.
        interceptors: Request rewrites applied in order before dispatch.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        interceptors: Iterable[Interceptor] = (),
    ):
        if not is_absolute(base_url):
            raise ValueError(f"base_url must be an absolute URL, got {base_url!r}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.base_url = base_url
        self.timeout = timeout
        self.interceptors: Tuple[Interceptor, ...] = tuple(interceptors)
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> "NetworkingClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def get(
        self,
        endpoint: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        return self.send(self._build(HttpVerb.GET, endpoint, headers, query))

    def post(
        self,
        endpoint: str,
        *,
        body: Body = None,
        content_type: ContentType = ContentType.JSON,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        return self.send(self._build(HttpVerb.POST, endpoint, headers, query, content_type, body))

    def put(
        self,
        endpoint: str,
        *,
        body: Body = None,
        content_type: ContentType = ContentType.JSON,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        return self.send(self._build(HttpVerb.PUT, endpoint, headers, query, content_type, body))

    def patch(
        self,
        endpoint: str,
        *,
        body: Body = None,
        content_type: ContentType = ContentType.JSON,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        return self.send(self._build(HttpVerb.PATCH, endpoint, headers, query, content_type, body))

    def delete(
        self,
        endpoint: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        return self.send(self._build(HttpVerb.DELETE, endpoint, headers, query))

    def _build(
        self,
        verb: HttpVerb,
        endpoint: str,
        headers: Optional[Mapping[str, str]],
        query: Optional[Mapping[str, Any]],
        content_type: Optional[ContentType] = None,
        body: Body = None,
    ) -> Request:
        return Request(
            verb=verb,
            uri=resolve_uri(self.base_url, endpoint, query),
            headers=headers or {},
            content_type=content_type,
            body=body,
        )

    def send(self, request: Request) -> Result:
        """Send a request and classify the outcome.

        Args:
            request: The request to send. Interceptors are applied to it first.

        Returns:
            ``Success`` with a response variant, or ``Failure`` with one of
            ``RequestTimeoutError``, ``NoInternetConnectionError`` or
            ``UnknownError``.
        """
        try:
            outgoing = apply_interceptors(self.interceptors, request)
            if not is_absolute(outgoing.uri):
                return Failure(UnknownError(cause=f"Request URI is not absolute: {outgoing.uri!r}"))

            logger.debug("Making %s request to %s", outgoing.verb.value, outgoing.uri)
            status_code, headers, body = self._dispatch_with_deadline(outgoing)
        except (FutureTimeoutError, requests.Timeout) as e:
            cause = str(e) or f"Request timed out after {self.timeout} seconds"
            logger.warning("%s %s timed out: %s", request.verb.value, request.uri, cause)
            return Failure(RequestTimeoutError(cause=cause, stack_trace=traceback.format_exc()))
        except CONNECTIVITY_ERRORS as e:
            logger.warning("%s %s could not connect: %s", request.verb.value, request.uri, e)
            return Failure(NoInternetConnectionError(cause=str(e), stack_trace=traceback.format_exc()))
        except Exception as e:
            logger.warning("%s %s failed: %s", request.verb.value, request.uri, e)
            return Failure(UnknownError(cause=str(e), stack_trace=traceback.format_exc()))

        content_type = ContentType.of(headers.get("content-type"))
        logger.debug("%s %s returned %d (%s)", outgoing.verb.value, outgoing.uri, status_code, content_type.name)
        return Success(classify_response(status_code, content_type, body, headers))

    def _dispatch_with_deadline(self, request: Request) -> Tuple[int, CaseInsensitiveDict, bytes]:
        # One worker per call: the deadline starts at dispatch and an abandoned
        # call holds no thread another call is waiting for.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="relaynet-dispatch")
        try:
            return executor.submit(self._dispatch, request).result(timeout=self.timeout)
        finally:
            executor.shutdown(wait=False)

    def _dispatch(self, request: Request) -> Tuple[int, CaseInsensitiveDict, bytes]:
        headers = CaseInsensitiveDict(request.headers)
        if request.content_type is not None:
            headers["Content-Type"] = request.content_type.mime

        prepared = requests.Request(
            method=request.verb.value,
            url=request.uri,
            headers=headers,
            data=request.body,
        ).prepare()

        response = self.session.send(prepared, timeout=self.timeout, stream=True)
        try:
            body = response.content
        finally:
            response.close()
        return response.status_code, CaseInsensitiveDict(response.headers), body
