"""Clients that route every request through a proxy.

A proxy configuration is an interceptor: it rewrites each outgoing request
so it is addressed to the proxy. The proxy clients register it after any
other interceptors so it sees the final headers.

The relay proxy expects the original destination in ``X-RELAY-URL`` and
honours two optional flags:

- ``X-INCLUDE-BODY``: keep the body even for verbs that normally drop it.
- ``X-BYPASS-EXPOSE-HEADERS``: skip the relay's header exposure filter.
"""

import logging
from typing import Dict, Iterable, Optional

from ..core.interceptors import Interceptor
from ..core.models import Request
from ..core.resolver import is_absolute
from .http import NetworkingClient

logger = logging.getLogger(__name__)

RELAY_DESTINATION_URL_HEADER = "X-RELAY-URL"
ALWAYS_INCLUDE_BODY_HEADER = "X-INCLUDE-BODY"
BYPASS_EXPOSE_HEADERS_HEADER = "X-BYPASS-EXPOSE-HEADERS"

BYPASS_HEADER_VALUE = "true"


class ProxyConfiguration:
    """Base class for request rewrites that redirect traffic to a proxy."""

    def __init__(self, uri: str):
        if not is_absolute(uri):
            raise ValueError(f"proxy uri must be an absolute URL, got {uri!r}")
        self.uri = uri

    def rewrite(self, request: Request) -> Request:
        raise NotImplementedError

    def intercept(self, request: Request) -> Request:
        return self.rewrite(request)


class RelayProxyConfiguration(ProxyConfiguration):
    def __init__(self, uri: str, bypass_body_delete: bool = False, bypass_expose_headers: bool = False):
        super().__init__(uri)
        self.bypass_body_delete = bypass_body_delete
        self.bypass_expose_headers = bypass_expose_headers

    def rewrite(self, request: Request) -> Request:
        relay_headers: Dict[str, str] = {RELAY_DESTINATION_URL_HEADER: request.uri}
        if self.bypass_body_delete:
            relay_headers[ALWAYS_INCLUDE_BODY_HEADER] = BYPASS_HEADER_VALUE
        if self.bypass_expose_headers:
            relay_headers[BYPASS_EXPOSE_HEADERS_HEADER] = BYPASS_HEADER_VALUE

        logger.debug("Relaying %s %s through %s", request.verb.value, request.uri, self.uri)
        return request.with_headers(relay_headers).copy_with(uri=self.uri)


class ProxyNetworkingClient(NetworkingClient):
    """A ``NetworkingClient`` whose requests all pass through a proxy.

    Reuses the wrapped client's base URL and session. The proxy rewrite is
    registered last, after ``interceptors`` (which default to the wrapped
    client's own). Closing the proxy client closes the wrapped client too.
    """

    def __init__(
        self,
        client: NetworkingClient,
        proxy_configuration: ProxyConfiguration,
        timeout: Optional[float] = None,
        interceptors: Optional[Iterable[Interceptor]] = None,
    ):
        if interceptors is None:
            interceptors = client.interceptors
        super().__init__(
            base_url=client.base_url,
            session=client.session,
            timeout=timeout if timeout is not None else client.timeout,
            interceptors=(*interceptors, proxy_configuration),
        )
        self.client = client
        self.proxy_configuration = proxy_configuration

    def close(self) -> None:
        super().close()
        self.client.close()


class RelayProxyNetworkingClient(ProxyNetworkingClient):
    def __init__(
        self,
        client: NetworkingClient,
        uri: str,
        timeout: Optional[float] = None,
        interceptors: Optional[Iterable[Interceptor]] = None,
        bypass_body_delete: bool = False,
        bypass_expose_headers: bool = False,
    ):
        super().__init__(
            client=client,
            proxy_configuration=RelayProxyConfiguration(
                uri=uri,
                bypass_body_delete=bypass_body_delete,
                bypass_expose_headers=bypass_expose_headers,
            ),
            timeout=timeout,
            interceptors=interceptors,
        )
