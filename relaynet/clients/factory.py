import logging
from typing import List, Optional

import requests

from ..config.config import ClientConfig
from ..core.interceptors import BearerTokenInterceptor, HeadersInterceptor, Interceptor
from .http import NetworkingClient
from .proxy import RelayProxyNetworkingClient

logger = logging.getLogger(__name__)


def build_client(config: ClientConfig, session: Optional[requests.Session] = None) -> NetworkingClient:
    """Wire a client from configuration.

    Fixed headers are applied first, then the bearer token, and the relay
    rewrite (when ``relay_url`` is set) last.
    """
    interceptors: List[Interceptor] = []
    if config.headers:
        interceptors.append(HeadersInterceptor(config.headers))
    if config.auth_token:
        interceptors.append(BearerTokenInterceptor(config.auth_token))

    client = NetworkingClient(
        base_url=config.base_url,
        session=session,
        timeout=config.timeout_seconds,
        interceptors=interceptors,
    )
    if not config.relay_url:
        return client

    logger.info("Routing requests for %s through relay %s", config.base_url, config.relay_url)
    return RelayProxyNetworkingClient(
        client=client,
        uri=config.relay_url,
        bypass_body_delete=config.bypass_body_delete,
        bypass_expose_headers=config.bypass_expose_headers,
    )
