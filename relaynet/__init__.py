"""HTTP client that classifies responses instead of raising, with relay proxy support."""

from .clients.factory import build_client
from .clients.http import DEFAULT_TIMEOUT, NetworkingClient
from .clients.proxy import (
    ALWAYS_INCLUDE_BODY_HEADER,
    BYPASS_EXPOSE_HEADERS_HEADER,
    RELAY_DESTINATION_URL_HEADER,
    ProxyConfiguration,
    ProxyNetworkingClient,
    RelayProxyConfiguration,
    RelayProxyNetworkingClient,
)
from .config.config import ClientConfig, ConfigurationError, load_config
from .core.interceptors import BearerTokenInterceptor, HeadersInterceptor, Interceptor, apply_interceptors
from .core.models import (
    BinaryResponse,
    ContentType,
    ErrorResponse,
    Failure,
    Headers,
    HttpVerb,
    JpegImageResponse,
    JsonResponse,
    NoInternetConnectionError,
    PlainTextResponse,
    PngImageResponse,
    Request,
    RequestError,
    RequestTimeoutError,
    Response,
    Result,
    Success,
    UnknownError,
)
from .core.resolver import resolve_uri
