"""Configurable async HTTP client."""

from .builder import FlexHttpBuilder
from .cache import ResponseCache, build_cache_key
from .client import ClientConfig, FlexHttp
from .codec import DecodingError, EncodingError
from .configs import FlexHttpSettings
from .exceptions import (
    FlexHttpError,
    NetworkError,
    RequestCancelledError,
    RequestTimeoutError,
    UnsupportedMethodError,
)
from .interceptors import HeadersInterceptor, Interceptor, InterceptorChain, LoggingInterceptor
from .log import init_logging
from .models import ContextState, RequestContext, Response, StreamResponse
from .pool import PoolLimits
from .streaming import ResponseStream
from .types import Decoder, LineDecoder

__all__ = [
    "FlexHttp",
    "FlexHttpBuilder",
    "ClientConfig",
    "FlexHttpSettings",
    "PoolLimits",
    "RequestContext",
    "ContextState",
    "Response",
    "StreamResponse",
    "ResponseStream",
    "ResponseCache",
    "build_cache_key",
    "Interceptor",
    "InterceptorChain",
    "LoggingInterceptor",
    "HeadersInterceptor",
    "Decoder",
    "LineDecoder",
    "FlexHttpError",
    "NetworkError",
    "RequestTimeoutError",
    "RequestCancelledError",
    "UnsupportedMethodError",
    "EncodingError",
    "DecodingError",
    "init_logging",
]
