from datetime import timedelta
from types import MappingProxyType

import httpx

from .client import ClientConfig, FlexHttp
from .configs import FlexHttpSettings, load_settings
from .interceptors import Interceptor


class FlexHttpBuilder:
    """Fluent configuration surface for ``FlexHttp``.

    Defaults come from ``FlexHttpSettings`` (``FLEX_HTTP_*`` environment
    variables); every ``with_*`` call overrides them.
    """

    def __init__(self, base_url: str | None = None, settings: FlexHttpSettings | None = None):
        settings = settings or load_settings()
        self.base_url = base_url
        self.default_headers: dict[str, str] = {}
        self.timeout: float = settings.TIMEOUT
        self.interceptors: list[Interceptor] = []
        self.max_retries: int = settings.MAX_RETRIES
        self.enable_logging: bool = settings.ENABLE_LOGGING
        self.max_connections_per_host: int = settings.MAX_CONNECTIONS_PER_HOST
        self.retry_base_delay: float = settings.RETRY_BASE_DELAY
        self.keepalive_expiry: float = settings.KEEPALIVE_EXPIRY
        self.transport: httpx.AsyncBaseTransport | None = None

    def with_base_url(self, url: str) -> "FlexHttpBuilder":
        self.base_url = url
        return self

    def with_header(self, key: str, value: str) -> "FlexHttpBuilder":
        self.default_headers[key] = value
        return self

    def with_timeout(self, timeout: float | timedelta) -> "FlexHttpBuilder":
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        return self

    def with_interceptor(self, interceptor: Interceptor) -> "FlexHttpBuilder":
        self.interceptors.append(interceptor)
        return self

    def with_max_retries(self, retries: int) -> "FlexHttpBuilder":
        if retries < 0:
            raise ValueError("max retries must be >= 0")
        self.max_retries = retries
        return self

    def with_logging(self, enable: bool = True) -> "FlexHttpBuilder":
        self.enable_logging = enable
        return self

    def with_max_connections(self, max_connections: int) -> "FlexHttpBuilder":
        if max_connections <= 0:
            raise ValueError("max connections must be positive")
        self.max_connections_per_host = max_connections
        return self

    def with_retry_delay(self, delay: float | timedelta) -> "FlexHttpBuilder":
        if isinstance(delay, timedelta):
            delay = delay.total_seconds()
        if delay < 0:
            raise ValueError("retry delay must be >= 0")
        self.retry_base_delay = delay
        return self

    def with_transport(self, transport: httpx.AsyncBaseTransport) -> "FlexHttpBuilder":
        self.transport = transport
        return self

    def build(self) -> FlexHttp:
        config = ClientConfig(
            base_url=self.base_url,
            default_headers=MappingProxyType(dict(self.default_headers)),
            timeout=self.timeout,
            max_retries=self.max_retries,
            enable_logging=self.enable_logging,
            interceptors=tuple(self.interceptors),
            max_connections_per_host=self.max_connections_per_host,
            retry_base_delay=self.retry_base_delay,
            keepalive_expiry=self.keepalive_expiry,
        )
        return FlexHttp(config, transport=self.transport)
