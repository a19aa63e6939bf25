"""httpx-backed transport adapter.

An ``Exchange`` buffers headers and body until ``finalize()`` sends them, so
nothing reaches the network before the pre-send interceptors have run.
"""

import logging
from typing import Any

import httpx

from .pool import PoolLimits

logger = logging.getLogger(__name__)


class Exchange:
    """One outbound request/response interaction."""

    def __init__(self, client: httpx.AsyncClient, method: str, url: str) -> None:
        self.method = method
        self.url = url
        self.headers = httpx.Headers()
        self._client = client
        self._body = bytearray()
        self._response: httpx.Response | None = None

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def write_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def set_content_type(self, content_type: str, **params: str) -> None:
        value = content_type
        for name, param in params.items():
            value += f"; {name}={param}"
        self.headers["content-type"] = value

    def write(self, data: str | bytes) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._body.extend(data)

    async def finalize(self, timeout: httpx.Timeout | None = None) -> httpx.Response:
        """Send the request and return once the response headers arrived.

        ``timeout`` overrides the client-wide httpx timeout for this exchange.
        """
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        request = self._client.build_request(
            self.method,
            self.url,
            headers=self.headers,
            content=bytes(self._body),
            **kwargs,
        )
        self._response = await self._client.send(request, stream=True)
        return self._response

    async def aclose(self) -> None:
        if self._response is not None:
            await self._response.aclose()
            self._response = None


class HttpxTransport:
    """Owns the lazily created ``httpx.AsyncClient`` shared by all exchanges."""

    def __init__(
        self,
        pool_limits: PoolLimits | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._pool_limits = pool_limits or PoolLimits()
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "limits": self._pool_limits.to_httpx_limits(),
                "timeout": self._timeout,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    def open(self, method: str, url: str) -> Exchange:
        return Exchange(self.client, method, url)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("transport closed")
