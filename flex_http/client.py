import asyncio
import logging
import os
import time
from collections.abc import AsyncGenerator, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import httpx

from . import codec
from .cache import ResponseCache, build_cache_key
from .exceptions import FlexHttpError, RequestCancelledError, UnsupportedMethodError
from .interceptors import Interceptor, InterceptorChain
from .log import trace_id_generator, trace_id_var
from .models import RequestContext, Response, StreamResponse
from .multipart import encode_file_field, make_boundary
from .pool import PoolLimits
from .streaming import ResponseStream
from .transport import Exchange, HttpxTransport
from .types import Decoder, LineDecoder

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH"})

PrepareFn = Callable[[Exchange], None]


def _json_body(body: Any) -> PrepareFn:
    # Encoding happens per attempt, so an unencodable body fails each attempt.
    def prepare(exchange: Exchange) -> None:
        exchange.write(codec.encode(body))

    return prepare


@dataclass(frozen=True)
class ClientConfig:
    base_url: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    max_retries: int = 0
    enable_logging: bool = False
    interceptors: tuple[Interceptor, ...] = ()
    max_connections_per_host: int = 6
    retry_base_delay: float = 0.5
    keepalive_expiry: float = 10.0

    @property
    def pool_limits(self) -> PoolLimits:
        return PoolLimits(
            max_connections_per_host=self.max_connections_per_host,
            keepalive_expiry=self.keepalive_expiry,
        )


class FlexHttp:
    """Async HTTP client with interceptors, retry, caching and streaming.

    Build one with ``FlexHttpBuilder``; the configuration is fixed for the
    lifetime of the client.

        client = FlexHttpBuilder(base_url="https://api.example.com").with_max_retries(2).build()
        async with client:
            response = await client.get("/posts/1", use_cache=True)
            post = response.decoded_body()
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ClientConfig()
        self._chain = InterceptorChain(self.config.interceptors)
        self._cache = ResponseCache()
        self._transport = HttpxTransport(
            pool_limits=self.config.pool_limits,
            timeout=self.config.timeout,
            transport=transport,
        )

    @classmethod
    def create(cls, base_url: str | None = None) -> "FlexHttp":
        from .builder import FlexHttpBuilder

        return FlexHttpBuilder(base_url=base_url).build()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def close(self) -> None:
        await self._transport.close()
        self._cache.clear()
        self._log("Client closed")

    async def __aenter__(self) -> "FlexHttp":
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        body: Any = None,
        use_cache: bool = False,
        decoder: Decoder | None = None,
    ) -> Response:
        return await self._execute(
            method,
            path,
            headers=headers,
            prepare=_json_body(body) if body is not None else None,
            use_cache=use_cache,
            decoder=decoder,
        )

    async def get(self, path: str, **kwargs: Any) -> Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Response:
        return await self.request("DELETE", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PATCH", path, **kwargs)

    async def upload(
        self,
        path: str,
        *,
        file: str | os.PathLike,
        headers: dict[str, str] | None = None,
        field_name: str = "file",
        decoder: Decoder | None = None,
    ) -> Response:
        """POST ``file`` as ``multipart/form-data`` under ``field_name``."""
        file_path = Path(file)
        try:
            content = await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            raise FlexHttpError(f"Unknown error: {e}") from e

        boundary = make_boundary()
        payload = encode_file_field(boundary, field_name, file_path.name, content)

        def prepare(exchange: Exchange) -> None:
            exchange.set_content_type("multipart/form-data", boundary=boundary)
            exchange.write(payload)

        return await self._execute("POST", path, headers=headers, prepare=prepare, decoder=decoder)

    def stream(
        self,
        path: str,
        headers: dict[str, str] | None = None,
        line_decoder: LineDecoder | None = None,
    ) -> ResponseStream:
        """GET ``path`` and yield one ``StreamResponse`` per received text chunk.

        No retry and no caching. The request is only sent once iteration starts.
        """
        return ResponseStream(self._stream_events(path, headers, line_decoder))

    async def _execute(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        prepare: PrepareFn | None = None,
        use_cache: bool = False,
        decoder: Decoder | None = None,
    ) -> Response:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(f"Unsupported HTTP method: {method}")

        token = trace_id_var.set(trace_id_generator())
        try:
            cache_key = build_cache_key(method, path, headers)
            if use_cache:
                cached = self._cache.get(cache_key)
                if cached is not None:
                    self._log(f"Cache hit for {cache_key}")
                    return cached

            attempts = 0
            while True:
                try:
                    response = await self._attempt(method, path, headers, prepare, decoder)
                except Exception as e:
                    attempts += 1
                    if attempts > self.config.max_retries:
                        error = FlexHttpError.from_error(e)
                        if error is e:
                            raise
                        raise error from e
                    self._log(
                        f"Retrying {method} {path} (Attempt {attempts}/{self.config.max_retries}): {e}"
                    )
                    await asyncio.sleep(self.config.retry_base_delay * attempts)
                    continue

                if use_cache:
                    self._cache.set(cache_key, response)
                return response
        finally:
            trace_id_var.reset(token)

    async def _attempt(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None,
        prepare: PrepareFn | None,
        decoder: Decoder | None,
    ) -> Response:
        exchange = self._transport.open(method, self._build_url(path))
        try:
            self._apply_headers(exchange, headers)
            if prepare is not None:
                prepare(exchange)

            ctx = RequestContext(exchange)
            await self._chain.run_request(ctx)
            if ctx.cancelled:
                raise RequestCancelledError()

            self._log(f"Executing {method} {exchange.url}")
            start_time = time.time()
            http_response = await asyncio.wait_for(exchange.finalize(), timeout=self.config.timeout)
            await http_response.aread()
            latency_ms = int((time.time() - start_time) * 1000)

            response = Response(
                status_code=http_response.status_code,
                body=http_response.text,
                headers=dict(http_response.headers),
                method=method,
                decoder=decoder,
                url=str(http_response.url),
                latency_ms=latency_ms,
            )
            self._log(f"Response {method} {exchange.url}: {response.status_code}")

            await self._chain.run_response(response)
            return response
        finally:
            await exchange.aclose()

    async def _stream_events(
        self,
        path: str,
        headers: dict[str, str] | None,
        line_decoder: LineDecoder | None,
    ) -> AsyncGenerator[StreamResponse, None]:
        exchange = self._transport.open("GET", self._build_url(path))
        try:
            self._apply_headers(exchange, headers)
            ctx = RequestContext(exchange)
            await self._chain.run_request(ctx)
            if ctx.cancelled:
                raise RequestCancelledError("Stream request cancelled")

            # Only the wait for headers is bounded; chunk reads may idle indefinitely.
            stream_timeout = httpx.Timeout(self.config.timeout, read=None)
            http_response = await asyncio.wait_for(
                exchange.finalize(timeout=stream_timeout), timeout=self.config.timeout
            )
            self._log(f"Streaming {path}: {http_response.status_code}")
            response_headers = dict(http_response.headers)

            async for chunk in http_response.aiter_text():
                event = StreamResponse(
                    status_code=http_response.status_code,
                    data=line_decoder(chunk) if line_decoder is not None else chunk,
                    headers=response_headers,
                )
                await self._chain.run_stream_chunk(event)
                yield event
        except FlexHttpError:
            raise
        except Exception as e:
            raise FlexHttpError.from_error(e) from e
        finally:
            await exchange.aclose()

    def _build_url(self, path: str) -> str:
        base_url = self.config.base_url
        if not base_url or urlsplit(path).scheme:
            return path
        if not path:
            return base_url
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    def _apply_headers(self, exchange: Exchange, headers: dict[str, str] | None) -> None:
        for key, value in self.config.default_headers.items():
            exchange.write_header(key, value)
        for key, value in (headers or {}).items():
            exchange.write_header(key, value)
        if exchange.content_type is None:
            exchange.set_content_type("application/json")

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self.config.enable_logging else logging.DEBUG, message)
