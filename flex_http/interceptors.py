import logging
from collections.abc import Iterable, Iterator

from .models import RequestContext, Response, StreamResponse


class Interceptor:
    """Hook set invoked by the pipeline. Override only the hooks you need."""

    async def on_request(self, ctx: RequestContext) -> None:
        return None

    async def on_response(self, response: Response) -> None:
        return None

    async def on_stream_chunk(self, chunk: StreamResponse) -> None:
        return None


class InterceptorChain:
    """Runs one stage across all interceptors, strictly in registration order."""

    def __init__(self, interceptors: Iterable[Interceptor] = ()) -> None:
        self._interceptors = tuple(interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)

    def __iter__(self) -> Iterator[Interceptor]:
        return iter(self._interceptors)

    async def run_request(self, ctx: RequestContext) -> None:
        for interceptor in self._interceptors:
            await interceptor.on_request(ctx)

    async def run_response(self, response: Response) -> None:
        for interceptor in self._interceptors:
            await interceptor.on_response(response)

    async def run_stream_chunk(self, chunk: StreamResponse) -> None:
        for interceptor in self._interceptors:
            await interceptor.on_stream_chunk(chunk)


class LoggingInterceptor(Interceptor):
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or logging.getLogger(__name__)

    async def on_request(self, ctx: RequestContext) -> None:
        self.log.info(f"-> {ctx.method} {ctx.url}")

    async def on_response(self, response: Response) -> None:
        self.log.info(
            f"<- {response.method} {response.status_code} ({response.latency_ms}ms) - {response.body}"
        )

    async def on_stream_chunk(self, chunk: StreamResponse) -> None:
        self.log.info(f"<~ {chunk.status_code} - {chunk.data}")


class HeadersInterceptor(Interceptor):
    """Sets fixed headers on every outgoing request."""

    def __init__(self, **headers: str) -> None:
        self.headers = headers

    async def on_request(self, ctx: RequestContext) -> None:
        for key, value in self.headers.items():
            ctx.set_header(key, value)
