from collections.abc import AsyncGenerator
from typing import Any, Generic

from .models import StreamResponse
from .types import T


class ResponseStream(Generic[T]):
    """Pull-based, single-use sequence of ``StreamResponse`` events.

    Nothing is sent until the first element is requested. Leaving an
    ``async with`` block, or calling ``aclose()``, releases the underlying
    exchange even when the consumer stopped early.

        async with client.stream("/events") as events:
            async for event in events:
                ...
    """

    def __init__(self, source: AsyncGenerator[StreamResponse[T], None]) -> None:
        self._source = source
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "ResponseStream[T]":
        return self

    async def __anext__(self) -> StreamResponse[T]:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._source.__anext__()
        except BaseException:
            await self.aclose()
            raise

    async def aclose(self) -> None:
        if not self._closed:
            self._closed = True
            await self._source.aclose()

    async def __aenter__(self) -> "ResponseStream[T]":
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.aclose()
