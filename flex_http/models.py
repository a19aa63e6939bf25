import enum
from dataclasses import dataclass, field
from typing import Any, Generic

import httpx

from . import codec
from .transport import Exchange
from .types import Decoder, T


class ContextState(enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class RequestContext:
    """Envelope handed to ``on_request`` hooks for a single attempt."""

    def __init__(self, exchange: Exchange) -> None:
        self.exchange = exchange
        self._state = ContextState.ACTIVE

    @property
    def method(self) -> str:
        return self.exchange.method

    @property
    def url(self) -> str:
        return self.exchange.url

    @property
    def headers(self) -> httpx.Headers:
        return self.exchange.headers

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._state is ContextState.CANCELLED

    def set_header(self, key: str, value: str) -> None:
        self.exchange.write_header(key, value)

    def cancel(self) -> None:
        self._state = ContextState.CANCELLED


@dataclass(frozen=True)
class Response(Generic[T]):
    status_code: int
    body: str
    headers: dict[str, str]
    method: str
    decoder: Decoder[T] | None = field(default=None, repr=False, compare=False)
    url: str = ""
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def decoded_body(self) -> T:
        decoded: Any = codec.decode(self.body)
        if self.decoder is not None:
            return self.decoder(decoded)
        return decoded

    def __str__(self) -> str:
        return f"Response[{self.method}] {self.status_code}: {self.body}"


@dataclass(frozen=True)
class StreamResponse(Generic[T]):
    status_code: int
    data: T
    headers: dict[str, str]

    def __str__(self) -> str:
        return f"StreamResponse[{self.status_code}]: {self.data}"
