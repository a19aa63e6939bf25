import asyncio

import httpx


class FlexHttpError(Exception):
    """Unified error surfaced by every FlexHttp call."""

    message: str = "HTTP request failed"
    status_code: int | None = None

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.__class__.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @classmethod
    def from_error(cls, error: BaseException) -> "FlexHttpError":
        if isinstance(error, FlexHttpError):
            return error
        # TimeoutError subclasses OSError, so it must be checked first
        if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
            return RequestTimeoutError()
        if isinstance(error, (httpx.TransportError, OSError)):
            return NetworkError(f"Network error: {error}")
        return FlexHttpError(f"Unknown error: {error}")

    def __str__(self) -> str:
        return f"FlexHttpError: {self.message} (Status: {self.status_code})"


class NetworkError(FlexHttpError):
    message = "Network error"


class RequestTimeoutError(FlexHttpError):
    message = "Request timed out"


class RequestCancelledError(FlexHttpError):
    message = "Request cancelled"


class UnsupportedMethodError(FlexHttpError):
    message = "Unsupported HTTP method"
