import httpx
import pytest

from flex_http import FlexHttpBuilder
from flex_http.configs import FlexHttpSettings

BASE_URL = "https://api.example.com"


class RecordingHandler:
    """httpx.MockTransport handler that records every request it receives."""

    def __init__(self, respond=None):
        self.requests: list[httpx.Request] = []
        self._respond = respond or (lambda request: httpx.Response(200, json={}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def settings():
    return FlexHttpSettings(_env_file=None)


@pytest.fixture
def builder(settings):
    return FlexHttpBuilder(base_url=BASE_URL, settings=settings).with_retry_delay(0)
