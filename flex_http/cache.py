import json
import threading
from collections.abc import Mapping

from .models import Response


def build_cache_key(method: str, path: str, headers: Mapping[str, str] | None = None) -> str:
    serialized = json.dumps(sorted(headers.items())) if headers else ""
    return f"{method.upper()}:{path}:{serialized}"


class ResponseCache:
    """Process-lifetime memoization of successful responses.

    No eviction and no TTL: entries live until ``clear()``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Response] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Response | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, response: Response) -> None:
        with self._lock:
            self._entries[key] = response

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
