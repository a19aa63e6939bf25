from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

JsonValue = Any
Decoder = Callable[[JsonValue], T]
LineDecoder = Callable[[str], T]
