"""JSON encode/decode used for request bodies and response payloads."""

import json
from typing import Any


class JsonCodecError(ValueError):
    pass


class EncodingError(JsonCodecError):
    """The value could not be serialized to JSON."""


class DecodingError(JsonCodecError):
    """The text is not valid JSON."""


def encode(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Converting object to an encodable object failed: {e}") from e


def decode(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise DecodingError(f"Invalid JSON payload: {e}") from e
