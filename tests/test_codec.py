import pytest

from flex_http import codec
from flex_http.codec import DecodingError, EncodingError


class TestCodec:
    def test_encode_decode(self):
        value = {"title": "foo", "ids": [1, 2], "nested": {"ok": True}}
        assert codec.decode(codec.encode(value)) == value

    def test_encode_rejects_unserializable(self):
        with pytest.raises(EncodingError) as exc_info:
            codec.encode({"callback": lambda: None})
        assert "Converting object to an encodable object failed" in str(exc_info.value)

    def test_decode_rejects_malformed(self):
        with pytest.raises(DecodingError):
            codec.decode("{not json")

    def test_decode_accepts_bytes(self):
        assert codec.decode(b'{"id": 1}') == {"id": 1}

    def test_errors_are_value_errors(self):
        assert issubclass(EncodingError, ValueError)
        assert issubclass(DecodingError, ValueError)
