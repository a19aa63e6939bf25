import time
import uuid

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "pdf": "application/pdf",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def make_boundary() -> str:
    return f"----FlexHttp{int(time.time() * 1000)}{uuid.uuid4().hex[:8]}"


def encode_file_field(boundary: str, field_name: str, filename: str, content: bytes) -> bytes:
    """Encode a single-file ``multipart/form-data`` body."""
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{field_name}"; filename="{filename}"\r\n'
        f"Content-Type: {guess_mime_type(filename)}\r\n\r\n"
    )
    return head.encode("utf-8") + content + f"\r\n--{boundary}--\r\n".encode("utf-8")
