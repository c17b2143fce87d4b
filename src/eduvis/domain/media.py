"""Helpers for image data URIs."""

import base64
import binascii
import re
from dataclasses import dataclass

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>[A-Za-z0-9+/=\s]*)$"
)


class InvalidDataUriError(ValueError):
    """Raised when a string is not a usable image data URI."""


@dataclass(frozen=True)
class DataUri:
    """Parsed ``data:<mime>;base64,<payload>`` value."""

    mime_type: str
    payload: str


def parse_data_uri(value: str) -> DataUri:
    """Parse and validate an image data URI."""
    match = _DATA_URI_RE.match(value.strip())
    if match is None:
        raise InvalidDataUriError(
            "Expected a data URI like 'data:<mimetype>;base64,<encoded_data>'"
        )
    mime_type = match.group("mime").lower()
    if not mime_type.startswith("image/"):
        raise InvalidDataUriError(f"Unsupported mime type: {mime_type}")
    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        raise InvalidDataUriError("Data URI payload is empty")
    try:
        base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise InvalidDataUriError("Data URI payload is not valid base64") from exc
    return DataUri(mime_type=mime_type, payload=payload)


def to_data_uri(image_bytes: bytes, default_mime_type: str = "image/jpeg") -> str:
    """Convert bytes to a base64 data URI for image input or display."""
    mime_type = detect_mime_type(image_bytes, default=default_mime_type)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes, default: str = "image/jpeg") -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return default
