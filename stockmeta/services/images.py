"""Encoded image payloads exchanged between the upload and generation steps."""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

DATA_URI_PREFIX = "data:"
BASE64_MARKER = ";base64"


class InvalidImageError(ValueError):
    """Raised when an uploaded image cannot be encoded or decoded."""


@dataclass(frozen=True, slots=True)
class EncodedImage:
    """Self-describing base64 image, equivalent to a ``data:`` URI."""

    media_type: str
    data: str

    @classmethod
    def from_bytes(
        cls, raw: bytes, content_type: str | None = None
    ) -> "EncodedImage":
        if not raw:
            raise InvalidImageError("Uploaded image is empty")

        media_type = (content_type or "application/octet-stream").split(";")[0]
        encoded = base64.b64encode(raw).decode("ascii")
        return cls(media_type=media_type.strip(), data=encoded)

    @classmethod
    def from_data_uri(cls, uri: str) -> "EncodedImage":
        if not uri.startswith(DATA_URI_PREFIX) or "," not in uri:
            raise InvalidImageError("Image payload is not a data URI")

        header, _, data = uri[len(DATA_URI_PREFIX):].partition(",")
        if not header.endswith(BASE64_MARKER):
            raise InvalidImageError("Image payload is not base64 encoded")
        if not data:
            raise InvalidImageError("Image payload is empty")
        try:
            base64.b64decode(data, validate=True)
        except binascii.Error as exc:
            raise InvalidImageError("Image payload is not valid base64") from exc

        media_type = header[: -len(BASE64_MARKER)] or "application/octet-stream"
        return cls(media_type=media_type, data=data)

    @property
    def payload(self) -> str:
        """Base64 data segment with the format declaration stripped."""

        return self.data

    def to_data_uri(self) -> str:
        return f"{DATA_URI_PREFIX}{self.media_type}{BASE64_MARKER},{self.data}"

    def __repr__(self) -> str:
        return f"EncodedImage(media_type={self.media_type!r}, size={len(self.data)})"
