"""Value objects exchanged between the normalizer and the generation client."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict

from magic_meme.media.errors import DecodeError


DATA_URL_PREFIX = "data:"
BASE64_MARKER = ";base64"


@dataclass(frozen=True)
class ImagePayload:
    """An encoded image plus its MIME label.

    The base64 text is kept exactly as received so that results coming back
    from the provider are forwarded byte-for-byte.
    """

    mime_type: str
    base64_data: str

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str) -> ImagePayload:
        return cls(mime_type=mime_type, base64_data=base64.b64encode(content).decode("ascii"))

    @classmethod
    def from_data_url(cls, data_url: str) -> ImagePayload:
        if not isinstance(data_url, str) or not data_url.startswith(DATA_URL_PREFIX) or "," not in data_url:
            raise DecodeError("Invalid image data URL.")
        header, body = data_url[len(DATA_URL_PREFIX):].split(",", 1)
        if not header.endswith(BASE64_MARKER):
            raise DecodeError("Image data URL is not base64 encoded.")
        mime_type = header[: -len(BASE64_MARKER)] or "application/octet-stream"
        body = "".join(body.split())
        if not body:
            raise DecodeError("Invalid image data URL.")
        return cls(mime_type=mime_type, base64_data=body)

    @classmethod
    def from_inline_data(cls, inline_data: Dict[str, Any]) -> ImagePayload:
        return cls(
            mime_type=str(inline_data.get("mimeType") or inline_data.get("mime_type") or "image/png"),
            base64_data=str(inline_data.get("data") or ""),
        )

    @property
    def data(self) -> bytes:
        try:
            return base64.b64decode(self.base64_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"Invalid base64 payload: {exc}") from exc

    @property
    def data_url(self) -> str:
        return f"{DATA_URL_PREFIX}{self.mime_type}{BASE64_MARKER},{self.base64_data}"

    def to_inline_data(self) -> Dict[str, str]:
        return {"mimeType": self.mime_type, "data": self.base64_data}


@dataclass(frozen=True)
class CropRegion:
    size: int
    offset_x: int
    offset_y: int

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> CropRegion:
        size = min(width, height)
        return cls(size=size, offset_x=(width - size) // 2, offset_y=(height - size) // 2)

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.offset_x, self.offset_y, self.offset_x + self.size, self.offset_y + self.size)
