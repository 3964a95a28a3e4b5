"""Image acquisition and square normalization.

Processing flow:
    1. ``load_as_payload`` reads a user file into a base64 data URL.
    2. ``crop_to_square`` decodes it, cuts the centered ``min(w, h)`` square at
       1:1 scale and re-encodes the result as a PNG data URL.

Zero-sized images and non-image files are rejected at decode time with
``DecodeError``; nothing downstream ever sees them. EXIF orientation is
applied on decode, so phone photos are cropped the way they are displayed.
"""

from __future__ import annotations

from io import BytesIO
import mimetypes
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from magic_meme.media.errors import DecodeError, ReadError, RenderError
from magic_meme.media.payload import CropRegion, ImagePayload


OUTPUT_MIME_TYPE = "image/png"
FALLBACK_MIME_TYPE = "application/octet-stream"
# Modes the PNG encoder writes natively; anything else is flattened to RGB(A).
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}

FileSource = Union[str, os.PathLike, BinaryIO]


def _guess_mime_type(name: Optional[str]) -> str:
    if not name:
        return FALLBACK_MIME_TYPE
    guessed, _ = mimetypes.guess_type(name)
    return guessed or FALLBACK_MIME_TYPE


def _read_source(source: FileSource) -> tuple[bytes, Optional[str]]:
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            return path.read_bytes(), path.name
        except OSError as exc:
            raise ReadError(f"Could not read {path.name}: {exc}") from exc

    name = getattr(source, "name", None)
    try:
        content = source.read()
    except (OSError, ValueError) as exc:
        raise ReadError(f"Could not read uploaded file: {exc}") from exc
    if not isinstance(content, bytes):
        raise ReadError("Uploaded file must be opened in binary mode.")
    return content, name if isinstance(name, str) else None


def load_as_payload(source: FileSource, mime_type: Optional[str] = None) -> str:
    """Read a path or binary file object into a ``data:<mime>;base64,...`` URL."""
    content, name = _read_source(source)
    resolved_mime = (mime_type or "").strip() or _guess_mime_type(name)
    return ImagePayload.from_bytes(content, resolved_mime).data_url


def decode_data_url(data_url: str) -> ImagePayload:
    return ImagePayload.from_data_url(data_url)


def _open_image(data_url: str) -> Image.Image:
    raw = decode_data_url(data_url).data
    try:
        image = Image.open(BytesIO(raw))
        image.load()
        # Pixels are cut in display orientation; the PNG written later carries no EXIF tag.
        image = ImageOps.exif_transpose(image) or image
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Could not decode image: {exc}") from exc

    width, height = image.size
    if width <= 0 or height <= 0:
        raise DecodeError(f"Image has no pixels ({width}x{height}).")
    return image


def image_dimensions(data_url: str) -> tuple[int, int]:
    return _open_image(data_url).size


def crop_to_square(data_url: str) -> str:
    """Center-crop the image in ``data_url`` to a square PNG data URL.

    Raises:
        DecodeError: the data URL is malformed or holds no decodable image.
        RenderError: the square surface could not be produced or encoded.
    """
    image = _open_image(data_url)
    region = CropRegion.from_dimensions(*image.size)

    try:
        square = image.crop(region.box)
        if square.mode not in _PNG_MODES:
            square = square.convert("RGBA" if "A" in square.getbands() else "RGB")
        buffer = BytesIO()
        square.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise RenderError(f"Could not render {region.size}x{region.size} crop: {exc}") from exc

    return ImagePayload.from_bytes(buffer.getvalue(), OUTPUT_MIME_TYPE).data_url
