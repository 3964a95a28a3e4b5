"""Meme orchestration: crop on upload, one generation call, displayable outcome."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from magic_meme.core.logger import get_logger
from magic_meme.media.client import GenerationClient, GenerationRequest
from magic_meme.media.errors import DecodeError, GenerationFailedError, MemeMakerError
from magic_meme.media.normalizer import FileSource, crop_to_square, decode_data_url, load_as_payload
from magic_meme.media.prompts import DEFAULT_INTENSITY, DEFAULT_STYLE, MemeStyle


CROP_FAILED_MESSAGE = "Failed to read and crop image file."
MISSING_IMAGE_MESSAGE = "Please upload an image to begin the magic."
INVALID_IMAGE_MESSAGE = "Invalid image data URL."

logger = get_logger("magic_meme.service")


@dataclass(frozen=True)
class MemeGenerationResult:
    success: bool
    status: str
    message: str
    image: Optional[str] = None
    mime_type: Optional[str] = None


def prepare_source_image(source: FileSource, mime_type: Optional[str] = None) -> str:
    """Read an upload and return it as a square PNG data URL.

    Raises:
        MemeMakerError: with a user-facing message when reading or cropping fails.
    """
    try:
        return crop_to_square(load_as_payload(source, mime_type=mime_type))
    except MemeMakerError as exc:
        logger.warning("source_image_rejected", error_type=type(exc).__name__, error=str(exc))
        raise MemeMakerError(CROP_FAILED_MESSAGE) from exc


async def create_meme(
    client: GenerationClient,
    image_data_url: Optional[str],
    *,
    style: Union[MemeStyle, str] = DEFAULT_STYLE,
    intensity: int = DEFAULT_INTENSITY,
    caption: str = "",
    description: str = "",
) -> MemeGenerationResult:
    if not image_data_url:
        return MemeGenerationResult(success=False, status="missing_image", message=MISSING_IMAGE_MESSAGE)

    try:
        decode_data_url(image_data_url)
    except DecodeError:
        return MemeGenerationResult(
            success=False,
            status="invalid_image",
            message=f"Generation failed: {INVALID_IMAGE_MESSAGE}",
        )

    # Whatever arrives is cut to the square PNG the model is shown.
    try:
        source = decode_data_url(crop_to_square(image_data_url))
    except MemeMakerError as exc:
        logger.warning("source_image_rejected", error_type=type(exc).__name__, error=str(exc))
        return MemeGenerationResult(
            success=False,
            status="invalid_image",
            message=f"Generation failed: {CROP_FAILED_MESSAGE}",
        )

    request = GenerationRequest(
        image=source,
        style=style,
        intensity=intensity,
        caption=caption,
        description=description,
    )
    try:
        result = await client.generate(request)
    except GenerationFailedError as exc:
        return MemeGenerationResult(
            success=False,
            status=exc.state or "failed",
            message=f"Generation failed: {exc.message}",
        )

    return MemeGenerationResult(
        success=True,
        status="succeeded",
        message="Meme generated.",
        image=result.image.data_url,
        mime_type=result.image.mime_type,
    )


def export_meme(data_url: str, destination: Union[str, Path]) -> Path:
    """Write the decoded image bytes of ``data_url`` to ``destination``."""
    payload = decode_data_url(data_url)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload.data)
    return path
