"""Meme API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from magic_meme.media.client import GenerationClient, get_generation_client
from magic_meme.media.errors import MemeMakerError
from magic_meme.media.normalizer import OUTPUT_MIME_TYPE, image_dimensions
from magic_meme.media.prompts import (
    BALANCED_MAX,
    DEFAULT_INTENSITY,
    DEFAULT_STYLE,
    INTENSITY_DESCRIPTIONS,
    MAX_INTENSITY,
    MIN_INTENSITY,
    STYLE_LABELS,
    SUBTLE_MAX,
    IntensityTier,
    MemeStyle,
)
from magic_meme.media.service import create_meme, prepare_source_image
from magic_meme.schemas.meme import (
    IntensityTierItem,
    MemeCropResponse,
    MemeGenerateRequest,
    MemeGenerateResponse,
    MemeStyleItem,
    MemeStyleListResponse,
)


router = APIRouter(prefix="/memes", tags=["memes"])

_TIER_BOUNDS = {
    IntensityTier.SUBTLE: (MIN_INTENSITY, SUBTLE_MAX),
    IntensityTier.BALANCED: (SUBTLE_MAX + 1, BALANCED_MAX),
    IntensityTier.HEAVY_REDRAW: (BALANCED_MAX + 1, MAX_INTENSITY),
}
_CLIENT_ERROR_STATUSES = {"missing_image", "invalid_image"}


@router.get("/styles", response_model=MemeStyleListResponse)
def list_styles() -> MemeStyleListResponse:
    return MemeStyleListResponse(
        default_style=DEFAULT_STYLE.value,
        default_intensity=DEFAULT_INTENSITY,
        styles=[MemeStyleItem(id=style.value, label=STYLE_LABELS[style]) for style in MemeStyle],
        intensity_tiers=[
            IntensityTierItem(
                tier=tier.value,
                min_level=low,
                max_level=high,
                description=INTENSITY_DESCRIPTIONS[tier],
            )
            for tier, (low, high) in _TIER_BOUNDS.items()
        ],
    )


@router.post("/crop", response_model=MemeCropResponse)
def crop_upload(file: UploadFile = File(...)) -> MemeCropResponse:
    try:
        cropped = prepare_source_image(file.file, mime_type=file.content_type)
        width, height = image_dimensions(cropped)
    except MemeMakerError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return MemeCropResponse(image=cropped, mime_type=OUTPUT_MIME_TYPE, width=width, height=height)


@router.post("/generate", response_model=MemeGenerateResponse)
async def generate_meme(
    payload: MemeGenerateRequest,
    response: Response,
    client: GenerationClient = Depends(get_generation_client),
) -> MemeGenerateResponse:
    result = await create_meme(
        client,
        payload.image,
        style=payload.style,
        intensity=payload.intensity,
        caption=payload.caption,
        description=payload.description,
    )
    if not result.success:
        if result.status in _CLIENT_ERROR_STATUSES:
            response.status_code = status.HTTP_400_BAD_REQUEST
        else:
            response.status_code = status.HTTP_502_BAD_GATEWAY

    return MemeGenerateResponse(
        success=result.success,
        status=result.status,
        message=result.message,
        image=result.image,
        mime_type=result.mime_type,
    )
