"""Schemas for meme endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class MemeCropResponse(BaseModel):
    image: str
    mime_type: str
    width: int
    height: int


class MemeGenerateRequest(BaseModel):
    image: str = Field(min_length=1)
    style: str = Field(default="Enchanted", max_length=40)
    intensity: int = Field(default=50, ge=0, le=100)
    caption: str = ""
    description: str = ""


class MemeGenerateResponse(BaseModel):
    success: bool
    status: str
    message: str
    image: Optional[str] = None
    mime_type: Optional[str] = None


class MemeStyleItem(BaseModel):
    id: str
    label: str


class IntensityTierItem(BaseModel):
    tier: str
    min_level: int
    max_level: int
    description: str


class MemeStyleListResponse(BaseModel):
    default_style: str
    default_intensity: int
    styles: list[MemeStyleItem]
    intensity_tiers: list[IntensityTierItem]
