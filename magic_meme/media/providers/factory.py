"""Factory to resolve active image provider."""

from __future__ import annotations

from functools import lru_cache

from magic_meme.core.config import get_settings
from magic_meme.media.providers.base import ImageEditProvider
from magic_meme.media.providers.gemini_provider import GeminiImageProvider
from magic_meme.media.providers.mock_provider import MockImageProvider


@lru_cache(maxsize=1)
def get_image_provider() -> ImageEditProvider:
    settings = get_settings()
    provider = settings.image_provider.strip().lower()
    if provider == "mock":
        return MockImageProvider()
    return GeminiImageProvider(
        api_key=settings.api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_api_base_url,
        timeout_seconds=settings.generation_timeout_seconds,
    )


def reset_image_provider_cache() -> None:
    get_image_provider.cache_clear()
