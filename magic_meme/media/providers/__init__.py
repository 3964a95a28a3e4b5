"""Image generation provider integrations."""

from magic_meme.media.providers.base import ImageEditProvider, build_request_body
from magic_meme.media.providers.factory import get_image_provider, reset_image_provider_cache
from magic_meme.media.providers.gemini_provider import GeminiImageProvider
from magic_meme.media.providers.mock_provider import MockImageProvider

__all__ = [
    "ImageEditProvider",
    "GeminiImageProvider",
    "MockImageProvider",
    "build_request_body",
    "get_image_provider",
    "reset_image_provider_cache",
]
