"""Provider contract for image-editing backends."""

from __future__ import annotations

from typing import Any, Dict, Protocol

from magic_meme.media.payload import ImagePayload


RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


def build_request_body(*, image: ImagePayload, instruction: str) -> Dict[str, Any]:
    """``generateContent`` body: inline image part, instruction part, both modalities."""
    return {
        "contents": [
            {
                "parts": [
                    {"inlineData": image.to_inline_data()},
                    {"text": instruction},
                ]
            }
        ],
        "generationConfig": {
            "responseModalities": list(RESPONSE_MODALITIES),
        },
    }


class ImageEditProvider(Protocol):
    provider_name: str

    async def generate_content(
        self,
        *,
        image: ImagePayload,
        instruction: str,
    ) -> Dict[str, Any]:
        """Issue one call and return the raw response body (candidates/parts)."""
        raise NotImplementedError
