"""Offline image provider for local/dev usage."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, Optional

from magic_meme.media.payload import ImagePayload
from magic_meme.media.providers.base import ImageEditProvider


# Only the most recent calls are kept; the cached instance lives as long as the server.
MAX_RECORDED_CALLS = 16


class MockImageProvider(ImageEditProvider):
    """Echoes the uploaded image back, or answers with ``refusal_text`` when set."""

    provider_name = "mock"

    def __init__(self, *, refusal_text: Optional[str] = None, max_recorded_calls: int = MAX_RECORDED_CALLS) -> None:
        self._refusal_text = refusal_text
        self.calls: Deque[Dict[str, Any]] = deque(maxlen=max_recorded_calls)

    async def generate_content(
        self,
        *,
        image: ImagePayload,
        instruction: str,
    ) -> Dict[str, Any]:
        self.calls.append({"mime_type": image.mime_type, "data": image.data, "instruction": instruction})
        if self._refusal_text is not None:
            parts = [{"text": self._refusal_text}]
        else:
            parts = [{"inlineData": image.to_inline_data()}]
        return {"candidates": [{"content": {"parts": parts, "role": "model"}}]}
