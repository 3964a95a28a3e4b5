"""Single-call meme generation client.

Flow per request:
    compose instruction -> dispatch one provider call -> race it against the
    timeout -> extract the first inline image of the first candidate.

Every failure leaves through ``GenerationFailedError`` with a displayable
message. Nothing is retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Union

from magic_meme.core.config import get_settings
from magic_meme.core.logger import get_logger
from magic_meme.media.errors import (
    EmptyResponseError,
    GenerationFailedError,
    GenerationTimeoutError,
    ModelRefusalError,
)
from magic_meme.media.payload import ImagePayload
from magic_meme.media.prompts import DEFAULT_INTENSITY, DEFAULT_STYLE, MemeStyle, build_instruction
from magic_meme.media.providers import ImageEditProvider, get_image_provider


DEFAULT_TIMEOUT_SECONDS = 120.0
TIMEOUT_MESSAGE = (
    "Image generation timed out. The image may be too complex. "
    "Please try again with a different image."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while calling the Gemini API."

logger = get_logger("magic_meme.generation")


class GenerationState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    REFUSED = "refused"
    EMPTY_RESPONSE = "empty_response"
    TRANSPORT_FAILED = "transport_failed"


@dataclass(frozen=True)
class GenerationRequest:
    image: ImagePayload
    style: Union[MemeStyle, str] = DEFAULT_STYLE
    intensity: int = DEFAULT_INTENSITY
    caption: str = ""
    description: str = ""


@dataclass(frozen=True)
class GenerationResult:
    image: ImagePayload
    instruction: str


def _first_candidate_parts(body: Dict[str, Any]) -> list[Dict[str, Any]]:
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return []
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return []
    content = candidate.get("content")
    if not isinstance(content, dict):
        return []
    parts = content.get("parts")
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def extract_result(body: Dict[str, Any]) -> ImagePayload:
    """Pick the image out of a ``generateContent`` response body.

    Only the first candidate is consulted. The first part carrying inline
    data wins; failing that, the first text part is raised as a refusal.
    """
    parts = _first_candidate_parts(body)

    for part in parts:
        inline_data = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline_data, dict) and inline_data.get("data"):
            return ImagePayload.from_inline_data(inline_data)

    for part in parts:
        text_value = part.get("text")
        if isinstance(text_value, str) and text_value:
            raise ModelRefusalError(text_value)

    raise EmptyResponseError()


def _failure_state(exc: Exception) -> GenerationState:
    if isinstance(exc, GenerationTimeoutError):
        return GenerationState.TIMED_OUT
    if isinstance(exc, ModelRefusalError):
        return GenerationState.REFUSED
    if isinstance(exc, EmptyResponseError):
        return GenerationState.EMPTY_RESPONSE
    return GenerationState.TRANSPORT_FAILED


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, GenerationTimeoutError):
        return TIMEOUT_MESSAGE
    detail = str(exc).strip()
    if not detail:
        return UNKNOWN_ERROR_MESSAGE
    return f"API Error: {detail}"


class GenerationClient:
    def __init__(
        self,
        provider: ImageEditProvider,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive.")
        self._provider = provider
        self._timeout_seconds = timeout_seconds

    @property
    def provider_name(self) -> str:
        return getattr(self._provider, "provider_name", type(self._provider).__name__)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def _dispatch(self, image: ImagePayload, instruction: str) -> Dict[str, Any]:
        call = self._provider.generate_content(image=image, instruction=instruction)
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise GenerationTimeoutError(
                f"Request timed out after {self._timeout_seconds:g} seconds."
            ) from exc

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        instruction = build_instruction(
            request.style,
            request.intensity,
            request.caption,
            request.description,
        )

        try:
            logger.info(
                "generation_dispatched",
                state=GenerationState.DISPATCHED.value,
                provider=self.provider_name,
                style=MemeStyle.resolve(request.style).value,
                intensity=request.intensity,
                has_caption=bool(request.caption.strip()),
                has_description=bool(request.description.strip()),
                timeout_seconds=self._timeout_seconds,
            )
            body = await self._dispatch(request.image, instruction)
            image = extract_result(body)
        except Exception as exc:
            state = _failure_state(exc)
            message = _failure_message(exc)
            logger.error(
                "generation_failed",
                provider=self.provider_name,
                state=state.value,
                error_type=type(exc).__name__,
                error=str(exc)[:240],
            )
            raise GenerationFailedError(message, state=state.value) from exc

        logger.info(
            "generation_succeeded",
            provider=self.provider_name,
            state=GenerationState.SUCCEEDED.value,
            mime_type=image.mime_type,
        )
        return GenerationResult(image=image, instruction=instruction)


@lru_cache(maxsize=1)
def get_generation_client() -> GenerationClient:
    settings = get_settings()
    return GenerationClient(
        get_image_provider(),
        timeout_seconds=settings.generation_timeout_seconds,
    )
