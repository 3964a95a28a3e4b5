"""Gemini image editing provider."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from magic_meme.core.logger import get_logger
from magic_meme.media.errors import ConfigError, GenerationTimeoutError, TransportError
from magic_meme.media.payload import ImagePayload
from magic_meme.media.providers.base import ImageEditProvider, build_request_body


logger = get_logger("magic_meme.providers.gemini")


class GeminiImageProvider(ImageEditProvider):
    provider_name = "gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._model = (model or "").strip()
        if not self._api_key:
            raise ConfigError("API_KEY environment variable is not set.")
        if not self._model:
            raise ConfigError("GEMINI_MODEL must not be empty.")
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = max(1.0, float(timeout_seconds))
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def _endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self._api_key}

    async def _post(self, request_body: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self._endpoint(), headers=self._headers(), json=request_body)
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await client.post(self._endpoint(), headers=self._headers(), json=request_body)

    async def generate_content(
        self,
        *,
        image: ImagePayload,
        instruction: str,
    ) -> Dict[str, Any]:
        request_body = build_request_body(image=image, instruction=instruction)

        try:
            response = await self._post(request_body)
        except httpx.TimeoutException as exc:
            logger.warning("gemini_request_timed_out", model=self._model, error=str(exc))
            raise GenerationTimeoutError(f"gemini_request_timed_out error={exc.__class__.__name__}") from exc
        except httpx.HTTPError as exc:
            logger.warning("gemini_transport_error", model=self._model, error=str(exc))
            raise TransportError(f"gemini_request_failed error={exc.__class__.__name__}: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            detail = response.text.strip()
            if len(detail) > 240:
                detail = detail[:240] + "..."
            raise TransportError(f"gemini_request_failed status={response.status_code} detail={detail}")

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError("gemini_invalid_json_response") from exc
        if not isinstance(body, dict):
            raise TransportError("gemini_invalid_json_response")
        return body
