"""Central runtime configuration for Magic Meme Maker."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"
    port: int = 8000
    app_name: str = "magic_meme"
    app_version: str = "0.1.0"
    api_key: str = ""
    image_provider: str = "gemini"
    gemini_model: str = "gemini-2.5-flash-image-preview"
    gemini_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    generation_timeout_seconds: float = 120.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def _validate(settings: Settings) -> Settings:
    if settings.image_provider.strip().lower() not in {"gemini", "mock"}:
        raise ValueError("IMAGE_PROVIDER must be one of: gemini, mock.")
    if settings.log_format.strip().lower() not in {"json", "console"}:
        raise ValueError("LOG_FORMAT must be one of: json, console.")
    if settings.generation_timeout_seconds <= 0:
        raise ValueError("GENERATION_TIMEOUT_SECONDS must be positive.")
    if not settings.gemini_model.strip():
        raise ValueError("GEMINI_MODEL must not be empty.")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return validated settings as a cached singleton."""

    return _validate(Settings())
