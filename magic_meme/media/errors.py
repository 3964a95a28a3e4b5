"""Error taxonomy for image normalization and meme generation."""

from __future__ import annotations

from typing import Optional


class MemeMakerError(Exception):
    """Base class for every failure raised by the meme pipeline."""


class ConfigError(MemeMakerError, ValueError):
    """Raised when a component is built without the configuration it needs."""


class ReadError(MemeMakerError):
    """Raised when a user-supplied file cannot be read."""


class DecodeError(MemeMakerError):
    """Raised when bytes cannot be decoded into an image."""


class RenderError(MemeMakerError):
    """Raised when the cropped surface cannot be produced or encoded."""


class GenerationError(MemeMakerError):
    """Base class for failures inside a single generation call."""


class GenerationTimeoutError(GenerationError):
    pass


class TransportError(GenerationError):
    """Raised on network or HTTP-level failures talking to the provider."""


class ModelRefusalError(GenerationError):
    """The model answered with prose instead of an image."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Model returned text instead of an image: {text}")
        self.text = text


class EmptyResponseError(GenerationError):
    def __init__(self, message: str = "No image data found in the API response.") -> None:
        super().__init__(message)


class GenerationFailedError(MemeMakerError):
    """Boundary error of the generation client.

    Carries a single displayable message. ``state`` records which terminal
    state the request ended in, for logging only.
    """

    def __init__(self, message: str, *, state: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.state = state
