"""Instruction text sent to the image model."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Union


class MemeStyle(str, Enum):
    ENCHANTED = "Enchanted"
    REALISTIC = "Realistic"
    ANIME = "Anime"
    J_ART = "J-Art"
    EXAGGERATED = "Exaggerated"
    COMICAL = "Comical"

    @classmethod
    def resolve(cls, value: Union[str, MemeStyle, None]) -> MemeStyle:
        """Map any identifier onto the closed set, falling back to the default."""
        if isinstance(value, MemeStyle):
            return value
        try:
            return cls(value)
        except ValueError:
            return DEFAULT_STYLE


class IntensityTier(str, Enum):
    SUBTLE = "subtle"
    BALANCED = "balanced"
    HEAVY_REDRAW = "heavy redraw"


DEFAULT_STYLE = MemeStyle.ENCHANTED
DEFAULT_INTENSITY = 50
MIN_INTENSITY = 0
MAX_INTENSITY = 100
SUBTLE_MAX = 33
BALANCED_MAX = 66

STYLE_CLAUSES: Dict[MemeStyle, str] = {
    MemeStyle.ENCHANTED: (
        "in the classic Disney animation style, reminiscent of films like "
        "'The Little Mermaid' or 'Aladdin'"
    ),
    MemeStyle.REALISTIC: (
        "in a photorealistic, cinematic style, as if it were a still from a live-action movie"
    ),
    MemeStyle.ANIME: (
        "in a vibrant Japanese anime style, with characteristic large eyes, "
        "expressive features, and dynamic lines"
    ),
    MemeStyle.J_ART: (
        "in a beautiful, painterly Japanese art style, similar to concept art for a fantasy JRPG"
    ),
    MemeStyle.EXAGGERATED: (
        "in a heavily exaggerated caricature style, amplifying the subject's expression "
        "and features for comedic effect"
    ),
    MemeStyle.COMICAL: (
        "in a goofy, comical cartoon style with bright colors and simplified, funny shapes"
    ),
}

STYLE_LABELS: Dict[MemeStyle, str] = {
    MemeStyle.ENCHANTED: "魔幻",
    MemeStyle.REALISTIC: "真人",
    MemeStyle.ANIME: "动漫",
    MemeStyle.J_ART: "日系",
    MemeStyle.EXAGGERATED: "夸张",
    MemeStyle.COMICAL: "搞笑",
}

INTENSITY_CLAUSES: Dict[IntensityTier, str] = {
    IntensityTier.SUBTLE: (
        "Subtly apply the style, making minimal changes to the original image's structure "
        "and preserving the subject's facial features as closely as possible."
    ),
    IntensityTier.BALANCED: (
        "Apply a balanced style, preserving the core facial features of the subject while "
        "clearly transforming the overall aesthetic."
    ),
    IntensityTier.HEAVY_REDRAW: (
        "Heavily redraw the image in the style, retaining only the most essential facial "
        "characteristics (like eye position and basic expression) while transforming "
        "everything else significantly."
    ),
}

INTENSITY_DESCRIPTIONS: Dict[IntensityTier, str] = {
    IntensityTier.SUBTLE: "Subtle Magic: Keeps most of the original image.",
    IntensityTier.BALANCED: "Balanced Charm: Blends original features with the selected style.",
    IntensityTier.HEAVY_REDRAW: "Full Transformation: A strong style that may alter features significantly.",
}


def style_clause(style: Union[str, MemeStyle, None]) -> str:
    return STYLE_CLAUSES[MemeStyle.resolve(style)]


def intensity_tier(level: int) -> IntensityTier:
    if level <= SUBTLE_MAX:
        return IntensityTier.SUBTLE
    if level <= BALANCED_MAX:
        return IntensityTier.BALANCED
    return IntensityTier.HEAVY_REDRAW


def describe_intensity(level: int) -> str:
    return INTENSITY_DESCRIPTIONS[intensity_tier(level)]


def build_instruction(
    style: Union[str, MemeStyle, None],
    intensity_level: int,
    caption: str = "",
    description: str = "",
) -> str:
    """Compose the natural-language instruction for one generation call.

    Caption and description are inserted verbatim, without escaping; the
    clause for each is omitted when its text is blank.
    """
    caption_clause = ""
    if caption.strip():
        caption_clause = (
            f'Finally, integrate the text "{caption}" into the image using a prominent, '
            "stylized font that fits the chosen aesthetic."
        )

    description_clause = ""
    if description.strip():
        description_clause = (
            "Crucially, you must modify the subject's expression, pose, and the scene's "
            f'atmosphere to visually represent the following description: "{description}".'
        )

    return (
        "Your task is to create an image. "
        f"Redraw the provided image {style_clause(style)}. "
        f"{description_clause} "
        f"{INTENSITY_CLAUSES[intensity_tier(intensity_level)]} "
        f"{caption_clause} "
        "The output must be the final image only, with no explanatory text."
    )
