from __future__ import annotations

from typing import Mapping

from google.genai import types

from .image.generation.interfaces import (
    SUPPORTED_ASPECT_RATIOS,
    TEXT_TO_IMAGE_MIME_TYPE,
    AspectRatio,
)

CARTOON_ID_PHOTO_PROMPT = """
You are an expert anime and cartoon illustrator. Your task is to create a high-quality, professional-style ID photo based on the user's character description.

**Core Instructions:**
1.  **Format:** Generate a head-and-shoulders bust shot.
2.  **Pose:** The character must be facing forward, looking directly at the camera.
3.  **Expression:** The character should have a neutral, closed-mouth expression suitable for an ID photo.
4.  **Background:** The background must be a solid, uniform, light color (e.g., #FFFFFF white or #F0F0F0 light grey).
5.  **Quality:** The image must be high-resolution, with clean lines and professional coloring. It should look like an official ID photo from the character's universe.
6.  **Art Style:** Strictly adhere to the art style mentioned in the user's prompt. If the user says "in the style of Naruto," the final image must look like it was drawn by Masashi Kishimoto. Do not add any text, watermarks, or borders.

**User's Request:**
"{user_prompt}"
"""

SIZE_PRESETS: Mapping[str, AspectRatio] = {
    "passport": "3:4",
    "square": "1:1",
    "profile": "9:16",
}
DEFAULT_SIZE = "passport"

REFINEMENT_MODALITIES = ("IMAGE", "TEXT")


def compose_id_photo_prompt(description: str) -> str:
    """Wrap a character description in the ID-photo illustration brief."""

    cleaned = description.strip()
    if not cleaned:
        raise ValueError("Character description is empty; cannot construct prompt")
    return CARTOON_ID_PHOTO_PROMPT.replace("{user_prompt}", cleaned)


def aspect_ratio_for(size: str) -> AspectRatio:
    try:
        return SIZE_PRESETS[size.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown size preset {size!r}; expected one of {', '.join(SIZE_PRESETS)}"
        ) from None


def is_supported_aspect_ratio(value: str) -> bool:
    return value in SUPPORTED_ASPECT_RATIOS


def build_generate_images_config(aspect_ratio: AspectRatio) -> types.GenerateImagesConfig:
    return types.GenerateImagesConfig(
        number_of_images=1,
        output_mime_type=TEXT_TO_IMAGE_MIME_TYPE,
        aspect_ratio=aspect_ratio,
    )


def build_refinement_contents(image_bytes: bytes, mime_type: str, instruction: str) -> list[types.Part]:
    # image first, instruction second
    return [
        types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        types.Part.from_text(text=instruction),
    ]


def build_refinement_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(response_modalities=list(REFINEMENT_MODALITIES))


__all__ = [
    "CARTOON_ID_PHOTO_PROMPT",
    "DEFAULT_SIZE",
    "SIZE_PRESETS",
    "aspect_ratio_for",
    "build_generate_images_config",
    "build_refinement_config",
    "build_refinement_contents",
    "compose_id_photo_prompt",
    "is_supported_aspect_ratio",
]
