from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal, Protocol, get_args

AspectRatio = Literal["1:1", "3:4", "9:16"]
SUPPORTED_ASPECT_RATIOS: tuple[str, ...] = get_args(AspectRatio)

TEXT_TO_IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    aspect_ratio: AspectRatio

    def __post_init__(self) -> None:
        if not self.prompt or not self.prompt.strip():
            raise ValueError("Prompt must not be empty")
        if self.aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
            raise ValueError(
                f"Unsupported aspect ratio {self.aspect_ratio!r}; "
                f"expected one of {', '.join(SUPPORTED_ASPECT_RATIOS)}"
            )


@dataclass(frozen=True)
class RefinementRequest:
    source_image: bytes
    mime_type: str
    instruction: str

    def __post_init__(self) -> None:
        if not self.source_image:
            raise ValueError("Source image must not be empty")
        if not self.mime_type or not self.mime_type.strip():
            raise ValueError("MIME type must not be empty")
        if not self.instruction or not self.instruction.strip():
            raise ValueError("Instruction must not be empty")


@dataclass(frozen=True)
class GenerationResult:
    image_bytes: bytes
    mime_type: str

    def as_base64(self) -> str:
        return base64.b64encode(self.image_bytes).decode("ascii")


class TextToImageEngineProtocol(Protocol):
    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Create a new image from a text prompt."""


class RefinementEngineProtocol(Protocol):
    def refine(self, request: RefinementRequest) -> GenerationResult:
        """Modify an existing image following a text instruction."""
