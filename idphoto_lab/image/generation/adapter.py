from __future__ import annotations

import logging
from dataclasses import dataclass

from idphoto_lab.prompting import (
    build_generate_images_config,
    build_refinement_config,
    build_refinement_contents,
)

from .interfaces import (
    GenerationRequest,
    GenerationResult,
    RefinementEngineProtocol,
    RefinementRequest,
    TextToImageEngineProtocol,
)
from .responses import interpret_edit_response, interpret_generate_response, transport_failure

LOGGER = logging.getLogger("idphoto.generation")


@dataclass
class TextToImageGenerator(TextToImageEngineProtocol):
    """Create a single PNG from a prompt with the Imagen endpoint."""

    client: object
    model: str

    def generate(self, request: GenerationRequest) -> GenerationResult:
        LOGGER.info(
            "requesting image model=%s aspect_ratio=%s prompt_length=%d",
            self.model,
            request.aspect_ratio,
            len(request.prompt),
        )
        try:
            response = self.client.models.generate_images(  # type: ignore[attr-defined]
                model=self.model,
                prompt=request.prompt,
                config=build_generate_images_config(request.aspect_ratio),
            )
        except Exception as exc:
            LOGGER.error("image generation call failed: %s", exc)
            transport_failure(exc)
        return interpret_generate_response(response)


@dataclass
class ImageRefiner(RefinementEngineProtocol):
    """Edit an existing image with a text instruction via ``generate_content``."""

    client: object
    model: str

    def refine(self, request: RefinementRequest) -> GenerationResult:
        LOGGER.info(
            "requesting refinement model=%s mime_type=%s source_bytes=%d",
            self.model,
            request.mime_type,
            len(request.source_image),
        )
        try:
            response = self.client.models.generate_content(  # type: ignore[attr-defined]
                model=self.model,
                contents=build_refinement_contents(
                    request.source_image,
                    request.mime_type,
                    request.instruction,
                ),
                config=build_refinement_config(),
            )
        except Exception as exc:
            LOGGER.error("image refinement call failed: %s", exc)
            transport_failure(exc)
        return interpret_edit_response(response, request.mime_type)


__all__ = ["ImageRefiner", "TextToImageGenerator"]
