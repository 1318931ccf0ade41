"""Base64 boundary around the generation engines.

Callers (the HTTP app and the CLI) exchange images as base64 text; the
engines work on raw bytes.  This module validates caller input, converts
between the two and delegates each call to exactly one engine invocation.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import time
from dataclasses import dataclass

from google import genai

from .config import StudioConfig
from .image.generation.adapter import ImageRefiner, TextToImageGenerator
from .image.generation.errors import GenerationError, InvalidRequestError
from .image.generation.interfaces import (
    SUPPORTED_ASPECT_RATIOS,
    GenerationRequest,
    RefinementEngineProtocol,
    RefinementRequest,
    TextToImageEngineProtocol,
)
from .prompting import compose_id_photo_prompt, is_supported_aspect_ratio

LOGGER = logging.getLogger("idphoto.service")

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[^,]*)?;base64,(?P<data>.*)$", re.DOTALL)


def split_data_url(payload: str) -> tuple[str | None, str]:
    """Return ``(mime_type, base64_text)`` for a data URL or plain base64."""

    match = _DATA_URL.match(payload.strip())
    if match is None:
        return None, payload.strip()
    return match.group("mime"), match.group("data")


def decode_image_payload(payload: str) -> bytes:
    _, data = split_data_url(payload)
    data = "".join(data.split())
    if not data:
        raise InvalidRequestError("Source image is empty")
    try:
        return base64.b64decode(data, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise InvalidRequestError("Source image is not valid base64 data") from exc


@dataclass
class StudioService:
    generator: TextToImageEngineProtocol
    refiner: RefinementEngineProtocol

    @classmethod
    def from_config(cls, config: StudioConfig) -> "StudioService":
        client_kwargs = {}
        if config.provider.api_key:
            client_kwargs["api_key"] = config.provider.api_key
        client = genai.Client(**client_kwargs)
        return cls(
            generator=TextToImageGenerator(client=client, model=config.provider.image_model),
            refiner=ImageRefiner(client=client, model=config.provider.edit_model),
        )

    def generate_from_text(self, prompt: str, aspect_ratio: str, *, apply_template: bool = False) -> str:
        if not prompt or not prompt.strip():
            raise InvalidRequestError("A character description is required")
        if not is_supported_aspect_ratio(aspect_ratio):
            raise InvalidRequestError(
                f"Unsupported aspect ratio {aspect_ratio!r}; "
                f"expected one of {', '.join(SUPPORTED_ASPECT_RATIOS)}"
            )
        text = compose_id_photo_prompt(prompt) if apply_template else prompt.strip()
        request = GenerationRequest(prompt=text, aspect_ratio=aspect_ratio)  # type: ignore[arg-type]

        start = time.perf_counter()
        try:
            result = self.generator.generate(request)
        except GenerationError as exc:
            elapsed = (time.perf_counter() - start) * 1000.0
            LOGGER.warning("generate failed kind=%s (ms=%.0f): %s", exc.kind.value, elapsed, exc.message)
            raise
        encoded = result.as_base64()
        elapsed = (time.perf_counter() - start) * 1000.0
        LOGGER.info("generate succeeded base64_length=%d (ms=%.0f)", len(encoded), elapsed)
        return encoded

    def refine_image(self, base64_source_image: str, mime_type: str, instruction: str) -> str:
        if not base64_source_image:
            raise InvalidRequestError("A source image is required")
        url_mime, _ = split_data_url(base64_source_image)
        mime = (mime_type or "").strip() or (url_mime or "")
        if not mime:
            raise InvalidRequestError("The source image MIME type is required")
        if not instruction or not instruction.strip():
            raise InvalidRequestError("A refinement instruction is required")
        request = RefinementRequest(
            source_image=decode_image_payload(base64_source_image),
            mime_type=mime,
            instruction=instruction.strip(),
        )

        start = time.perf_counter()
        try:
            result = self.refiner.refine(request)
        except GenerationError as exc:
            elapsed = (time.perf_counter() - start) * 1000.0
            LOGGER.warning("refine failed kind=%s (ms=%.0f): %s", exc.kind.value, elapsed, exc.message)
            raise
        encoded = result.as_base64()
        elapsed = (time.perf_counter() - start) * 1000.0
        LOGGER.info("refine succeeded base64_length=%d (ms=%.0f)", len(encoded), elapsed)
        return encoded


__all__ = ["StudioService", "decode_image_payload", "split_data_url"]
