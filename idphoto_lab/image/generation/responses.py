"""Classification of provider responses into images or user-facing errors.

The two provider endpoints answer with structurally different envelopes, so
each one is parsed into its own tagged variant first (:class:`EditResponse`
and :class:`GenerateResponse`).  Classification then works only from those
parsed fields, which keeps it deterministic for a given response object.

Responses may arrive either as google-genai SDK objects (snake_case
attributes) or as raw JSON mappings (camelCase keys); both are accepted.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Mapping, NoReturn, Sequence

from google.genai import errors as genai_errors

from .errors import (
    MalformedResponseError,
    NoImageReturnedError,
    SafetyRejectedError,
    TransportFailureError,
)
from .interfaces import TEXT_TO_IMAGE_MIME_TYPE, GenerationResult

LOGGER = logging.getLogger("idphoto.responses")

UNEXPECTED_STRUCTURE_MESSAGE = "The API returned an unexpected response structure."
EMPTY_RESPONSE_MESSAGE = "The API did not return a valid image. The response was empty."
CONNECTIVITY_MESSAGE = (
    "An unknown error occurred while generating the image. "
    "Please check your network connection."
)


def _field(obj: Any, *names: str) -> Any:
    """Return the first non-``None`` field among ``names``."""

    if obj is None:
        return None
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _coerce_bytes(blob: Any) -> bytes | None:
    if isinstance(blob, (bytes, bytearray)):
        return bytes(blob)
    if isinstance(blob, str):
        try:
            return base64.b64decode(blob)
        except (ValueError, binascii.Error):
            return None
    return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    # SDK enums (e.g. BlockedReason) are str-valued
    value = getattr(value, "value", value)
    text = str(value).strip()
    return text or None


def _to_serializable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Mapping):
        return {str(key): _to_serializable(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_serializable(item) for item in value]
    if hasattr(value, "model_dump"):
        return _to_serializable(value.model_dump(exclude_none=True))
    return str(value)


def describe_response(response: Any) -> str:
    """Render a provider response for diagnostic logging."""

    return json.dumps(_to_serializable(response), ensure_ascii=False, indent=2)


def _as_sequence(value: Any) -> Sequence[Any]:
    # mappings and scalars in a list slot are out of contract
    if isinstance(value, (list, tuple)):
        return value
    return ()


def _first_candidate_parts(response: Any) -> Sequence[Any]:
    candidates = _as_sequence(_field(response, "candidates"))
    if not candidates:
        return ()
    content = _field(candidates[0], "content")
    return _as_sequence(_field(content, "parts"))


@dataclass(frozen=True)
class EditResponse:
    """Parsed envelope of the image+text ("edit") endpoint."""

    kind: ClassVar[Literal["edit"]] = "edit"

    image_data: bytes | None
    image_mime_type: str | None
    has_candidates: bool
    has_prompt_feedback: bool
    block_reason: str | None
    text: str | None
    error_message: str | None

    @classmethod
    def parse(cls, response: Any) -> "EditResponse":
        parts = _first_candidate_parts(response)

        image_data: bytes | None = None
        image_mime_type: str | None = None
        texts: list[str] = []
        for part in parts:
            inline = _field(part, "inline_data", "inlineData")
            if inline is not None and image_data is None:
                blob = _coerce_bytes(_field(inline, "data"))
                if blob:
                    image_data = blob
                    image_mime_type = _as_text(_field(inline, "mime_type", "mimeType"))
                    continue
            part_text = _field(part, "text")
            if isinstance(part_text, str) and part_text.strip():
                texts.append(part_text)

        text = "".join(texts).strip() or None
        if text is None:
            top_level = _field(response, "text")
            if isinstance(top_level, str):
                text = top_level.strip() or None

        prompt_feedback = _field(response, "prompt_feedback", "promptFeedback")
        error = _field(response, "error")
        return cls(
            image_data=image_data,
            image_mime_type=image_mime_type,
            has_candidates=_field(response, "candidates") is not None,
            has_prompt_feedback=prompt_feedback is not None,
            block_reason=_as_text(_field(prompt_feedback, "block_reason", "blockReason")),
            text=text,
            error_message=_as_text(_field(error, "message")) if error is not None else None,
        )


@dataclass(frozen=True)
class GenerateResponse:
    """Parsed envelope of the text-to-image ("generate") endpoint."""

    kind: ClassVar[Literal["generate"]] = "generate"

    image_count: int
    first_image_bytes: bytes | None

    @classmethod
    def parse(cls, response: Any) -> "GenerateResponse":
        generated = _as_sequence(_field(response, "generated_images", "generatedImages"))
        first_bytes: bytes | None = None
        if generated:
            image = _field(generated[0], "image")
            first_bytes = _coerce_bytes(_field(image, "image_bytes", "imageBytes"))
        return cls(image_count=len(generated), first_image_bytes=first_bytes or None)


def classify_edit_response(parsed: EditResponse, mime_type: str) -> GenerationResult:
    """Apply the edit-shape rule set to an already parsed response."""

    if parsed.image_data:
        return GenerationResult(image_bytes=parsed.image_data, mime_type=mime_type)

    if not parsed.has_candidates and not parsed.has_prompt_feedback:
        detail = parsed.error_message or parsed.text or UNEXPECTED_STRUCTURE_MESSAGE
        raise MalformedResponseError(f"AI API error: {detail}")

    if parsed.block_reason:
        raise SafetyRejectedError(
            "The image request was rejected for safety reasons: "
            f"{parsed.block_reason}. Try a different photo or wording.",
            block_reason=parsed.block_reason,
        )

    if parsed.text:
        raise NoImageReturnedError(
            f"The AI could not generate an image: {parsed.text}",
            provider_text=parsed.text,
        )

    raise MalformedResponseError(EMPTY_RESPONSE_MESSAGE)


def classify_generate_response(parsed: GenerateResponse) -> GenerationResult:
    """Apply the text-to-image rule set to an already parsed response.

    This envelope has no safety field, so a filtered prompt and a generic
    failure both surface as an empty image list.
    """

    if parsed.image_count > 0 and parsed.first_image_bytes:
        return GenerationResult(
            image_bytes=parsed.first_image_bytes,
            mime_type=TEXT_TO_IMAGE_MIME_TYPE,
        )
    raise MalformedResponseError(EMPTY_RESPONSE_MESSAGE)


def interpret_edit_response(response: Any, mime_type: str) -> GenerationResult:
    """Classify a ``generate_content`` response for the refinement path."""

    parsed = EditResponse.parse(response)
    try:
        return classify_edit_response(parsed, mime_type)
    except NoImageReturnedError as exc:
        LOGGER.warning("provider returned text instead of an image: %s", exc.provider_text)
        raise
    except MalformedResponseError:
        LOGGER.error("unexpected edit response from provider:\n%s", describe_response(response))
        raise


def interpret_generate_response(response: Any) -> GenerationResult:
    """Classify a ``generate_images`` response for the text-to-image path."""

    parsed = GenerateResponse.parse(response)
    try:
        return classify_generate_response(parsed)
    except MalformedResponseError:
        LOGGER.error("unexpected generate response from provider:\n%s", describe_response(response))
        raise


def transport_failure(exc: BaseException) -> NoReturn:
    """Re-raise a failed provider call as :class:`TransportFailureError`."""

    if isinstance(exc, genai_errors.APIError):
        detail = _as_text(exc.message) or _as_text(exc.status)
    else:
        detail = _as_text(str(exc))
    message = f"Could not reach the image provider: {detail}" if detail else CONNECTIVITY_MESSAGE
    raise TransportFailureError(message) from exc


__all__ = [
    "EditResponse",
    "GenerateResponse",
    "classify_edit_response",
    "classify_generate_response",
    "describe_response",
    "interpret_edit_response",
    "interpret_generate_response",
    "transport_failure",
]
