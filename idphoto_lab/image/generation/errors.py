"""Error taxonomy shared by the text-to-image and refinement paths."""

from __future__ import annotations

from enum import Enum


class GenerationErrorKind(str, Enum):
    SAFETY_REJECTED = "safety_rejected"
    NO_IMAGE_RETURNED = "no_image_returned"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT_FAILURE = "transport_failure"


class GenerationError(RuntimeError):
    """Raised when the provider did not produce a usable image.

    Every instance carries a message that can be shown to the end user as-is.
    """

    kind: GenerationErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SafetyRejectedError(GenerationError):
    """The provider declined the request on content-policy grounds."""

    kind = GenerationErrorKind.SAFETY_REJECTED

    def __init__(self, message: str, *, block_reason: str) -> None:
        super().__init__(message)
        self.block_reason = block_reason


class NoImageReturnedError(GenerationError):
    """The provider answered in prose instead of returning an image."""

    kind = GenerationErrorKind.NO_IMAGE_RETURNED

    def __init__(self, message: str, *, provider_text: str) -> None:
        super().__init__(message)
        self.provider_text = provider_text


class MalformedResponseError(GenerationError):
    """The response did not match any known envelope."""

    kind = GenerationErrorKind.MALFORMED_RESPONSE


class TransportFailureError(GenerationError):
    """The provider call itself could not complete."""

    kind = GenerationErrorKind.TRANSPORT_FAILURE


class InvalidRequestError(ValueError):
    """Raised at the service boundary when caller input is unusable."""


__all__ = [
    "GenerationError",
    "GenerationErrorKind",
    "InvalidRequestError",
    "MalformedResponseError",
    "NoImageReturnedError",
    "SafetyRejectedError",
    "TransportFailureError",
]
