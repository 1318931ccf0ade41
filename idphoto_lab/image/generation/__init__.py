"""Provider calls and response interpretation for ID photo generation."""

from .errors import (
    GenerationError,
    GenerationErrorKind,
    InvalidRequestError,
    MalformedResponseError,
    NoImageReturnedError,
    SafetyRejectedError,
    TransportFailureError,
)
from .interfaces import (
    SUPPORTED_ASPECT_RATIOS,
    AspectRatio,
    GenerationRequest,
    GenerationResult,
    RefinementRequest,
)

__all__ = [
    "AspectRatio",
    "GenerationError",
    "GenerationErrorKind",
    "GenerationRequest",
    "GenerationResult",
    "InvalidRequestError",
    "MalformedResponseError",
    "NoImageReturnedError",
    "RefinementRequest",
    "SUPPORTED_ASPECT_RATIOS",
    "SafetyRejectedError",
    "TransportFailureError",
]
