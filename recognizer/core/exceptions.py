"""
Exception hierarchy for the recognizer service.

All recognizer errors inherit from RecognizerError and carry a user-facing
message. Errors raised by the recognition pipeline also carry the Decision
reached for the invocation, so callers can tell a negative recognition
outcome apart from a technical failure.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..domain.models.decision import Decision


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class RecognizerError(Exception):
    """Base exception for all recognizer errors."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        decision: Optional["Decision"] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.details = details or {}
        self.decision = decision


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class ConfigurationError(RecognizerError):
    """Raised at startup when configuration is missing or malformed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            user_message="Recognizer configuration is invalid.",
            **kwargs,
        )


# -----------------------------------------------------------------------------
# Recognition capability
# -----------------------------------------------------------------------------


class CapabilityError(RecognizerError):
    """Raised when the detection/label/comparison backend fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        retryable: bool = False,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.retryable = retryable


# -----------------------------------------------------------------------------
# Negative recognition outcomes (surfaced as errors outside discovery mode)
# -----------------------------------------------------------------------------


class RecognitionFailedError(RecognizerError):
    """Base exception for a not-recognized decision."""
    pass


class NoFaceDetectedError(RecognitionFailedError):
    """Raised when the source image contains no face."""
    pass


class PolicyViolationError(RecognitionFailedError):
    """Raised when a detected label fails its configured confidence gate."""
    pass


class NoMatchFoundError(RecognitionFailedError):
    """Raised when no reference image matched the source image."""

    def __init__(self, message: str = "Did not recognize the caller", **kwargs):
        super().__init__(message, **kwargs)


# -----------------------------------------------------------------------------
# Front ends and diagnostics
# -----------------------------------------------------------------------------


class DiagnosticOutputError(RecognizerError):
    """Raised when discovery-mode diagnostics cannot be written."""
    pass


class FrameCaptureError(RecognizerError):
    """Raised when a frame cannot be grabbed from a video source."""
    pass


def get_user_message(exc: BaseException) -> str:
    """
    Return a safe, user-facing message for any exception.
    """
    if isinstance(exc, RecognizerError) and getattr(exc, "user_message", None):
        return exc.user_message
    return "Something went wrong. Please try again."
