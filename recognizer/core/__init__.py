from .config import Settings, get_settings, configure_settings
from .exceptions import (
    RecognizerError,
    ConfigurationError,
    CapabilityError,
    RecognitionFailedError,
    NoFaceDetectedError,
    PolicyViolationError,
    NoMatchFoundError,
    DiagnosticOutputError,
    FrameCaptureError,
)
from .logging_config import configure_logging, InvocationLogger

__all__ = [
    "Settings",
    "get_settings",
    "configure_settings",
    "RecognizerError",
    "ConfigurationError",
    "CapabilityError",
    "RecognitionFailedError",
    "NoFaceDetectedError",
    "PolicyViolationError",
    "NoMatchFoundError",
    "DiagnosticOutputError",
    "FrameCaptureError",
    "configure_logging",
    "InvocationLogger",
]
