from .recognition_capability import RecognitionCapability
from .notification_transport import NotificationTransport
from .diagnostic_sink import DiagnosticSink

__all__ = [
    "RecognitionCapability",
    "NotificationTransport",
    "DiagnosticSink",
]
