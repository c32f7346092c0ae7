from .infrastructure_provider import InfrastructureProvider
from .recognition_provider import RecognitionProvider


__all__ = [
    "InfrastructureProvider",
    "RecognitionProvider",
]
