"""External service clients for communicating with external systems"""

from .rekognition_client import RekognitionClient

__all__ = [
    "RekognitionClient",
]
