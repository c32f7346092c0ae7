from .recognition_dto import RecognizeRequest, RecognizeResponse

__all__ = [
    "RecognizeRequest",
    "RecognizeResponse",
]
