from .process_image import ProcessImageUseCase, PipelineStage
from .recognize_stream import RecognizeStreamUseCase

__all__ = [
    "ProcessImageUseCase",
    "PipelineStage",
    "RecognizeStreamUseCase",
]
