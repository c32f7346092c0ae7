from .recognition import (
    ProcessImageUseCase,
    RecognizeStreamUseCase,
)

__all__ = [
    "ProcessImageUseCase",
    "RecognizeStreamUseCase",
]
