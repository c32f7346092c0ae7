from .base_container import BaseContainer
from .container import RecognizerContainer, get_container, reset_container

__all__ = [
    "BaseContainer",
    "RecognizerContainer",
    "get_container",
    "reset_container",
]
