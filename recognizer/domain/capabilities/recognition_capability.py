from abc import ABC, abstractmethod
from typing import List
from ..models.detection import DetectionResult, FaceMatch, LabelResult


class RecognitionCapability(ABC):
    """
    Capability interface - the remote face detection, label detection and
    face comparison service.

    Implementations raise CapabilityError when a call fails. An empty result
    (no faces, no labels, no matches) is a valid answer, not an error.
    """

    @abstractmethod
    async def detect_faces(self, image: bytes) -> DetectionResult:
        """Detect faces in an image"""
        pass

    @abstractmethod
    async def detect_labels(self, image: bytes) -> LabelResult:
        """Detect labels (objects, scenes, concepts) in an image"""
        pass

    @abstractmethod
    async def compare_faces(
        self,
        source: bytes,
        target: bytes,
        similarity_threshold: float,
    ) -> List[FaceMatch]:
        """Compare the face in source against faces in target"""
        pass
