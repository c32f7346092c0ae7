# Standard library imports
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class FaceRegion:
    """One face found by face detection."""
    confidence: float
    bounding_box: Optional[Dict[str, float]] = None


@dataclass(frozen=True)
class DetectionResult:
    """
    Result of face detection on one image.

    Only used as a face-presence signal: the count matters, identity does not.
    """
    faces: Tuple[FaceRegion, ...] = ()

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "face_count": self.face_count,
            "faces": [
                {"confidence": face.confidence, "bounding_box": face.bounding_box}
                for face in self.faces
            ],
        }


@dataclass(frozen=True)
class Label:
    """A detected label and its confidence in [0, 100]."""
    name: str
    confidence: float


@dataclass(frozen=True)
class LabelResult:
    """Labels returned for one image, in the order the backend returned them."""
    labels: Tuple[Label, ...] = ()

    def __iter__(self):
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": [
                {"name": label.name, "confidence": label.confidence}
                for label in self.labels
            ],
        }


@dataclass(frozen=True)
class FaceMatch:
    """A face in the reference image that matched the source face."""
    similarity: float
    bounding_box: Optional[Dict[str, float]] = None


@dataclass(frozen=True)
class ComparisonOutcome:
    """
    Outcome of comparing the source image against one reference image.

    error is set when the comparison call failed; such an outcome never matches.
    """
    identifier: str
    match_count: int = 0
    error: Optional[str] = field(default=None)

    @property
    def matched(self) -> bool:
        return self.error is None and self.match_count > 0
