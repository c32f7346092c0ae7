from .detection import DetectionResult, FaceRegion, Label, LabelResult, FaceMatch, ComparisonOutcome
from .reference import ReferenceImage, ReferenceSet
from .label_policy import LabelPolicy, PolicyViolation, PolicyEvaluation, ViolationKind, parse_thresholds
from .decision import Decision, DecisionKind, DecisionReason, FanOutVerdict
from .recognition_policy import RecognitionPolicy

__all__ = [
    "DetectionResult",
    "FaceRegion",
    "Label",
    "LabelResult",
    "FaceMatch",
    "ComparisonOutcome",
    "ReferenceImage",
    "ReferenceSet",
    "LabelPolicy",
    "PolicyViolation",
    "PolicyEvaluation",
    "ViolationKind",
    "parse_thresholds",
    "Decision",
    "DecisionKind",
    "DecisionReason",
    "FanOutVerdict",
    "RecognitionPolicy",
]
