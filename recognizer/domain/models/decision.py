# Standard library imports
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Local application imports
from .detection import ComparisonOutcome
from .label_policy import PolicyViolation


class DecisionKind(str, Enum):
    RECOGNIZED = "recognized"
    NOT_RECOGNIZED = "not_recognized"
    REJECTED = "rejected"


class DecisionReason(str, Enum):
    NO_FACE_DETECTED = "no_face_detected"
    POLICY_VIOLATION = "policy_violation"
    NO_MATCH_FOUND = "no_match_found"
    DETECTION_ERROR = "detection_error"
    LABEL_DETECTION_ERROR = "label_detection_error"


@dataclass(frozen=True)
class FanOutVerdict:
    """
    Aggregate result of comparing one source image against every reference.

    winner is the identifier of the first comparison that completed with a
    match; it is recorded exactly once.
    """
    recognized: bool
    winner: Optional[str]
    outcomes: Tuple[ComparisonOutcome, ...]
    calls_issued: int
    completed: int

    @property
    def matched_identifiers(self) -> Tuple[str, ...]:
        return tuple(outcome.identifier for outcome in self.outcomes if outcome.matched)

    @property
    def failed_identifiers(self) -> Tuple[str, ...]:
        return tuple(outcome.identifier for outcome in self.outcomes if outcome.error is not None)


@dataclass(frozen=True)
class Decision:
    """
    Final output of one pipeline invocation.

    Exactly one Decision is produced per invocation.
    """
    kind: DecisionKind
    reason: Optional[DecisionReason] = None
    matched_reference: Optional[str] = None
    violation: Optional[PolicyViolation] = None

    @classmethod
    def recognized(cls, matched_reference: Optional[str]) -> "Decision":
        return cls(kind=DecisionKind.RECOGNIZED, matched_reference=matched_reference)

    @classmethod
    def not_recognized(
        cls,
        reason: DecisionReason,
        violation: Optional[PolicyViolation] = None,
    ) -> "Decision":
        return cls(kind=DecisionKind.NOT_RECOGNIZED, reason=reason, violation=violation)

    @classmethod
    def rejected(cls, reason: DecisionReason) -> "Decision":
        return cls(kind=DecisionKind.REJECTED, reason=reason)

    @property
    def is_recognized(self) -> bool:
        return self.kind is DecisionKind.RECOGNIZED

    def describe(self) -> str:
        if self.kind is DecisionKind.RECOGNIZED:
            return f"recognized as {self.matched_reference}"
        if self.violation is not None:
            return f"{self.kind.value} ({self.reason.value}): {self.violation.describe()}"
        reason = self.reason.value if self.reason else "unknown"
        return f"{self.kind.value} ({reason})"
