# Standard library imports
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

# Local application imports
from ...core.exceptions import ConfigurationError


def parse_thresholds(raw: str, setting_name: str = "confidences") -> Mapping[str, float]:
    """
    Parse "Label:threshold" pairs separated by commas.

    Example: "Photography:98.0,Fisheye:60.0,Computer Hardware:40.0"

    Blank entries are skipped. Anything else that is not a label name followed
    by a decimal threshold in [0, 100] raises ConfigurationError.
    """
    thresholds = {}
    for raw_entry in (raw or "").split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        label_name, separator, raw_threshold = entry.rpartition(":")
        label_name = label_name.strip()
        raw_threshold = raw_threshold.strip()
        if not separator or not label_name:
            raise ConfigurationError(
                f"{setting_name}: entry {entry!r} must look like 'Label:threshold'"
            )
        try:
            threshold = Decimal(raw_threshold)
        except InvalidOperation:
            raise ConfigurationError(
                f"{setting_name}: threshold {raw_threshold!r} for label {label_name!r} is not a decimal number"
            )
        if not threshold.is_finite() or not Decimal(0) <= threshold <= Decimal(100):
            raise ConfigurationError(
                f"{setting_name}: threshold {raw_threshold} for label {label_name!r} must be within [0, 100]"
            )
        thresholds[label_name] = float(threshold)
    return MappingProxyType(thresholds)


@dataclass(frozen=True)
class LabelPolicy:
    """
    Label confidence gates.

    min_confidence: a returned label with this name must have at least this confidence.
    max_confidence: a returned label with this name must have at most this confidence.
    Both mappings keep the order the thresholds were configured in.
    """
    min_confidence: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    max_confidence: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_strings(cls, not_less_than: str = "", not_more_than: str = "") -> "LabelPolicy":
        return cls(
            min_confidence=parse_thresholds(not_less_than, "confidences_not_less_than"),
            max_confidence=parse_thresholds(not_more_than, "confidences_not_more_than"),
        )

    @property
    def is_empty(self) -> bool:
        return not self.min_confidence and not self.max_confidence


class ViolationKind(str, Enum):
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"


@dataclass(frozen=True)
class PolicyViolation:
    """The first label found outside its configured confidence gate."""
    kind: ViolationKind
    label: str
    threshold: float
    actual: float

    def describe(self) -> str:
        direction = "less" if self.kind is ViolationKind.BELOW_MINIMUM else "more"
        return f"Label {self.label} has confidence {direction} than {self.threshold} ({self.actual:f})"


@dataclass(frozen=True)
class PolicyEvaluation:
    passed: bool
    violation: Optional[PolicyViolation] = None
