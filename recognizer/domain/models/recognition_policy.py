# Standard library imports
from dataclasses import dataclass

# Local application imports
from .label_policy import LabelPolicy
from .reference import ReferenceSet


@dataclass(frozen=True)
class RecognitionPolicy:
    """
    Validated, immutable policy bundle consumed by the recognition pipeline.

    Built once at startup from settings. A reload means building a new bundle
    (and pipeline) between invocations, never mutating this one.
    """
    reference_set: ReferenceSet
    label_policy: LabelPolicy
    discovery_mode: bool
    notification_topic: str
    recognized_message: str
    not_recognized_message: str

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.discovery_mode and not self.notification_topic:
            raise ValueError("Notification topic is required outside discovery mode")
