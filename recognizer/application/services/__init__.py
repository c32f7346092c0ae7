from .confidence_policy import evaluate_label_policy, find_first_violation
from .comparison_fanout import ComparisonFanOutEngine
from .deadline import call_with_deadline

__all__ = [
    "evaluate_label_policy",
    "find_first_violation",
    "ComparisonFanOutEngine",
    "call_with_deadline",
]
