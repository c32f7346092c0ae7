"""
Confidence Policy Evaluator
---------------------------

Checks detected labels against the configured minimum/maximum confidence
gates. Pure: no I/O, no logging, same answer for the same inputs.
"""

from typing import Optional

from ...domain.models.detection import LabelResult
from ...domain.models.label_policy import (
    LabelPolicy,
    PolicyEvaluation,
    PolicyViolation,
    ViolationKind,
)


def find_first_violation(labels: LabelResult, policy: LabelPolicy) -> Optional[PolicyViolation]:
    """
    Return the first label outside its gate, or None.

    Minimum gates are checked before maximum gates; within each, gates are
    visited in configured order and labels in the order they were returned.
    """
    for label_name, minimum in policy.min_confidence.items():
        for label in labels:
            if label.name == label_name and label.confidence < minimum:
                return PolicyViolation(ViolationKind.BELOW_MINIMUM, label_name, minimum, label.confidence)

    for label_name, maximum in policy.max_confidence.items():
        for label in labels:
            if label.name == label_name and label.confidence > maximum:
                return PolicyViolation(ViolationKind.ABOVE_MAXIMUM, label_name, maximum, label.confidence)

    return None


def evaluate_label_policy(labels: LabelResult, policy: LabelPolicy) -> PolicyEvaluation:
    """
    Evaluate labels against the policy.

    Args:
        labels: Labels detected in the source image
        policy: Minimum/maximum confidence gates

    Returns:
        PolicyEvaluation with passed=False and the first violation when any
        gate fails. Labels the policy does not mention never fail.
    """
    violation = find_first_violation(labels, policy)
    return PolicyEvaluation(passed=violation is None, violation=violation)
