# Standard library imports
import logging
import uuid
from enum import Enum
from typing import Optional

# Local application imports
from ....core.exceptions import (
    CapabilityError,
    NoFaceDetectedError,
    NoMatchFoundError,
    PolicyViolationError,
    RecognitionFailedError,
)
from ....core.logging_config import InvocationLogger
from ....domain.capabilities.diagnostic_sink import DiagnosticSink
from ....domain.capabilities.notification_transport import NotificationTransport
from ....domain.capabilities.recognition_capability import RecognitionCapability
from ....domain.models.decision import Decision, DecisionKind, DecisionReason
from ....domain.models.detection import DetectionResult, LabelResult
from ....domain.models.recognition_policy import RecognitionPolicy
from ...services.comparison_fanout import ComparisonFanOutEngine
from ...services.confidence_policy import evaluate_label_policy
from ...services.deadline import call_with_deadline

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    START = "start"
    DETECTED = "detected"
    LABEL_CHECKED = "label_checked"
    COMPARED = "compared"
    DECIDED = "decided"
    NOTIFIED = "notified"


_FAILURE_ERRORS = {
    DecisionReason.NO_FACE_DETECTED: NoFaceDetectedError,
    DecisionReason.POLICY_VIOLATION: PolicyViolationError,
    DecisionReason.NO_MATCH_FOUND: NoMatchFoundError,
}


class ProcessImageUseCase:
    """
    Use case for deciding whether a still image shows a known person.

    Sequence: face detection -> label detection -> label confidence gates ->
    comparison fan-out -> decision -> one notification.

    Outside discovery mode a not-recognized decision is published and then
    raised as a RecognitionFailedError. In discovery mode nothing is
    published, raw results go to the diagnostic sink, and the decision is
    returned without raising.
    """

    def __init__(
        self,
        capability: RecognitionCapability,
        fan_out_engine: ComparisonFanOutEngine,
        notifier: NotificationTransport,
        policy: RecognitionPolicy,
        diagnostic_sink: Optional[DiagnosticSink] = None,
        call_timeout: float = 10.0,
    ) -> None:
        self.capability = capability
        self.fan_out_engine = fan_out_engine
        self.notifier = notifier
        self.policy = policy
        self.diagnostic_sink = diagnostic_sink
        self.call_timeout = call_timeout

    @property
    def discovery_mode(self) -> bool:
        return self.policy.discovery_mode

    async def execute(self, image: bytes, source: str = "image") -> Decision:
        """
        Run the recognition pipeline for one image.

        Args:
            image: Raw image bytes (JPEG/PNG)
            source: Where the image came from, for logging

        Returns:
            The Decision for this invocation

        Raises:
            CapabilityError: detection or label detection failed (decision REJECTED, nothing published)
            DiagnosticOutputError: discovery output could not be written
            RecognitionFailedError: not recognized, outside discovery mode (after publishing)
        """
        log = InvocationLogger(logger, uuid.uuid4().hex[:12])
        log.info(f"Processing {source} ({len(image)} bytes), discovery_mode={self.discovery_mode}")

        decision = await self._decide(image, log)
        log.info(f"Stage {PipelineStage.DECIDED.value}: {decision.describe()}")

        if self.discovery_mode:
            return decision

        await self._notify(decision, log)
        log.info(f"Stage {PipelineStage.NOTIFIED.value}")

        if decision.kind is DecisionKind.NOT_RECOGNIZED:
            error_class = _FAILURE_ERRORS.get(decision.reason, RecognitionFailedError)
            message = self._failure_message(decision, source)
            raise error_class(message, decision=decision, details={"source": source})
        return decision

    # -------------------------------------------------------------------------
    # Decision
    # -------------------------------------------------------------------------

    async def _decide(self, image: bytes, log: InvocationLogger) -> Decision:
        gate_failure: Optional[Decision] = None

        detection = await self._detect_faces(image, log)
        log.info(f"Stage {PipelineStage.DETECTED.value}: {detection.face_count} face(s)")
        if detection.face_count == 0:
            log.error("No faces detected in the image")
            if not self.discovery_mode:
                return Decision.not_recognized(DecisionReason.NO_FACE_DETECTED)
            gate_failure = Decision.not_recognized(DecisionReason.NO_FACE_DETECTED)

        labels = await self._detect_labels(image, log)
        if self.discovery_mode:
            log.info(f"DetectLabels output: {labels.to_dict()}")
            if self.diagnostic_sink is not None:
                await self.diagnostic_sink.capture(detection, labels)

        evaluation = evaluate_label_policy(labels, self.policy.label_policy)
        log.info(f"Stage {PipelineStage.LABEL_CHECKED.value}: passed={evaluation.passed}")
        if not evaluation.passed:
            log.error(f"Some of the labels did not pass confidence level: {evaluation.violation.describe()}")
            failure = Decision.not_recognized(DecisionReason.POLICY_VIOLATION, violation=evaluation.violation)
            if not self.discovery_mode:
                return failure
            gate_failure = gate_failure or failure

        verdict = await self.fan_out_engine.run(image, self.policy.reference_set, log)
        log.info(f"Stage {PipelineStage.COMPARED.value}: recognized={verdict.recognized}, winner={verdict.winner}")

        if gate_failure is not None:
            return gate_failure
        if verdict.recognized:
            return Decision.recognized(verdict.winner)
        return Decision.not_recognized(DecisionReason.NO_MATCH_FOUND)

    async def _detect_faces(self, image: bytes, log: InvocationLogger) -> DetectionResult:
        try:
            return await call_with_deadline(
                "detect_faces", self.capability.detect_faces(image), self.call_timeout
            )
        except CapabilityError as e:
            log.error(f"Error detecting face: {e}")
            e.decision = Decision.rejected(DecisionReason.DETECTION_ERROR)
            raise

    async def _detect_labels(self, image: bytes, log: InvocationLogger) -> LabelResult:
        try:
            return await call_with_deadline(
                "detect_labels", self.capability.detect_labels(image), self.call_timeout
            )
        except CapabilityError as e:
            log.error(f"Error detecting labels: {e}")
            e.decision = Decision.rejected(DecisionReason.LABEL_DETECTION_ERROR)
            raise

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    async def _notify(self, decision: Decision, log: InvocationLogger) -> bool:
        if decision.is_recognized:
            payload = self.policy.recognized_message
        else:
            payload = self.policy.not_recognized_message
        delivered = await self.notifier.publish(self.policy.notification_topic, payload)
        if not delivered:
            log.warning(f"Notification for decision {decision.kind.value} was not delivered")
        return delivered

    @staticmethod
    def _failure_message(decision: Decision, source: str) -> str:
        if decision.reason is DecisionReason.NO_FACE_DETECTED:
            return f"No faces detected in the image: {source}"
        if decision.reason is DecisionReason.POLICY_VIOLATION:
            return f"Some of the labels did not pass confidence level: {decision.violation.describe()}"
        return "Did not recognize the caller"
