"""
Shared pytest fixtures for recognizer tests.
"""
import asyncio
import os
from typing import Dict, List, Optional, Tuple, Union

import pytest

from recognizer.core.exceptions import CapabilityError
from recognizer.domain.capabilities.diagnostic_sink import DiagnosticSink
from recognizer.domain.capabilities.notification_transport import NotificationTransport
from recognizer.domain.capabilities.recognition_capability import RecognitionCapability
from recognizer.domain.models.detection import (
    DetectionResult,
    FaceMatch,
    FaceRegion,
    Label,
    LabelResult,
)
from recognizer.domain.models.label_policy import LabelPolicy
from recognizer.domain.models.recognition_policy import RecognitionPolicy
from recognizer.domain.models.reference import ReferenceImage, ReferenceSet

RECOGNIZED = '{"message": "recognized"}'
NOT_RECOGNIZED = '{"message": "not_recognized"}'
TOPIC = "entrance/recognizer"

CompareBehaviour = Union[int, Exception]


class FakeCapability(RecognitionCapability):
    """
    In-memory recognition capability.

    compare_results maps a reference image's bytes to a match count or to an
    exception to raise; compare_delays maps it to a sleep before answering.
    """

    def __init__(
        self,
        face_count: int = 1,
        labels: Optional[List[Tuple[str, float]]] = None,
        compare_results: Optional[Dict[bytes, CompareBehaviour]] = None,
        compare_delays: Optional[Dict[bytes, float]] = None,
        detect_faces_error: Optional[Exception] = None,
        detect_labels_error: Optional[Exception] = None,
    ):
        self.face_count = face_count
        self.labels = labels or []
        self.compare_results = compare_results or {}
        self.compare_delays = compare_delays or {}
        self.detect_faces_error = detect_faces_error
        self.detect_labels_error = detect_labels_error
        self.calls: List[str] = []
        self.compare_targets: List[bytes] = []

    async def detect_faces(self, image: bytes) -> DetectionResult:
        self.calls.append("detect_faces")
        if self.detect_faces_error:
            raise self.detect_faces_error
        return DetectionResult(faces=tuple(FaceRegion(confidence=99.9) for _ in range(self.face_count)))

    async def detect_labels(self, image: bytes) -> LabelResult:
        self.calls.append("detect_labels")
        if self.detect_labels_error:
            raise self.detect_labels_error
        return LabelResult(labels=tuple(Label(name, confidence) for name, confidence in self.labels))

    async def compare_faces(self, source: bytes, target: bytes, similarity_threshold: float) -> List[FaceMatch]:
        self.calls.append("compare_faces")
        self.compare_targets.append(target)
        delay = self.compare_delays.get(target, 0)
        if delay:
            await asyncio.sleep(delay)
        result = self.compare_results.get(target, 0)
        if isinstance(result, Exception):
            raise result
        return [FaceMatch(similarity=99.0) for _ in range(result)]

    @property
    def compare_count(self) -> int:
        return self.calls.count("compare_faces")


class RecordingNotifier(NotificationTransport):
    def __init__(self, delivered: bool = True):
        self.delivered = delivered
        self.published: List[Tuple[str, str]] = []
        self.closed = False

    async def publish(self, topic: str, payload: str) -> bool:
        self.published.append((topic, payload))
        return self.delivered

    async def close(self) -> None:
        self.closed = True


class RecordingSink(DiagnosticSink):
    def __init__(self):
        self.captured: List[Tuple[DetectionResult, LabelResult]] = []

    async def capture(self, detection: DetectionResult, labels: LabelResult) -> None:
        self.captured.append((detection, labels))


def make_reference_set(*entries: Tuple[str, float]) -> ReferenceSet:
    """Build a reference set whose image bytes are the identifier encoded."""
    return ReferenceSet(
        references=tuple(
            ReferenceImage(identifier=name, image=name.encode(), similarity_threshold=threshold)
            for name, threshold in entries
        )
    )


def make_policy(
    reference_set: Optional[ReferenceSet] = None,
    label_policy: Optional[LabelPolicy] = None,
    discovery_mode: bool = False,
) -> RecognitionPolicy:
    return RecognitionPolicy(
        reference_set=reference_set if reference_set is not None else make_reference_set(("alice.jpg", 95.0)),
        label_policy=label_policy or LabelPolicy(),
        discovery_mode=discovery_mode,
        notification_topic=TOPIC,
        recognized_message=RECOGNIZED,
        not_recognized_message=NOT_RECOGNIZED,
    )


def capability_error(operation: str = "compare_faces") -> CapabilityError:
    return CapabilityError(f"{operation} failed: InvalidParameterException", operation=operation)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """
    Run with no recognizer variables in the environment and an empty working
    directory, so no stray config.yaml or .env is picked up.
    """
    for key in list(os.environ):
        if key.startswith(("MQTT_", "SAMPLE_", "TARGET_", "CONFIDENCES_", "DISCOVERY_", "CAPABILITY_")) or key in (
            "RUN_MODE",
            "CONFIG_FILE",
            "SIMILARITY_THRESHOLD",
            "API_HOST",
            "API_PORT",
            "LOG_LEVEL",
            "AWS_REGION",
        ):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def mock_env(clean_env, tmp_path, monkeypatch):
    """Minimal valid environment with two reference images on disk."""
    alice = tmp_path / "alice.jpg"
    bob = tmp_path / "bob.jpg"
    alice.write_bytes(b"alice-bytes")
    bob.write_bytes(b"bob-bytes")
    env_vars = {
        "MQTT_BROKER": "localhost",
        "MQTT_CLIENT_ID": "recognizer-test",
        "SAMPLE_IMAGE_PATHS": f"{alice},{bob}",
        "TARGET_IMAGE_PATH": str(tmp_path / "target.jpg"),
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    yield env_vars


@pytest.fixture
def capability_factory():
    """Returns the FakeCapability class, so tests build one per scenario."""
    return FakeCapability


@pytest.fixture
def reference_set_factory():
    return make_reference_set


@pytest.fixture
def policy_factory():
    return make_policy


@pytest.fixture
def capability_error_factory():
    return capability_error
