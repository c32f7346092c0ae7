"""
Integration tests for the recognize API endpoint.
Uses TestClient with a mocked container (no camera, AWS or MQTT broker).
Note: Runs full app lifespan (slower). Use: pytest tests/unit/ for fast unit-only runs.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

pytestmark = pytest.mark.integration
from fastapi.testclient import TestClient

from recognizer.application.use_cases.recognition.recognize_stream import RecognizeStreamUseCase
from recognizer.core.exceptions import CapabilityError, FrameCaptureError, NoMatchFoundError
from recognizer.domain.models.decision import Decision, DecisionReason


@pytest.fixture
def mock_recognize_use_case():
    return AsyncMock(spec=RecognizeStreamUseCase)


@pytest.fixture
def mock_container(mock_recognize_use_case):
    container = MagicMock()
    container.settings.sample_images = [{"path": "alice.jpg"}]
    container.settings.discovery_mode = False
    container.get.side_effect = lambda cls: {
        RecognizeStreamUseCase: mock_recognize_use_case,
    }.get(cls, None)
    return container


@pytest.fixture
def client(mock_container):
    """Create test client with mocked container."""
    from recognizer.main import app

    with patch("recognizer.api.v1.recognize_controller.get_container", return_value=mock_container), \
            patch("recognizer.main.get_container", return_value=mock_container), \
            patch("recognizer.main.reset_container", new=AsyncMock()):
        with TestClient(app) as c:
            yield c


class TestRecognizeAPI:
    """Tests for /v1/recognize"""

    def test_recognized(self, client, mock_recognize_use_case):
        mock_recognize_use_case.execute.return_value = Decision.recognized("alice.jpg")

        response = client.post("/v1/recognize", json={"webrtc_url": "rtsp://camera/stream"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Processed image successfully",
            "decision": "recognized",
            "matched_reference": "alice.jpg",
        }
        mock_recognize_use_case.execute.assert_awaited_once_with("rtsp://camera/stream")

    def test_discovery_decision_is_success(self, client, mock_recognize_use_case):
        mock_recognize_use_case.execute.return_value = Decision.not_recognized(DecisionReason.NO_FACE_DETECTED)

        response = client.post("/v1/recognize", json={"webrtc_url": "rtsp://camera/stream"})

        assert response.status_code == 200
        assert response.json()["decision"] == "not_recognized"

    def test_not_recognized_returns_400(self, client, mock_recognize_use_case):
        mock_recognize_use_case.execute.side_effect = NoMatchFoundError(
            decision=Decision.not_recognized(DecisionReason.NO_MATCH_FOUND)
        )

        response = client.post("/v1/recognize", json={"webrtc_url": "rtsp://camera/stream"})

        assert response.status_code == 400
        assert response.json() == {"message": "Did not recognize the caller", "decision": "not_recognized"}

    def test_capability_failure_returns_400(self, client, mock_recognize_use_case):
        mock_recognize_use_case.execute.side_effect = CapabilityError(
            "Rekognition detect_faces failed: AccessDeniedException",
            operation="detect_faces",
            decision=Decision.rejected(DecisionReason.DETECTION_ERROR),
        )

        response = client.post("/v1/recognize", json={"webrtc_url": "rtsp://camera/stream"})

        assert response.status_code == 400
        assert response.json()["decision"] == "rejected"

    def test_capture_failure_returns_400(self, client, mock_recognize_use_case):
        mock_recognize_use_case.execute.side_effect = FrameCaptureError("Cannot read device rtsp://camera/stream")

        response = client.post("/v1/recognize", json={"webrtc_url": "rtsp://camera/stream"})

        assert response.status_code == 400
        assert response.json() == {"message": "Cannot read device rtsp://camera/stream"}

    @pytest.mark.parametrize("body", [{}, {"webrtc_url": ""}, {"webrtc_url": 5}, ["rtsp://camera/stream"]])
    def test_invalid_payload_returns_400(self, client, mock_recognize_use_case, body):
        response = client.post("/v1/recognize", json=body)

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request payload"}
        mock_recognize_use_case.execute.assert_not_called()

    def test_non_json_body_returns_400(self, client, mock_recognize_use_case):
        response = client.post(
            "/v1/recognize",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request payload"}
