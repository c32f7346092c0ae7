# Standard library imports
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

# External package imports
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

# Local application imports
from ...core.exceptions import CapabilityError
from ...domain.capabilities.recognition_capability import RecognitionCapability
from ...domain.models.detection import DetectionResult, FaceMatch, FaceRegion, Label, LabelResult
from ...utils.retry_utils import async_retry_on_exception

logger = logging.getLogger(__name__)

RETRYABLE_ERROR_CODES = frozenset({
    "ThrottlingException",
    "ProvisionedThroughputExceededException",
    "LimitExceededException",
    "InternalServerError",
})


class RekognitionClient(RecognitionCapability):
    """
    AWS Rekognition implementation of the recognition capability.

    boto3 is synchronous, so every call runs in a worker thread. Throttling
    and internal server errors are retried with exponential backoff; every
    other failure is raised as CapabilityError right away.
    """

    QUALITY_FILTER = "AUTO"

    def __init__(
        self,
        region_name: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 2,
        client: Optional[Any] = None,
    ):
        """
        Initialize the Rekognition client.

        Args:
            region_name: AWS region. If None, uses the default boto3 chain.
            timeout: Connect/read timeout for each HTTP request (seconds).
            max_retries: Retries for throttled requests.
            client: Pre-built boto3 client (tests).
        """
        self.timeout = timeout
        self.max_retries = max_retries
        if client is None:
            client = boto3.client(
                "rekognition",
                region_name=region_name or None,
                config=Config(
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    retries={"mode": "standard", "max_attempts": 1},
                ),
            )
        self._client = client

    async def detect_faces(self, image: bytes) -> DetectionResult:
        response = await self._call("detect_faces", self._client.detect_faces, Image={"Bytes": image})
        faces = tuple(
            FaceRegion(
                confidence=float(detail.get("Confidence", 0.0)),
                bounding_box=detail.get("BoundingBox"),
            )
            for detail in response.get("FaceDetails", [])
        )
        return DetectionResult(faces=faces)

    async def detect_labels(self, image: bytes) -> LabelResult:
        response = await self._call("detect_labels", self._client.detect_labels, Image={"Bytes": image})
        labels = tuple(
            Label(name=str(label.get("Name", "")), confidence=float(label.get("Confidence", 0.0)))
            for label in response.get("Labels", [])
        )
        return LabelResult(labels=labels)

    async def compare_faces(
        self,
        source: bytes,
        target: bytes,
        similarity_threshold: float,
    ) -> List[FaceMatch]:
        response = await self._call(
            "compare_faces",
            self._client.compare_faces,
            SourceImage={"Bytes": source},
            TargetImage={"Bytes": target},
            SimilarityThreshold=float(similarity_threshold),
            QualityFilter=self.QUALITY_FILTER,
        )
        return [
            FaceMatch(
                similarity=float(match.get("Similarity", 0.0)),
                bounding_box=(match.get("Face") or {}).get("BoundingBox"),
            )
            for match in response.get("FaceMatches", [])
        ]

    async def _call(self, operation: str, method: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        @async_retry_on_exception(max_retries=self.max_retries)
        async def invoke() -> Dict[str, Any]:
            return await asyncio.to_thread(self._invoke_blocking, operation, method, kwargs)

        return await invoke()

    @staticmethod
    def _invoke_blocking(
        operation: str,
        method: Callable[..., Dict[str, Any]],
        kwargs: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            return method(**kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            raise CapabilityError(
                f"Rekognition {operation} failed: {code}: {error.get('Message', str(e))}",
                operation=operation,
                retryable=code in RETRYABLE_ERROR_CODES,
                details={"code": code},
            )
        except BotoCoreError as e:
            raise CapabilityError(
                f"Rekognition {operation} failed: {e}",
                operation=operation,
                retryable=False,
            )
