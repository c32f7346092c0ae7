from abc import ABC, abstractmethod
from ..models.detection import DetectionResult, LabelResult


class DiagnosticSink(ABC):
    """Capability interface - receives raw detection output in discovery mode"""

    @abstractmethod
    async def capture(self, detection: DetectionResult, labels: LabelResult) -> None:
        """Record detection and label results. Raises DiagnosticOutputError on failure."""
        pass
