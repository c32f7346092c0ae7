"""Diagnostic Sinks

Write raw face/label detection output captured in discovery mode, so that
label confidence gates can be tuned without affecting MQTT consumers.
"""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

from ...core.exceptions import DiagnosticOutputError
from ...domain.capabilities.diagnostic_sink import DiagnosticSink
from ...domain.models.detection import DetectionResult, LabelResult

logger = logging.getLogger(__name__)


def build_diagnostic_document(detection: DetectionResult, labels: LabelResult) -> Dict[str, Any]:
    return {
        "captured_at": datetime.now(timezone.utc).isoformat(),
        **detection.to_dict(),
        **labels.to_dict(),
    }


class LoggingDiagnosticSink(DiagnosticSink):
    """Logs the diagnostic document; used when no output file is configured."""

    async def capture(self, detection: DetectionResult, labels: LabelResult) -> None:
        document = build_diagnostic_document(detection, labels)
        logger.info(f"Discovery output:\n{json.dumps(document, indent=2, ensure_ascii=False)}")


class FileDiagnosticSink(DiagnosticSink):
    """
    Appends one pretty-printed JSON document per invocation to a file.

    The file is created with owner-only permissions.
    """

    def __init__(self, path: str):
        self.path = path

    async def capture(self, detection: DetectionResult, labels: LabelResult) -> None:
        document = build_diagnostic_document(detection, labels)
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        logger.info(f"Writing labels to a file: {self.path}")
        await asyncio.to_thread(self._append, text)

    def _append(self, text: str) -> None:
        try:
            fd = os.open(self.path, os.O_APPEND | os.O_WRONLY | os.O_CREAT, 0o600)
            with os.fdopen(fd, "a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise DiagnosticOutputError(
                f"Cannot write discovery output to {self.path}: {e}",
                details={"path": self.path},
            )
