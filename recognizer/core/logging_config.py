"""Logging setup and per-invocation logger."""

import logging
from typing import Any, MutableMapping, Tuple

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str = "INFO") -> None:
    """Install the console log format once at process start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class InvocationLogger(logging.LoggerAdapter):
    """
    Logger adapter that tags every message with a pipeline invocation id.

    Built once per invocation and passed explicitly to the components that
    take part in it.
    """

    def __init__(self, logger: logging.Logger, invocation_id: str):
        super().__init__(logger, {"invocation_id": invocation_id})

    @property
    def invocation_id(self) -> str:
        return self.extra["invocation_id"]

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[invocation {self.invocation_id}] {msg}", kwargs
