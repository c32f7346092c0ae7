"""Loads the reference image set once at startup."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ...core.exceptions import ConfigurationError
from ...domain.models.reference import ReferenceImage, ReferenceSet

logger = logging.getLogger(__name__)


def load_reference_set(
    entries: Iterable[Dict[str, Any]],
    default_similarity_threshold: float,
) -> ReferenceSet:
    """
    Read every configured reference image into memory.

    Args:
        entries: Dicts with "path" and an optional "similarity_threshold"
        default_similarity_threshold: Threshold for entries without their own

    Returns:
        ReferenceSet in configured order

    Raises:
        ConfigurationError: if an image cannot be read or a threshold is invalid
    """
    references: List[ReferenceImage] = []
    for entry in entries:
        path = str(entry["path"])
        try:
            threshold = float(entry.get("similarity_threshold", default_similarity_threshold))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Invalid similarity_threshold for {path}: {entry.get('similarity_threshold')!r}"
            )

        try:
            image = Path(path).read_bytes()
        except OSError as e:
            logger.error(f"Error reading file {path}: {e}")
            raise ConfigurationError(f"Cannot read reference image {path}: {e}")

        try:
            references.append(ReferenceImage(identifier=path, image=image, similarity_threshold=threshold))
        except ValueError as e:
            raise ConfigurationError(str(e))
        logger.info(f"Loaded reference image {path} ({len(image)} bytes, threshold {threshold})")

    return ReferenceSet(references=tuple(references))
