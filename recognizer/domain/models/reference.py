# Standard library imports
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class ReferenceImage:
    """
    A known-identity image the source image is compared against.

    The identifier (usually the file path) is only used for logging and for
    attributing a match.
    """
    identifier: str
    image: bytes
    similarity_threshold: float

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.identifier:
            raise ValueError("Reference identifier is required")
        if not self.image:
            raise ValueError(f"Reference image {self.identifier} is empty")
        if not 0 <= self.similarity_threshold <= 100:
            raise ValueError(
                f"Similarity threshold for {self.identifier} must be within [0, 100], "
                f"got {self.similarity_threshold}"
            )

    def __repr__(self) -> str:
        return (
            f"ReferenceImage(identifier={self.identifier!r}, "
            f"bytes={len(self.image)}, similarity_threshold={self.similarity_threshold})"
        )


@dataclass(frozen=True)
class ReferenceSet:
    """Ordered, read-only collection of reference images loaded at startup."""
    references: Tuple[ReferenceImage, ...] = ()

    def __iter__(self) -> Iterator[ReferenceImage]:
        return iter(self.references)

    def __len__(self) -> int:
        return len(self.references)

    @property
    def identifiers(self) -> Tuple[str, ...]:
        return tuple(reference.identifier for reference in self.references)
