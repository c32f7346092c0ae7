"""
Comparison Fan-Out Engine
-------------------------

Compares one source image against every reference image concurrently and
reduces the results with first-match-wins semantics.

All comparisons are issued before any is awaited, and the engine always
joins on every one of them: an early match does not cancel the others.
"""

import asyncio
import logging
from typing import List, Optional, Union

from ...domain.capabilities.recognition_capability import RecognitionCapability
from ...domain.models.decision import FanOutVerdict
from ...domain.models.detection import ComparisonOutcome
from ...domain.models.reference import ReferenceImage, ReferenceSet
from .deadline import call_with_deadline

logger = logging.getLogger(__name__)

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class _FanOutState:
    """Mutable state shared by the comparison tasks of one run."""

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.winner: Optional[str] = None
        self.completed = 0

    async def claim_winner(self, identifier: str) -> bool:
        """Record identifier as the winning match unless one is already recorded."""
        async with self.lock:
            if self.winner is not None:
                return False
            self.winner = identifier
            return True

    async def mark_completed(self) -> None:
        async with self.lock:
            self.completed += 1


class ComparisonFanOutEngine:
    """Runs one face comparison per reference image and aggregates the verdict."""

    def __init__(self, capability: RecognitionCapability, call_timeout: float = 10.0) -> None:
        self.capability = capability
        self.call_timeout = call_timeout

    async def run(
        self,
        image: bytes,
        reference_set: ReferenceSet,
        log: Optional[LoggerLike] = None,
    ) -> FanOutVerdict:
        """
        Compare image against every reference.

        Args:
            image: Source image bytes
            reference_set: References to compare against
            log: Logger for this invocation (defaults to the module logger)

        Returns:
            FanOutVerdict; recognized is True when at least one comparison matched.
            A failed comparison counts as "no match" for that reference only.
        """
        log = log or logger
        state = _FanOutState()

        tasks = [
            asyncio.create_task(self._compare_one(image, reference, state, log))
            for reference in reference_set
        ]
        outcomes: List[ComparisonOutcome] = list(await asyncio.gather(*tasks)) if tasks else []

        recognized = any(outcome.matched for outcome in outcomes)
        log.info(
            f"Compared against {len(outcomes)} reference(s): "
            f"{sum(1 for o in outcomes if o.matched)} matched, "
            f"{sum(1 for o in outcomes if o.error is not None)} failed"
        )
        return FanOutVerdict(
            recognized=recognized,
            winner=state.winner,
            outcomes=tuple(outcomes),
            calls_issued=len(tasks),
            completed=state.completed,
        )

    async def _compare_one(
        self,
        image: bytes,
        reference: ReferenceImage,
        state: _FanOutState,
        log: LoggerLike,
    ) -> ComparisonOutcome:
        try:
            matches = await call_with_deadline(
                "compare_faces",
                self.capability.compare_faces(image, reference.image, reference.similarity_threshold),
                self.call_timeout,
            )
        except Exception as e:
            log.error(f"Error comparing faces with {reference.identifier}: {e}")
            await state.mark_completed()
            return ComparisonOutcome(identifier=reference.identifier, error=str(e) or type(e).__name__)

        outcome = ComparisonOutcome(identifier=reference.identifier, match_count=len(matches))
        if outcome.matched:
            if await state.claim_winner(reference.identifier):
                log.info(f"Recognized snapshot as {reference.identifier}")
            else:
                log.info(f"Also matched {reference.identifier}; recognition already attributed to {state.winner}")
        else:
            log.warning(f"Did not recognize the caller as {reference.identifier}")
        await state.mark_completed()
        return outcome
