"""Per-call deadline for recognition capability calls."""

import asyncio
from typing import Awaitable, TypeVar

from ...core.exceptions import CapabilityError

T = TypeVar("T")


async def call_with_deadline(operation: str, awaitable: Awaitable[T], timeout: float) -> T:
    """
    Await a capability call, giving up after timeout seconds.

    Raises:
        CapabilityError: if the deadline expires
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise CapabilityError(
            f"{operation} did not complete within {timeout:g}s",
            operation=operation,
            details={"timeout_seconds": timeout},
        )
