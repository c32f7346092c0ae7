"""
Unit tests for the async retry decorator.
"""
import pytest

from recognizer.core.exceptions import CapabilityError
from recognizer.utils.retry_utils import async_retry_on_exception


def _flaky(failures, retryable=True):
    calls = {"count": 0}

    @async_retry_on_exception(max_retries=2, initial_delay=0.0, jitter=False)
    async def operation():
        calls["count"] += 1
        if calls["count"] <= failures:
            raise CapabilityError("throttled", operation="detect_faces", retryable=retryable)
        return "ok"

    return operation, calls


class TestAsyncRetryOnException:
    @pytest.mark.asyncio
    async def test_succeeds_after_retryable_failures(self):
        operation, calls = _flaky(failures=2)

        assert await operation() == "ok"
        assert calls["count"] == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        operation, calls = _flaky(failures=5)

        with pytest.raises(CapabilityError):
            await operation()
        assert calls["count"] == 3

    @pytest.mark.asyncio
    async def test_non_retryable_error_is_raised_at_once(self):
        operation, calls = _flaky(failures=1, retryable=False)

        with pytest.raises(CapabilityError):
            await operation()
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self):
        calls = {"count": 0}

        @async_retry_on_exception(max_retries=3, initial_delay=0.0, jitter=False)
        async def operation():
            calls["count"] += 1
            raise KeyError("boom")

        with pytest.raises(KeyError):
            await operation()
        assert calls["count"] == 1
