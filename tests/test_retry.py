# ABOUTME: Test cases for the exponential backoff retry policy
# ABOUTME: Covers delay computation, jitter bounds, retryable classification and the async retry loop

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from azure_tts.models.errors import (
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)
from azure_tts.utils.retry import RetryPolicy, is_retryable, run_with_retry


class TestRetryPolicy:
    """Test backoff delay computation."""

    def test_exponential_without_jitter(self):
        policy = RetryPolicy(base_delay=timedelta(milliseconds=500), jitter=False)
        assert policy.get_delay(0) == timedelta(0)
        assert policy.get_delay(-3) == timedelta(0)
        assert policy.get_delay(1) == timedelta(milliseconds=500)
        assert policy.get_delay(2) == timedelta(seconds=1)
        assert policy.get_delay(3) == timedelta(seconds=2)

    def test_capped_at_max_delay(self):
        policy = RetryPolicy(
            base_delay=timedelta(seconds=1), max_delay=timedelta(seconds=5), jitter=False
        )
        assert policy.get_delay(10) == timedelta(seconds=5)

    def test_jitter_bounds(self):
        policy = RetryPolicy(base_delay=timedelta(seconds=1), jitter=True)
        for _ in range(50):
            delay = policy.get_delay(2)
            assert timedelta(seconds=1) <= delay <= timedelta(seconds=2)

    @pytest.mark.parametrize("kwargs", [
        {"max_retries": -1},
        {"base_delay": timedelta(0)},
        {"base_delay": timedelta(seconds=10), "max_delay": timedelta(seconds=1)},
        {"backoff_multiplier": 0.5},
    ])
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)

    def test_copy_with(self):
        policy = RetryPolicy().copy_with(max_retries=5)
        assert policy.max_retries == 5
        assert policy == RetryPolicy(max_retries=5)


class TestIsRetryable:
    """Test transient error classification."""

    @pytest.mark.parametrize("error,expected", [
        (RateLimitError("x"), True),
        (ServiceUnavailableError("x"), True),
        (NetworkError("x"), True),
        (AuthenticationError("x"), False),
        (ValidationError("x"), False),
        (ValueError("x"), False),
    ])
    def test_classification(self, error, expected):
        assert is_retryable(error) is expected


class TestRunWithRetry:
    """Test the async retry loop."""

    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self):
        operation = AsyncMock(side_effect=[ServiceUnavailableError("down"), NetworkError("reset"), "ok"])
        policy = RetryPolicy(max_retries=3, jitter=False)

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            assert await run_with_retry(operation, policy) == "ok"

        assert operation.await_count == 3
        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        operation = AsyncMock(side_effect=ServiceUnavailableError("down"))
        policy = RetryPolicy(max_retries=2, jitter=False)

        with patch("asyncio.sleep", new=AsyncMock()):
            with pytest.raises(ServiceUnavailableError):
                await run_with_retry(operation, policy)

        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_non_retryable_raised_immediately(self):
        operation = AsyncMock(side_effect=AuthenticationError("bad key"))

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(AuthenticationError):
                await run_with_retry(operation, RetryPolicy())

        assert operation.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_honours_retry_after(self):
        operation = AsyncMock(side_effect=[RateLimitError("quota", retry_after=timedelta(seconds=7)), "ok"])
        policy = RetryPolicy(jitter=False)

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            assert await run_with_retry(operation, policy) == "ok"

        sleep.assert_awaited_once_with(7.0)

    @pytest.mark.asyncio
    async def test_zero_retries(self):
        operation = AsyncMock(side_effect=NetworkError("reset"))
        with pytest.raises(NetworkError):
            await run_with_retry(operation, RetryPolicy(max_retries=0))
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_lambda_returning_coroutine(self):
        calls = []

        async def synthesize(text):
            calls.append(text)
            if len(calls) < 2:
                raise NetworkError("reset")
            return text.upper()

        with patch("asyncio.sleep", new=AsyncMock()):
            result = await run_with_retry(lambda: synthesize("hi"), RetryPolicy(jitter=False))

        assert result == "HI"
        assert calls == ["hi", "hi"]

    @pytest.mark.asyncio
    async def test_logs_each_retry(self, caplog):
        operation = AsyncMock(side_effect=[ServiceUnavailableError("down"), "ok"])

        with patch("asyncio.sleep", new=AsyncMock()):
            with caplog.at_level("WARNING", logger="azure_tts.utils.retry"):
                await run_with_retry(operation, RetryPolicy(jitter=False), "synthesis")

        assert "synthesis failed with service_unavailable error, retrying in 0.50s (attempt 1/3)" in caplog.text
