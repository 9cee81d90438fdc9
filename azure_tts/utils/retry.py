# ABOUTME: Exponential backoff retry policy for transient Azure TTS failures
# ABOUTME: Used by the batch synthesis and voice list paths; the streaming pipeline never retries internally

import logging
import random
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, TypeVar

import backoff

from azure_tts.models.errors import (
    AzureTtsError,
    NetworkError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (RateLimitError, ServiceUnavailableError, NetworkError)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff with optional jitter.

    Attempt ``n`` (1-based) waits ``base_delay * backoff_multiplier ** (n - 1)``,
    capped at ``max_delay``. With jitter the wait is randomized between 50%
    and 100% of that value. ``max_retries=0`` disables retries.
    """
    max_retries: int = 3
    base_delay: timedelta = timedelta(milliseconds=500)
    max_delay: timedelta = timedelta(seconds=30)
    backoff_multiplier: float = 2.0
    jitter: bool = True

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay <= timedelta(0):
            raise ValueError("base_delay must be positive")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if self.backoff_multiplier < 1.0:
            raise ValueError("backoff_multiplier must be >= 1.0")

    def get_delay(self, attempt: int) -> timedelta:
        if attempt <= 0:
            return timedelta(0)

        delay_ms = self.base_delay / timedelta(milliseconds=1) * self.backoff_multiplier ** (attempt - 1)
        delay_ms = min(delay_ms, self.max_delay / timedelta(milliseconds=1))

        if self.jitter:
            delay_ms *= 0.5 + random.random() * 0.5

        return timedelta(milliseconds=round(delay_ms))

    def copy_with(self, **changes) -> "RetryPolicy":
        return replace(self, **changes)


def is_retryable(error: BaseException) -> bool:
    """Whether an error is transient and worth another attempt."""
    return isinstance(error, RETRYABLE_ERRORS)


def _policy_wait(policy: RetryPolicy):
    """backoff wait generator driven by the policy; backoff sends in each failure."""
    attempt = 0
    error = yield
    while True:
        attempt += 1
        delay = policy.get_delay(attempt)
        if isinstance(error, RateLimitError) and error.retry_after and error.retry_after > delay:
            delay = error.retry_after
        error = yield delay.total_seconds()


def _retry_logger(operation_name: str, policy: RetryPolicy) -> Callable[[Dict[str, Any]], None]:
    def log_retry(details: Dict[str, Any]) -> None:
        e = details["exception"]
        logger.warning(
            f"{operation_name} failed with {e.kind.value} error, "
            f"retrying in {details['wait']:.2f}s "
            f"(attempt {details['tries']}/{policy.max_retries}): {e}"
        )
    return log_retry


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    operation_name: str = "request",
) -> T:
    """
    Run an async operation, retrying transient failures per the policy.

    A RateLimitError's retry_after is honoured when it is longer than the
    computed backoff. Non-retryable errors propagate immediately.
    """
    @backoff.on_exception(
        _policy_wait,
        AzureTtsError,
        max_tries=policy.max_retries + 1,
        giveup=lambda e: not is_retryable(e),
        jitter=None,
        on_backoff=_retry_logger(operation_name, policy),
        logger=None,
        policy=policy,
    )
    async def attempt() -> T:
        return await operation()

    return await attempt()
