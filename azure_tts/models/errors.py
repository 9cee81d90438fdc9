# ABOUTME: This file defines the exception taxonomy raised by the Azure TTS client.
# ABOUTME: Every failure maps to exactly one ErrorKind so callers can match on it exhaustively.

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    INITIALIZATION = "initialization"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NETWORK = "network"
    RATE_LIMIT = "rate_limit"
    SERVICE_UNAVAILABLE = "service_unavailable"


class AzureTtsError(Exception):
    """Base class for all client errors.

    Subclasses are the closed set of failure kinds; ``kind`` mirrors the
    class so callers can dispatch with ``match error.kind``.
    """

    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class InitializationError(AzureTtsError):
    """Raised when the client is used before it was configured correctly."""
    kind = ErrorKind.INITIALIZATION


class AuthenticationError(AzureTtsError):
    """Raised when no valid token is available or the service rejects it.
    Maps to HTTP 401 and 403.
    """
    kind = ErrorKind.AUTHENTICATION


class ValidationError(AzureTtsError):
    """Raised when request parameters are invalid.
    Maps to HTTP 400.
    """
    kind = ErrorKind.VALIDATION


class NetworkError(AzureTtsError):
    """Raised on transport failures and unmapped HTTP statuses."""
    kind = ErrorKind.NETWORK


class RateLimitError(AzureTtsError):
    """Raised when the subscription quota is exceeded.
    Maps to HTTP 429.
    """
    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str,
        retry_after: Optional[timedelta] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.retry_after = retry_after


class ServiceUnavailableError(AzureTtsError):
    """Raised when the service answers with a 5xx status."""
    kind = ErrorKind.SERVICE_UNAVAILABLE


def parse_retry_after(value: Optional[str]) -> Optional[timedelta]:
    """Parse a Retry-After header given either as delta-seconds or an HTTP date."""
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return timedelta(seconds=int(value))
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(when - datetime.now(timezone.utc), timedelta(0))


def error_for_status(
    status_code: int,
    detail: Any,
    retry_after: Optional[timedelta] = None,
) -> AzureTtsError:
    """Map a failed HTTP status to the matching error instance."""
    if status_code == 400:
        return ValidationError(f"Bad request: {detail}")
    if status_code == 401:
        return AuthenticationError(f"Authentication failed: {detail}")
    if status_code == 403:
        return AuthenticationError(f"Access forbidden: {detail}")
    if status_code == 429:
        return RateLimitError(f"Rate limit exceeded: {detail}", retry_after=retry_after)
    if 500 <= status_code < 600:
        return ServiceUnavailableError(f"Azure service error {status_code}: {detail}")
    return NetworkError(f"HTTP error {status_code}: {detail}")


def extract_error_detail(raw: bytes) -> str:
    """Decode an error body for inclusion in an exception message."""
    if not raw:
        return "empty error response"
    return raw.decode("utf-8", errors="ignore").strip() or "empty error response"
