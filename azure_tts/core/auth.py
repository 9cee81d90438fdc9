# ABOUTME: Bearer token acquisition and refresh for the Azure speech service
# ABOUTME: TokenProvider caches one short-lived token and serialises refreshes behind an asyncio.Lock

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import httpx

from azure_tts.config import Settings
from azure_tts.models.errors import NetworkError, error_for_status, extract_error_detail, parse_retry_after

logger = logging.getLogger(__name__)

# Azure issues tokens valid for 10 minutes; refresh well before that.
TOKEN_LIFETIME = timedelta(minutes=8)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthToken:
    value: str
    issued_at: datetime = field(default_factory=_utcnow)
    lifetime: timedelta = TOKEN_LIFETIME

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + self.lifetime

    @property
    def is_expired(self) -> bool:
        return _utcnow() >= self.expires_at

    @property
    def header_value(self) -> str:
        return f"Bearer {self.value}"

    def __repr__(self) -> str:
        # Never log the token itself
        return f"AuthToken(expires_at={self.expires_at.isoformat()})"


class TokenSource(Protocol):
    """Anything that can hand out a currently valid bearer token."""

    async def get_valid_token(self) -> AuthToken:
        ...


class TokenProvider:
    """
    Issues bearer tokens from the region's token endpoint using the subscription key.

    Readers take the cached token without locking; only a refresh acquires the
    lock, and callers that queued behind a refresh reuse its result.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client
        self._token: Optional[AuthToken] = None
        self._lock = asyncio.Lock()

    @property
    def current_token(self) -> Optional[AuthToken]:
        return self._token

    async def get_valid_token(self) -> AuthToken:
        token = self._token
        if token is not None and not token.is_expired:
            return token

        async with self._lock:
            # Another caller may have refreshed while we waited
            token = self._token
            if token is not None and not token.is_expired:
                return token

            self._token = await self._issue_token()
            return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a fresh one."""
        self._token = None

    async def _issue_token(self) -> AuthToken:
        logger.debug(f"Requesting access token from {self.settings.token_endpoint}")

        try:
            response = await self.http_client.post(
                self.settings.token_endpoint,
                headers={
                    "Ocp-Apim-Subscription-Key": self.settings.subscription_key,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Token request failed: {e}")
            raise NetworkError("Failed to reach the token endpoint", cause=e) from e

        if response.status_code != 200:
            error = error_for_status(
                response.status_code,
                extract_error_detail(response.content),
                parse_retry_after(response.headers.get("retry-after")),
            )
            logger.error(f"Token request rejected: {error}")
            raise error

        logger.info("Access token refreshed")
        return AuthToken(value=response.text.strip())
