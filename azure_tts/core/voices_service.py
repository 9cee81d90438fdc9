# ABOUTME: Voice catalog retrieval from the Azure voice list endpoint
# ABOUTME: Parses the service JSON into Voice models and caches the list for a short time

import logging
import time
from datetime import timedelta
from typing import List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from azure_tts.config import Settings
from azure_tts.core.auth import TokenSource
from azure_tts.core.stream_client import USER_AGENT
from azure_tts.models.errors import (
    AuthenticationError,
    NetworkError,
    error_for_status,
    extract_error_detail,
    parse_retry_after,
)
from azure_tts.models.voices import Voice
from azure_tts.monitoring.metrics import StreamMetrics, get_metrics
from azure_tts.utils.cache import TtlCache
from azure_tts.utils.retry import RetryPolicy, run_with_retry

logger = logging.getLogger(__name__)

VOICES_CACHE_TTL = timedelta(seconds=60)
_VOICES_KEY = "voices"


class VoicesService:
    """Lists the voices available in the configured region."""

    def __init__(
        self,
        settings: Settings,
        token_source: TokenSource,
        http_client: httpx.AsyncClient,
        retry_policy: Optional[RetryPolicy] = None,
        cache_ttl: timedelta = VOICES_CACHE_TTL,
        metrics: Optional[StreamMetrics] = None,
    ):
        self.settings = settings
        self.token_source = token_source
        self.http_client = http_client
        self.retry_policy = retry_policy or RetryPolicy()
        self.cache_ttl = cache_ttl
        self.metrics = metrics or get_metrics()
        self._cache: TtlCache[List[Voice]] = TtlCache()

    async def get_voices(self) -> List[Voice]:
        cached = self._cache.get(_VOICES_KEY)
        if cached is not None:
            return list(cached)

        voices = await run_with_retry(self._fetch_voices, self.retry_policy, "voice list")
        self._cache.put(_VOICES_KEY, voices, self.cache_ttl)
        return list(voices)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _fetch_voices(self) -> List[Voice]:
        token = await self.token_source.get_valid_token()
        if token is None or token.is_expired:
            raise AuthenticationError("Authentication token is missing or expired")

        started_at = time.monotonic()
        try:
            response = await self.http_client.get(
                self.settings.voices_endpoint,
                headers={"Authorization": token.header_value, "User-Agent": USER_AGENT},
            )
        except httpx.HTTPError as e:
            logger.error(f"Voice list request failed: {e}")
            self.metrics.record_error("network", "voices")
            raise NetworkError("Failed to fetch voice list", cause=e) from e
        finally:
            self.metrics.record_request_duration("voices", time.monotonic() - started_at)

        if response.status_code != 200:
            error = error_for_status(
                response.status_code,
                extract_error_detail(response.content),
                parse_retry_after(response.headers.get("retry-after")),
            )
            logger.error(f"Voice list failed with status {response.status_code}: {error}")
            self.metrics.record_error(error.kind.value, "voices")
            raise error

        try:
            voices = [Voice.model_validate(item) for item in response.json()]
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unexpected voice list payload: {e}")
            raise NetworkError("Malformed voice list response", cause=e) from e

        logger.info(f"Fetched {len(voices)} voices for region {self.settings.region}")
        return voices
