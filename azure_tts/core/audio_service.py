# ABOUTME: Batch (non-streaming) speech synthesis against the Azure TTS endpoint
# ABOUTME: Returns the whole audio body at once, with response caching and retry on transient failures

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from azure_tts.config import Settings
from azure_tts.core.auth import TokenSource
from azure_tts.core.stream_client import DEFAULT_CONTENT_TYPE, synthesis_headers
from azure_tts.core.stream_service import SsmlBuilder
from azure_tts.models.errors import (
    AuthenticationError,
    NetworkError,
    error_for_status,
    extract_error_detail,
    parse_retry_after,
)
from azure_tts.models.requests import TtsParams
from azure_tts.monitoring.metrics import StreamMetrics, get_metrics
from azure_tts.utils.cache import AudioCache
from azure_tts.utils.retry import RetryPolicy, run_with_retry
from azure_tts.utils.ssml import build_ssml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioResult:
    audio: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.audio)


class AudioService:
    """Synthesizes complete audio responses for TtsParams."""

    def __init__(
        self,
        settings: Settings,
        token_source: TokenSource,
        http_client: httpx.AsyncClient,
        cache: Optional[AudioCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        ssml_builder: SsmlBuilder = build_ssml,
        metrics: Optional[StreamMetrics] = None,
    ):
        self.settings = settings
        self.token_source = token_source
        self.http_client = http_client
        self.cache = cache if cache is not None else AudioCache(ttl=settings.cache_ttl)
        self.retry_policy = retry_policy or RetryPolicy()
        self.ssml_builder = ssml_builder
        self.metrics = metrics or get_metrics()

    async def get_audio(self, params: TtsParams) -> AudioResult:
        """
        Synthesize the text of params and return the complete audio.

        Cached results are returned without a request. Rate limiting, 5xx
        answers and transport failures are retried per the retry policy.
        """
        cached = self.cache.get(params)
        if cached is not None:
            logger.debug(f"Audio cache hit for {params}")
            return cached

        result = await run_with_retry(
            lambda: self._synthesize(params), self.retry_policy, "synthesis"
        )
        self.cache.put(params, result)
        return result

    async def _synthesize(self, params: TtsParams) -> AudioResult:
        token = await self.token_source.get_valid_token()
        if token is None or token.is_expired:
            raise AuthenticationError("Authentication token is missing or expired")

        request_body = self.ssml_builder(
            params.voice, params.text, params.rate, params.style, params.role
        )
        logger.debug(f"Requesting audio for {params}")

        started_at = time.monotonic()
        try:
            response = await self.http_client.post(
                self.settings.tts_endpoint,
                content=request_body.encode("utf-8"),
                headers=synthesis_headers(token.header_value, params.audio_format),
            )
        except httpx.HTTPError as e:
            logger.error(f"Synthesis request failed: {e}")
            self.metrics.record_error("network", "synthesis")
            raise NetworkError("Failed to generate audio", cause=e) from e
        finally:
            self.metrics.record_request_duration("synthesis", time.monotonic() - started_at)

        if response.status_code != 200:
            error = error_for_status(
                response.status_code,
                extract_error_detail(response.content),
                parse_retry_after(response.headers.get("retry-after")),
            )
            logger.error(f"Synthesis failed with status {response.status_code}: {error}")
            self.metrics.record_error(error.kind.value, "synthesis")
            raise error

        result = AudioResult(
            audio=response.content,
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        )
        logger.info(f"Synthesized {result.size} bytes of {result.content_type}")
        return result
