# ABOUTME: AzureTts facade tying configuration, authentication and the synthesis services together
# ABOUTME: Owns the shared httpx client and exposes voices, batch synthesis and streaming synthesis

import logging
from typing import AsyncIterator, List, Optional, Tuple

import httpx

from azure_tts.config import Settings, get_settings
from azure_tts.core.audio_service import AudioResult, AudioService
from azure_tts.core.auth import TokenProvider, TokenSource
from azure_tts.core.stream_client import StreamTransport
from azure_tts.core.stream_service import StreamOrchestrator
from azure_tts.core.voices_service import VoicesService
from azure_tts.logging_config import configure_logging
from azure_tts.models.errors import InitializationError
from azure_tts.models.requests import StreamingParams, TtsParams
from azure_tts.models.streaming import StreamEnvelope, StreamProgress
from azure_tts.models.voices import Voice
from azure_tts.monitoring.metrics import StreamMetrics, get_metrics
from azure_tts.utils.cache import AudioCache
from azure_tts.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


class AzureTts:
    """
    Client for the Azure text-to-speech service.

    Use as an async context manager, or call ``aclose()`` when done, so the
    HTTP connection pool is released::

        async with AzureTts.from_env() as tts:
            voice = VoiceFilter(await tts.get_voices()).by_locale("en-US").first_or_raise()
            envelope = await tts.get_tts_stream(params)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        token_source: Optional[TokenSource] = None,
        metrics: Optional[StreamMetrics] = None,
    ):
        if settings is None:
            settings = _load_settings()
        self.settings = settings

        try:
            retry_policy = RetryPolicy(
                max_retries=settings.max_retries,
                base_delay=settings.retry_base_delay,
                max_delay=settings.retry_max_delay,
            )
        except ValueError as e:
            raise InitializationError(f"Invalid retry configuration: {e}", cause=e) from e

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=settings.request_timeout_sec)
        self.metrics = metrics or get_metrics()
        self.token_source = token_source or TokenProvider(settings, self.http_client)

        self.voices = VoicesService(
            settings, self.token_source, self.http_client,
            retry_policy=retry_policy, metrics=self.metrics,
        )
        self.audio = AudioService(
            settings, self.token_source, self.http_client,
            cache=AudioCache(ttl=settings.cache_ttl),
            retry_policy=retry_policy, metrics=self.metrics,
        )
        self.streaming = StreamOrchestrator(
            settings, self.token_source, StreamTransport(self.http_client, self.metrics),
        )

        logger.debug(f"Azure TTS client initialized for region {settings.region}")

    @classmethod
    def from_env(cls, **kwargs) -> "AzureTts":
        """Create a client from environment variables, configuring logging when enabled."""
        settings = _load_settings()
        if settings.with_logs:
            configure_logging(settings.log_level, enable_json=False)
        return cls(settings=settings, **kwargs)

    async def get_voices(self) -> List[Voice]:
        return await self.voices.get_voices()

    async def get_tts(self, params: TtsParams) -> AudioResult:
        return await self.audio.get_audio(params)

    async def get_tts_stream(self, params: StreamingParams) -> StreamEnvelope:
        return await self.streaming.get_audio_stream(params)

    async def get_tts_stream_with_progress(
        self, params: StreamingParams
    ) -> Tuple[StreamEnvelope, AsyncIterator[StreamProgress]]:
        return await self.streaming.get_audio_stream_with_progress(params)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "AzureTts":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValueError as e:
        raise InitializationError(f"Invalid configuration: {e}", cause=e) from e
