# ABOUTME: Streaming synthesis entry point wiring validation, authentication and SSML into the transport
# ABOUTME: Offers a plain audio stream and a variant that tees a progress stream off the same chunks

import logging
import uuid
from typing import AsyncIterator, Callable, Optional, Tuple

from azure_tts.config import Settings
from azure_tts.core.auth import TokenSource
from azure_tts.core.stream_client import StreamTransport
from azure_tts.core.validation import validate_streaming_params
from azure_tts.logging_config import stream_id_context
from azure_tts.models.errors import AuthenticationError
from azure_tts.models.requests import StreamingParams
from azure_tts.models.streaming import StreamEnvelope, StreamProgress
from azure_tts.models.voices import StyleSsml, Voice, VoiceRole
from azure_tts.utils.ssml import build_ssml
from azure_tts.utils.streaming import ProgressTrackingStream

logger = logging.getLogger(__name__)

SsmlBuilder = Callable[[Voice, str, float, Optional[StyleSsml], Optional[VoiceRole]], str]


class StreamOrchestrator:
    """
    Produces live audio streams for StreamingParams.

    Nothing here retries: every failure is terminal for the call that raised
    it, and callers apply their own retry policy around it.
    """

    def __init__(
        self,
        settings: Settings,
        token_source: TokenSource,
        transport: StreamTransport,
        ssml_builder: SsmlBuilder = build_ssml,
    ):
        self.settings = settings
        self.token_source = token_source
        self.transport = transport
        self.ssml_builder = ssml_builder

    def validate_streaming_params(self, params: StreamingParams) -> None:
        """Raise ValidationError describing the first rule the parameters break."""
        validate_streaming_params(params)

    async def get_audio_stream(self, params: StreamingParams) -> StreamEnvelope:
        """
        Open a streaming synthesis request.

        Parameters are validated before any network activity. The returned
        envelope must be consumed or closed to release the connection.

        Raises:
            ValidationError: Parameters are invalid
            AuthenticationError: No valid token, or the service rejected it
            RateLimitError, ServiceUnavailableError, NetworkError: Request failed
        """
        self.validate_streaming_params(params)

        token = await self.token_source.get_valid_token()
        if token is None or token.is_expired:
            raise AuthenticationError("No valid authentication token available")

        request_body = self.ssml_builder(
            params.voice, params.text, params.rate, params.style, params.role
        )

        stream_id = uuid.uuid4().hex[:12]
        with stream_id_context(stream_id):
            logger.info(f"Starting audio stream for {params}")
            return await self.transport.stream_request(
                self.settings.tts_endpoint,
                request_body,
                token.header_value,
                params.audio_format,
                stream_id=stream_id,
            )

    async def get_audio_stream_with_progress(
        self, params: StreamingParams
    ) -> Tuple[StreamEnvelope, AsyncIterator[StreamProgress]]:
        """
        Open a stream and derive a progress stream from it.

        Progress values are produced only as the audio stream is consumed; the
        progress stream completes when the audio stream completes or is closed
        and fails with the same error if the audio stream fails.
        """
        envelope = await self.get_audio_stream(params)
        tracked = ProgressTrackingStream(envelope.audio_stream, envelope.estimated_total_bytes)

        return (
            StreamEnvelope(
                audio_stream=tracked,
                content_type=envelope.content_type,
                estimated_total_bytes=envelope.estimated_total_bytes,
            ),
            tracked.progress_updates(),
        )
