# ABOUTME: HTTP transport that turns a streamed Azure synthesis response into sequenced AudioChunk values
# ABOUTME: Maps failed statuses and transport errors into the client error taxonomy and closes responses on cancel

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Optional

import httpx

from azure_tts.logging_config import stream_id_context
from azure_tts.models.errors import (
    NetworkError,
    error_for_status,
    extract_error_detail,
    parse_retry_after,
)
from azure_tts.models.streaming import AudioChunk, StreamEnvelope
from azure_tts.monitoring.metrics import StreamMetrics, get_metrics

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "audio/mpeg"
USER_AGENT = "azure-tts-python"


def synthesis_headers(auth_header_value: str, format_header_value: str) -> Dict[str, str]:
    """Headers required by the synthesis endpoint, shared by batch and streaming calls."""
    return {
        "Authorization": auth_header_value,
        "X-Microsoft-OutputFormat": format_header_value,
        "Content-Type": "application/ssml+xml",
        "Accept": "audio/*",
        "User-Agent": USER_AGENT,
    }


def _parse_content_length(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    return length if length >= 0 else None


class ChunkStream:
    """
    Async iterator of AudioChunk values bound to one open HTTP response.

    Sequence numbers start at 0 and increase by one per chunk. A successful
    response always ends with exactly one empty terminal chunk, even when the
    body was empty. The response is released when the body completes or
    fails, when the consuming task is cancelled, when ``aclose()`` is called
    (whether or not iteration ever started), and when a partly read stream is
    dropped and the event loop finalizes it.
    """

    def __init__(
        self,
        response: httpx.Response,
        metrics: StreamMetrics,
        started_at: float,
        stream_id: str,
    ):
        self._response = response
        self._metrics = metrics
        self._started_at = started_at
        self.stream_id = stream_id
        self._chunks = self._iter_chunks()
        self._finished = False
        self._bytes_received = 0

        self._metrics.stream_started()

    def __aiter__(self) -> "ChunkStream":
        return self

    async def __anext__(self) -> AudioChunk:
        with stream_id_context(self.stream_id):
            return await self._chunks.__anext__()

    async def aclose(self) -> None:
        with stream_id_context(self.stream_id):
            if not self._finished:
                logger.info(f"Audio stream closed by consumer after {self._bytes_received} bytes")
            await self._chunks.aclose()
            # The generator never ran its cleanup if iteration had not started
            await self._finish("cancelled")

    async def _finish(self, outcome: str) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            await self._response.aclose()
        finally:
            self._metrics.stream_finished(outcome)
            self._metrics.record_request_duration("stream", time.monotonic() - self._started_at)

    async def _iter_chunks(self) -> AsyncIterator[AudioChunk]:
        sequence_number = 0
        outcome = "cancelled"

        try:
            try:
                async for fragment in self._response.aiter_bytes():
                    if not fragment:
                        continue

                    if sequence_number == 0:
                        self._metrics.record_first_chunk(time.monotonic() - self._started_at)
                    self._metrics.record_chunk(len(fragment))
                    self._bytes_received += len(fragment)

                    yield AudioChunk(
                        data=bytes(fragment),
                        sequence_number=sequence_number,
                        timestamp=datetime.now(timezone.utc),
                    )
                    sequence_number += 1
            except httpx.HTTPError as e:
                outcome = "failed"
                logger.error(f"Audio stream interrupted after {sequence_number} chunks: {e}")
                self._metrics.record_error("network", "stream")
                raise NetworkError("Stream interrupted", cause=e) from e

            logger.info(
                f"Audio stream completed: {sequence_number} chunks, {self._bytes_received} bytes"
            )
            await self._finish("completed")
            yield AudioChunk(
                data=b"",
                sequence_number=sequence_number,
                timestamp=datetime.now(timezone.utc),
                is_last=True,
            )
        finally:
            # Runs on completion, failure, task cancellation and aclose(), including
            # the aclose() the event loop issues for an abandoned stream
            await self._finish(outcome)


class StreamTransport:
    """
    Opens streaming synthesis requests against the Azure TTS endpoint.

    The HTTP client is injected so tests can mount an ``httpx.MockTransport``
    and so the facade can share one connection pool across services.
    """

    def __init__(self, http_client: httpx.AsyncClient, metrics: Optional[StreamMetrics] = None):
        self.http_client = http_client
        self.metrics = metrics or get_metrics()

    async def stream_request(
        self,
        endpoint: str,
        request_body: str,
        auth_header_value: str,
        format_header_value: str,
        stream_id: Optional[str] = None,
    ) -> StreamEnvelope:
        """
        Send the request and return once the response status is known.

        Failed statuses raise before any chunk exists; the returned envelope's
        stream yields the body as it arrives. Log lines emitted while the
        stream is read or closed carry ``stream_id``.
        """
        stream_id = stream_id or uuid.uuid4().hex[:12]
        request = self.http_client.build_request(
            "POST",
            endpoint,
            content=request_body.encode("utf-8"),
            headers=synthesis_headers(auth_header_value, format_header_value),
        )
        logger.debug(f"Opening audio stream: POST {endpoint} format={format_header_value}")

        started_at = time.monotonic()
        try:
            response = await self.http_client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"Failed to open audio stream: {e}")
            self.metrics.record_error("network", "stream")
            raise NetworkError("Failed to initiate streaming TTS request", cause=e) from e

        if response.status_code != 200:
            await self._raise_for_status(response)

        content_type = response.headers.get("content-type", DEFAULT_CONTENT_TYPE)
        estimated_total_bytes = _parse_content_length(response.headers.get("content-length"))
        logger.info(
            f"Audio stream opened: content_type={content_type} "
            f"estimated_total_bytes={estimated_total_bytes}"
        )

        return StreamEnvelope(
            audio_stream=ChunkStream(response, self.metrics, started_at, stream_id),
            content_type=content_type,
            estimated_total_bytes=estimated_total_bytes,
        )

    async def _raise_for_status(self, response: httpx.Response) -> None:
        try:
            raw = await response.aread()
        except httpx.HTTPError as e:
            logger.debug(f"Could not read error body: {e}")
            raw = b""
        finally:
            await response.aclose()

        error = error_for_status(
            response.status_code,
            extract_error_detail(raw),
            parse_retry_after(response.headers.get("retry-after")),
        )
        logger.error(f"Streaming request failed with status {response.status_code}: {error}")
        self.metrics.record_error(error.kind.value, "stream")
        raise error
