# ABOUTME: This file provides the playback-side buffering and progress tracking for streamed audio chunks.
# ABOUTME: ChunkBuffer re-slices inbound chunks for playback; ProgressTrackingStream tees progress off the chunk stream.

import asyncio
import logging
import time
from collections import deque
from datetime import timedelta
from typing import AsyncIterator, Deque, Optional, TYPE_CHECKING

from azure_tts.models.streaming import AudioChunk, StreamProgress

if TYPE_CHECKING:
    from azure_tts.models.requests import StreamingParams

logger = logging.getLogger(__name__)

DEFAULT_TARGET_CHUNK_BYTES = 64 * 1024
DEFAULT_MIN_PLAYBACK_BYTES = 16 * 1024


class ChunkBuffer:
    """Byte buffer between the network stream and a playback consumer.

    Not thread-safe: one writer and one reader, or a single task doing both.
    The front segment is consumed through an offset so partial pops do not
    copy the remainder.
    """

    def __init__(
        self,
        target_outbound_chunk_bytes: int = DEFAULT_TARGET_CHUNK_BYTES,
        min_playback_threshold_bytes: int = DEFAULT_MIN_PLAYBACK_BYTES,
    ):
        """Initialize the chunk buffer.

        Args:
            target_outbound_chunk_bytes: Size of each chunk returned by pop_playback_chunk
            min_playback_threshold_bytes: Bytes required before playback may start
        """
        if target_outbound_chunk_bytes <= 0:
            raise ValueError("target_outbound_chunk_bytes must be positive")
        if min_playback_threshold_bytes < 0:
            raise ValueError("min_playback_threshold_bytes cannot be negative")
        self.target_outbound_chunk_bytes = target_outbound_chunk_bytes
        self.min_playback_threshold_bytes = min_playback_threshold_bytes
        self._segments: Deque[bytes] = deque()
        self._head_offset = 0
        self._total_bytes = 0
        self._is_complete = False

    @classmethod
    def for_params(cls, params: "StreamingParams") -> "ChunkBuffer":
        """Size a buffer from the chunk size and buffer strategy of a request."""
        return cls(
            target_outbound_chunk_bytes=params.preferred_chunk_size.target_bytes,
            min_playback_threshold_bytes=params.buffer_strategy.min_playback_bytes,
        )

    def push(self, chunk: AudioChunk) -> None:
        """Append a chunk's data; a terminal chunk marks the buffer complete."""
        if chunk.data:
            self._segments.append(chunk.data)
            self._total_bytes += len(chunk.data)
        if chunk.is_last:
            self._is_complete = True

    def has_enough_data_for_playback(self) -> bool:
        return self._total_bytes >= self.min_playback_threshold_bytes or self._is_complete

    def pop_playback_chunk(self) -> Optional[bytes]:
        """Remove and return up to target_outbound_chunk_bytes from the front.

        Returns None when the buffer is empty. The result is short only when
        the buffer holds fewer bytes than the target.
        """
        wanted = min(self.target_outbound_chunk_bytes, self._total_bytes)
        if wanted == 0:
            return None

        out = bytearray()
        while len(out) < wanted:
            segment = self._segments[0]
            available = len(segment) - self._head_offset
            take = min(available, wanted - len(out))
            out += segment[self._head_offset:self._head_offset + take]
            if take == available:
                self._segments.popleft()
                self._head_offset = 0
            else:
                self._head_offset += take

        self._total_bytes -= wanted
        return bytes(out)

    def drain_all(self) -> bytes:
        """Remove and return everything buffered, in order."""
        if not self._segments:
            return b""
        parts = [self._segments[0][self._head_offset:]]
        parts.extend(list(self._segments)[1:])
        self._segments.clear()
        self._head_offset = 0
        self._total_bytes = 0
        return b"".join(parts)

    @property
    def buffered_bytes(self) -> int:
        return self._total_bytes

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    @property
    def is_empty(self) -> bool:
        return self._total_bytes == 0

    @property
    def is_complete(self) -> bool:
        return self._is_complete


async def iter_playback_chunks(
    audio_stream: AsyncIterator[AudioChunk],
    buffer: ChunkBuffer,
) -> AsyncIterator[bytes]:
    """Feed a chunk stream through a buffer and yield playback-sized byte chunks.

    Nothing is yielded until the buffer reaches its playback threshold. Once
    the stream ends everything left in the buffer is yielded, the final
    chunk possibly short.

    Args:
        audio_stream: Stream of AudioChunk values, usually StreamEnvelope.audio_stream
        buffer: Buffer that decides outbound sizes and when playback starts

    Yields:
        Byte chunks of buffer.target_outbound_chunk_bytes
    """
    started = False
    async for chunk in audio_stream:
        buffer.push(chunk)
        if not started and buffer.has_enough_data_for_playback():
            started = True
            logger.debug(f"Playback threshold reached with {buffer.buffered_bytes} bytes buffered")
        if not started:
            continue
        while buffer.buffered_bytes >= buffer.target_outbound_chunk_bytes:
            yield buffer.pop_playback_chunk()

    while not buffer.is_empty:
        yield buffer.pop_playback_chunk()


class _StreamFailed:
    def __init__(self, error: BaseException):
        self.error = error


_DONE = object()


async def _iter_progress(queue: asyncio.Queue) -> AsyncIterator[StreamProgress]:
    while True:
        item = await queue.get()
        if item is _DONE:
            return
        if isinstance(item, _StreamFailed):
            raise item.error
        yield item


class ProgressTrackingStream:
    """Audio chunk stream that publishes a StreamProgress for every chunk it hands out.

    The source is pulled only by whoever iterates this object; progress values
    go to an unbounded side queue so a slow progress listener never stalls the
    audio. Progress for a chunk is queued before the chunk is returned. The
    progress stream ends when the audio stream ends, is closed, has its
    consuming task cancelled or is dropped and finalized, and re-raises the
    audio stream's error if it failed. Ending always closes the source.
    """

    def __init__(
        self,
        source: AsyncIterator[AudioChunk],
        total_estimated_bytes: Optional[int] = None,
        clock=time.monotonic,
    ):
        self._source = source
        self._total_estimated_bytes = total_estimated_bytes
        self._clock = clock
        self._started_at = clock()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._bytes_received = 0
        self._chunks_received = 0
        self._finished = False
        self._chunks = self._tee()

    def __aiter__(self) -> "ProgressTrackingStream":
        return self

    async def __anext__(self) -> AudioChunk:
        return await self._chunks.__anext__()

    async def aclose(self) -> None:
        await self._chunks.aclose()
        # Not started yet means the generator never reached its cleanup
        self._finish()
        await self._close_source()

    async def _tee(self) -> AsyncIterator[AudioChunk]:
        try:
            async for chunk in self._source:
                # Only chunks carrying audio count; the terminal marker just completes the stream
                if chunk.data:
                    self._bytes_received += len(chunk.data)
                    self._chunks_received += 1

                self._queue.put_nowait(StreamProgress(
                    bytes_received=self._bytes_received,
                    chunks_received=self._chunks_received,
                    total_estimated_bytes=self._total_estimated_bytes,
                    elapsed_time=timedelta(seconds=self._clock() - self._started_at),
                    is_complete=chunk.is_last,
                ))

                if chunk.is_last:
                    self._finish()
                yield chunk
        except Exception as e:
            self._finish(error=e)
            raise
        finally:
            self._finish()
            await self._close_source()

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()

    def _finish(self, error: Optional[BaseException] = None) -> None:
        if self._finished:
            return
        self._finished = True
        if error is not None:
            self._queue.put_nowait(_StreamFailed(error))
        self._queue.put_nowait(_DONE)

    def progress_updates(self) -> AsyncIterator[StreamProgress]:
        """Progress snapshots until the audio stream finishes.

        The returned iterator holds only the queue, so an audio stream that is
        dropped without being closed can still be collected and end it.
        """
        return _iter_progress(self._queue)
