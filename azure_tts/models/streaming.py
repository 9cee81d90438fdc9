# ABOUTME: This file defines the value types of the streaming pipeline: chunks, progress snapshots and options.
# ABOUTME: AudioChunk and StreamProgress are immutable Pydantic models; StreamEnvelope wraps a live chunk stream.

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import AsyncIterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

KIB = 1024


class ChunkSize(str, Enum):
    """Preferred outbound chunk granularity. A hint, not a guarantee."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def target_bytes(self) -> int:
        return {"small": 4 * KIB, "medium": 16 * KIB, "large": 64 * KIB}[self.value]


class BufferStrategy(str, Enum):
    """How much audio must accumulate before playback may begin."""
    LOW_LATENCY = "low_latency"
    BALANCED = "balanced"
    HIGH_QUALITY = "high_quality"

    @property
    def min_playback_bytes(self) -> int:
        return {"low_latency": 4 * KIB, "balanced": 16 * KIB, "high_quality": 64 * KIB}[self.value]


class AudioChunk(BaseModel):
    """One unit of streamed audio as received by the client."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    sequence_number: int = Field(ge=0)
    timestamp: datetime
    is_last: bool = False

    @model_validator(mode="after")
    def check_terminal_marker(self) -> "AudioChunk":
        if not self.data and not self.is_last:
            raise ValueError("only the terminal chunk may carry empty data")
        return self

    @property
    def size(self) -> int:
        return len(self.data)


class StreamProgress(BaseModel):
    """Point-in-time snapshot of a stream's progress."""

    model_config = ConfigDict(frozen=True)

    bytes_received: int = Field(ge=0)
    chunks_received: int = Field(ge=0)
    total_estimated_bytes: Optional[int] = None
    elapsed_time: timedelta
    is_complete: bool = False

    @property
    def percent_complete(self) -> Optional[float]:
        """Fraction in [0, 1], or None when the server did not report a length."""
        if not self.total_estimated_bytes or self.total_estimated_bytes <= 0:
            return None
        return min(max(self.bytes_received / self.total_estimated_bytes, 0.0), 1.0)

    @property
    def bytes_per_second(self) -> float:
        seconds = self.elapsed_time.total_seconds()
        return self.bytes_received / seconds if seconds > 0 else 0.0

    @property
    def chunks_per_second(self) -> float:
        seconds = self.elapsed_time.total_seconds()
        return self.chunks_received / seconds if seconds > 0 else 0.0


@dataclass
class StreamEnvelope:
    """A live audio stream plus the response metadata known when it opened.

    Closing the envelope (``aclose`` or ``async with``) tears down the
    underlying HTTP response even if the stream was not fully consumed.
    """
    audio_stream: AsyncIterator[AudioChunk]
    content_type: str
    estimated_total_bytes: Optional[int] = None

    async def aclose(self) -> None:
        aclose = getattr(self.audio_stream, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "StreamEnvelope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
