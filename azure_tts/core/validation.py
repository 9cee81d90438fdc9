# ABOUTME: This file holds the parameter rules shared by the builders and the streaming service.
# ABOUTME: Cross-field streaming compatibility is expressed as a table of CompatibilityRule entries.

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

from azure_tts.models.errors import ValidationError
from azure_tts.models.formats import STREAMING_FORMATS
from azure_tts.models.streaming import BufferStrategy, ChunkSize
from azure_tts.models.voices import StyleSsml, Voice, VoiceRole

if TYPE_CHECKING:
    from azure_tts.models.requests import TtsParams

MAX_TEXT_LENGTH = 10_000
MIN_RATE = 0.5
MAX_RATE = 3.0
MIN_MAX_LATENCY = timedelta(milliseconds=50)


def text_length(text: str) -> int:
    """Length in UTF-16 code units, which is how the service counts characters."""
    return len(text.encode("utf-16-le")) // 2


def validate_text(text: str) -> None:
    if not text:
        raise ValidationError("Text cannot be empty")
    length = text_length(text)
    if length > MAX_TEXT_LENGTH:
        raise ValidationError(
            f"Text length ({length}) exceeds maximum allowed ({MAX_TEXT_LENGTH})"
        )


def validate_rate(rate: float) -> None:
    if rate < MIN_RATE or rate > MAX_RATE:
        raise ValidationError(f"Rate must be between {MIN_RATE} and {MAX_RATE} (current: {rate})")


def validate_max_latency(latency: timedelta) -> None:
    if latency < timedelta(0):
        raise ValidationError("Max latency cannot be negative")
    if latency < MIN_MAX_LATENCY:
        raise ValidationError(
            f"Max latency cannot be less than 50ms (current: {_ms(latency)}ms)"
        )


def validate_voice_capabilities(
    voice: Voice,
    style: Optional[StyleSsml],
    role: Optional[VoiceRole],
) -> None:
    if style is not None and style.style not in voice.styles:
        supported = ", ".join(sorted(s.style_name for s in voice.styles)) or "none"
        raise ValidationError(
            f'Voice "{voice.short_name}" does not support style "{style.style_name}". '
            f"Supported styles: {supported}"
        )
    if role is not None and role not in voice.roles:
        supported = ", ".join(sorted(r.value for r in voice.roles)) or "none"
        raise ValidationError(
            f'Voice "{voice.short_name}" does not support role "{role.value}". '
            f"Supported roles: {supported}"
        )


def validate_streaming_format(audio_format: str) -> None:
    if audio_format not in STREAMING_FORMATS:
        raise ValidationError(
            f'Audio format "{audio_format}" is not optimized for streaming. '
            "Use an MP3 or Opus format for streaming requests."
        )


@dataclass(frozen=True)
class CompatibilityRule:
    """One rejected combination of streaming options.

    A rule matches when every condition it sets holds. Latency conditions
    only apply when a max latency was given.
    """
    name: str
    message: str
    chunk_size: Optional[ChunkSize] = None
    buffer_strategy: Optional[BufferStrategy] = None
    latency_below: Optional[timedelta] = None
    latency_above: Optional[timedelta] = None

    def matches(
        self,
        chunk_size: ChunkSize,
        buffer_strategy: BufferStrategy,
        max_latency: Optional[timedelta],
    ) -> bool:
        if self.chunk_size is not None and chunk_size != self.chunk_size:
            return False
        if self.buffer_strategy is not None and buffer_strategy != self.buffer_strategy:
            return False
        if self.latency_below is not None or self.latency_above is not None:
            if max_latency is None:
                return False
            if self.latency_below is not None and not max_latency < self.latency_below:
                return False
            if self.latency_above is not None and not max_latency > self.latency_above:
                return False
        return True


DEFAULT_COMPATIBILITY_RULES: Sequence[CompatibilityRule] = (
    CompatibilityRule(
        name="large_chunks_low_latency",
        chunk_size=ChunkSize.LARGE,
        buffer_strategy=BufferStrategy.LOW_LATENCY,
        message=(
            "Large chunk size is incompatible with low latency buffer strategy. "
            "Use a small or medium chunk size for low latency."
        ),
    ),
    CompatibilityRule(
        name="high_quality_tight_latency",
        buffer_strategy=BufferStrategy.HIGH_QUALITY,
        latency_below=timedelta(milliseconds=1000),
        message=(
            "Max latency of {latency_ms}ms is too aggressive for high quality buffer strategy. "
            "Use the low latency strategy or increase max latency."
        ),
    ),
    CompatibilityRule(
        name="low_latency_loose_latency",
        buffer_strategy=BufferStrategy.LOW_LATENCY,
        latency_above=timedelta(seconds=5),
        message=(
            "Max latency of {latency_ms}ms is too high for low latency buffer strategy. "
            "Use the balanced or high quality strategy."
        ),
    ),
    CompatibilityRule(
        name="large_chunks_tight_latency",
        chunk_size=ChunkSize.LARGE,
        latency_below=timedelta(milliseconds=500),
        message=(
            "Large chunk size may not achieve max latency of {latency_ms}ms. "
            "Use a small or medium chunk size for low latency requirements."
        ),
    ),
)


def check_streaming_compatibility(
    chunk_size: ChunkSize,
    buffer_strategy: BufferStrategy,
    max_latency: Optional[timedelta],
    rules: Iterable[CompatibilityRule] = DEFAULT_COMPATIBILITY_RULES,
) -> None:
    """Raise ValidationError for the first rule the combination violates."""
    for rule in rules:
        if rule.matches(chunk_size, buffer_strategy, max_latency):
            latency_ms = _ms(max_latency) if max_latency is not None else None
            raise ValidationError(rule.message.format(latency_ms=latency_ms))


def validate_streaming_params(params: "TtsParams") -> None:
    """Re-check a parameter set right before it is sent as a streaming request."""
    if not params.text:
        raise ValidationError("Text cannot be empty for streaming TTS")
    length = text_length(params.text)
    if length > MAX_TEXT_LENGTH:
        raise ValidationError(
            f"Text length ({length}) exceeds maximum allowed ({MAX_TEXT_LENGTH}) for streaming TTS"
        )
    if params.rate < MIN_RATE or params.rate > MAX_RATE:
        raise ValidationError(
            f"Speech rate ({params.rate}) must be between {MIN_RATE} and {MAX_RATE} for streaming TTS"
        )
    validate_voice_capabilities(params.voice, params.style, params.role)
    validate_streaming_format(params.audio_format)


def _ms(latency: timedelta) -> int:
    return int(latency.total_seconds() * 1000)
