# ABOUTME: This file implements fluent builders for batch and streaming request parameters.
# ABOUTME: Setters validate single fields eagerly; build() runs the full cross-field validation.

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from azure_tts.core.validation import (
    DEFAULT_COMPATIBILITY_RULES,
    CompatibilityRule,
    validate_max_latency,
    validate_rate,
    validate_text,
)
from azure_tts.models.errors import ValidationError
from azure_tts.models.requests import RULES_CONTEXT_KEY, StreamingParams, TtsParams
from azure_tts.models.streaming import BufferStrategy, ChunkSize
from azure_tts.models.voices import StyleSsml, Voice, VoiceRole


class TtsParamsBuilder:
    """Accumulates request fields and produces an immutable TtsParams."""

    def __init__(self):
        self._voice: Optional[Voice] = None
        self._text: Optional[str] = None
        self._audio_format: Optional[str] = None
        self._rate: Optional[float] = None
        self._style: Optional[StyleSsml] = None
        self._role: Optional[VoiceRole] = None

    def voice(self, voice: Voice) -> TtsParamsBuilder:
        self._voice = voice
        return self

    def text(self, text: str) -> TtsParamsBuilder:
        validate_text(text)
        self._text = text
        return self

    def audio_format(self, audio_format: str) -> TtsParamsBuilder:
        self._audio_format = audio_format
        return self

    def rate(self, rate: float) -> TtsParamsBuilder:
        validate_rate(rate)
        self._rate = rate
        return self

    def style(self, style: StyleSsml) -> TtsParamsBuilder:
        self._style = style
        return self

    def role(self, role: VoiceRole) -> TtsParamsBuilder:
        self._role = role
        return self

    def _base_fields(self) -> Dict[str, Any]:
        if self._voice is None:
            raise ValidationError("Voice is required. Call voice() before build().")
        if self._text is None:
            raise ValidationError("Text is required. Call text() before build().")
        if self._audio_format is None:
            raise ValidationError("Audio format is required. Call audio_format() before build().")
        fields: Dict[str, Any] = {
            "voice": self._voice,
            "text": self._text,
            "audio_format": self._audio_format,
            "style": self._style,
            "role": self._role,
        }
        if self._rate is not None:
            fields["rate"] = self._rate
        return fields

    def build(self) -> TtsParams:
        return TtsParams(**self._base_fields())

    def reset(self) -> TtsParamsBuilder:
        self._voice = None
        self._text = None
        self._audio_format = None
        self._rate = None
        self._style = None
        self._role = None
        return self

    def copy(self) -> TtsParamsBuilder:
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        return clone

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(voice={self._voice.short_name if self._voice else None}, "
            f"text={len(self._text) if self._text is not None else None} chars, "
            f"audio_format={self._audio_format}, rate={self._rate})"
        )


class StreamingParamsBuilder(TtsParamsBuilder):
    """Builder for StreamingParams with named presets.

    Example:
        params = (
            StreamingParamsBuilder.for_realtime()
            .voice(voice)
            .text("Hello")
            .audio_format(AudioOutputFormat.AUDIO_24KHZ_48KBITRATE_MONO_MP3)
            .build()
        )
    """

    def __init__(self, rules: Sequence[CompatibilityRule] = DEFAULT_COMPATIBILITY_RULES):
        super().__init__()
        self._rules = tuple(rules)
        self._preferred_chunk_size = ChunkSize.MEDIUM
        self._buffer_strategy = BufferStrategy.BALANCED
        self._enable_progress_tracking = True
        self._max_latency: Optional[timedelta] = None

    def preferred_chunk_size(self, chunk_size: ChunkSize) -> StreamingParamsBuilder:
        self._preferred_chunk_size = chunk_size
        return self

    def buffer_strategy(self, strategy: BufferStrategy) -> StreamingParamsBuilder:
        self._buffer_strategy = strategy
        return self

    def enable_progress_tracking(self, enabled: bool) -> StreamingParamsBuilder:
        self._enable_progress_tracking = enabled
        return self

    def max_latency(self, latency: timedelta) -> StreamingParamsBuilder:
        validate_max_latency(latency)
        self._max_latency = latency
        return self

    def build(self) -> StreamingParams:
        fields = self._base_fields()
        fields.update(
            preferred_chunk_size=self._preferred_chunk_size,
            buffer_strategy=self._buffer_strategy,
            enable_progress_tracking=self._enable_progress_tracking,
            max_latency=self._max_latency,
        )
        return StreamingParams.model_validate(fields, context={RULES_CONTEXT_KEY: self._rules})

    def reset(self) -> StreamingParamsBuilder:
        super().reset()
        self._preferred_chunk_size = ChunkSize.MEDIUM
        self._buffer_strategy = BufferStrategy.BALANCED
        self._enable_progress_tracking = True
        self._max_latency = None
        return self

    @classmethod
    def for_realtime(cls) -> StreamingParamsBuilder:
        """Small chunks, low latency buffering, 300ms max latency."""
        return (
            cls()
            .preferred_chunk_size(ChunkSize.SMALL)
            .buffer_strategy(BufferStrategy.LOW_LATENCY)
            .enable_progress_tracking(True)
            .max_latency(timedelta(milliseconds=300))
        )

    @classmethod
    def for_high_quality(cls) -> StreamingParamsBuilder:
        return (
            cls()
            .preferred_chunk_size(ChunkSize.LARGE)
            .buffer_strategy(BufferStrategy.HIGH_QUALITY)
            .enable_progress_tracking(True)
        )

    @classmethod
    def balanced(cls) -> StreamingParamsBuilder:
        return (
            cls()
            .preferred_chunk_size(ChunkSize.MEDIUM)
            .buffer_strategy(BufferStrategy.BALANCED)
            .enable_progress_tracking(True)
        )

    def __repr__(self) -> str:
        return (
            f"{super().__repr__()[:-1]}, chunk_size={self._preferred_chunk_size.value}, "
            f"buffer_strategy={self._buffer_strategy.value}, "
            f"progress_tracking={self._enable_progress_tracking}, max_latency={self._max_latency})"
        )
