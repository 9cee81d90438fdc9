# ABOUTME: This file defines the immutable request parameter models for batch and streaming synthesis.
# ABOUTME: Validation runs on construction; builders pass custom compatibility rules through the validation context.

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator

from azure_tts.core.validation import (
    DEFAULT_COMPATIBILITY_RULES,
    check_streaming_compatibility,
    validate_max_latency,
    validate_rate,
    validate_text,
    validate_voice_capabilities,
)
from azure_tts.models.streaming import BufferStrategy, ChunkSize
from azure_tts.models.voices import StyleSsml, Voice, VoiceRole

RULES_CONTEXT_KEY = "compatibility_rules"


class TtsParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    voice: Voice
    text: str
    audio_format: str
    rate: float = 1.0
    style: Optional[StyleSsml] = None
    role: Optional[VoiceRole] = None

    @model_validator(mode="after")
    def check_base_fields(self) -> "TtsParams":
        validate_text(self.text)
        validate_rate(self.rate)
        validate_voice_capabilities(self.voice, self.style, self.role)
        return self

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}(voice={self.voice.short_name}, text={len(self.text)} chars, "
            f"audio_format={self.audio_format}, rate={self.rate})"
        )


class StreamingParams(TtsParams):
    preferred_chunk_size: ChunkSize = ChunkSize.MEDIUM
    buffer_strategy: BufferStrategy = BufferStrategy.BALANCED
    enable_progress_tracking: bool = True
    max_latency: Optional[timedelta] = None

    @model_validator(mode="after")
    def check_streaming_fields(self, info: ValidationInfo) -> "StreamingParams":
        if self.max_latency is not None:
            validate_max_latency(self.max_latency)
        rules = DEFAULT_COMPATIBILITY_RULES
        if info.context and RULES_CONTEXT_KEY in info.context:
            rules = info.context[RULES_CONTEXT_KEY]
        check_streaming_compatibility(
            self.preferred_chunk_size, self.buffer_strategy, self.max_latency, rules
        )
        return self

    def __str__(self) -> str:
        return (
            f"StreamingParams(voice={self.voice.short_name}, text={len(self.text)} chars, "
            f"audio_format={self.audio_format}, rate={self.rate}, "
            f"chunk_size={self.preferred_chunk_size.value}, "
            f"buffer_strategy={self.buffer_strategy.value}, "
            f"progress_tracking={self.enable_progress_tracking}, max_latency={self.max_latency})"
        )
