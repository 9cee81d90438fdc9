# ABOUTME: Test cases for the fluent TtsParams and StreamingParams builders
# ABOUTME: Covers required fields, eager setter validation, cross-field rules, presets, reset and copy

from datetime import timedelta

import pytest

from azure_tts.core.params_builder import StreamingParamsBuilder, TtsParamsBuilder
from azure_tts.core.validation import CompatibilityRule
from azure_tts.models.errors import ValidationError
from azure_tts.models.requests import StreamingParams, TtsParams
from azure_tts.models.streaming import BufferStrategy, ChunkSize
from azure_tts.models.voices import StyleSsml, VoiceRole, VoiceStyle

from helpers import STREAM_FORMAT


def base_builder(voice, builder=None):
    builder = builder or StreamingParamsBuilder()
    return builder.voice(voice).text("Hello").audio_format(STREAM_FORMAT)


class TestTtsParamsBuilder:
    """Test the batch parameter builder."""

    def test_build_with_defaults(self, voice):
        params = TtsParamsBuilder().voice(voice).text("Hello").audio_format(STREAM_FORMAT).build()
        assert isinstance(params, TtsParams)
        assert params.rate == 1.0
        assert params.style is None
        assert params.role is None

    @pytest.mark.parametrize("missing", ["voice", "text", "audio_format"])
    def test_missing_required_field(self, voice, missing):
        builder = TtsParamsBuilder()
        if missing != "voice":
            builder.voice(voice)
        if missing != "text":
            builder.text("Hello")
        if missing != "audio_format":
            builder.audio_format(STREAM_FORMAT)
        with pytest.raises(ValidationError, match="is required"):
            builder.build()

    def test_setters_validate_eagerly(self):
        with pytest.raises(ValidationError):
            TtsParamsBuilder().text("")
        with pytest.raises(ValidationError):
            TtsParamsBuilder().text("x" * 10_001)
        with pytest.raises(ValidationError):
            TtsParamsBuilder().rate(3.5)

    def test_unsupported_style_fails_at_build(self, plain_voice):
        builder = TtsParamsBuilder().voice(plain_voice).text("Hi").audio_format(STREAM_FORMAT)
        builder.style(StyleSsml(style=VoiceStyle.cheerful))
        with pytest.raises(ValidationError, match="does not support style"):
            builder.build()

    def test_reset_clears_fields(self, voice):
        builder = TtsParamsBuilder().voice(voice).text("Hello").audio_format(STREAM_FORMAT)
        builder.reset()
        with pytest.raises(ValidationError):
            builder.build()

    def test_copy_is_independent(self, voice):
        builder = TtsParamsBuilder().voice(voice).text("Hello").audio_format(STREAM_FORMAT)
        clone = builder.copy().text("Goodbye")
        assert builder.build().text == "Hello"
        assert clone.build().text == "Goodbye"


class TestStreamingParamsBuilder:
    """Test the streaming parameter builder."""

    def test_defaults(self, voice):
        params = base_builder(voice).build()
        assert isinstance(params, StreamingParams)
        assert params.text == "Hello"
        assert params.preferred_chunk_size == ChunkSize.MEDIUM
        assert params.buffer_strategy == BufferStrategy.BALANCED
        assert params.enable_progress_tracking is True
        assert params.max_latency is None

    def test_large_chunks_with_low_latency_rejected(self, voice):
        builder = (
            base_builder(voice)
            .preferred_chunk_size(ChunkSize.LARGE)
            .buffer_strategy(BufferStrategy.LOW_LATENCY)
        )
        with pytest.raises(ValidationError, match="incompatible with low latency"):
            builder.build()

    def test_rejection_independent_of_setter_order(self, voice):
        builder = (
            StreamingParamsBuilder()
            .buffer_strategy(BufferStrategy.LOW_LATENCY)
            .audio_format(STREAM_FORMAT)
            .preferred_chunk_size(ChunkSize.LARGE)
            .text("Hello")
            .voice(voice)
        )
        with pytest.raises(ValidationError):
            builder.build()

    def test_max_latency_setter_validates(self):
        with pytest.raises(ValidationError, match="negative"):
            StreamingParamsBuilder().max_latency(timedelta(milliseconds=-5))
        with pytest.raises(ValidationError, match="less than 50ms"):
            StreamingParamsBuilder().max_latency(timedelta(milliseconds=10))

    def test_high_quality_tight_latency_rejected(self, voice):
        builder = (
            base_builder(voice)
            .buffer_strategy(BufferStrategy.HIGH_QUALITY)
            .max_latency(timedelta(milliseconds=800))
        )
        with pytest.raises(ValidationError):
            builder.build()

    def test_build_is_repeatable(self, voice):
        builder = base_builder(voice).rate(1.5).role(VoiceRole.Girl)
        first = builder.build()
        second = builder.build()
        assert first == second
        assert first is not second

    def test_params_are_immutable(self, voice):
        params = base_builder(voice).build()
        with pytest.raises(Exception):
            params.text = "changed"

    def test_realtime_preset(self, voice):
        params = base_builder(voice, StreamingParamsBuilder.for_realtime()).build()
        assert params.preferred_chunk_size == ChunkSize.SMALL
        assert params.buffer_strategy == BufferStrategy.LOW_LATENCY
        assert params.max_latency == timedelta(milliseconds=300)

    def test_high_quality_preset(self, voice):
        params = base_builder(voice, StreamingParamsBuilder.for_high_quality()).build()
        assert params.preferred_chunk_size == ChunkSize.LARGE
        assert params.buffer_strategy == BufferStrategy.HIGH_QUALITY

    def test_balanced_preset(self, voice):
        params = base_builder(voice, StreamingParamsBuilder.balanced()).build()
        assert params.preferred_chunk_size == ChunkSize.MEDIUM
        assert params.buffer_strategy == BufferStrategy.BALANCED

    def test_preset_can_be_customized(self, voice):
        builder = StreamingParamsBuilder.for_realtime().enable_progress_tracking(False)
        params = base_builder(voice, builder).build()
        assert params.enable_progress_tracking is False
        assert params.preferred_chunk_size == ChunkSize.SMALL

    def test_high_quality_preset_with_realtime_latency_rejected(self, voice):
        builder = StreamingParamsBuilder.for_high_quality().max_latency(timedelta(milliseconds=300))
        with pytest.raises(ValidationError):
            base_builder(voice, builder).build()

    def test_custom_rules(self, voice):
        permissive = StreamingParamsBuilder(rules=())
        params = (
            base_builder(voice, permissive)
            .preferred_chunk_size(ChunkSize.LARGE)
            .buffer_strategy(BufferStrategy.LOW_LATENCY)
            .build()
        )
        assert params.preferred_chunk_size == ChunkSize.LARGE

        strict = StreamingParamsBuilder(rules=[CompatibilityRule(
            name="progress_required", message="Medium chunks are not allowed",
            chunk_size=ChunkSize.MEDIUM,
        )])
        with pytest.raises(ValidationError, match="Medium chunks are not allowed"):
            base_builder(voice, strict).build()

    def test_direct_construction_uses_default_rules(self, voice):
        with pytest.raises(ValidationError):
            StreamingParams(
                voice=voice, text="Hello", audio_format=STREAM_FORMAT,
                preferred_chunk_size=ChunkSize.LARGE, buffer_strategy=BufferStrategy.LOW_LATENCY,
            )

    def test_reset_restores_streaming_defaults(self, voice):
        builder = StreamingParamsBuilder.for_realtime().reset()
        params = base_builder(voice, builder).build()
        assert params.preferred_chunk_size == ChunkSize.MEDIUM
        assert params.max_latency is None

    def test_copy_keeps_streaming_fields(self, voice):
        builder = base_builder(voice, StreamingParamsBuilder.for_realtime())
        clone = builder.copy().preferred_chunk_size(ChunkSize.MEDIUM)
        assert builder.build().preferred_chunk_size == ChunkSize.SMALL
        assert clone.build().preferred_chunk_size == ChunkSize.MEDIUM
        assert clone.build().buffer_strategy == BufferStrategy.LOW_LATENCY

    def test_repr_mentions_options(self, voice):
        text = repr(base_builder(voice))
        assert "en-US-JennyNeural" in text
        assert "chunk_size=medium" in text
