# ABOUTME: Azure text-to-speech client package initialization
# ABOUTME: Exports the client facade, parameter builders, streaming types and the error taxonomy

from .client import AzureTts
from .config import Settings, get_settings
from .core.audio_service import AudioResult
from .core.params_builder import StreamingParamsBuilder, TtsParamsBuilder
from .models.errors import (
    AuthenticationError,
    AzureTtsError,
    ErrorKind,
    InitializationError,
    NetworkError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)
from .models.formats import AudioOutputFormat
from .models.requests import StreamingParams, TtsParams
from .models.streaming import AudioChunk, BufferStrategy, ChunkSize, StreamEnvelope, StreamProgress
from .models.voices import StyleSsml, Voice, VoiceFilter, VoiceRole, VoiceStyle
from .utils.streaming import ChunkBuffer, iter_playback_chunks

__version__ = "1.0.0"

__all__ = [
    "AzureTts",
    "Settings",
    "get_settings",
    "AudioResult",
    "StreamingParamsBuilder",
    "TtsParamsBuilder",
    "AuthenticationError",
    "AzureTtsError",
    "ErrorKind",
    "InitializationError",
    "NetworkError",
    "RateLimitError",
    "ServiceUnavailableError",
    "ValidationError",
    "AudioOutputFormat",
    "StreamingParams",
    "TtsParams",
    "AudioChunk",
    "BufferStrategy",
    "ChunkSize",
    "StreamEnvelope",
    "StreamProgress",
    "StyleSsml",
    "Voice",
    "VoiceFilter",
    "VoiceRole",
    "VoiceStyle",
    "ChunkBuffer",
    "iter_playback_chunks",
]
