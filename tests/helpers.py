# ABOUTME: Shared test data and HTTP simulation helpers for the Azure TTS test suite
# ABOUTME: Voice JSON payloads, endpoint constants, a static token source and MockTransport utilities
import asyncio
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Iterable, List, Optional

import httpx

from azure_tts.core.auth import AuthToken
from azure_tts.models.formats import AudioOutputFormat

TEST_SUBSCRIPTION_KEY = "0123456789abcdef0123456789abcdef"
TEST_REGION = "westus"
TTS_ENDPOINT = f"https://{TEST_REGION}.tts.speech.microsoft.com/cognitiveservices/v1"
VOICES_ENDPOINT = f"https://{TEST_REGION}.tts.speech.microsoft.com/cognitiveservices/voices/list"
TOKEN_ENDPOINT = f"https://{TEST_REGION}.api.cognitive.microsoft.com/sts/v1.0/issueToken"
STREAM_FORMAT = AudioOutputFormat.AUDIO_24KHZ_48KBITRATE_MONO_MP3

JENNY_JSON = {
    "Name": "Microsoft Server Speech Text to Speech Voice (en-US, JennyNeural)",
    "DisplayName": "Jenny",
    "LocalName": "Jenny",
    "ShortName": "en-US-JennyNeural",
    "Gender": "Female",
    "Locale": "en-US",
    "SampleRateHertz": "24000",
    "VoiceType": "Neural",
    "Status": "GA",
    "StyleList": ["cheerful", "sad", "narration-professional", "brand-new-style"],
    "RolePlayList": ["Girl", "SeniorFemale"],
}

RYAN_JSON = {
    "Name": "Microsoft Server Speech Text to Speech Voice (en-GB, RyanNeural)",
    "DisplayName": "Ryan",
    "LocalName": "Ryan",
    "ShortName": "en-GB-RyanNeural",
    "Gender": "Male",
    "Locale": "en-GB",
    "SampleRateHertz": "24000",
    "VoiceType": "Neural",
    "Status": "GA",
}

KATJA_JSON = {
    "Name": "Microsoft Server Speech Text to Speech Voice (de-DE, Katja)",
    "DisplayName": "Katja",
    "LocalName": "Katja",
    "ShortName": "de-DE-Katja",
    "Gender": "Female",
    "Locale": "de-DE",
    "SampleRateHertz": "16000",
    "VoiceType": "Standard",
    "Status": "Deprecated",
}


class StaticTokenSource:
    """Token source handing out a fixed token and counting calls."""

    def __init__(self, token: Optional[AuthToken] = None):
        self.token = token or AuthToken(value="test-token")
        self.calls = 0

    async def get_valid_token(self) -> AuthToken:
        self.calls += 1
        return self.token


def expired_token() -> AuthToken:
    return AuthToken(value="stale-token", issued_at=datetime.now(timezone.utc) - timedelta(minutes=30))


async def fragments(
    parts: Iterable[bytes],
    error: Optional[Exception] = None,
) -> AsyncIterator[bytes]:
    """Response body delivering each part as its own fragment, optionally failing afterwards."""
    for part in parts:
        yield part
    if error is not None:
        raise error


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingHandler:
    """MockTransport handler that records requests and answers from a response factory."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


class TrackedBody(httpx.AsyncByteStream):
    """Streamed response body that records how far it was read and whether it was closed.

    With stall=True the body hangs after its parts instead of ending, like a
    connection that stopped delivering.
    """

    def __init__(self, parts: Iterable[bytes], error: Optional[Exception] = None, stall: bool = False):
        self.parts = list(parts)
        self.error = error
        self.stall = stall
        self.delivered = 0
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for part in self.parts:
            self.delivered += 1
            yield part
        if self.error is not None:
            raise self.error
        if self.stall:
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True
