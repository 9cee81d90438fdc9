# ABOUTME: In-memory TTL caches for synthesized audio and other short-lived client data
# ABOUTME: Expired entries are evicted lazily on read, in bulk by cleanup() and on every AudioCache write

import hashlib
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Dict, Generic, Hashable, Optional, TypeVar

if TYPE_CHECKING:
    from azure_tts.models.requests import TtsParams

V = TypeVar("V")


@dataclass
class _CacheEntry(Generic[V]):
    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TtlCache(Generic[V]):
    """Dictionary-backed cache where every entry carries its own time to live."""

    def __init__(self, clock=time.monotonic):
        self._entries: Dict[Hashable, _CacheEntry[V]] = {}
        self._clock = clock

    def put(self, key: Hashable, value: V, ttl: timedelta) -> None:
        self._entries[key] = _CacheEntry(value, self._clock() + ttl.total_seconds())

    def get(self, key: Hashable) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def remove(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class AudioCache:
    """Caches synthesized audio keyed by text, voice, output format, rate, style and role."""

    DEFAULT_TTL = timedelta(hours=1)

    def __init__(self, ttl: timedelta = DEFAULT_TTL, cache: Optional[TtlCache[Any]] = None):
        self.ttl = ttl
        self._cache = cache if cache is not None else TtlCache()

    @staticmethod
    def key_for(params: "TtsParams") -> str:
        digest = hashlib.sha256(params.text.encode("utf-8")).hexdigest()
        key = f"audio_{digest}_{params.voice.short_name}_{params.audio_format}_{params.rate}"
        if params.style is not None:
            key += f"_{params.style.style_name}_{params.style.style_degree}"
        if params.role is not None:
            key += f"_{params.role.value}"
        return key

    def put(self, params: "TtsParams", audio: Any) -> None:
        if self.ttl <= timedelta(0):
            return
        # Expired audio is dropped on every write
        self._cache.cleanup()
        self._cache.put(self.key_for(params), audio, self.ttl)

    def get(self, params: "TtsParams") -> Optional[Any]:
        return self._cache.get(self.key_for(params))

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
