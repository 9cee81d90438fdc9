# ABOUTME: Configuration system for the Azure TTS client with environment variable handling
# ABOUTME: Provides a Settings singleton with validation and the region-specific endpoints

import os
from datetime import timedelta
from typing import Literal

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

SUBSCRIPTION_KEY_LENGTH = 32
VALID_LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


class Settings:
    """
    Configuration settings for the Azure TTS client.
    Singleton class that loads configuration from environment variables
    with validation and defaults.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # Always re-initialize to pick up environment changes
        self._subscription_key = self._get_subscription_key()
        self._region = self._get_region()
        self._request_timeout_sec = self._get_positive_float("AZURE_TTS_REQUEST_TIMEOUT_SEC", "30")
        self._log_level = self._get_log_level()
        self._with_logs = self._get_with_logs()
        self._max_retries = self._get_max_retries()
        self._retry_base_delay_ms = self._get_positive_float("AZURE_TTS_RETRY_BASE_DELAY_MS", "500")
        self._retry_max_delay_sec = self._get_positive_float("AZURE_TTS_RETRY_MAX_DELAY_SEC", "30")
        self._cache_ttl_sec = self._get_cache_ttl_sec()

    @classmethod
    def _reset_instance(cls):
        """Reset singleton instance for testing purposes only."""
        cls._instance = None

    def _get_subscription_key(self) -> str:
        """Get and validate AZURE_TTS_SUBSCRIPTION_KEY environment variable."""
        key = os.getenv("AZURE_TTS_SUBSCRIPTION_KEY", "").strip()

        if not key:
            raise ValueError("AZURE_TTS_SUBSCRIPTION_KEY must be set")
        if len(key) != SUBSCRIPTION_KEY_LENGTH:
            raise ValueError(
                f"AZURE_TTS_SUBSCRIPTION_KEY must be {SUBSCRIPTION_KEY_LENGTH} characters"
            )

        return key

    def _get_region(self) -> str:
        """Get and validate AZURE_TTS_REGION environment variable."""
        region = os.getenv("AZURE_TTS_REGION", "").strip().lower()

        if not region:
            raise ValueError("AZURE_TTS_REGION must be set")

        return region

    def _get_positive_float(self, name: str, default: str) -> float:
        value = float(os.getenv(name, default))

        if value <= 0:
            raise ValueError(f"{name} must be positive")

        return value

    def _get_log_level(self) -> Literal["debug", "info", "warning", "error", "critical"]:
        """Get and validate AZURE_TTS_LOG_LEVEL environment variable."""
        log_level = os.getenv("AZURE_TTS_LOG_LEVEL", "info").lower()

        if log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {log_level}. "
                f"Valid levels: {', '.join(VALID_LOG_LEVELS)}"
            )

        return log_level

    def _get_with_logs(self) -> bool:
        return os.getenv("AZURE_TTS_WITH_LOGS", "true").strip().lower() in ("1", "true", "yes", "on")

    def _get_max_retries(self) -> int:
        """Get and validate AZURE_TTS_MAX_RETRIES environment variable."""
        max_retries = int(os.getenv("AZURE_TTS_MAX_RETRIES", "3"))

        if max_retries < 0:
            raise ValueError("AZURE_TTS_MAX_RETRIES cannot be negative")

        return max_retries

    def _get_cache_ttl_sec(self) -> int:
        ttl = int(os.getenv("AZURE_TTS_CACHE_TTL_SEC", "3600"))

        if ttl < 0:
            raise ValueError("AZURE_TTS_CACHE_TTL_SEC cannot be negative")

        return ttl

    # Properties to provide immutable access
    @property
    def subscription_key(self) -> str:
        return self._subscription_key

    @property
    def region(self) -> str:
        return self._region

    @property
    def request_timeout_sec(self) -> float:
        return self._request_timeout_sec

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def with_logs(self) -> bool:
        return self._with_logs

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def retry_base_delay(self) -> timedelta:
        return timedelta(milliseconds=self._retry_base_delay_ms)

    @property
    def retry_max_delay(self) -> timedelta:
        return timedelta(seconds=self._retry_max_delay_sec)

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self._cache_ttl_sec)

    @property
    def token_endpoint(self) -> str:
        return f"https://{self._region}.api.cognitive.microsoft.com/sts/v1.0/issueToken"

    @property
    def tts_endpoint(self) -> str:
        return f"https://{self._region}.tts.speech.microsoft.com/cognitiveservices/v1"

    @property
    def voices_endpoint(self) -> str:
        return f"https://{self._region}.tts.speech.microsoft.com/cognitiveservices/voices/list"


# Global function to get settings instance
def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
