# ABOUTME: Pytest configuration and shared fixtures
# ABOUTME: Sets up a clean environment, isolated metrics, voices and token sources for client tests
import os
import sys
from pathlib import Path
from typing import List

import pytest
from prometheus_client import CollectorRegistry

sys.path.insert(0, str(Path(__file__).parent))

from azure_tts.config import Settings  # noqa: E402
from azure_tts.models.voices import Voice  # noqa: E402
from azure_tts.monitoring.metrics import StreamMetrics  # noqa: E402
from helpers import (  # noqa: E402
    JENNY_JSON,
    KATJA_JSON,
    RYAN_JSON,
    TEST_REGION,
    TEST_SUBSCRIPTION_KEY,
    StaticTokenSource,
    expired_token,
)


@pytest.fixture
def env(monkeypatch):
    """Minimal valid environment; tests may override individual variables."""
    for var in list(os.environ):
        if var.startswith("AZURE_TTS_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AZURE_TTS_SUBSCRIPTION_KEY", TEST_SUBSCRIPTION_KEY)
    monkeypatch.setenv("AZURE_TTS_REGION", TEST_REGION)
    Settings._reset_instance()
    yield monkeypatch
    Settings._reset_instance()


@pytest.fixture
def settings(env) -> Settings:
    return Settings()


@pytest.fixture
def metrics() -> StreamMetrics:
    """Metrics bound to a private registry so tests never share counters."""
    return StreamMetrics(registry=CollectorRegistry())


@pytest.fixture
def voice() -> Voice:
    """A voice supporting a few styles and roles."""
    return Voice.model_validate(JENNY_JSON)


@pytest.fixture
def plain_voice() -> Voice:
    """A voice without styles or roles."""
    return Voice.model_validate(RYAN_JSON)


@pytest.fixture
def all_voices() -> List[Voice]:
    return [Voice.model_validate(item) for item in (JENNY_JSON, RYAN_JSON, KATJA_JSON)]


@pytest.fixture
def token_source() -> StaticTokenSource:
    return StaticTokenSource()


@pytest.fixture
def expired_token_source() -> StaticTokenSource:
    return StaticTokenSource(expired_token())
