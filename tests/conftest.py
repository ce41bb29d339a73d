"""Shared pytest fixtures."""
from __future__ import annotations

import pytest

from agentrun.config.settings import Settings, get_settings
from agentrun.infrastructure.observability.logging import metrics
from tests.helpers import StubResolver


@pytest.fixture
def resolver() -> StubResolver:
    return StubResolver()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the caller's environment."""
    return Settings(
        log_level="WARNING",
        log_format="console",
        media_resolver="none",
        drop_unpaired_calls=True,
    )


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch):
    """Reset process-wide state between tests."""
    for var in ["AGENTRUN_MEDIA_RESOLVER", "AGENTRUN_LOG_LEVEL", "AGENTRUN_DROP_UNPAIRED_CALLS"]:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    metrics.reset()
    yield
    get_settings.cache_clear()
