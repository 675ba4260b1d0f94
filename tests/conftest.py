"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from pointrelay import observability
from pointrelay.config import RelayConfig
from tests.helpers.fakes import RecordingLogger, RecordingNotifier, ScriptedSource

_RELAY_ENV_VARS = (
    "POINTRELAY_LOYVERSE_TOKEN",
    "POINTRELAY_WEBHOOK_URL",
    "POINTRELAY_CUSTOMERS_URL",
    "POINTRELAY_CUSTOMERS_LIMIT",
    "POINTRELAY_POLL_INTERVAL_S",
    "POINTRELAY_HTTP_TIMEOUT_S",
    "POINTRELAY_HOST",
    "POINTRELAY_PORT",
    "POINTRELAY_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_relay_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide any relay settings from the developer's shell."""
    for name in _RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return a configuration pointing at test-only endpoints."""
    return RelayConfig(
        loyverse_token="test-token",  # noqa: S106 - fixture credential
        webhook_url="https://hook.example.test/points",
        customers_url="https://loyverse.example.test/v1.0/customers",
        customers_limit=50,
        poll_interval_s=60.0,
        http_timeout_s=2.0,
    )


@pytest.fixture
def event_log(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    """Capture structured relay events emitted through observability."""
    recorder = RecordingLogger()
    monkeypatch.setattr(observability, "logger", recorder)
    return recorder


@pytest.fixture
def source() -> ScriptedSource:
    """Return an empty scripted customer source."""
    return ScriptedSource()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Return a notifier that records every call."""
    return RecordingNotifier()
