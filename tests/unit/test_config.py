"""Unit tests for RelayConfig.from_env."""

from __future__ import annotations

import pytest

from pointrelay.config import DEFAULT_CUSTOMERS_URL, RelayConfig
from pointrelay.errors import RelayConfigError


@pytest.fixture
def required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set the two mandatory variables."""
    monkeypatch.setenv("POINTRELAY_LOYVERSE_TOKEN", "  secret  ")
    monkeypatch.setenv("POINTRELAY_WEBHOOK_URL", "https://hook.example.test/x")


@pytest.mark.usefixtures("required_env")
class TestFromEnv:
    """Tests for environment parsing."""

    def test_defaults(self) -> None:
        """Optional settings fall back to their defaults."""
        config = RelayConfig.from_env()

        assert config.loyverse_token == "secret"
        assert config.webhook_url == "https://hook.example.test/x"
        assert config.customers_url == DEFAULT_CUSTOMERS_URL
        assert config.customers_limit == 250
        assert config.poll_interval_s == 60.0
        assert config.http_timeout_s == 10.0

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Optional settings are read when present."""
        monkeypatch.setenv("POINTRELAY_CUSTOMERS_URL", "https://lv.example.test/c")
        monkeypatch.setenv("POINTRELAY_CUSTOMERS_LIMIT", "100")
        monkeypatch.setenv("POINTRELAY_POLL_INTERVAL_S", "30")
        monkeypatch.setenv("POINTRELAY_HTTP_TIMEOUT_S", "2.5")

        config = RelayConfig.from_env()

        assert config.customers_url == "https://lv.example.test/c"
        assert config.customers_limit == 100
        assert config.poll_interval_s == 30.0
        assert config.http_timeout_s == 2.5

    def test_blank_optional_values_use_defaults(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Whitespace-only optional values count as unset."""
        monkeypatch.setenv("POINTRELAY_CUSTOMERS_URL", "  ")
        monkeypatch.setenv("POINTRELAY_POLL_INTERVAL_S", "")

        config = RelayConfig.from_env()

        assert config.customers_url == DEFAULT_CUSTOMERS_URL
        assert config.poll_interval_s == 60.0

    @pytest.mark.parametrize(
        ("env_var", "raw", "fragment"),
        [
            ("POINTRELAY_POLL_INTERVAL_S", "soon", "must be a number"),
            ("POINTRELAY_POLL_INTERVAL_S", "0", "must be at least 0"),
            ("POINTRELAY_HTTP_TIMEOUT_S", "-1", "must be at least 0"),
            ("POINTRELAY_CUSTOMERS_LIMIT", "1.5", "must be a number"),
            ("POINTRELAY_CUSTOMERS_LIMIT", "0", "between 1 and 250"),
            ("POINTRELAY_CUSTOMERS_LIMIT", "251", "between 1 and 250"),
        ],
    )
    def test_invalid_numbers_raise(
        self,
        monkeypatch: pytest.MonkeyPatch,
        env_var: str,
        raw: str,
        fragment: str,
    ) -> None:
        """Invalid numeric settings raise RelayConfigError naming the variable."""
        monkeypatch.setenv(env_var, raw)

        with pytest.raises(RelayConfigError, match=env_var) as excinfo:
            RelayConfig.from_env()

        assert fragment in str(excinfo.value)


@pytest.mark.parametrize(
    ("missing", "present"),
    [
        ("POINTRELAY_LOYVERSE_TOKEN", "POINTRELAY_WEBHOOK_URL"),
        ("POINTRELAY_WEBHOOK_URL", "POINTRELAY_LOYVERSE_TOKEN"),
    ],
)
def test_missing_required_variable_raises(
    monkeypatch: pytest.MonkeyPatch, missing: str, present: str
) -> None:
    """Both the token and the webhook URL are mandatory."""
    monkeypatch.setenv(present, "value")
    monkeypatch.setenv(missing, "   ")

    with pytest.raises(RelayConfigError, match=f"{missing} is required"):
        RelayConfig.from_env()


@pytest.mark.parametrize("token", ["töken", "secret\u00a0key", "ключ"])
def test_non_ascii_token_is_rejected(
    monkeypatch: pytest.MonkeyPatch, token: str
) -> None:
    """Tokens that cannot be encoded into the Authorization header fail at startup."""
    monkeypatch.setenv("POINTRELAY_LOYVERSE_TOKEN", token)
    monkeypatch.setenv("POINTRELAY_WEBHOOK_URL", "https://hook.example.test/x")

    with pytest.raises(
        RelayConfigError,
        match="POINTRELAY_LOYVERSE_TOKEN must contain only ASCII characters",
    ):
        RelayConfig.from_env()
