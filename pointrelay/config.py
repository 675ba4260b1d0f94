"""Configuration for the balance relay.

This module provides the RelayConfig dataclass which holds the credentials,
endpoints and timings shared by the Loyverse client, the webhook notifier and
the poll scheduler.

Usage
-----
Create a configuration directly:

>>> config = RelayConfig(
...     loyverse_token="token",
...     webhook_url="https://hook.example.test/abc",
... )
>>> config.poll_interval_s
60.0

Or load from environment variables:

>>> import os
>>> os.environ["POINTRELAY_LOYVERSE_TOKEN"] = "token"
>>> os.environ["POINTRELAY_WEBHOOK_URL"] = "https://hook.example.test/abc"
>>> RelayConfig.from_env().customers_limit
250

"""

from __future__ import annotations

import dataclasses as dc
import os

from pointrelay.errors import RelayConfigError

DEFAULT_CUSTOMERS_URL = "https://api.loyverse.com/v1.0/customers"
# Loyverse caps a single customers page at 250 records.
MAX_CUSTOMERS_LIMIT = 250
_DEFAULT_POLL_INTERVAL_S = 60.0
_DEFAULT_HTTP_TIMEOUT_S = 10.0


@dc.dataclass(frozen=True, slots=True)
class RelayConfig:
    """Settings for polling Loyverse and relaying balance changes.

    Attributes
    ----------
    loyverse_token
        Bearer token for the Loyverse API.
    webhook_url
        Endpoint that receives one POST per changed customer.
    customers_url
        Loyverse customer-list endpoint.
    customers_limit
        Page size requested from Loyverse. Only the first page is read.
    poll_interval_s
        Seconds between scheduled ticks.
    http_timeout_s
        Timeout applied to every outbound request.

    """

    loyverse_token: str
    webhook_url: str
    customers_url: str = DEFAULT_CUSTOMERS_URL
    customers_limit: int = MAX_CUSTOMERS_LIMIT
    poll_interval_s: float = _DEFAULT_POLL_INTERVAL_S
    http_timeout_s: float = _DEFAULT_HTTP_TIMEOUT_S

    @staticmethod
    def _require(env_var: str) -> str:
        value = os.environ.get(env_var, "").strip()
        if not value:
            raise RelayConfigError.missing(env_var)
        return value

    @classmethod
    def _parse_token(cls, env_var: str) -> str:
        # Sent verbatim in the Authorization header, which httpx encodes as ASCII.
        token = cls._require(env_var)
        if not token.isascii():
            raise RelayConfigError.invalid_token(env_var)
        return token

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive float env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise RelayConfigError.invalid_number(env_var, raw) from exc
        if value <= 0:
            raise RelayConfigError.out_of_range(env_var, value, 0)
        return value

    @staticmethod
    def _parse_limit(env_var: str) -> int:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return MAX_CUSTOMERS_LIMIT
        try:
            value = int(raw)
        except ValueError as exc:
            raise RelayConfigError.invalid_number(env_var, raw) from exc
        if not 1 <= value <= MAX_CUSTOMERS_LIMIT:
            raise RelayConfigError.out_of_range(env_var, value, 1, MAX_CUSTOMERS_LIMIT)
        return value

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``POINTRELAY_LOYVERSE_TOKEN``: Required Loyverse bearer token.
        - ``POINTRELAY_WEBHOOK_URL``: Required webhook endpoint.
        - ``POINTRELAY_CUSTOMERS_URL``: Optional customer-list endpoint.
        - ``POINTRELAY_CUSTOMERS_LIMIT``: Optional page size (1 to 250).
        - ``POINTRELAY_POLL_INTERVAL_S``: Optional tick interval in seconds.
        - ``POINTRELAY_HTTP_TIMEOUT_S``: Optional request timeout in seconds.

        Returns
        -------
        RelayConfig
            Configuration instance with values from environment or defaults.

        Raises
        ------
        RelayConfigError
            If a required variable is missing, the token is not ASCII or a
            numeric variable is invalid.

        """
        customers_url = (
            os.environ.get("POINTRELAY_CUSTOMERS_URL", "").strip()
            or DEFAULT_CUSTOMERS_URL
        )
        return cls(
            loyverse_token=cls._parse_token("POINTRELAY_LOYVERSE_TOKEN"),
            webhook_url=cls._require("POINTRELAY_WEBHOOK_URL"),
            customers_url=customers_url,
            customers_limit=cls._parse_limit("POINTRELAY_CUSTOMERS_LIMIT"),
            poll_interval_s=cls._parse_positive_float(
                "POINTRELAY_POLL_INTERVAL_S", _DEFAULT_POLL_INTERVAL_S
            ),
            http_timeout_s=cls._parse_positive_float(
                "POINTRELAY_HTTP_TIMEOUT_S", _DEFAULT_HTTP_TIMEOUT_S
            ),
        )
