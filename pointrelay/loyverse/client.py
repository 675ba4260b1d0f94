"""Loyverse customer-list client used by the change detector."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import httpx
import msgspec

from pointrelay.errors import LoyverseAPIError, LoyverseResponseShapeError
from pointrelay.observability import TickEventLogger

from .models import CustomerListResponse, CustomerRecord

if typ.TYPE_CHECKING:
    from pointrelay.config import RelayConfig

# Failures absorbed by fetch_customers; anything else is a programming error.
_ABSORBED_ERRORS = (LoyverseAPIError, LoyverseResponseShapeError)


class CustomerSource(typ.Protocol):
    """Interface for reading the current set of loyalty customers."""

    async def fetch_customers(self) -> cabc.Sequence[CustomerRecord]:
        """Return every customer the source reports, or nothing on failure."""
        ...


def _decode_customers(content: bytes) -> CustomerListResponse:
    """Decode a customers response body, mapping msgspec errors to shape errors."""
    try:
        return msgspec.json.decode(content, type=CustomerListResponse)
    except msgspec.ValidationError as exc:
        raise LoyverseResponseShapeError.schema_mismatch(str(exc)) from exc
    except msgspec.DecodeError as exc:
        raise LoyverseResponseShapeError.invalid_json(
            content.decode("utf-8", errors="replace")
        ) from exc


class LoyverseCustomerClient:
    """Loyverse implementation of :class:`CustomerSource`.

    Only the first page of ``GET /customers`` is read. When Loyverse returns
    a pagination cursor the remaining customers are not seen this tick and a
    ``customers.fetch_truncated`` warning is logged.
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        event_logger: TickEventLogger | None = None,
    ) -> None:
        """Initialise the client with the relay configuration."""
        self._config = config
        self._events = event_logger or TickEventLogger()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.http_timeout_s,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_customers(self) -> list[CustomerRecord]:
        """Fetch the current customers, returning an empty list on any failure.

        Failures are logged as ``customers.fetch_failed`` and never raised, so
        callers must read an empty result as "no changes this tick" rather
        than "every customer was deleted".
        """
        try:
            response = await self._request_customers()
        except _ABSORBED_ERRORS as exc:
            self._events.log_fetch_failed(self._config.customers_url, exc)
            return []

        if response.cursor:
            self._events.log_fetch_truncated(
                self._config.customers_url, len(response.customers)
            )
        return response.customers

    async def _request_customers(self) -> CustomerListResponse:
        """Perform the GET request and decode the customers envelope.

        Raises
        ------
        LoyverseAPIError
            On timeout, transport failure or a non-2xx status.
        LoyverseResponseShapeError
            When the body is not JSON or lacks a valid ``customers`` list.

        """
        try:
            response = await self._client.get(
                self._config.customers_url,
                params={"limit": self._config.customers_limit},
                headers={"Authorization": f"Bearer {self._config.loyverse_token}"},
            )
        except httpx.TimeoutException as exc:
            raise LoyverseAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise LoyverseAPIError.network_error(str(exc)) from exc

        if not response.is_success:
            raise LoyverseAPIError.http_error(response.status_code)
        return _decode_customers(response.content)
