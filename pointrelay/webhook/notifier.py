"""Webhook notifier that forwards balance changes."""

from __future__ import annotations

import typing as typ

import httpx

from pointrelay.errors import WebhookDeliveryError
from pointrelay.observability import TickEventLogger

from .payload import WebhookPayload

if typ.TYPE_CHECKING:
    from pointrelay.config import RelayConfig
    from pointrelay.loyverse.models import Balance, CustomerRecord


class ChangeNotifier(typ.Protocol):
    """Interface for announcing one customer's balance change."""

    async def notify(
        self, record: CustomerRecord, previous_points: Balance | None = None
    ) -> bool:
        """Deliver the change and report whether it was accepted."""
        ...


class WebhookNotifier:
    """POST balance changes to the configured webhook URL.

    Each call is a single attempt. Failed deliveries are logged as
    ``webhook.failed`` and dropped; there is no retry and no queue.
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        event_logger: TickEventLogger | None = None,
    ) -> None:
        """Initialise the notifier with the relay configuration."""
        self._webhook_url = config.webhook_url
        self._events = event_logger or TickEventLogger()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.http_timeout_s,
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def notify(
        self, record: CustomerRecord, previous_points: Balance | None = None
    ) -> bool:
        """Send the change for ``record``; never raises.

        Returns
        -------
        bool
            ``True`` when the webhook answered 2xx, ``False`` otherwise.

        """
        payload = WebhookPayload.from_record(record, previous_points)
        try:
            status_code = await self._post(payload)
        except WebhookDeliveryError as exc:
            self._events.log_webhook_failed(record.id, exc)
            return False

        self._events.log_webhook_delivered(record.id, status_code)
        return True

    async def _post(self, payload: WebhookPayload) -> int:
        try:
            response = await self._client.post(
                self._webhook_url,
                content=payload.encode(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as exc:
            raise WebhookDeliveryError.timeout() from exc
        except httpx.RequestError as exc:
            raise WebhookDeliveryError.network_error(str(exc)) from exc

        if not response.is_success:
            raise WebhookDeliveryError.http_error(response.status_code)
        return response.status_code
