"""Manual trigger for a balance check.

``GET /check-updates`` runs one tick immediately and always answers
``200 OK`` with a plain-text acknowledgement. Fetch and webhook failures are
already absorbed by the detector's collaborators; anything unexpected is
logged here so operators never see an error status from this endpoint.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from pointrelay.logging import get_logger, log_info
from pointrelay.observability import TickEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from pointrelay.detection.detector import ChangeDetector

__all__ = ["ACKNOWLEDGEMENT", "CheckUpdatesResource"]

ACKNOWLEDGEMENT = "Checked for point updates"

logger = get_logger(__name__)


class CheckUpdatesResource:
    """Run a tick on demand.

    When a scheduled tick is already running the request waits for it and
    then runs its own tick.
    """

    def __init__(
        self,
        detector: ChangeDetector,
        *,
        event_logger: TickEventLogger | None = None,
    ) -> None:
        """Initialize with the detector to tick."""
        self._detector = detector
        self._events = event_logger or TickEventLogger()

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /check-updates requests."""
        log_info(logger, "Manual balance check requested")
        try:
            await self._detector.tick()
        except Exception as exc:  # noqa: BLE001 - endpoint always acknowledges
            self._events.log_tick_failed(exc)

        resp.content_type = falcon.MEDIA_TEXT
        resp.text = ACKNOWLEDGEMENT
        resp.status = HTTPStatus.OK
