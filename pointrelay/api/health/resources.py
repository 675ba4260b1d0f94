"""Liveness and readiness probe resources.

``/health`` only reports that the process is serving requests. ``/ready``
reports whether the change detector has completed its first tick, since
until then the relay cannot notify anyone.

Usage
-----
Register health endpoints on the Falcon app::

    from pointrelay.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(detector))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from pointrelay.detection.state import DetectorPhase

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from pointrelay.detection.detector import ChangeDetector

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reflecting the detector phase.

    Responds 200 ``{"status": "ready", "phase": "tracking"}`` once the first
    tick has populated the balance cache, and 503
    ``{"status": "initializing", "phase": "uninitialized"}`` before that.

    """

    def __init__(self, detector: ChangeDetector) -> None:
        """Initialize with the detector whose phase is reported."""
        self._detector = detector

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with the readiness status.

        """
        phase = self._detector.phase
        if phase is DetectorPhase.TRACKING:
            resp.media = {"status": "ready", "phase": str(phase)}
            resp.status = HTTPStatus.OK
        else:
            resp.media = {"status": "initializing", "phase": str(phase)}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
