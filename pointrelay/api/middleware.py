"""ASGI lifespan middleware that runs the poll scheduler alongside the app.

The scheduler starts on the ASGI ``lifespan.startup`` event and is cancelled
on ``lifespan.shutdown``, after which the outbound HTTP clients are closed.

Usage
-----
Register the middleware when creating the Falcon app::

    from pointrelay.api.middleware import SchedulerLifespan

    lifespan = SchedulerLifespan(scheduler, closables=(source, notifier))
    app = falcon.asgi.App(middleware=[lifespan])

"""

from __future__ import annotations

import typing as typ

from pointrelay.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pointrelay.scheduler import PollScheduler

__all__ = ["SchedulerLifespan", "SupportsAclose"]

logger = get_logger(__name__)


class SupportsAclose(typ.Protocol):
    """Resource holding connections that must be released on shutdown."""

    async def aclose(self) -> None: ...


class SchedulerLifespan:
    """Falcon middleware tying the poll scheduler to the ASGI lifespan.

    Parameters
    ----------
    scheduler
        Scheduler started on startup and stopped on shutdown.
    closables
        Resources closed, in order, after the scheduler has stopped.

    """

    def __init__(
        self,
        scheduler: PollScheduler,
        *,
        closables: cabc.Sequence[SupportsAclose] = (),
    ) -> None:
        """Initialize the middleware with the scheduler to manage."""
        self._scheduler = scheduler
        self._closables = tuple(closables)

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Start the scheduler when the ASGI server starts."""
        self._scheduler.start()
        log_info(logger, "Poll scheduler started")

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Stop the scheduler and close outbound clients."""
        await self._scheduler.stop()
        for closable in self._closables:
            await closable.aclose()
        log_info(logger, "Poll scheduler stopped")
