"""Application factory for the pointrelay Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when a change detector is supplied,
the readiness probe and the manual ``/check-updates`` trigger.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app that also polls in the background::

    from pointrelay.api.app import AppDependencies, create_app

    deps = AppDependencies(
        detector=detector,
        scheduler=PollScheduler(detector),
        closables=(source, notifier),
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from pointrelay.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from pointrelay.api.middleware import SupportsAclose
    from pointrelay.detection.detector import ChangeDetector
    from pointrelay.scheduler import PollScheduler

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    detector
        Change detector behind ``/ready`` and ``/check-updates``.
    scheduler
        Optional scheduler bound to the ASGI lifespan. Without it ticks only
        run through ``/check-updates``.
    closables
        Outbound clients closed on lifespan shutdown. Only used together
        with ``scheduler``.

    """

    detector: ChangeDetector
    scheduler: PollScheduler | None = None
    closables: tuple[SupportsAclose, ...] = ()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, only ``/health``
        is available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []
    if dependencies is not None and dependencies.scheduler is not None:
        from pointrelay.api.middleware import SchedulerLifespan

        middleware.append(
            SchedulerLifespan(
                dependencies.scheduler, closables=dependencies.closables
            )
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())

    if dependencies is not None:
        from pointrelay.api.checks.resources import CheckUpdatesResource

        app.add_route("/ready", ReadyResource(dependencies.detector))
        app.add_route("/check-updates", CheckUpdatesResource(dependencies.detector))

    return app
