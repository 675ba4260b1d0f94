"""pointrelay runtime entrypoint.

This module provides the ASGI application factory used by granian
(``pointrelay.runtime:create_app``). It reads :class:`RelayConfig` from the
environment, wires the Loyverse client, the webhook notifier, the change
detector and the poll scheduler, and delegates application construction to
:func:`pointrelay.api.app.create_app`.

Server settings are driven by environment variables:

- ``POINTRELAY_HOST``: Bind address (default ``0.0.0.0``)
- ``POINTRELAY_PORT``: Listen port (default ``3000``)
- ``POINTRELAY_LOG_LEVEL``: Log level (default ``INFO``)

See :meth:`RelayConfig.from_env` for the relay settings.

Run the service directly with ``python -m pointrelay.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from pointrelay.config import RelayConfig
from pointrelay.errors import RelayConfigError
from pointrelay.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

    from pointrelay.api.app import AppDependencies

__all__ = ["build_dependencies", "create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid POINTRELAY_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def build_dependencies(config: RelayConfig) -> AppDependencies:
    """Wire the relay components for ``config``."""
    from pointrelay.api.app import AppDependencies
    from pointrelay.detection import ChangeDetector
    from pointrelay.loyverse import LoyverseCustomerClient
    from pointrelay.observability import TickEventLogger
    from pointrelay.scheduler import PollScheduler
    from pointrelay.webhook import WebhookNotifier

    events = TickEventLogger()
    source = LoyverseCustomerClient(config, event_logger=events)
    notifier = WebhookNotifier(config, event_logger=events)
    detector = ChangeDetector(source, notifier, event_logger=events)
    scheduler = PollScheduler(
        detector, interval_s=config.poll_interval_s, event_logger=events
    )
    return AppDependencies(
        detector=detector,
        scheduler=scheduler,
        closables=(source, notifier),
    )


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    Raises
    ------
    SystemExit
        If the relay configuration is missing or invalid.

    """
    from pointrelay.api.app import create_app as _create_api_app

    try:
        config = RelayConfig.from_env()
    except RelayConfigError as exc:
        log_error(logger, "Invalid relay configuration: %s", exc)
        raise SystemExit(1) from exc

    log_info(
        logger,
        "Relaying %s balance changes to webhook every %.0fs",
        config.customers_url,
        config.poll_interval_s,
    )
    return _create_api_app(build_dependencies(config))


def main() -> None:
    """Start the pointrelay server using granian.

    Reads ``POINTRELAY_HOST``, ``POINTRELAY_PORT``, and
    ``POINTRELAY_LOG_LEVEL`` from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("POINTRELAY_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("POINTRELAY_PORT", "3000"))
    log_level_str = os.environ.get("POINTRELAY_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid POINTRELAY_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting pointrelay on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "pointrelay.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
        # Balance cache and phase live in process memory.
        workers=1,
    )
    server.serve()


if __name__ == "__main__":
    main()
