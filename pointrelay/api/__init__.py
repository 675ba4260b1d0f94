"""pointrelay HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application: health probes, the readiness probe and the manual
balance-check trigger.

Usage
-----
Create the application::

    from pointrelay.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # detector endpoints and background polling
"""

from pointrelay.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
