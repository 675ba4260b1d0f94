"""pointrelay: relay Loyverse loyalty balance changes to a webhook."""

from __future__ import annotations

__version__ = "0.1.0"
