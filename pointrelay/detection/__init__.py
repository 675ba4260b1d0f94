"""Balance change detection and its in-memory state."""

from __future__ import annotations

from .detector import ChangeDetector, TickResult
from .state import BalanceCache, DetectorPhase, DetectorState

__all__ = [
    "BalanceCache",
    "ChangeDetector",
    "DetectorPhase",
    "DetectorState",
    "TickResult",
]
