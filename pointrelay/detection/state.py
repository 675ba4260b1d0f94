"""In-memory state owned by the change detector."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pointrelay.loyverse.models import Balance


class DetectorPhase(enum.StrEnum):
    """Lifecycle phase of a change detector.

    ``UNINITIALIZED`` ticks only populate the cache. The detector moves to
    ``TRACKING`` once, after its first tick, and never returns.
    """

    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


class BalanceCache:
    """Last observed balance per customer id.

    Entries are only ever added or overwritten. Customers that disappear from
    the source keep their last balance for the lifetime of the process.
    """

    def __init__(self, initial: cabc.Mapping[str, Balance] | None = None) -> None:
        self._balances: dict[str, Balance] = dict(initial or {})

    def __len__(self) -> int:
        return len(self._balances)

    def __contains__(self, customer_id: object) -> bool:
        return customer_id in self._balances

    def previous(self, customer_id: str) -> Balance:
        """Return the cached balance, or 0 for customers never seen."""
        return self._balances.get(customer_id, 0)

    def record(self, customer_id: str, balance: Balance) -> None:
        """Store ``balance`` as the latest observation for ``customer_id``."""
        self._balances[customer_id] = balance

    def snapshot(self) -> dict[str, Balance]:
        """Return a copy of the cache contents."""
        return dict(self._balances)


@dc.dataclass(slots=True)
class DetectorState:
    """Mutable state injected into a :class:`ChangeDetector`."""

    phase: DetectorPhase = DetectorPhase.UNINITIALIZED
    balances: BalanceCache = dc.field(default_factory=BalanceCache)

    def mark_tracking(self) -> None:
        """Leave the initialisation phase; repeated calls are no-ops."""
        self.phase = DetectorPhase.TRACKING
