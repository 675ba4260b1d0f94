"""Change detection between successive customer fetches.

A :class:`ChangeDetector` compares each fetched balance with the value it saw
on an earlier tick and notifies the webhook for every difference. The first
tick after process start only fills the cache: with no history every
customer would look changed.

Usage
-----
Wire the detector from a source and a notifier:

>>> detector = ChangeDetector(
...     LoyverseCustomerClient(config),
...     WebhookNotifier(config),
... )
>>> result = await detector.tick()
>>> result.phase
<DetectorPhase.UNINITIALIZED: 'uninitialized'>

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import datetime as dt
import typing as typ

from pointrelay.observability import TickEventLogger

from .state import DetectorPhase, DetectorState

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pointrelay.loyverse.client import CustomerSource
    from pointrelay.loyverse.models import Balance, CustomerRecord
    from pointrelay.webhook.notifier import ChangeNotifier


@dc.dataclass(frozen=True, slots=True)
class TickResult:
    """Outcome of a single tick.

    Attributes
    ----------
    phase
        Phase the detector was in when the tick ran.
    customers_fetched
        Number of records returned by the source. Zero also covers a failed
        fetch, which the source reports only through its logs.
    changes_detected
        Records whose balance differed from the cached value.
    notifications_delivered
        Webhooks accepted by the receiving endpoint.
    notifications_failed
        Webhooks that were attempted and dropped.

    """

    phase: DetectorPhase
    customers_fetched: int = 0
    changes_detected: int = 0
    notifications_delivered: int = 0
    notifications_failed: int = 0


class ChangeDetector:
    """Detect balance changes and forward them to a notifier.

    Ticks are serialised: a second caller waits for the running tick to
    finish before starting its own. Use :attr:`busy` to skip instead of
    waiting.
    """

    def __init__(
        self,
        source: CustomerSource,
        notifier: ChangeNotifier,
        *,
        state: DetectorState | None = None,
        event_logger: TickEventLogger | None = None,
    ) -> None:
        """Initialise the detector with its collaborators and state."""
        self._source = source
        self._notifier = notifier
        self._state = state or DetectorState()
        self._events = event_logger or TickEventLogger()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> DetectorState:
        """Return the injected state object."""
        return self._state

    @property
    def phase(self) -> DetectorPhase:
        """Return the current lifecycle phase."""
        return self._state.phase

    @property
    def busy(self) -> bool:
        """Return whether a tick is in progress."""
        return self._lock.locked()

    async def tick(self) -> TickResult:
        """Fetch customers, diff against the cache and notify changes.

        Returns
        -------
        TickResult
            Counters describing what the tick observed and sent.

        """
        async with self._lock:
            phase = self._state.phase
            self._events.log_tick_started(phase)
            started_at = dt.datetime.now(dt.UTC)

            customers = await self._source.fetch_customers()
            if phase is DetectorPhase.UNINITIALIZED:
                result = self._initialise(customers)
            else:
                result = await self._track(customers)
            self._state.mark_tracking()

            duration = dt.datetime.now(dt.UTC) - started_at
            self._events.log_tick_completed(result, duration)
            return result

    def _initialise(self, customers: cabc.Sequence[CustomerRecord]) -> TickResult:
        balances = self._state.balances
        for customer in customers:
            balances.record(customer.id, customer.total_points)
        return TickResult(
            phase=DetectorPhase.UNINITIALIZED,
            customers_fetched=len(customers),
        )

    async def _track(self, customers: cabc.Sequence[CustomerRecord]) -> TickResult:
        balances = self._state.balances
        changes = delivered = failed = 0
        for customer in customers:
            # Unseen customers default to 0, so a new customer at 0 is silent.
            previous = balances.previous(customer.id)
            if customer.total_points == previous:
                continue

            changes += 1
            balances.record(customer.id, customer.total_points)
            self._events.log_balance_changed(
                customer.id, customer.name, previous, customer.total_points
            )
            if await self._notify(customer, previous):
                delivered += 1
            else:
                failed += 1

        return TickResult(
            phase=DetectorPhase.TRACKING,
            customers_fetched=len(customers),
            changes_detected=changes,
            notifications_delivered=delivered,
            notifications_failed=failed,
        )

    async def _notify(self, customer: CustomerRecord, previous: Balance) -> bool:
        # Notification failures never abort the tick.
        try:
            return await self._notifier.notify(customer, previous)
        except Exception as exc:  # noqa: BLE001 - count as a dropped webhook
            self._events.log_webhook_failed(customer.id, exc)
            return False
