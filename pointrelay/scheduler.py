"""Fixed-interval scheduler that drives change-detector ticks."""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

from pointrelay.observability import TickEventLogger

if typ.TYPE_CHECKING:
    from pointrelay.detection.detector import ChangeDetector, TickResult


class PollScheduler:
    """Run :meth:`ChangeDetector.tick` on a fixed cadence.

    The first tick runs as soon as the scheduler starts. Later ticks are
    aligned to ``interval_s`` from that start; a tick that overruns its slot
    causes the missed slots to be dropped, not queued. A slot that arrives
    while another tick (e.g. a manual trigger) is still running is skipped.
    """

    def __init__(
        self,
        detector: ChangeDetector,
        *,
        interval_s: float = 60.0,
        event_logger: TickEventLogger | None = None,
    ) -> None:
        """Initialise the scheduler for ``detector``."""
        if interval_s <= 0:
            msg = f"interval_s must be positive, got: {interval_s}"
            raise ValueError(msg)
        self._detector = detector
        self._interval_s = interval_s
        self._events = event_logger or TickEventLogger()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Return whether the background loop is active."""
        return self._task is not None and not self._task.done()

    async def run_once(self) -> TickResult | None:
        """Run one scheduled tick, or skip it when the detector is busy.

        Unexpected tick failures are logged and reported as ``None`` so the
        loop keeps its cadence.
        """
        if self._detector.busy:
            self._events.log_tick_skipped("previous tick still running")
            return None
        try:
            return await self._detector.tick()
        except Exception as exc:  # noqa: BLE001 - keep polling after a bad tick
            self._events.log_tick_failed(exc)
            return None

    async def run(self) -> None:
        """Run the tick loop forever."""
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            await self.run_once()
            next_at += self._interval_s
            now = loop.time()
            if next_at < now:
                missed = int((now - next_at) // self._interval_s) + 1
                next_at += missed * self._interval_s
            await asyncio.sleep(next_at - now)

    def start(self) -> None:
        """Start the loop as a background task; no-op when already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self.run(), name="pointrelay-poll-scheduler"
        )

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
