"""Unit tests for the Falcon application factory and resources."""

from __future__ import annotations

from http import HTTPStatus

import falcon.asgi
import falcon.testing
import pytest

from pointrelay.api import AppDependencies, create_app
from pointrelay.api.checks.resources import ACKNOWLEDGEMENT
from pointrelay.api.middleware import SchedulerLifespan
from pointrelay.detection import ChangeDetector, DetectorPhase
from pointrelay.observability import TickEventType
from pointrelay.scheduler import PollScheduler
from tests.helpers.fakes import (
    ClosableSpy,
    RecordingLogger,
    RecordingNotifier,
    ScriptedSource,
    make_customer,
)


class _ExplodingSource:
    async def fetch_customers(self) -> list:
        msg = "unexpected"
        raise RuntimeError(msg)


@pytest.fixture
def detector(source: ScriptedSource, notifier: RecordingNotifier) -> ChangeDetector:
    """Return a detector over the scripted source and recording notifier."""
    return ChangeDetector(source, notifier)


@pytest.fixture
def client(detector: ChangeDetector) -> falcon.testing.TestClient:
    """Create a test client for an app without background polling."""
    return falcon.testing.TestClient(create_app(AppDependencies(detector=detector)))


class TestHealthOnlyApp:
    """Tests for create_app without dependencies."""

    def test_returns_falcon_asgi_app(self) -> None:
        """create_app returns a Falcon ASGI App instance."""
        assert isinstance(create_app(), falcon.asgi.App)

    def test_health_returns_ok(self) -> None:
        """GET /health answers 200 with status ok."""
        result = falcon.testing.TestClient(create_app()).simulate_get("/health")
        assert result.status_code == HTTPStatus.OK
        assert result.json == {"status": "ok"}

    @pytest.mark.parametrize("path", ["/ready", "/check-updates"])
    def test_detector_routes_absent(self, path: str) -> None:
        """Detector endpoints need a detector."""
        result = falcon.testing.TestClient(create_app()).simulate_get(path)
        assert result.status_code == HTTPStatus.NOT_FOUND


class TestReadyEndpoint:
    """Tests for GET /ready."""

    def test_unavailable_before_first_tick(
        self, client: falcon.testing.TestClient
    ) -> None:
        """The relay is not ready until the cache has been populated."""
        result = client.simulate_get("/ready")
        assert result.status_code == HTTPStatus.SERVICE_UNAVAILABLE
        assert result.json == {"status": "initializing", "phase": "uninitialized"}

    def test_ready_once_tracking(
        self, client: falcon.testing.TestClient, detector: ChangeDetector
    ) -> None:
        """After the first tick the relay reports ready."""
        detector.state.mark_tracking()

        result = client.simulate_get("/ready")

        assert result.status_code == HTTPStatus.OK
        assert result.json == {"status": "ready", "phase": "tracking"}


class TestCheckUpdatesEndpoint:
    """Tests for GET /check-updates."""

    def test_runs_a_tick_and_acknowledges(
        self, client: falcon.testing.TestClient, detector: ChangeDetector
    ) -> None:
        """A manual check ticks the detector and answers plain text."""
        result = client.simulate_get("/check-updates")

        assert result.status_code == HTTPStatus.OK
        assert result.text == ACKNOWLEDGEMENT
        assert result.headers["content-type"].startswith("text/plain")
        assert detector.phase is DetectorPhase.TRACKING

    def test_notifies_changes_on_later_checks(
        self,
        client: falcon.testing.TestClient,
        source: ScriptedSource,
        notifier: RecordingNotifier,
    ) -> None:
        """Manual checks after the first one forward detected changes."""
        source.push(make_customer("1", 10))
        source.push(make_customer("1", 15))

        first = client.simulate_get("/check-updates")
        second = client.simulate_get("/check-updates")

        assert first.status_code == second.status_code == HTTPStatus.OK
        assert notifier.customer_ids == ["1"]

    def test_acknowledges_when_notifications_fail(
        self, source: ScriptedSource
    ) -> None:
        """Dropped webhooks do not change the response."""
        notifier = RecordingNotifier(failing_ids={"1"})
        detector = ChangeDetector(source, notifier)
        detector.state.mark_tracking()
        source.push(make_customer("1", 10))
        client = falcon.testing.TestClient(
            create_app(AppDependencies(detector=detector))
        )

        result = client.simulate_get("/check-updates")

        assert result.status_code == HTTPStatus.OK
        assert result.text == ACKNOWLEDGEMENT
        assert notifier.customer_ids == ["1"]

    def test_acknowledges_when_tick_raises(
        self, notifier: RecordingNotifier, event_log: RecordingLogger
    ) -> None:
        """Even an unexpected failure answers 200 and is logged."""
        detector = ChangeDetector(_ExplodingSource(), notifier)
        client = falcon.testing.TestClient(
            create_app(AppDependencies(detector=detector))
        )

        result = client.simulate_get("/check-updates")

        assert result.status_code == HTTPStatus.OK
        assert result.text == ACKNOWLEDGEMENT
        assert event_log.messages(TickEventType.TICK_FAILED)


class TestSchedulerLifespan:
    """Tests for the lifespan middleware."""

    @pytest.mark.asyncio
    async def test_startup_starts_and_shutdown_stops(
        self, detector: ChangeDetector
    ) -> None:
        """The scheduler follows the ASGI lifespan and clients are closed."""
        scheduler = PollScheduler(detector, interval_s=60)
        first, second = ClosableSpy(), ClosableSpy()
        lifespan = SchedulerLifespan(scheduler, closables=(first, second))

        await lifespan.process_startup({"type": "lifespan"}, {})
        assert scheduler.running is True

        await lifespan.process_shutdown({"type": "lifespan"}, {})
        assert scheduler.running is False
        assert first.closed is True
        assert second.closed is True

    def test_app_with_scheduler_registers_lifespan(
        self, detector: ChangeDetector
    ) -> None:
        """create_app wires the scheduler through middleware."""
        deps = AppDependencies(
            detector=detector, scheduler=PollScheduler(detector, interval_s=60)
        )

        app = create_app(deps)

        result = falcon.testing.TestClient(app).simulate_get("/health")
        assert result.status_code == HTTPStatus.OK
