"""Observability primitives for the balance relay.

Provides structured logging and error categorization for ticks, customer
fetches and webhook deliveries. Every event is emitted as a single
``[event] key=value`` log line suitable for parsing by log aggregators.
"""

from __future__ import annotations

import enum
import typing as typ

import httpx

from pointrelay.errors import (
    LoyverseAPIError,
    LoyverseResponseShapeError,
    RelayConfigError,
    WebhookDeliveryError,
)
from pointrelay.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from pointrelay.detection.detector import TickResult
    from pointrelay.detection.state import DetectorPhase
    from pointrelay.loyverse.models import Balance

logger = get_logger(__name__)

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class TickEventType(enum.StrEnum):
    """Structured log event types for relay observability."""

    TICK_STARTED = "tick.started"
    TICK_COMPLETED = "tick.completed"
    TICK_SKIPPED = "tick.skipped"
    TICK_FAILED = "tick.failed"
    FETCH_FAILED = "customers.fetch_failed"
    FETCH_TRUNCATED = "customers.fetch_truncated"
    BALANCE_CHANGED = "balance.changed"
    WEBHOOK_DELIVERED = "webhook.delivered"
    WEBHOOK_FAILED = "webhook.failed"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (LoyverseResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (RelayConfigError, ErrorCategory.CONFIGURATION),
    (httpx.TransportError, ErrorCategory.TRANSIENT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes.

    Returns:
        ErrorCategory indicating the type of failure for alert routing.

    """
    # Status-bearing errors: no status means timeout or network failure
    if isinstance(exc, LoyverseAPIError | WebhookDeliveryError):
        if (
            exc.status_code is None
            or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class TickEventLogger:
    """Emit structured relay events through femtologging.

    Events are emitted at INFO level for success, WARNING for degraded
    outcomes (skipped ticks, truncated fetches, failed deliveries) and ERROR
    for fetch failures and unexpected tick failures.
    """

    def log_tick_started(self, phase: DetectorPhase) -> None:
        """Log the start of a tick."""
        log_info(logger, "[%s] phase=%s", TickEventType.TICK_STARTED, phase)

    def log_tick_completed(self, result: TickResult, duration: dt.timedelta) -> None:
        """Log tick completion with its counters."""
        log_info(
            logger,
            "[%s] phase=%s duration_seconds=%.3f customers_fetched=%d "
            "changes_detected=%d notifications_delivered=%d "
            "notifications_failed=%d",
            TickEventType.TICK_COMPLETED,
            result.phase,
            duration.total_seconds(),
            result.customers_fetched,
            result.changes_detected,
            result.notifications_delivered,
            result.notifications_failed,
        )

    def log_tick_skipped(self, reason: str) -> None:
        """Log a scheduled tick that did not run."""
        log_warning(logger, "[%s] reason=%s", TickEventType.TICK_SKIPPED, reason)

    def log_tick_failed(self, error: BaseException) -> None:
        """Log a tick that raised unexpectedly."""
        log_error(
            logger,
            "[%s] error_type=%s error_category=%s error_message=%s",
            TickEventType.TICK_FAILED,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_fetch_failed(self, url: str, error: BaseException) -> None:
        """Log a customer fetch that was absorbed as an empty result."""
        log_error(
            logger,
            "[%s] url=%s error_type=%s error_category=%s error_message=%s",
            TickEventType.FETCH_FAILED,
            url,
            type(error).__name__,
            categorize_error(error),
            str(error),
        )

    def log_fetch_truncated(self, url: str, customers: int) -> None:
        """Log a fetch whose response advertised further pages."""
        log_warning(
            logger,
            "[%s] url=%s customers_read=%d has_more_pages=True",
            TickEventType.FETCH_TRUNCATED,
            url,
            customers,
        )

    def log_balance_changed(
        self,
        customer_id: str,
        name: str | None,
        previous: Balance,
        current: Balance,
    ) -> None:
        """Log a detected balance change."""
        log_info(
            logger,
            "[%s] customer_id=%s name=%s previous_points=%s new_points=%s",
            TickEventType.BALANCE_CHANGED,
            customer_id,
            name,
            previous,
            current,
        )

    def log_webhook_delivered(self, customer_id: str, status_code: int) -> None:
        """Log a webhook accepted by the receiving endpoint."""
        log_info(
            logger,
            "[%s] customer_id=%s status_code=%d",
            TickEventType.WEBHOOK_DELIVERED,
            customer_id,
            status_code,
        )

    def log_webhook_failed(self, customer_id: str, error: BaseException) -> None:
        """Log a webhook that was dropped after a failed delivery."""
        log_warning(
            logger,
            "[%s] customer_id=%s error_type=%s error_category=%s error_message=%s",
            TickEventType.WEBHOOK_FAILED,
            customer_id,
            type(error).__name__,
            categorize_error(error),
            str(error),
        )
