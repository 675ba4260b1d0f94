"""Errors raised by the relay components.

The Loyverse and webhook errors never escape their component: the client
and notifier raise them internally and absorb them at their public
boundary after logging.
"""

from __future__ import annotations


class RelayConfigError(RuntimeError):
    """Raised when required environment configuration is missing or invalid."""

    @classmethod
    def missing(cls, env_var: str) -> RelayConfigError:
        """Return an error for a required variable that is unset or blank."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid_number(cls, env_var: str, raw: str) -> RelayConfigError:
        """Return an error for a variable that does not parse as a number."""
        return cls(f"{env_var} must be a number, got: {raw!r}")

    @classmethod
    def invalid_token(cls, env_var: str) -> RelayConfigError:
        """Return an error for a token that cannot be sent in an HTTP header."""
        return cls(f"{env_var} must contain only ASCII characters")

    @classmethod
    def out_of_range(
        cls, env_var: str, value: float, lower: float, upper: float | None = None
    ) -> RelayConfigError:
        """Return an error for a numeric variable outside its allowed range."""
        if upper is None:
            return cls(f"{env_var} must be at least {lower}, got: {value}")
        return cls(f"{env_var} must be between {lower} and {upper}, got: {value}")


# Content preview length for error messages
_CONTENT_PREVIEW_LIMIT = 100


class LoyverseAPIError(RuntimeError):
    """Raised when the Loyverse API cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> LoyverseAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"Loyverse API HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> LoyverseAPIError:
        """Return an error for a request that exceeded the client timeout."""
        return cls("Loyverse API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> LoyverseAPIError:
        """Return an error for transport-level failures."""
        return cls(f"Loyverse API network error: {detail}")


class LoyverseResponseShapeError(RuntimeError):
    """Raised when a Loyverse response does not match the expected schema."""

    @classmethod
    def invalid_json(cls, content: str) -> LoyverseResponseShapeError:
        """Return an error for a body that is not valid JSON."""
        preview = content[:_CONTENT_PREVIEW_LIMIT]
        return cls(f"Loyverse response is not valid JSON: {preview!r}")

    @classmethod
    def schema_mismatch(cls, detail: str) -> LoyverseResponseShapeError:
        """Return an error for JSON that does not match the customers schema."""
        return cls(f"Loyverse response does not match customers schema: {detail}")


class WebhookDeliveryError(RuntimeError):
    """Raised when a webhook POST is not accepted by the receiving endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> WebhookDeliveryError:
        """Return an error for non-2xx webhook responses."""
        return cls(f"Webhook HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> WebhookDeliveryError:
        """Return an error for a webhook request that timed out."""
        return cls("Webhook request timed out")

    @classmethod
    def network_error(cls, detail: str) -> WebhookDeliveryError:
        """Return an error for transport-level webhook failures."""
        return cls(f"Webhook network error: {detail}")
