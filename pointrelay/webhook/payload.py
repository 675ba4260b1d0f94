"""Webhook payload sent for each changed customer."""

from __future__ import annotations

import typing as typ

import msgspec

from pointrelay.loyverse.models import Balance

if typ.TYPE_CHECKING:
    from pointrelay.loyverse.models import CustomerRecord


class WebhookPayload(msgspec.Struct, frozen=True, kw_only=True):
    """JSON body of one balance-change notification.

    Contact and spend fields are passed through from the customer record
    unchanged and are ``null`` when Loyverse omits them.
    """

    customer_id: str
    name: str
    new_points: Balance
    previous_points: Balance | None = None
    email: str | None = None
    phone_number: str | None = None
    total_spent: float | None = None

    @classmethod
    def from_record(
        cls, record: CustomerRecord, previous_points: Balance | None = None
    ) -> WebhookPayload:
        """Build the payload for ``record`` after a balance change."""
        return cls(
            customer_id=record.id,
            name=record.name,
            new_points=record.total_points,
            previous_points=previous_points,
            email=record.email,
            phone_number=record.phone_number,
            total_spent=record.total_spent,
        )

    def encode(self) -> bytes:
        """Return the JSON encoding of the payload."""
        return msgspec.json.encode(self)
