"""Typed models for the Loyverse customers endpoint."""

from __future__ import annotations

import msgspec

Balance = int | float


class CustomerRecord(msgspec.Struct, frozen=True, kw_only=True):
    """Snapshot of one Loyverse customer as returned by a single fetch.

    Only the fields the relay forwards are decoded; Loyverse sends many more
    (addresses, customer codes, timestamps) and they are ignored.

    Attributes
    ----------
    id
        Loyverse customer identifier.
    name
        Display name.
    total_points
        Current loyalty points balance.
    email
        Optional contact email, forwarded as-is.
    phone_number
        Optional contact phone number, forwarded as-is.
    total_spent
        Optional lifetime spend, forwarded as-is.

    """

    id: str
    name: str
    total_points: Balance
    email: str | None = None
    phone_number: str | None = None
    total_spent: float | None = None


class CustomerListResponse(msgspec.Struct, kw_only=True):
    """Envelope of ``GET /customers``."""

    customers: list[CustomerRecord]
    cursor: str | None = None
