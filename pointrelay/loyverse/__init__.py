"""Loyverse customer-list client and models."""

from __future__ import annotations

from .client import CustomerSource, LoyverseCustomerClient
from .models import Balance, CustomerListResponse, CustomerRecord

__all__ = [
    "Balance",
    "CustomerListResponse",
    "CustomerRecord",
    "CustomerSource",
    "LoyverseCustomerClient",
]
