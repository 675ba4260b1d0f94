"""Outbound webhook notifications for balance changes."""

from __future__ import annotations

from .notifier import ChangeNotifier, WebhookNotifier
from .payload import WebhookPayload

__all__ = ["ChangeNotifier", "WebhookNotifier", "WebhookPayload"]
