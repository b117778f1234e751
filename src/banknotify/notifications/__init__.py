"""Notification filtering and transaction classification."""

from .types import (
    RawNotification,
    TransactionEvent,
    ListenerState,
    MONITORED_PACKAGES,
    TRANSACTION_KEYWORDS,
    NOTIFICATION_RECEIVED,
)
from .classifier import classify, is_monitored_package, is_transaction_text

__all__ = [
    "RawNotification",
    "TransactionEvent",
    "ListenerState",
    "classify",
    "is_monitored_package",
    "is_transaction_text",
    "MONITORED_PACKAGES",
    "TRANSACTION_KEYWORDS",
    "NOTIFICATION_RECEIVED",
]
