"""Classify bank notifications as transaction events."""

import logging
from typing import Optional

from banknotify.logging import NOTIFICATION_TEXT_ARGS

from .types import (
    MONITORED_PACKAGES,
    TRANSACTION_KEYWORDS,
    RawNotification,
    TransactionEvent,
)

logger = logging.getLogger(__name__)

_MONITORED = frozenset(MONITORED_PACKAGES)


def _text_or_empty(value: object) -> str:
    """Missing or non-string text degrades to an empty string."""
    return value if isinstance(value, str) else ""


def is_monitored_package(package_id: str) -> bool:
    """True if notifications from this package are inspected."""
    return package_id in _MONITORED


def is_transaction_text(title: str, body: str) -> bool:
    """Check title and body for any transaction keyword.

    Plain substring test on the lowercased text, so "real" also matches
    inside longer words.

    Args:
        title: Notification title.
        body: Notification body.

    Returns:
        True if any keyword occurs in the text.
    """
    full_text = f"{title} {body}".lower()
    return any(keyword in full_text for keyword in TRANSACTION_KEYWORDS)


def classify(notification: RawNotification) -> Optional[TransactionEvent]:
    """Classify a raw notification.

    Args:
        notification: Notification delivered by the host.

    Returns:
        TransactionEvent carrying the original text and post time, or None
        if the source is not monitored or no keyword matched.
    """
    package_id = notification.source_package_id
    if not is_monitored_package(package_id):
        return None

    title = _text_or_empty(notification.title)
    body = _text_or_empty(notification.body)

    # Title and body (args 1 and 2) are masked unless text logging is on
    logger.debug(
        "Notification from %s: %s - %s",
        package_id,
        title,
        body,
        extra={NOTIFICATION_TEXT_ARGS: (1, 2)},
    )

    if not is_transaction_text(title, body):
        return None

    return TransactionEvent(
        title=title,
        body=body,
        source_package_id=package_id,
        timestamp=notification.posted_at,
    )
