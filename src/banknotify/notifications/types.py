"""Notification types and the fixed package/keyword sets."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

# Event name used on the outbound channel
NOTIFICATION_RECEIVED = "notificationReceived"

# Host extras keys carrying the notification text
EXTRA_TITLE = "android.title"
EXTRA_TEXT = "android.text"


class ListenerState(Enum):
    """Whether a sink is attached to the listener."""

    DETACHED = "detached"
    ATTACHED = "attached"


@dataclass(frozen=True)
class RawNotification:
    """A notification as delivered by the host OS."""

    source_package_id: str
    title: Optional[str]  # None when the host gave no title
    body: Optional[str]  # None when the host gave no text
    posted_at: int  # Epoch millis

    @classmethod
    def from_extras(
        cls,
        source_package_id: str,
        extras: Optional[Mapping[str, Any]],
        posted_at: int,
    ) -> "RawNotification":
        """Build a notification from a host extras mapping.

        Args:
            source_package_id: Package that posted the notification.
            extras: Host extras, may be None or lack the text keys.
            posted_at: Post time in epoch millis.

        Returns:
            RawNotification with None for any missing text field.
        """
        title = None
        body = None
        if extras:
            title_seq = extras.get(EXTRA_TITLE)
            text_seq = extras.get(EXTRA_TEXT)
            if title_seq is not None:
                title = str(title_seq)
            if text_seq is not None:
                body = str(text_seq)
        return cls(
            source_package_id=source_package_id,
            title=title,
            body=body,
            posted_at=posted_at,
        )


@dataclass(frozen=True)
class TransactionEvent:
    """A notification accepted as a financial transaction."""

    title: str
    body: str
    source_package_id: str
    timestamp: int  # Post time of the source notification, epoch millis

    def to_payload(self) -> dict[str, Any]:
        """Convert to the notificationReceived payload."""
        return {
            "title": self.title,
            "body": self.body,
            "packageName": self.source_package_id,
            "timestamp": self.timestamp,
        }


# ============================================================================
# Monitored Packages
# ============================================================================

MONITORED_PACKAGES = (
    "com.nu.production",  # Nubank
    "com.bradesco",  # Bradesco
    "com.bradesco.next",  # Bradesco Next
    "br.com.bradesco",  # Bradesco alternate id
)

# ============================================================================
# Transaction Keywords (lowercase, matched as substrings)
# ============================================================================

TRANSACTION_KEYWORDS = (
    "compra",
    "pagamento",
    "pix",
    "transferência",
    "saque",
    "depósito",
    "débito",
    "crédito",
    "fatura",
    "cartão",
    "conta",
    "real",
    "r$",
    "aprovado",
    "recebido",
    "enviado",
    "cobrado",
)
