"""Listener bridge between host notifications and the active sink."""

import logging
from typing import Optional

from banknotify.errors import PermissionDeniedError
from banknotify.notifications.classifier import classify
from banknotify.notifications.types import (
    NOTIFICATION_RECEIVED,
    ListenerState,
    RawNotification,
    TransactionEvent,
)

from .mailbox import SinkMailbox
from .permission import PermissionRegistry
from .sink import Sink

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Notification access permission not granted"


class ListenerBridge:
    """Filters host notifications and forwards transactions to a sink.

    States:
    - DETACHED: no sink, every notification is dropped unprocessed
    - ATTACHED: notifications are classified and matches emitted

    Delivery is best effort. Events posted while detached, or whose emit
    fails, are lost and never replayed.

    Usage:
        bridge = ListenerBridge(registry)
        bridge.start_listening(sink)

        # From the host delivery thread:
        bridge.on_notification_posted(raw)
    """

    def __init__(
        self,
        permissions: PermissionRegistry,
        mailbox: Optional[SinkMailbox] = None,
    ):
        """Initialize ListenerBridge.

        Args:
            permissions: OS permission registry.
            mailbox: Shared sink slot (a new one if None).
        """
        self._permissions = permissions
        self._mailbox = mailbox or SinkMailbox()

    @property
    def state(self) -> ListenerState:
        """Current listener state."""
        if self._mailbox.current() is None:
            return ListenerState.DETACHED
        return ListenerState.ATTACHED

    # ========================================================================
    # Control operations
    # ========================================================================

    def check_permission(self) -> bool:
        """Query whether notification access is granted."""
        return self._permissions.is_enabled()

    def request_permission(self) -> bool:
        """Ask the user for notification access.

        Opens the OS settings screen when access is missing. Does not wait
        for the user, so the result may still be False; callers re-check
        later.

        Returns:
            Permission status right after the request was issued.
        """
        if not self._permissions.is_enabled():
            logger.info("Requesting notification access permission")
            self._permissions.open_settings()
        return self._permissions.is_enabled()

    def start_listening(self, sink: Sink) -> None:
        """Attach a sink, replacing any previous one.

        Args:
            sink: Consumer for transaction events.

        Raises:
            PermissionDeniedError: Access is not granted. State is unchanged.
        """
        if not self._permissions.is_enabled():
            logger.warning("Cannot start listening: permission not granted")
            raise PermissionDeniedError(PERMISSION_DENIED_MESSAGE)

        self._mailbox.attach(sink)
        logger.info("Notification listener started")

    def stop_listening(self) -> None:
        """Detach the sink. Safe to call when already detached."""
        self._mailbox.detach()
        logger.info("Notification listener stopped")

    def detach_sink(self, sink: Sink) -> bool:
        """Detach a sink only if it is still the active one.

        Returns:
            True if the sink was detached.
        """
        detached = self._mailbox.detach_if(sink)
        if detached:
            logger.info("Active sink detached")
        return detached

    # ========================================================================
    # Host callbacks
    # ========================================================================

    def on_notification_posted(
        self, notification: RawNotification
    ) -> Optional[TransactionEvent]:
        """Handle a notification posted anywhere on the system.

        Args:
            notification: Notification from the host.

        Returns:
            The emitted event, or None if the notification was dropped.
        """
        if self._mailbox.current() is None:
            return None

        event = classify(notification)
        if event is None:
            return None

        # Re-read: the sink may have been cleared while classifying
        sink = self._mailbox.current()
        if sink is None:
            logger.debug("Sink detached mid-processing, dropping event")
            return None

        try:
            sink.emit(NOTIFICATION_RECEIVED, event.to_payload())
        except Exception as e:
            logger.error("Failed to emit transaction event: %s", e)
            return None

        logger.debug(
            "Transaction event emitted: package=%s, timestamp=%d",
            event.source_package_id,
            event.timestamp,
        )
        return event

    def on_notification_removed(self, notification: RawNotification) -> None:
        """Removals are ignored."""
        pass
