"""Tests for NotificationListenerPlugin."""

from unittest.mock import MagicMock

import pytest

from banknotify.errors import PermissionDeniedError, UnknownMethodError
from banknotify.listener.bridge import ListenerBridge
from banknotify.notifications.types import (
    NOTIFICATION_RECEIVED,
    ListenerState,
    RawNotification,
)
from banknotify.plugin import NotificationListenerPlugin


class FakeRegistry:
    """Permission registry with a settable grant."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.opened = False

    def is_enabled(self) -> bool:
        return self.granted

    def open_settings(self) -> None:
        self.opened = True


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def bridge(registry):
    return ListenerBridge(registry)


@pytest.fixture
def plugin(bridge):
    return NotificationListenerPlugin(bridge)


def nubank_purchase(posted_at: int = 1700000000000) -> RawNotification:
    return RawNotification(
        source_package_id="com.nu.production",
        title="Compra aprovada",
        body="R$ 45,00 no cartão final 1234",
        posted_at=posted_at,
    )


class TestControlCalls:
    """Tests for the request/response entry points."""

    def test_check_permission_payload(self, plugin, registry):
        """checkPermission returns a granted payload."""
        assert plugin.call("checkPermission") == {"granted": True}
        registry.granted = False
        assert plugin.call("checkPermission") == {"granted": False}

    def test_request_permission_payload(self, plugin, registry):
        """requestPermission opens settings and reports status."""
        registry.granted = False
        assert plugin.call("requestPermission") == {"granted": False}
        assert registry.opened

    def test_start_listening_attaches_plugin(self, plugin, bridge):
        """startListening makes the plugin the sink."""
        assert plugin.call("startListening") == {}
        assert bridge.state == ListenerState.ATTACHED

    def test_start_listening_rejected(self, plugin, registry, bridge):
        """startListening without access raises with the reject message."""
        registry.granted = False

        with pytest.raises(PermissionDeniedError, match="permission not granted"):
            plugin.call("startListening")

        assert bridge.state == ListenerState.DETACHED

    def test_stop_listening(self, plugin, bridge):
        """stopListening detaches."""
        plugin.call("startListening")
        assert plugin.call("stopListening") == {}
        assert bridge.state == ListenerState.DETACHED

    def test_unknown_method(self, plugin):
        """Unknown method names are rejected."""
        with pytest.raises(UnknownMethodError):
            plugin.call("addTransaction")


class TestEventChannel:
    """Tests for notificationReceived delivery."""

    def test_listener_receives_event(self, plugin, bridge):
        """Matching notification reaches the listener once."""
        listener = MagicMock()
        plugin.add_listener(NOTIFICATION_RECEIVED, listener)
        plugin.start_listening()

        bridge.on_notification_posted(nubank_purchase())

        listener.assert_called_once_with(
            {
                "title": "Compra aprovada",
                "body": "R$ 45,00 no cartão final 1234",
                "packageName": "com.nu.production",
                "timestamp": 1700000000000,
            }
        )

    def test_no_events_after_stop(self, plugin, bridge):
        """Stopped plugin gets no events."""
        listener = MagicMock()
        plugin.add_listener(NOTIFICATION_RECEIVED, listener)
        plugin.start_listening()
        plugin.stop_listening()

        bridge.on_notification_posted(nubank_purchase())

        listener.assert_not_called()

    def test_handle_remove(self, plugin):
        """Removed listener no longer receives events."""
        listener = MagicMock()
        handle = plugin.add_listener(NOTIFICATION_RECEIVED, listener)
        handle.remove()
        handle.remove()

        plugin.emit(NOTIFICATION_RECEIVED, {"title": "x"})

        listener.assert_not_called()
        assert plugin.listener_count(NOTIFICATION_RECEIVED) == 0

    def test_remove_all_listeners(self, plugin):
        """remove_all_listeners clears every event."""
        plugin.add_listener(NOTIFICATION_RECEIVED, MagicMock())
        plugin.add_listener("other", MagicMock())
        plugin.remove_all_listeners()

        assert plugin.listener_count(NOTIFICATION_RECEIVED) == 0
        assert plugin.listener_count("other") == 0

    def test_failing_listener_does_not_block_others(self, plugin, caplog):
        """One listener raising does not stop delivery to the next."""
        bad = MagicMock(side_effect=RuntimeError("ui closed"))
        good = MagicMock()
        plugin.add_listener(NOTIFICATION_RECEIVED, bad)
        plugin.add_listener(NOTIFICATION_RECEIVED, good)

        plugin.emit(NOTIFICATION_RECEIVED, {"title": "x"})

        good.assert_called_once_with({"title": "x"})
        assert "Listener error" in caplog.text

    def test_listener_mutation_not_shared(self, plugin):
        """Each listener gets its own copy of the payload."""
        seen = []

        def mutating(payload):
            payload["title"] = "changed"

        plugin.add_listener(NOTIFICATION_RECEIVED, mutating)
        plugin.add_listener(NOTIFICATION_RECEIVED, seen.append)
        original = {"title": "Pix recebido"}

        plugin.emit(NOTIFICATION_RECEIVED, original)

        assert seen == [{"title": "Pix recebido"}]
        assert original == {"title": "Pix recebido"}

    def test_listeners_filtered_by_event(self, plugin):
        """Listeners only get their own event."""
        listener = MagicMock()
        plugin.add_listener("other", listener)
        plugin.emit(NOTIFICATION_RECEIVED, {})
        listener.assert_not_called()


class TestClose:
    """Tests for consumer detach."""

    def test_close_detaches_active_plugin(self, plugin, bridge):
        """Closing the active plugin detaches it."""
        plugin.start_listening()
        plugin.close()
        assert bridge.state == ListenerState.DETACHED

    def test_close_keeps_newer_plugin(self, bridge):
        """Closing a replaced plugin leaves the newer one attached."""
        old = NotificationListenerPlugin(bridge)
        new = NotificationListenerPlugin(bridge)
        old.start_listening()
        new.start_listening()

        old.close()

        assert bridge.state == ListenerState.ATTACHED
