"""Consumer-facing plugin exposing the listener over a call/event bridge."""

import logging
from threading import Lock
from typing import Any, Callable

from banknotify.errors import UnknownMethodError
from banknotify.listener.bridge import ListenerBridge

logger = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], None]


class ListenerHandle:
    """Registration returned by add_listener."""

    def __init__(self, plugin: "NotificationListenerPlugin", event_name: str, fn: Listener):
        self._plugin = plugin
        self.event_name = event_name
        self.fn = fn

    def remove(self) -> None:
        """Unregister this listener. Safe to call twice."""
        self._plugin._remove_listener(self)


class NotificationListenerPlugin:
    """Control calls and event channel for the consumer.

    Each control call returns a payload dict, as the consumer's bridge
    expects. The plugin registers itself as the bridge's sink on
    start_listening and fans events out to its listeners.

    Usage:
        plugin = NotificationListenerPlugin(bridge)
        plugin.add_listener("notificationReceived", on_transaction)

        result = plugin.call("checkPermission")
        if result["granted"]:
            plugin.call("startListening")
    """

    def __init__(self, bridge: ListenerBridge):
        """Initialize NotificationListenerPlugin.

        Args:
            bridge: Listener bridge to control.
        """
        self._bridge = bridge
        self._listeners: dict[str, list[ListenerHandle]] = {}
        self._lock = Lock()
        self._methods: dict[str, Callable[[], dict[str, Any]]] = {
            "checkPermission": self.check_permission,
            "requestPermission": self.request_permission,
            "startListening": self.start_listening,
            "stopListening": self.stop_listening,
        }

    # ========================================================================
    # Control calls
    # ========================================================================

    def call(self, method: str) -> dict[str, Any]:
        """Route a control call by method name.

        Args:
            method: Method name as sent by the consumer (e.g. "startListening").

        Returns:
            Result payload.

        Raises:
            UnknownMethodError: Method is not exposed.
            PermissionDeniedError: startListening without access.
        """
        handler = self._methods.get(method)
        if handler is None:
            raise UnknownMethodError(f"Unknown method: {method}")
        return handler()

    def check_permission(self) -> dict[str, Any]:
        return {"granted": self._bridge.check_permission()}

    def request_permission(self) -> dict[str, Any]:
        return {"granted": self._bridge.request_permission()}

    def start_listening(self) -> dict[str, Any]:
        self._bridge.start_listening(self)
        return {}

    def stop_listening(self) -> dict[str, Any]:
        self._bridge.stop_listening()
        return {}

    def close(self) -> None:
        """Detach from the bridge if this plugin is still its sink."""
        self._bridge.detach_sink(self)

    # ========================================================================
    # Event channel
    # ========================================================================

    def add_listener(self, event_name: str, fn: Listener) -> ListenerHandle:
        """Register a listener for an event.

        Args:
            event_name: Event to listen for (e.g. "notificationReceived").
            fn: Called with the event payload.

        Returns:
            Handle whose remove() unregisters the listener.
        """
        handle = ListenerHandle(self, event_name, fn)
        with self._lock:
            self._listeners.setdefault(event_name, []).append(handle)
        logger.debug("Added listener for: %s", event_name)
        return handle

    def remove_all_listeners(self) -> None:
        with self._lock:
            self._listeners.clear()
        logger.debug("Removed all listeners")

    def listener_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._listeners.get(event_name, []))

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Deliver an event to every listener registered for it."""
        with self._lock:
            handles = list(self._listeners.get(event_name, []))

        if not handles:
            logger.debug("No listeners for %s, event dropped", event_name)
            return

        for handle in handles:
            try:
                handle.fn(dict(payload))
            except Exception as e:
                logger.error("Listener error for %s: %s", event_name, e)

    def _remove_listener(self, handle: ListenerHandle) -> None:
        with self._lock:
            handles = self._listeners.get(handle.event_name, [])
            if handle in handles:
                handles.remove(handle)
