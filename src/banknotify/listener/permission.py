"""Notification listener permission registries."""

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

# Separator used by the OS enabled-listener setting
LISTENER_SEPARATOR = ":"


class PermissionRegistry(Protocol):
    """Protocol for the OS notification-access registry."""

    def is_enabled(self) -> bool:
        """True if this listener is currently enabled in OS settings."""
        ...

    def open_settings(self) -> None:
        """Open the OS listener settings screen. Must not block."""
        ...


class SettingsPermissionRegistry:
    """Registry backed by the OS enabled-listener setting.

    The setting is a separator-joined list of flattened component names.
    The listener is enabled when its own component name is one of them.

    Usage:
        registry = SettingsPermissionRegistry(
            "app.banknotify/app.banknotify.NotificationListenerService",
            read_enabled_listeners=settings.read,
            open_settings=settings.open_listener_settings,
        )
    """

    def __init__(
        self,
        component_name: str,
        read_enabled_listeners: Callable[[], Optional[str]],
        open_settings: Optional[Callable[[], None]] = None,
    ):
        """Initialize SettingsPermissionRegistry.

        Args:
            component_name: Flattened identity of this listener.
            read_enabled_listeners: Returns the raw setting, or None if unset.
            open_settings: Opens the listener settings screen.
        """
        self._component_name = component_name
        self._read = read_enabled_listeners
        self._open = open_settings

    @property
    def component_name(self) -> str:
        return self._component_name

    def is_enabled(self) -> bool:
        flat = self._read()
        if not flat:
            return False
        return self._component_name in flat.split(LISTENER_SEPARATOR)

    def open_settings(self) -> None:
        if self._open is None:
            logger.warning("No settings opener configured for %s", self._component_name)
            return
        logger.info("Opening notification listener settings")
        self._open()


class UnsupportedPlatformRegistry:
    """Registry for platforms without notification listener support."""

    def is_enabled(self) -> bool:
        logger.debug("Notification listener not supported on this platform")
        return False

    def open_settings(self) -> None:
        logger.info("Notification listener settings not supported on this platform")
