"""Base exceptions for banknotify."""


class BankNotifyError(Exception):
    """Base exception for all banknotify errors."""

    pass


class PermissionDeniedError(BankNotifyError):
    """Notification access permission not granted."""

    pass


class UnknownMethodError(BankNotifyError):
    """Plugin call for a method the plugin does not expose."""

    pass


class ConfigError(BankNotifyError):
    """Configuration could not be read."""

    pass
