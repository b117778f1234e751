"""banknotify - Capture bank transaction notifications."""

__version__ = "0.1.0"
