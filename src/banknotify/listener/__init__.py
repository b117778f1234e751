"""Listener bridge, sink slot, and permission registries."""

from .bridge import ListenerBridge
from .mailbox import SinkMailbox
from .permission import (
    PermissionRegistry,
    SettingsPermissionRegistry,
    UnsupportedPlatformRegistry,
)
from .sink import AsyncioSink, CallbackSink, Sink

__all__ = [
    "ListenerBridge",
    "SinkMailbox",
    "PermissionRegistry",
    "SettingsPermissionRegistry",
    "UnsupportedPlatformRegistry",
    "Sink",
    "CallbackSink",
    "AsyncioSink",
]
