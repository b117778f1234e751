"""Configuration management for banknotify."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml


DEFAULT_COMPONENT_NAME = "app.banknotify/app.banknotify.NotificationListenerService"


@dataclass
class ListenerConfig:
    """Notification listener configuration."""

    component_name: str = DEFAULT_COMPONENT_NAME  # Identity matched against enabled listeners
    enabled_listeners_file: str | None = None  # File holding the OS enabled-listener setting


@dataclass
class Config:
    """banknotify configuration."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_notification_text: bool = False  # Log notification title/body unmasked
    listener: ListenerConfig = field(default_factory=ListenerConfig)


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return Path.home() / ".config" / "banknotify" / "config.yaml"


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
        if not content.strip():
            return None
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    return data


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file or defaults.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if data is None:
        return Config()

    # Wrong-typed sections and values fall back to defaults
    listener_data = data.get("listener")
    if not isinstance(listener_data, dict):
        listener_data = {}
    listener_config = ListenerConfig(
        component_name=_get_typed(
            listener_data, "component_name", ListenerConfig.component_name, str
        ),
        enabled_listeners_file=_get_typed(
            listener_data,
            "enabled_listeners_file",
            ListenerConfig.enabled_listeners_file,
            str,
        ),
    )

    return Config(
        log_level=_get_typed(data, "log_level", Config.log_level, str),
        log_file=_get_typed(data, "log_file", Config.log_file, str),
        log_notification_text=_get_typed(
            data, "log_notification_text", Config.log_notification_text, bool
        ),
        listener=listener_config,
    )


def _get_typed(data: dict[str, Any], key: str, default: Any, kind: type) -> Any:
    """Return data[key] if it has the expected type, else the default."""
    value = data.get(key)
    if isinstance(value, kind):
        return value
    return default
