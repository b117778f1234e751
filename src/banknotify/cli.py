"""CLI entry point for banknotify."""

import json
from pathlib import Path
from typing import Any

import click

from banknotify import __version__
from banknotify.config import Config, load_config
from banknotify.errors import ConfigError
from banknotify.logging import setup_logging


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """banknotify - Capture bank transactions from notifications."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config)
    ctx.obj["logger"] = setup_logging(ctx.obj["config"])


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"banknotify version {__version__}")


@main.command()
@click.option("--package", "-p", "package_id", required=True, help="Source package id.")
@click.option("--title", "-t", default=None, help="Notification title.")
@click.option("--body", "-b", default=None, help="Notification text.")
@click.option("--timestamp", type=int, default=0, help="Post time in epoch millis.")
def classify(package_id: str, title: str | None, body: str | None, timestamp: int) -> None:
    """Classify a single notification."""
    from banknotify.notifications import RawNotification, classify as classify_notification

    raw = RawNotification(
        source_package_id=package_id,
        title=title,
        body=body,
        posted_at=timestamp,
    )
    event = classify_notification(raw)
    if event is None:
        click.echo("rejected")
        raise SystemExit(1)

    click.echo(json.dumps(event.to_payload(), ensure_ascii=False))


class _GrantedPermissions:
    """Permission registry that always grants access, for replays."""

    def is_enabled(self) -> bool:
        return True

    def open_settings(self) -> None:
        pass


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def replay(source) -> None:
    """Replay JSON-lines notifications through the listener.

    Each line holds {"packageName", "title", "body", "timestamp"}.
    Use - to read from stdin.
    """
    from banknotify.listener import CallbackSink, ListenerBridge
    from banknotify.notifications import RawNotification

    def on_event(event_name: str, payload: dict[str, Any]) -> None:
        click.echo(json.dumps(payload, ensure_ascii=False))

    bridge = ListenerBridge(_GrantedPermissions())
    bridge.start_listening(CallbackSink(on_event))

    received = 0
    emitted = 0
    for line_no, line in enumerate(source, start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
            package_id = data["packageName"]
            if not isinstance(package_id, str):
                raise TypeError("packageName must be a string")
            raw = RawNotification(
                source_package_id=package_id,
                title=data.get("title"),
                body=data.get("body"),
                posted_at=int(data.get("timestamp", 0)),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            click.echo(f"Line {line_no}: skipped malformed notification ({e})", err=True)
            continue

        received += 1
        if bridge.on_notification_posted(raw) is not None:
            emitted += 1

    bridge.stop_listening()
    click.echo(f"{received} received, {emitted} emitted", err=True)


def _read_enabled_listeners(path: Path) -> str | None:
    """Read the enabled-listener setting from a file."""
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def _build_registry(config: Config):
    """Create the permission registry described by the config."""
    from banknotify.listener import (
        SettingsPermissionRegistry,
        UnsupportedPlatformRegistry,
    )

    listener = config.listener
    if not listener.enabled_listeners_file:
        return UnsupportedPlatformRegistry()

    path = Path(listener.enabled_listeners_file).expanduser()

    def open_settings() -> None:
        click.echo(f"Grant access by adding {listener.component_name} to {path}")

    return SettingsPermissionRegistry(
        listener.component_name,
        read_enabled_listeners=lambda: _read_enabled_listeners(path),
        open_settings=open_settings,
    )


@main.group()
def permission() -> None:
    """Notification access permission commands."""
    pass


@permission.command("check")
@click.pass_context
def permission_check(ctx: click.Context) -> None:
    """Show whether notification access is granted."""
    from banknotify.listener import ListenerBridge

    bridge = ListenerBridge(_build_registry(ctx.obj["config"]))
    try:
        granted = bridge.check_permission()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Permission: {'granted' if granted else 'not granted'}")


@permission.command("request")
@click.pass_context
def permission_request(ctx: click.Context) -> None:
    """Request notification access."""
    from banknotify.listener import ListenerBridge

    bridge = ListenerBridge(_build_registry(ctx.obj["config"]))
    try:
        granted = bridge.request_permission()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if granted:
        click.echo("Permission: granted")
    else:
        click.echo("Permission: not granted yet, check again after granting access")
