"""Logging configuration for banknotify.

Notification titles and bodies carry financial data. Log calls that include
them name the offending args through the NOTIFICATION_TEXT_ARGS extra, and
handlers installed here mask those args unless the config opts in.
"""

import logging
from pathlib import Path
from typing import Iterable

from banknotify.config import Config

LOGGER_NAME = "banknotify"

# Log record attribute listing the indexes of args holding notification text
NOTIFICATION_TEXT_ARGS = "notification_text_args"
REDACTED = "<redacted>"

# Log format: 2025-01-27 10:30:45 [INFO] message
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers owned by setup_logging so they can be replaced
_OWNED = "_banknotify_owned"


class NotificationTextFilter(logging.Filter):
    """Masks notification text args in records that declare them."""

    def filter(self, record: logging.LogRecord) -> bool:
        indexes = getattr(record, NOTIFICATION_TEXT_ARGS, None)
        if indexes and isinstance(record.args, tuple):
            record.args = _mask_args(record.args, indexes)
        return True


def _mask_args(args: tuple, indexes: Iterable[int]) -> tuple:
    masked = list(args)
    for i in indexes:
        if 0 <= i < len(masked):
            masked[i] = REDACTED
    return tuple(masked)


def _build_handlers(config: Config) -> list[logging.Handler]:
    """Create the file and console handlers described by config."""
    handlers: list[logging.Handler] = []

    if config.log_file:
        log_path = Path(config.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    text_filter = None if config.log_notification_text else NotificationTextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        if text_filter is not None:
            handler.addFilter(text_filter)
        setattr(handler, _OWNED, True)

    return handlers


def setup_logging(config: Config) -> logging.Logger:
    """Configure the banknotify logger from config.

    Calling again replaces the handlers installed by a previous call, so a
    reloaded config takes effect without duplicating output.

    Args:
        config: Configuration object with log settings.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    _remove_owned_handlers(logger)

    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    for handler in _build_handlers(config):
        logger.addHandler(handler)

    # Package handlers only, root handlers stay untouched
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove installed handlers and restore defaults. Used for testing."""
    logger = logging.getLogger(LOGGER_NAME)
    _remove_owned_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED, False):
            logger.removeHandler(handler)
            handler.close()
