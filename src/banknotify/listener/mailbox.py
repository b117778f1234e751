"""Single-slot holder for the active event sink."""

import logging
from threading import Lock
from typing import Optional

from .sink import Sink

logger = logging.getLogger(__name__)


class SinkMailbox:
    """Thread-safe slot holding at most one sink.

    Shared between control calls (attach/detach) and the notification
    delivery path (current). Readers get a snapshot, never a torn value.
    """

    def __init__(self):
        self._sink: Optional[Sink] = None
        self._lock = Lock()

    def attach(self, sink: Sink) -> Optional[Sink]:
        """Set the active sink, replacing any previous one.

        Args:
            sink: Sink to receive events.

        Returns:
            The sink that was replaced, or None.
        """
        with self._lock:
            previous = self._sink
            self._sink = sink
        if previous is not None and previous is not sink:
            logger.debug("Replaced active sink")
        return previous

    def detach(self) -> None:
        """Clear the active sink."""
        with self._lock:
            self._sink = None

    def detach_if(self, sink: Sink) -> bool:
        """Clear the slot only if it still holds this sink.

        Returns:
            True if the sink was cleared, False if another sink was active.
        """
        with self._lock:
            if self._sink is not sink:
                return False
            self._sink = None
        return True

    def current(self) -> Optional[Sink]:
        """Snapshot of the active sink, or None."""
        with self._lock:
            return self._sink
