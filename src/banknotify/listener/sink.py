"""Event sinks that receive classified transaction events."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Protocol, Union

logger = logging.getLogger(__name__)

# Handler type: async or sync function taking (event_name, payload)
EventHandler = Union[
    Callable[[str, dict[str, Any]], Awaitable[None]],
    Callable[[str, dict[str, Any]], None],
]


class Sink(Protocol):
    """Protocol for consumers of transaction events."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Deliver an event. Must not block the caller."""
        ...


class CallbackSink:
    """Sink that calls a function synchronously on the delivering thread."""

    def __init__(self, callback: Callable[[str, dict[str, Any]], None]):
        self._callback = callback

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self._callback(event_name, payload)


class AsyncioSink:
    """Sink that hands events to an asyncio event loop.

    Safe to call from any thread. Events are scheduled with
    call_soon_threadsafe and never awaited by the caller. If the loop is
    closed the event is lost.

    Usage:
        sink = AsyncioSink(asyncio.get_running_loop(), on_event)
        bridge.start_listening(sink)
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, handler: EventHandler):
        """Initialize AsyncioSink.

        Args:
            loop: Loop the handler runs on.
            handler: Async or sync function(event_name, payload).
        """
        self._loop = loop
        self._handler = handler
        # The loop only holds weak references to tasks
        self._tasks: set[asyncio.Task] = set()

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        try:
            self._loop.call_soon_threadsafe(self._deliver, event_name, payload)
        except RuntimeError:
            # Loop closed
            logger.debug("Event loop closed, dropping %s event", event_name)

    def _deliver(self, event_name: str, payload: dict[str, Any]) -> None:
        """Run the handler on the loop thread."""
        try:
            if inspect.iscoroutinefunction(self._handler):
                task = self._loop.create_task(self._run_async(event_name, payload))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
            else:
                self._handler(event_name, payload)
        except Exception as e:
            logger.error("Event handler error for %s: %s", event_name, e)

    async def _run_async(self, event_name: str, payload: dict[str, Any]) -> None:
        try:
            await self._handler(event_name, payload)
        except Exception as e:
            logger.error("Event handler error for %s: %s", event_name, e)
