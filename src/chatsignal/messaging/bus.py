"""
In-process event bus for public chat events.

Maps each EventKind to an ordered list of listeners. Delivery is synchronous
and isolated: a failing listener is logged and the remaining listeners
still run. Coroutine listeners are scheduled on the running loop and bounded
by a timeout so one slow listener cannot hold back the others.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional

from ..core.events import EventKind

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventBus:
    """
    Registry of listeners per event kind.

    Usage:
        bus = EventBus()
        bus.add(EventKind.PARTICIPANTS_ADDED, handle_added)
        bus.publish(EventKind.PARTICIPANTS_ADDED, payload)
        bus.remove(EventKind.PARTICIPANTS_ADDED, handle_added)
    """

    def __init__(self, listener_timeout: Optional[float] = 30.0):
        """
        Initialize bus.

        Args:
            listener_timeout: Seconds a coroutine listener may run before it is cancelled
                (None disables the bound)
        """
        self.listener_timeout = listener_timeout
        self._listeners: Dict[EventKind, list[Listener]] = {}
        self._pending: set[asyncio.Task] = set()

    def add(self, kind: EventKind, listener: Listener) -> None:
        """Register listener under kind. The same listener may be added more than once."""
        kind = EventKind.parse(kind)
        if not callable(listener):
            raise TypeError(f"Listener for {kind} must be callable, got {type(listener).__name__}")
        self._listeners.setdefault(kind, []).append(listener)
        logger.debug(f"Added listener for {kind}: {len(self._listeners[kind])} registered")

    def remove(self, kind: EventKind, listener: Listener) -> bool:
        """
        Remove the first registration of listener under kind.

        Returns:
            True if a registration was removed, False if none matched
        """
        kind = EventKind.parse(kind)
        listeners = self._listeners.get(kind)
        if not listeners:
            return False

        for index, registered in enumerate(listeners):
            if registered is listener:
                del listeners[index]
                if not listeners:
                    del self._listeners[kind]
                logger.debug(f"Removed listener for {kind}")
                return True
        return False

    def clear(self) -> None:
        """Remove every listener of every kind."""
        count = sum(len(listeners) for listeners in self._listeners.values())
        self._listeners.clear()
        logger.debug(f"Cleared {count} listeners")

    def listeners(self, kind: EventKind) -> list[Listener]:
        """Snapshot of listeners registered under kind."""
        return list(self._listeners.get(EventKind.parse(kind), []))

    def publish(self, kind: EventKind, *args: Any) -> int:
        """
        Deliver an event to every listener registered under kind.

        Listeners are taken from a snapshot, so a listener may add or remove
        registrations (including itself) while it runs.

        Args:
            kind: Event kind
            *args: Payload (empty for lifecycle signals)

        Returns:
            Number of listeners invoked
        """
        listeners = self._listeners.get(kind)
        if not listeners:
            return 0

        snapshot = list(listeners)
        for listener in snapshot:
            try:
                result = listener(*args)
            except Exception as e:
                logger.error(f"Error in listener for {kind}: {e}", exc_info=True)
                continue

            if inspect.isawaitable(result):
                self._schedule(kind, result)

        return len(snapshot)

    async def drain(self) -> None:
        """Wait for scheduled coroutine listeners to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of coroutine listeners still running."""
        return len(self._pending)

    def _schedule(self, kind: EventKind, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"Async listener for {kind} dropped: no running event loop")
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        if self.listener_timeout is not None:
            awaitable = asyncio.wait_for(awaitable, timeout=self.listener_timeout)
        task = loop.create_task(awaitable)
        self._pending.add(task)
        task.add_done_callback(lambda t: self._on_listener_done(kind, t))

    def _on_listener_done(self, kind: EventKind, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if isinstance(error, asyncio.TimeoutError):
            logger.error(f"Async listener for {kind} timed out after {self.listener_timeout}s")
        elif error is not None:
            logger.error(f"Error in async listener for {kind}: {error}", exc_info=error)
