"""
Lifecycle controller for realtime notifications.

    IDLE --start()--> ACTIVE --stop()--> IDLE

start() and stop() are serialized by a single lock: a call issued while
another is in flight waits for it and then runs (last call wins).
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from ..core.errors import CapabilityError, PreconditionError
from ..core.events import EventKind
from ..messaging.bus import EventBus
from ..messaging.router import EventRouter

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class NotificationLifecycle:
    """
    Gates whether notifications are active for one client session.

    Args:
        transport: Bound signaling transport, or None when the environment
            has no realtime support
        router: Router installing the bridge handlers on start
        bus: Bus cleared on stop
    """

    def __init__(self, transport: Optional[Any], router: EventRouter, bus: EventBus):
        self.transport = transport
        self.router = router
        self.bus = bus
        self.state = LifecycleState.IDLE
        self._bridged = False
        self._lock = asyncio.Lock()

    @property
    def supported(self) -> bool:
        return self.transport is not None

    @property
    def is_active(self) -> bool:
        return self.state is LifecycleState.ACTIVE

    def require_capability(self) -> None:
        if self.transport is None:
            raise CapabilityError()

    def require_active(self, kind: EventKind) -> None:
        """Domain events may only be subscribed to while active."""
        if kind.is_domain and not self.is_active:
            raise PreconditionError(kind)

    async def start(self) -> None:
        """
        Start the transport and bridge its events.

        No-op if already active. Transport errors propagate and leave the
        state IDLE; a retry does not bridge twice.

        Raises:
            CapabilityError: If there is no transport
        """
        self.require_capability()

        async with self._lock:
            if self.is_active:
                logger.debug("Realtime notifications already started")
                return

            logger.info("Starting realtime notifications")
            # Bridge first so connection changes raised during start are not lost
            if not self._bridged:
                self.router.bridge(self.transport)
                self._bridged = True
            await self.transport.start()
            self.state = LifecycleState.ACTIVE
            logger.info("Realtime notifications started")

    async def stop(self) -> None:
        """
        Stop the transport and drop every registered listener.

        Runs in any state; callers must subscribe again after a restart.

        Raises:
            CapabilityError: If there is no transport
        """
        self.require_capability()

        async with self._lock:
            self.state = LifecycleState.IDLE
            logger.info("Stopping realtime notifications")
            try:
                await self.transport.stop()
            finally:
                # Rebridge on next start; handlers a failed stop left behind go inert
                self._bridged = False
                self.bus.clear()
            logger.info("Realtime notifications stopped")
