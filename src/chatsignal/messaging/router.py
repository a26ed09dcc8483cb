"""
Event router: bridges signaling transport events to public client events.

Transport events              Public events
------------------------      ------------------------------------
connectionChanged(Connected)  realTimeNotificationConnected
connectionChanged(Disconnected) realTimeNotificationDisconnected
connectionChanged(other)      (dropped)
chatMessageReceived           chatMessageReceived
chatThreadPropertiesUpdated   chatThreadPropertiesUpdated
participantsAdded             participantsAdded
participantsRemoved           participantsRemoved
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..core.events import ConnectionState, EventKind, TransportEvent
from .bus import EventBus

logger = logging.getLogger(__name__)

_PASSTHROUGH = {
    TransportEvent.CHAT_MESSAGE_RECEIVED: EventKind.CHAT_MESSAGE_RECEIVED,
    TransportEvent.CHAT_THREAD_PROPERTIES_UPDATED: EventKind.CHAT_THREAD_PROPERTIES_UPDATED,
    TransportEvent.PARTICIPANTS_ADDED: EventKind.PARTICIPANTS_ADDED,
    TransportEvent.PARTICIPANTS_REMOVED: EventKind.PARTICIPANTS_REMOVED,
}

_CONNECTION_SIGNALS = {
    ConnectionState.CONNECTED: EventKind.REALTIME_NOTIFICATION_CONNECTED,
    ConnectionState.DISCONNECTED: EventKind.REALTIME_NOTIFICATION_DISCONNECTED,
}


class EventRouter:
    """Republishes transport events on an EventBus."""

    def __init__(self, bus: EventBus):
        self.bus = bus
        self._generation = 0

    def bridge(self, transport: Any) -> None:
        """
        Register one handler per transport event name.

        Handlers are never removed individually; stopping the transport
        releases them. Handlers installed by an earlier bridge() become
        inert, so a transport that kept them still delivers each event once.

        Args:
            transport: Signaling transport exposing on(event, handler)
        """
        self._generation += 1
        generation = self._generation
        transport.on(TransportEvent.CONNECTION_CHANGED.value, self._connection_handler(generation))
        for event, kind in _PASSTHROUGH.items():
            transport.on(event.value, self._passthrough(kind, generation))
        logger.info("Bridged signaling transport events")

    def translate_connection_state(self, state: Any) -> EventKind | None:
        """Map a reported connection state to a lifecycle signal, or None if ignored."""
        try:
            state = ConnectionState(state)
        except ValueError:
            return None
        return _CONNECTION_SIGNALS.get(state)

    def _connection_handler(self, generation: int) -> Callable[[Any], None]:
        def handler(state: Any) -> None:
            if generation != self._generation:
                return
            kind = self.translate_connection_state(state)
            if kind is None:
                logger.debug(f"Ignoring connection state: {state}")
                return
            logger.info(f"Realtime notification connection state: {state}")
            self.bus.publish(kind)
        handler.__name__ = "bridge_connectionChanged"
        return handler

    def _passthrough(self, kind: EventKind, generation: int) -> Callable[[Any], None]:
        def handler(payload: Any) -> None:
            if generation != self._generation:
                return
            self.bus.publish(kind, payload)
        handler.__name__ = f"bridge_{kind.value}"
        return handler
