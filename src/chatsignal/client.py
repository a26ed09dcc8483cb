"""
ChatNotificationClient - realtime chat notifications for applications.

Usage:
    from chatsignal import ChatNotificationClient, EventKind, StaticTokenCredential

    client = ChatNotificationClient(
        "https://contoso.communication.example",
        StaticTokenCredential(token),
        {"redis_url": "redis://redis:6379"},
    )

    client.on(EventKind.REALTIME_NOTIFICATION_CONNECTED, lambda: print("connected"))
    await client.start_realtime_notifications()

    @client.listen("chatMessageReceived")
    def handle_message(event):
        print(event.message)

    ...
    await client.stop_realtime_notifications()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from .core.credential import TokenCredential
from .core.events import EventKind
from .core.options import ClientOptions
from .messaging.bus import EventBus, Listener
from .messaging.router import EventRouter
from .runtime.lifecycle import NotificationLifecycle
from .signaling.transport import TransportFactory, get_signaling_transport

logger = logging.getLogger(__name__)

EventName = Union[EventKind, str]


class ChatNotificationClient:
    """
    Client session for realtime chat notifications.

    Owns one signaling transport (bound at construction for the whole life
    of the client), one lifecycle controller and one event bus.
    """

    def __init__(
        self,
        endpoint: str,
        credential: TokenCredential,
        options: Optional[Union[ClientOptions, dict[str, Any]]] = None,
        *,
        transport_factory: TransportFactory = get_signaling_transport,
    ):
        """
        Initialize client.

        Args:
            endpoint: Communication resource endpoint
            credential: Token credential passed through to the transport
            options: ClientOptions or a dict accepted by ClientOptions.from_dict
            transport_factory: Builds the transport; returning None marks the
                environment as unsupported
        """
        if isinstance(options, dict):
            options = ClientOptions.from_dict(options)
        self._endpoint = endpoint
        self._credential = credential
        self._options = (options or ClientOptions()).with_endpoint(endpoint)

        self._bus = EventBus(listener_timeout=self._options.listener_timeout)
        self._router = EventRouter(self._bus)
        transport = transport_factory(self._credential, logger, self._options)
        self._lifecycle = NotificationLifecycle(transport, self._router, self._bus)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def realtime_supported(self) -> bool:
        """False when the transport factory returned no transport."""
        return self._lifecycle.supported

    @property
    def is_started(self) -> bool:
        return self._lifecycle.is_active

    async def start_realtime_notifications(self) -> None:
        """
        Start receiving realtime notifications.

        Call this before subscribing to chat events. Calling it again while
        started does nothing.

        Raises:
            CapabilityError: If realtime notifications are unsupported
        """
        await self._lifecycle.start()

    async def stop_realtime_notifications(self) -> None:
        """
        Stop receiving realtime notifications.

        Every listener of every event is removed; subscribe again after the
        next start.

        Raises:
            CapabilityError: If realtime notifications are unsupported
        """
        await self._lifecycle.stop()

    def on(self, event: EventName, listener: Listener) -> Listener:
        """
        Subscribe listener to an event.

        Chat events (chatMessageReceived, chatThreadPropertiesUpdated,
        participantsAdded, participantsRemoved) receive their payload;
        realTimeNotificationConnected/Disconnected listeners are called
        without arguments and may be registered before start.

        Returns:
            The listener, unchanged

        Raises:
            CapabilityError: If realtime notifications are unsupported
            PreconditionError: If subscribing to a chat event before start
            ConfigError: If event is not a known event name
        """
        self._lifecycle.require_capability()
        kind = EventKind.parse(event)
        self._lifecycle.require_active(kind)
        self._bus.add(kind, listener)
        return listener

    def off(self, event: EventName, listener: Listener) -> None:
        """
        Unsubscribe listener from an event.

        Removing a listener that is not registered does nothing.

        Raises:
            CapabilityError: If realtime notifications are unsupported
            ConfigError: If event is not a known event name
        """
        self._lifecycle.require_capability()
        self._bus.remove(EventKind.parse(event), listener)

    def listen(self, event: EventName) -> Callable[[Listener], Listener]:
        """
        Decorator form of on().

        Usage:
            @client.listen("participantsAdded")
            def handle_added(event):
                pass
        """
        def decorator(func: Listener) -> Listener:
            return self.on(event, func)
        return decorator

    async def close(self) -> None:
        """Stop notifications if they are running."""
        if self.realtime_supported and self.is_started:
            await self.stop_realtime_notifications()
        await self._bus.drain()

    async def __aenter__(self) -> "ChatNotificationClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
