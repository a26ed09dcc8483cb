"""
chatsignal - realtime chat notifications over a signaling transport.

Keeps a persistent signaling connection to the messaging gateway and fans out
typed events to application listeners:
- chatMessageReceived, chatThreadPropertiesUpdated
- participantsAdded, participantsRemoved
- realTimeNotificationConnected, realTimeNotificationDisconnected

Usage:
    from chatsignal import ChatNotificationClient, StaticTokenCredential

    client = ChatNotificationClient(endpoint, StaticTokenCredential(token), {"redis_url": "redis://redis:6379"})
    await client.start_realtime_notifications()
    client.on("chatMessageReceived", lambda event: print(event.message))
"""

from __future__ import annotations

from .client import ChatNotificationClient
from .core import (
    DOMAIN_EVENTS,
    LIFECYCLE_EVENTS,
    AccessToken,
    CapabilityError,
    ChatMessageReceivedEvent,
    ChatParticipant,
    ChatSignalError,
    ChatThreadPropertiesUpdatedEvent,
    ClientOptions,
    CommunicationUser,
    ConfigError,
    ConnectionState,
    EventKind,
    ParticipantsAddedEvent,
    ParticipantsRemovedEvent,
    PreconditionError,
    StaticTokenCredential,
    TokenCredential,
    TransportEvent,
    load_options,
)
from .messaging import EventBus, EventRouter
from .runtime import LifecycleState, NotificationLifecycle
from .signaling import (
    RedisSignalingTransport,
    SignalingTransport,
    TransportFactory,
    get_signaling_transport,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "ChatNotificationClient",
    # Core
    "DOMAIN_EVENTS",
    "LIFECYCLE_EVENTS",
    "AccessToken",
    "CapabilityError",
    "ChatMessageReceivedEvent",
    "ChatParticipant",
    "ChatSignalError",
    "ChatThreadPropertiesUpdatedEvent",
    "ClientOptions",
    "CommunicationUser",
    "ConfigError",
    "ConnectionState",
    "EventKind",
    "ParticipantsAddedEvent",
    "ParticipantsRemovedEvent",
    "PreconditionError",
    "StaticTokenCredential",
    "TokenCredential",
    "TransportEvent",
    "load_options",
    # Messaging
    "EventBus",
    "EventRouter",
    # Runtime
    "LifecycleState",
    "NotificationLifecycle",
    # Signaling
    "RedisSignalingTransport",
    "SignalingTransport",
    "TransportFactory",
    "get_signaling_transport",
]
