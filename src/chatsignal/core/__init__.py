"""
Core module - errors, event kinds, payload models and configuration.
"""

from __future__ import annotations

from .credential import AccessToken, StaticTokenCredential, TokenCredential
from .errors import (
    CapabilityError,
    ChatSignalError,
    ConfigError,
    PreconditionError,
)
from .events import (
    DOMAIN_EVENTS,
    LIFECYCLE_EVENTS,
    PAYLOAD_MODELS,
    ChatMessageReceivedEvent,
    ChatParticipant,
    ChatThreadProperties,
    ChatThreadPropertiesUpdatedEvent,
    CommunicationUser,
    ConnectionState,
    EventKind,
    ParticipantsAddedEvent,
    ParticipantsRemovedEvent,
    TransportEvent,
)
from .options import DEFAULT_GATEWAY_API_VERSION, ClientOptions, load_options

__all__ = [
    # Credential
    "AccessToken",
    "StaticTokenCredential",
    "TokenCredential",
    # Errors
    "CapabilityError",
    "ChatSignalError",
    "ConfigError",
    "PreconditionError",
    # Events
    "DOMAIN_EVENTS",
    "LIFECYCLE_EVENTS",
    "PAYLOAD_MODELS",
    "ChatMessageReceivedEvent",
    "ChatParticipant",
    "ChatThreadProperties",
    "ChatThreadPropertiesUpdatedEvent",
    "CommunicationUser",
    "ConnectionState",
    "EventKind",
    "ParticipantsAddedEvent",
    "ParticipantsRemovedEvent",
    "TransportEvent",
    # Options
    "DEFAULT_GATEWAY_API_VERSION",
    "ClientOptions",
    "load_options",
]
