"""
Event kinds and payload models for realtime chat notifications.

Two taxonomies live here:
- TransportEvent: low-level names raised by a signaling transport
- EventKind: public names applications subscribe to via ChatNotificationClient.on()

Payload models describe the shapes delivered for the four chat events.
They are frozen: listeners receive them read-only.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError


class EventKind(str, Enum):
    """Public event kinds exposed by the client."""

    CHAT_MESSAGE_RECEIVED = "chatMessageReceived"
    CHAT_THREAD_PROPERTIES_UPDATED = "chatThreadPropertiesUpdated"
    PARTICIPANTS_ADDED = "participantsAdded"
    PARTICIPANTS_REMOVED = "participantsRemoved"
    REALTIME_NOTIFICATION_CONNECTED = "realTimeNotificationConnected"
    REALTIME_NOTIFICATION_DISCONNECTED = "realTimeNotificationDisconnected"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> EventKind:
        """
        Resolve an event kind from a member or its string value.

        Raises:
            ConfigError: If value is not one of the known event kinds
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise ConfigError(f"Unknown event '{value}'. Expected one of: {known}")

    @property
    def is_lifecycle(self) -> bool:
        """Connected/disconnected signals carry no payload and skip the start guard."""
        return self in LIFECYCLE_EVENTS

    @property
    def is_domain(self) -> bool:
        return not self.is_lifecycle


LIFECYCLE_EVENTS = frozenset({
    EventKind.REALTIME_NOTIFICATION_CONNECTED,
    EventKind.REALTIME_NOTIFICATION_DISCONNECTED,
})

DOMAIN_EVENTS = frozenset(kind for kind in EventKind if kind not in LIFECYCLE_EVENTS)


class TransportEvent(str, Enum):
    """Low-level event names raised by a signaling transport."""

    CONNECTION_CHANGED = "connectionChanged"
    CHAT_MESSAGE_RECEIVED = "chatMessageReceived"
    CHAT_THREAD_PROPERTIES_UPDATED = "chatThreadPropertiesUpdated"
    PARTICIPANTS_ADDED = "participantsAdded"
    PARTICIPANTS_REMOVED = "participantsRemoved"

    def __str__(self) -> str:
        return self.value


class ConnectionState(str, Enum):
    """Connection state reported by the transport with connectionChanged."""

    UNKNOWN = "Unknown"
    CONNECTING = "Connecting"
    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"
    RECONNECTING = "Reconnecting"

    def __str__(self) -> str:
        return self.value


# === Payload models ===

class _EventModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class CommunicationUser(_EventModel):
    """Identifier of a communication user."""
    communication_user_id: str = Field(alias="communicationUserId")


class ChatParticipant(_EventModel):
    """A member of a chat thread."""
    id: CommunicationUser
    display_name: Optional[str] = Field(default=None, alias="displayName")
    share_history_time: Optional[datetime] = Field(default=None, alias="shareHistoryTime")
    metadata: dict[str, str] = Field(default_factory=dict)


class ChatThreadProperties(_EventModel):
    topic: Optional[str] = None
    metadata: dict[str, str] = Field(default_factory=dict)


class ChatMessageReceivedEvent(_EventModel):
    """
    A chat message arrived in a thread.

    The initial sender receives this event as well.
    """
    thread_id: str = Field(alias="threadId")
    sender: CommunicationUser
    sender_display_name: Optional[str] = Field(default=None, alias="senderDisplayName")
    recipient: Optional[CommunicationUser] = None
    id: str
    created_on: datetime = Field(alias="createdOn")
    version: str
    type: str = "Text"
    message: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)


class ChatThreadPropertiesUpdatedEvent(_EventModel):
    """Topic or metadata of a thread changed."""
    thread_id: str = Field(alias="threadId")
    version: str
    properties: ChatThreadProperties
    updated_on: datetime = Field(alias="updatedOn")
    updated_by: Optional[ChatParticipant] = Field(default=None, alias="updatedBy")


class ParticipantsAddedEvent(_EventModel):
    """Participants joined a thread."""
    thread_id: str = Field(alias="threadId")
    version: str
    added_on: datetime = Field(alias="addedOn")
    participants_added: list[ChatParticipant] = Field(default_factory=list, alias="participantsAdded")
    added_by: Optional[ChatParticipant] = Field(default=None, alias="addedBy")


class ParticipantsRemovedEvent(_EventModel):
    """Participants left or were removed from a thread."""
    thread_id: str = Field(alias="threadId")
    version: str
    removed_on: datetime = Field(alias="removedOn")
    participants_removed: list[ChatParticipant] = Field(default_factory=list, alias="participantsRemoved")
    removed_by: Optional[ChatParticipant] = Field(default=None, alias="removedBy")


# Lifecycle signals have no payload
PAYLOAD_MODELS: dict[EventKind, Optional[Type[BaseModel]]] = {
    EventKind.CHAT_MESSAGE_RECEIVED: ChatMessageReceivedEvent,
    EventKind.CHAT_THREAD_PROPERTIES_UPDATED: ChatThreadPropertiesUpdatedEvent,
    EventKind.PARTICIPANTS_ADDED: ParticipantsAddedEvent,
    EventKind.PARTICIPANTS_REMOVED: ParticipantsRemovedEvent,
    EventKind.REALTIME_NOTIFICATION_CONNECTED: None,
    EventKind.REALTIME_NOTIFICATION_DISCONNECTED: None,
}
