"""
Custom exceptions for the chatsignal realtime client.
"""

from __future__ import annotations

from typing import Any, Optional


class ChatSignalError(Exception):
    """Base exception for all chatsignal errors."""
    pass


class CapabilityError(ChatSignalError):
    """Raised when realtime notifications are used without a signaling transport."""

    def __init__(self, message: str = "Realtime notifications are not supported in this environment"):
        super().__init__(message)


class PreconditionError(ChatSignalError):
    """Raised when subscribing to a chat event before notifications are started."""

    def __init__(self, event: Optional[Any] = None):
        self.event = event
        super().__init__(
            "You must call start_realtime_notifications before you can subscribe to events"
            f"{f' (event: {event})' if event else ''}"
        )


class ConfigError(ChatSignalError):
    """Raised when client configuration or an event name is invalid."""
    pass
