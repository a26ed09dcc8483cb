"""
Messaging module - in-process fan-out of chat events.

Provides:
- EventBus: listener registry per event kind with isolated delivery
- EventRouter: bridges signaling transport events onto the bus
"""

from __future__ import annotations

from .bus import EventBus, Listener
from .router import EventRouter

__all__ = [
    "EventBus",
    "EventRouter",
    "Listener",
]
