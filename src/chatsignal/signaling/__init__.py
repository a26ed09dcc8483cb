"""
Signaling module - transports raising low-level chat events.

Provides:
- SignalingTransport: protocol every transport implements
- get_signaling_transport: default factory
- RedisSignalingTransport: Redis Pub/Sub backed transport
"""

from __future__ import annotations

from .redis_transport import RedisSignalingTransport
from .transport import SignalingTransport, TransportFactory, get_signaling_transport

__all__ = [
    "RedisSignalingTransport",
    "SignalingTransport",
    "TransportFactory",
    "get_signaling_transport",
]
