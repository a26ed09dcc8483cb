"""
Signaling transport contract and default factory.

A transport keeps the persistent connection to the notification gateway and
raises the low-level events listed in TransportEvent. The client never talks
to the wire itself; it binds whatever the factory returns.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..core.credential import TokenCredential
from ..core.options import ClientOptions

logger = logging.getLogger(__name__)


@runtime_checkable
class SignalingTransport(Protocol):
    """Persistent connection raising connectionChanged and chat events."""

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        ...


TransportFactory = Callable[
    [TokenCredential, logging.Logger, ClientOptions],
    Optional[SignalingTransport],
]


def get_signaling_transport(
    credential: TokenCredential,
    client_logger: logging.Logger,
    options: ClientOptions,
) -> Optional[SignalingTransport]:
    """
    Create the transport for this environment.

    Args:
        credential: Token credential, passed through unchanged
        client_logger: Logger of the owning client
        options: Client options (resource endpoint, gateway API version, passthrough)

    Returns:
        A RedisSignalingTransport when redis_url is configured, otherwise None
        (realtime notifications unsupported)
    """
    if not options.redis_url:
        client_logger.warning("No signaling gateway configured (redis_url); realtime notifications unavailable")
        return None

    from .redis_transport import RedisSignalingTransport

    client_logger.info(
        f"Using Redis signaling transport for {options.resource_endpoint} "
        f"(gateway API {options.gateway_api_version})"
    )
    return RedisSignalingTransport(credential, options)
