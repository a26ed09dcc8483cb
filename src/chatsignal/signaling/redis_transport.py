"""
Redis Pub/Sub signaling transport.

The notification gateway relays chat events into Redis channels named
"{channel_prefix}.{eventName}" as JSON documents:

    chat.chatMessageReceived
    chat.chatThreadPropertiesUpdated
    chat.participantsAdded
    chat.participantsRemoved

Incoming documents are validated against the payload models and raised to
registered handlers. Connection changes are raised as connectionChanged.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import ConnectionError as RedisConnectionError

from ..core.credential import TokenCredential
from ..core.errors import ConfigError
from ..core.events import PAYLOAD_MODELS, ConnectionState, EventKind, TransportEvent
from ..core.options import ClientOptions

logger = logging.getLogger(__name__)

_DOMAIN_TRANSPORT_EVENTS = [
    TransportEvent.CHAT_MESSAGE_RECEIVED,
    TransportEvent.CHAT_THREAD_PROPERTIES_UPDATED,
    TransportEvent.PARTICIPANTS_ADDED,
    TransportEvent.PARTICIPANTS_REMOVED,
]


class RedisSignalingTransport:
    """
    Signaling transport backed by Redis Pub/Sub.

    Usage:
        transport = RedisSignalingTransport(credential, ClientOptions(redis_url="redis://redis:6379"))
        transport.on("participantsAdded", handle_added)
        await transport.start()
        ...
        await transport.stop()
    """

    def __init__(
        self,
        credential: TokenCredential,
        options: ClientOptions,
        redis: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize transport.

        Args:
            credential: Token credential; the token is sent as the Redis password
                when options.extra["token_auth"] is true
            options: Client options (redis_url and channel_prefix are used)
            redis: Pre-built Redis connection (optional, mainly for tests)
        """
        if redis is None and not options.redis_url:
            raise ConfigError("redis_url is required for RedisSignalingTransport")

        self.credential = credential
        self.options = options
        self._redis = redis
        self._owns_redis = redis is None
        self._handlers: Dict[str, list[Callable]] = {}
        self._pubsub = None
        self._listener_task: Optional[asyncio.Task] = None
        self._running = False
        self._connection_lost = False
        # Seconds to wait before polling again after a listener error
        self.reconnect_delay = float(options.extra.get("reconnect_delay", 1.0))

    def channel_for(self, event: TransportEvent) -> str:
        return f"{self.options.channel_prefix}.{event.value}"

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        """Register handler for a transport event."""
        try:
            event = TransportEvent(event)
        except ValueError:
            raise ConfigError(f"Unknown transport event: {event}")
        self._handlers.setdefault(event.value, []).append(handler)
        logger.debug(f"Registered transport handler for {event}")

    async def start(self) -> None:
        """Connect to Redis and start listening for chat events."""
        if self._running:
            logger.warning("Signaling transport already running")
            return

        self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.CONNECTING)

        try:
            if self._redis is None:
                self._redis = await self._connect()

            self._pubsub = self._redis.pubsub()
            channels = [self.channel_for(event) for event in _DOMAIN_TRANSPORT_EVENTS]
            await self._pubsub.subscribe(*channels)
        except Exception:
            await self._close_connection()
            raise
        logger.info(f"Subscribed to Redis channels: {channels}")

        self._running = True
        self._connection_lost = False
        self._listener_task = asyncio.create_task(self._listen())
        self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.CONNECTED)

    async def stop(self) -> None:
        """Stop listening, close the connection and release all handlers."""
        self._running = False

        try:
            if self._listener_task:
                self._listener_task.cancel()
                try:
                    await self._listener_task
                except asyncio.CancelledError:
                    pass
                self._listener_task = None

            await self._close_connection()
            self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.DISCONNECTED)
        finally:
            self._handlers.clear()
        logger.info("Signaling transport stopped")

    async def _close_connection(self) -> None:
        pubsub, self._pubsub = self._pubsub, None
        redis = self._redis
        if self._owns_redis:
            self._redis = None

        try:
            if pubsub is not None:
                await pubsub.aclose()
        finally:
            if redis is not None and self._owns_redis:
                await redis.aclose()

    async def _connect(self) -> aioredis.Redis:
        password = None
        if self.options.extra.get("token_auth"):
            access_token = await self.credential.get_token()
            password = access_token.token

        logger.info(f"Connecting signaling transport to Redis: {self.options.redis_url}")
        return aioredis.from_url(
            self.options.redis_url,
            password=password,
            encoding="utf-8",
            decode_responses=True,
        )

    async def _listen(self) -> None:
        """Listen for messages and dispatch to handlers"""
        logger.info("Signaling listener started")
        try:
            while self._running:
                try:
                    message = await self._pubsub.get_message(
                        ignore_subscribe_messages=True,
                        timeout=1.0
                    )

                    if self._connection_lost:
                        self._connection_lost = False
                        logger.info("Signaling connection restored")
                        self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.CONNECTED)

                    if message and message["type"] == "message":
                        self.handle_message(message["channel"], message["data"])

                except asyncio.CancelledError:
                    raise
                except (RedisConnectionError, OSError) as e:
                    if not self._connection_lost:
                        self._connection_lost = True
                        logger.error(f"Signaling connection lost: {e}", exc_info=True)
                        self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.DISCONNECTED)
                    self._emit(TransportEvent.CONNECTION_CHANGED.value, ConnectionState.RECONNECTING)
                    await asyncio.sleep(self.reconnect_delay)
                except Exception as e:
                    logger.error(f"Signaling listener error: {e}", exc_info=True)
                    await asyncio.sleep(self.reconnect_delay)

        except asyncio.CancelledError:
            logger.info("Signaling listener cancelled")
            raise

    def handle_message(self, channel: str, raw_data: Any) -> None:
        """Decode a channel message and raise it as a transport event."""
        prefix = f"{self.options.channel_prefix}."
        if not channel.startswith(prefix):
            logger.debug(f"Ignoring message from foreign channel {channel}")
            return

        try:
            event = TransportEvent(channel[len(prefix):])
            model = PAYLOAD_MODELS[EventKind(event.value)]
        except (ValueError, KeyError):
            logger.warning(f"Unknown event channel: {channel}")
            return

        try:
            data = json.loads(raw_data) if isinstance(raw_data, (str, bytes)) else raw_data
            payload = model.model_validate(data)
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON in message from {channel}: {str(raw_data)[:100]}")
            return
        except ValidationError as e:
            logger.warning(f"Invalid {event} payload from {channel}: {e}")
            return

        self._emit(event.value, payload)

    def _emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Error in transport handler for {event}: {e}", exc_info=True)
