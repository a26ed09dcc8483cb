"""End-to-end behaviour of ChatNotificationClient over a stub transport."""

from __future__ import annotations

import pytest

from chatsignal import (
    CapabilityError,
    ChatNotificationClient,
    ConfigError,
    EventKind,
    PreconditionError,
)
from chatsignal.core.options import DEFAULT_GATEWAY_API_VERSION


def test_factory_receives_endpoint_and_default_gateway_version(client, credential, factory_calls):
    assert len(factory_calls) == 1
    cred, client_logger, options = factory_calls[0]
    assert cred is credential
    assert client_logger.name == "chatsignal.client"
    assert options.resource_endpoint == "https://chat.example"
    assert options.gateway_api_version == DEFAULT_GATEWAY_API_VERSION == "2024-03-07"


def test_gateway_version_from_options(transport, credential):
    seen = []

    def factory(cred, client_logger, options):
        seen.append(options)
        return transport

    ChatNotificationClient(
        "https://chat.example",
        credential,
        {"gatewayApiVersion": "2025-01-01", "pollingHint": 5},
        transport_factory=factory,
    )
    assert seen[0].gateway_api_version == "2025-01-01"
    assert seen[0].extra == {"pollingHint": 5}


async def test_participants_added_end_to_end(client, transport):
    await client.start_realtime_notifications()

    received = []
    client.on("participantsAdded", received.append)

    payload = {"participantIds": ["u1"]}
    transport.emit("participantsAdded", payload)
    assert received == [payload]
    assert received[0] is payload

    await client.stop_realtime_notifications()
    transport.emit("participantsAdded", payload)
    assert received == [payload]


async def test_start_twice_sets_up_once(client, transport):
    await client.start_realtime_notifications()
    await client.start_realtime_notifications()

    assert transport.start_calls == 1
    assert len(transport.on_calls) == 5
    assert client.is_started


def test_domain_subscription_before_start_fails(client):
    with pytest.raises(PreconditionError) as exc_info:
        client.on(EventKind.CHAT_MESSAGE_RECEIVED, lambda event: None)
    assert exc_info.value.event is EventKind.CHAT_MESSAGE_RECEIVED

    for name in ("chatThreadPropertiesUpdated", "participantsAdded", "participantsRemoved"):
        with pytest.raises(PreconditionError):
            client.on(name, lambda event: None)


def test_lifecycle_subscription_before_start_succeeds(client):
    listener = client.on("realTimeNotificationConnected", lambda: None)
    assert callable(listener)
    client.on(EventKind.REALTIME_NOTIFICATION_DISCONNECTED, lambda: None)


async def test_connected_signal_observed_from_start(client, transport):
    # A transport reporting Connected while starting
    async def start():
        transport.start_calls += 1
        transport.emit("connectionChanged", "Connected")

    transport.start = start
    connected = []
    client.on("realTimeNotificationConnected", lambda: connected.append(True))

    await client.start_realtime_notifications()
    assert connected == [True]


async def test_stop_removes_listeners_of_every_kind(client, transport):
    await client.start_realtime_notifications()
    calls = []
    client.on("realTimeNotificationDisconnected", lambda: calls.append("disconnected"))
    client.on("chatMessageReceived", lambda e: calls.append("message"))
    client.on("participantsRemoved", lambda e: calls.append("removed"))

    await client.stop_realtime_notifications()
    assert not client.is_started

    for kind in EventKind:
        assert client._bus.publish(kind, {}) == 0
    assert calls == []


async def test_resubscribe_after_restart(client, transport):
    await client.start_realtime_notifications()
    first = []
    client.on("chatMessageReceived", first.append)
    await client.stop_realtime_notifications()

    await client.start_realtime_notifications()
    second = []
    client.on("chatMessageReceived", second.append)
    transport.emit("chatMessageReceived", {"id": "m1"})

    assert first == []
    assert second == [{"id": "m1"}]
    assert transport.start_calls == 2
    assert transport.stop_calls == 1


async def test_off_removes_listener(client, transport):
    await client.start_realtime_notifications()
    received = []
    listener = received.append
    client.on("chatThreadPropertiesUpdated", listener)
    client.off("chatThreadPropertiesUpdated", listener)

    transport.emit("chatThreadPropertiesUpdated", {"threadId": "t1"})
    assert received == []


async def test_off_unknown_listener_is_noop(client):
    await client.start_realtime_notifications()
    client.off("participantsAdded", lambda e: None)
    client.off("realTimeNotificationConnected", lambda: None)


async def test_off_lifecycle_listener(client, transport):
    calls = []

    def on_connected():
        calls.append(True)

    client.on("realTimeNotificationConnected", on_connected)
    await client.start_realtime_notifications()
    client.off("realTimeNotificationConnected", on_connected)
    transport.emit("connectionChanged", "Connected")
    assert calls == []


async def test_listen_decorator(client, transport):
    await client.start_realtime_notifications()

    received = []

    @client.listen(EventKind.PARTICIPANTS_REMOVED)
    def handle_removed(event):
        received.append(event)

    transport.emit("participantsRemoved", {"participantIds": ["u2"]})
    assert received == [{"participantIds": ["u2"]}]
    assert callable(handle_removed)


async def test_unknown_event_name(client):
    await client.start_realtime_notifications()
    with pytest.raises(ConfigError):
        client.on("typingIndicatorReceived", lambda e: None)
    with pytest.raises(ConfigError):
        client.off("typingIndicatorReceived", lambda e: None)


async def test_capability_absent(incapable_client):
    assert not incapable_client.realtime_supported

    with pytest.raises(CapabilityError):
        incapable_client.on("realTimeNotificationConnected", lambda: None)
    with pytest.raises(CapabilityError):
        incapable_client.on("chatMessageReceived", lambda e: None)
    with pytest.raises(CapabilityError):
        incapable_client.off("chatMessageReceived", lambda e: None)
    with pytest.raises(CapabilityError):
        await incapable_client.start_realtime_notifications()
    with pytest.raises(CapabilityError):
        await incapable_client.stop_realtime_notifications()

    assert not incapable_client.is_started


async def test_async_context_manager_stops(client, transport):
    async with client:
        await client.start_realtime_notifications()
    assert transport.stop_calls == 1
    assert not client.is_started


async def test_close_without_start_does_not_stop(client, transport):
    await client.close()
    assert transport.stop_calls == 0
