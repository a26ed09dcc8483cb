"""EventBus registration, delivery order and listener isolation."""

from __future__ import annotations

import asyncio
import logging

import pytest

from chatsignal import ConfigError, EventBus, EventKind

MESSAGE = EventKind.CHAT_MESSAGE_RECEIVED


def test_publish_invokes_listeners_in_registration_order():
    bus = EventBus()
    calls = []
    bus.add(MESSAGE, lambda e: calls.append(("a", e)))
    bus.add(MESSAGE, lambda e: calls.append(("b", e)))

    assert bus.publish(MESSAGE, "payload") == 2
    assert calls == [("a", "payload"), ("b", "payload")]


def test_publish_only_reaches_matching_kind():
    bus = EventBus()
    calls = []
    bus.add(EventKind.PARTICIPANTS_ADDED, calls.append)

    assert bus.publish(MESSAGE, "payload") == 0
    assert calls == []


def test_remove_first_identical_registration():
    bus = EventBus()
    calls = []

    def listener(event):
        calls.append(event)

    bus.add(MESSAGE, listener)
    bus.add(MESSAGE, listener)
    assert bus.remove(MESSAGE, listener) is True

    bus.publish(MESSAGE, 1)
    assert calls == [1]
    assert bus.remove(MESSAGE, listener) is True
    assert bus.remove(MESSAGE, listener) is False
    assert bus.listeners(MESSAGE) == []


def test_remove_matches_identity_not_equality():
    class AlwaysEqual:
        def __eq__(self, other):
            return True

        __hash__ = object.__hash__

        def __call__(self, event):
            pass

    bus = EventBus()
    registered = AlwaysEqual()
    bus.add(MESSAGE, registered)

    assert bus.remove(MESSAGE, AlwaysEqual()) is False
    assert bus.listeners(MESSAGE) == [registered]


def test_failing_listener_does_not_block_siblings(caplog):
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    bus.add(MESSAGE, broken)
    bus.add(MESSAGE, calls.append)

    with caplog.at_level(logging.ERROR, logger="chatsignal.messaging.bus"):
        assert bus.publish(MESSAGE, "payload") == 2

    assert calls == ["payload"]
    assert "boom" in caplog.text


def test_listener_removing_itself_during_delivery():
    bus = EventBus()
    calls = []

    def once(event):
        calls.append("once")
        bus.remove(MESSAGE, once)

    bus.add(MESSAGE, once)
    bus.add(MESSAGE, lambda e: calls.append("after"))

    bus.publish(MESSAGE, None)
    bus.publish(MESSAGE, None)
    assert calls == ["once", "after", "after"]


def test_listener_added_during_delivery_waits_for_next_publish():
    bus = EventBus()
    calls = []

    def adder(event):
        bus.add(MESSAGE, lambda e: calls.append("late"))

    bus.add(MESSAGE, adder)
    bus.publish(MESSAGE, None)
    assert calls == []


def test_clear_drops_everything():
    bus = EventBus()
    for kind in EventKind:
        bus.add(kind, lambda *args: None)
    bus.clear()

    for kind in EventKind:
        assert bus.publish(kind) == 0


def test_lifecycle_signals_have_no_payload():
    bus = EventBus()
    calls = []
    bus.add(EventKind.REALTIME_NOTIFICATION_CONNECTED, lambda: calls.append("connected"))

    bus.publish(EventKind.REALTIME_NOTIFICATION_CONNECTED)
    assert calls == ["connected"]


def test_add_rejects_unknown_kind_and_non_callable():
    bus = EventBus()
    with pytest.raises(ConfigError):
        bus.add("typingIndicatorReceived", lambda e: None)
    with pytest.raises(TypeError):
        bus.add(MESSAGE, "not callable")


def test_string_kinds_are_accepted():
    bus = EventBus()
    calls = []
    bus.add("participantsAdded", calls.append)

    bus.publish(EventKind.PARTICIPANTS_ADDED, "p")
    assert calls == ["p"]


async def test_async_listeners_are_scheduled():
    bus = EventBus()
    calls = []

    async def slow(event):
        await asyncio.sleep(0)
        calls.append(("slow", event))

    bus.add(MESSAGE, slow)
    bus.add(MESSAGE, lambda e: calls.append(("sync", e)))

    bus.publish(MESSAGE, 1)
    assert calls == [("sync", 1)]
    assert bus.pending == 1

    await bus.drain()
    assert calls == [("sync", 1), ("slow", 1)]
    assert bus.pending == 0


async def test_async_listener_timeout_is_logged(caplog):
    bus = EventBus(listener_timeout=0.01)

    async def hangs(event):
        await asyncio.sleep(10)

    bus.add(MESSAGE, hangs)
    with caplog.at_level(logging.ERROR, logger="chatsignal.messaging.bus"):
        bus.publish(MESSAGE, None)
        await bus.drain()

    assert "timed out" in caplog.text
    assert bus.pending == 0


async def test_async_listener_error_is_logged(caplog):
    bus = EventBus()

    async def broken(event):
        raise ValueError("bad payload")

    bus.add(MESSAGE, broken)
    with caplog.at_level(logging.ERROR, logger="chatsignal.messaging.bus"):
        bus.publish(MESSAGE, None)
        await bus.drain()

    assert "bad payload" in caplog.text


def test_async_listener_without_loop_is_dropped(caplog):
    bus = EventBus()
    calls = []

    async def listener(event):
        calls.append(event)

    bus.add(MESSAGE, listener)
    with caplog.at_level(logging.WARNING, logger="chatsignal.messaging.bus"):
        bus.publish(MESSAGE, None)

    assert calls == []
    assert "no running event loop" in caplog.text
