"""Shared fixtures: an in-memory signaling transport and clients bound to it."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from chatsignal import ChatNotificationClient, StaticTokenCredential


class FakeTransport:
    """Signaling transport stub recording calls and raising events on demand."""

    def __init__(self, start_error: Exception | None = None):
        self.start_error = start_error
        self.handlers: dict[str, list[Callable]] = {}
        self.start_calls = 0
        self.stop_calls = 0
        self.on_calls: list[str] = []

    async def start(self) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error

    async def stop(self) -> None:
        self.stop_calls += 1
        self.handlers.clear()

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.on_calls.append(event)
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(payload)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def credential() -> StaticTokenCredential:
    return StaticTokenCredential("test-token")


@pytest.fixture
def factory_calls() -> list:
    return []


@pytest.fixture
def client(transport, credential, factory_calls) -> ChatNotificationClient:
    def factory(cred, client_logger, options):
        factory_calls.append((cred, client_logger, options))
        return transport

    return ChatNotificationClient("https://chat.example", credential, transport_factory=factory)


@pytest.fixture
def incapable_client(credential) -> ChatNotificationClient:
    return ChatNotificationClient(
        "https://chat.example",
        credential,
        transport_factory=lambda cred, client_logger, options: None,
    )
