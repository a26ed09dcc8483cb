"""
Token credential consumed by signaling transports.

Token acquisition and refresh belong to the caller; the client only
passes the credential through to the transport factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class AccessToken:
    """Access token with its expiry."""
    token: str
    expires_on: Optional[datetime] = None


@runtime_checkable
class TokenCredential(Protocol):
    """Anything able to supply an access token."""

    async def get_token(self) -> AccessToken:
        ...


class StaticTokenCredential:
    """
    Credential wrapping a fixed token.

    Usage:
        credential = StaticTokenCredential("eyJ0eXAi...")
        client = ChatNotificationClient("https://contoso.example", credential)
    """

    def __init__(self, token: str, expires_on: Optional[datetime] = None):
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = AccessToken(token=token, expires_on=expires_on)

    async def get_token(self) -> AccessToken:
        return self._token
