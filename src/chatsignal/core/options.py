"""
Configuration loading for chatsignal clients.

Options can be built in code, from a dict, or from a YAML file:

    # chatsignal.yaml
    gatewayApiVersion: "2024-03-07"
    redis_url: redis://localhost:6379
    channel_prefix: chat
    listener_timeout: 30
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ConfigError

DEFAULT_GATEWAY_API_VERSION = "2024-03-07"
DEFAULT_CONFIG_PATH = "chatsignal.yaml"

# camelCase spellings accepted in config files
_KEY_ALIASES = {
    "resourceEndpoint": "resource_endpoint",
    "gatewayApiVersion": "gateway_api_version",
    "redisUrl": "redis_url",
    "channelPrefix": "channel_prefix",
    "listenerTimeout": "listener_timeout",
}

_FIELDS = {"resource_endpoint", "gateway_api_version", "redis_url", "channel_prefix", "listener_timeout"}


@dataclass
class ClientOptions:
    """Options for ChatNotificationClient and its signaling transport."""
    resource_endpoint: Optional[str] = None
    gateway_api_version: str = DEFAULT_GATEWAY_API_VERSION
    redis_url: Optional[str] = None
    channel_prefix: str = "chat"
    listener_timeout: float = 30.0
    # Transport-specific passthrough options
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.gateway_api_version:
            self.gateway_api_version = DEFAULT_GATEWAY_API_VERSION
        if self.listener_timeout is not None and self.listener_timeout <= 0:
            raise ConfigError(f"listener_timeout must be positive, got {self.listener_timeout}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientOptions":
        """Create options from a dictionary (snake_case or camelCase keys)."""
        known = {}
        extra = dict(data.get("extra") or {})
        for key, value in data.items():
            if key == "extra":
                continue
            name = _KEY_ALIASES.get(key, key)
            if name in _FIELDS:
                known[name] = value
            else:
                extra[key] = value

        if "listener_timeout" in known:
            try:
                known["listener_timeout"] = float(known["listener_timeout"])
            except (TypeError, ValueError):
                raise ConfigError(f"listener_timeout must be a number, got {known['listener_timeout']!r}")

        return cls(**known, extra=extra)

    def with_endpoint(self, endpoint: str) -> "ClientOptions":
        """Return a copy bound to the given resource endpoint."""
        return replace(self, resource_endpoint=endpoint, extra=dict(self.extra))

    def to_dict(self) -> dict[str, Any]:
        """Convert options to a dictionary for YAML serialization."""
        data = {
            "gatewayApiVersion": self.gateway_api_version,
            "channel_prefix": self.channel_prefix,
            "listener_timeout": self.listener_timeout,
        }
        if self.resource_endpoint:
            data["resourceEndpoint"] = self.resource_endpoint
        if self.redis_url:
            data["redis_url"] = self.redis_url
        if self.extra:
            data["extra"] = dict(self.extra)
        return data

    def save(self, path: Path | str = DEFAULT_CONFIG_PATH) -> None:
        """Save options to a YAML file."""
        path = Path(path)
        path.write_text(yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False))


def load_options(path: Path | str = DEFAULT_CONFIG_PATH) -> ClientOptions | None:
    """Load options from a YAML file. Returns None if the file does not exist."""
    path = Path(path)
    if not path.exists():
        return None

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return ClientOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return ClientOptions.from_dict(data)
